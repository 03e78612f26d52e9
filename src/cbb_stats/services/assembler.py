"""
Response assembler - internal aggregates to client-facing stat lines.

This is the single place where aggregate field names are renamed for the
client (pts <- avg_pts, usg <- avg_usage, gp <- games_played, ...) and
where percentile fields are attached. Every line in one response carries
the same keys: metrics that are not ranked in the current mode get an
explicit null percentile instead of a missing key.
"""

from __future__ import annotations

import logging
from typing import Any, Hashable, Iterable, Mapping, Optional

from ..core.models import PlayerSeasonProfile, RollingAggregate, SeasonAggregate
from ..core.types import COUNTING_STATS, CONTEXT_STATS, DERIVED_STATS, RATE_STATS, StatMode
from ..percentiles.calculator import PercentileTable
from ..percentiles.config import ALL_RANKED_METRICS, get_ranked_metrics, percentile_field

logger = logging.getLogger(__name__)

# Client names that differ from the per-game column they average
_RENAMED_AVERAGES = {
    "usage": "usg",
}


def _build_stat_line_fields() -> dict[str, str]:
    fields = {
        "pid": "pid",
        "player_name": "player_name",
        "team": "team",
        "year": "year",
        "gp": "games_played",
        "first_game_date": "first_game_date",
        "last_game_date": "last_game_date",
    }
    for stat in COUNTING_STATS + RATE_STATS + CONTEXT_STATS:
        fields[_RENAMED_AVERAGES.get(stat, stat)] = f"avg_{stat}"
    for stat in DERIVED_STATS:
        fields[stat] = stat
    return fields


# Output field -> aggregate attribute
STAT_LINE_FIELDS: dict[str, str] = _build_stat_line_fields()

# Season-long constants copied from the player's profile row
PROFILE_FIELDS: tuple[str, ...] = (
    "conf",
    "player_type",
    "yr",
    "ht",
    "porpag",
    "dporpag",
    "drtg",
    "adjoe",
)

# Extra fields carried by rolling stat lines
ROLLING_FIELDS: tuple[str, ...] = ("last_n_days", "window_start")


def stat_line_key(line: Mapping[str, Any]) -> Hashable:
    """Entity key of a stat line; matches SeasonAggregate.entity_key."""
    return (line["pid"], line["team"])


def to_stat_line(
    aggregate: SeasonAggregate,
    profile: Optional[PlayerSeasonProfile] = None,
) -> dict[str, Any]:
    """
    Flatten an aggregate (and the player's profile, if any) into a stat line.

    Args:
        aggregate: Season or rolling aggregate for one player
        profile: Season profile for the same (pid, team, year)

    Returns:
        Flat dict keyed by client field names
    """
    line: dict[str, Any] = {
        field: getattr(aggregate, source) for field, source in STAT_LINE_FIELDS.items()
    }

    if isinstance(aggregate, RollingAggregate):
        for field in ROLLING_FIELDS:
            line[field] = getattr(aggregate, field)

    for field in PROFILE_FIELDS:
        line[field] = getattr(profile, field) if profile is not None else None

    # Prefer the roster spelling of the name when the game log has none
    if not line["player_name"] and profile is not None and profile.player_name:
        line["player_name"] = profile.player_name

    return line


def attach_percentiles(
    line: Mapping[str, Any],
    table: PercentileTable,
    ranked_metrics: Iterable[str],
    precision: int = 1,
) -> dict[str, Any]:
    """
    Return a copy of line with one pct_ field per rankable metric.

    Args:
        line: Stat line from to_stat_line
        table: Percentile table built over the comparison population
        ranked_metrics: Metrics ranked in the current mode
        precision: Decimal places kept on each percentile

    Returns:
        New dict with pct_<metric> for every metric in ALL_RANKED_METRICS
    """
    ranked = set(ranked_metrics)
    key = stat_line_key(line)
    annotated = dict(line)

    for metric in ALL_RANKED_METRICS:
        value = table.percentile(metric, key) if metric in ranked else None
        annotated[percentile_field(metric)] = round(value, precision) if value is not None else None

    return annotated


def unranked(line: Mapping[str, Any]) -> dict[str, Any]:
    """Copy of line with every pct_ field present and null.

    Used for lines that are returned but never part of a comparison
    population, such as a rostered player with no games.
    """
    annotated = dict(line)
    for metric in ALL_RANKED_METRICS:
        annotated[percentile_field(metric)] = None
    return annotated


def rank_stat_lines(
    lines: list[dict[str, Any]],
    mode: StatMode | str,
    precision: int = 1,
) -> list[dict[str, Any]]:
    """
    Rank every line against all the others and attach percentiles.

    The lines passed in are the whole comparison population; callers filter
    the result afterwards if they only need some of them.

    Args:
        lines: Stat lines for every player in the comparison scope
        mode: season or rolling; selects the ranked metric list
        precision: Decimal places kept on each percentile

    Returns:
        Annotated copies of lines, same order
    """
    ranked_metrics = get_ranked_metrics(mode)
    table = PercentileTable.build(lines, ranked_metrics, key=stat_line_key)

    logger.debug(
        "Ranking %d %s stat lines (pts population %d)",
        len(lines),
        StatMode(mode).value,
        table.sample_size("pts"),
    )
    return [attach_percentiles(line, table, ranked_metrics, precision) for line in lines]
