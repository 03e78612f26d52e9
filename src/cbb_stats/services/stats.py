"""
Stats service - the aggregation and ranking pipeline.

Each function fetches records from a GameRecordRepository, aggregates them,
ranks them against the comparison population and returns JSON-serializable
dicts. Routers and the CLI call these instead of touching the repository.

Nothing is cached: every call recomputes from the records it fetches.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from ..aggregators import SeasonStatsAggregator, aggregate_season, rolling_aggregate, validate_window
from ..aggregators.window import DEFAULT_LAST_N_DAYS
from ..core.config import get_settings
from ..core.models import PlayerSeasonProfile, RollingAggregate
from ..core.types import ComparisonScope, StatMode
from ..repositories.base import GameRecordRepository
from .assembler import rank_stat_lines, to_stat_line, unranked

logger = logging.getLogger(__name__)

ProfileIndex = dict[tuple[int, str], PlayerSeasonProfile]


def _scope_team(team: str, scope: ComparisonScope) -> Optional[str]:
    """Team filter for the population fetch; None means every team."""
    return team if scope is ComparisonScope.team else None


def _profile_index(
    repo: GameRecordRepository,
    year: int,
    team: Optional[str],
) -> ProfileIndex:
    return {(p.pid, p.team): p for p in repo.fetch_player_profiles(year, team=team)}


def _precision(precision: Optional[int]) -> int:
    return get_settings().percentile_precision if precision is None else precision


def get_player_season_averages(
    repo: GameRecordRepository,
    team: str,
    year: int,
) -> list[dict[str, Any]]:
    """
    Season aggregates for every player on a team.

    Args:
        repo: Record store
        team: Team name
        year: Season year

    Returns:
        One raw SeasonAggregate dict per player, ordered by pid
    """
    games = repo.fetch_games(year, team=team)
    aggregates = aggregate_season(games)
    logger.info("Aggregated %d games into %d players for %s %d", len(games), len(aggregates), team, year)
    return [aggregate.model_dump() for aggregate in aggregates]


def get_player_stats_with_percentiles(
    repo: GameRecordRepository,
    team: str,
    year: int,
    scope: ComparisonScope | str = ComparisonScope.team,
    precision: Optional[int] = None,
) -> list[dict[str, Any]]:
    """
    Season stat lines for a team with season-mode percentiles.

    Args:
        repo: Record store
        team: Team whose players are returned
        year: Season year
        scope: Population the percentiles rank against (team or league)
        precision: Decimal places on percentiles (defaults to settings)

    Returns:
        Stat lines for the team's players, each with every pct_ field
    """
    scope = ComparisonScope(scope)
    population_team = _scope_team(team, scope)

    games = repo.fetch_games(year, team=population_team)
    profiles = _profile_index(repo, year, population_team)
    lines = [to_stat_line(a, profiles.get(a.entity_key)) for a in aggregate_season(games)]

    ranked = rank_stat_lines(lines, StatMode.season, _precision(precision))
    result = [line for line in ranked if line["team"] == team]

    logger.info(
        "Ranked %d of %d season lines for %s %d (scope=%s)",
        len(result),
        len(ranked),
        team,
        year,
        scope.value,
    )
    return result


def get_player_rolling_averages(
    repo: GameRecordRepository,
    team: str,
    year: int,
    last_n_days: int = DEFAULT_LAST_N_DAYS,
    scope: ComparisonScope | str = ComparisonScope.team,
    pid: Optional[int] = None,
    precision: Optional[int] = None,
) -> list[dict[str, Any]]:
    """
    Trailing-window stat lines with rolling-mode percentiles.

    Each player's window ends at that player's own latest game. When pid is
    given the population is still the whole scope; only the output is
    filtered. A pid with a roster profile but no games in the season comes
    back as an empty line (gp 0, null stats and percentiles).

    Args:
        repo: Record store
        team: Team whose players are returned
        year: Season year
        last_n_days: Window length in days (>= 1)
        scope: Population the percentiles rank against (team or league)
        pid: Only return this player
        precision: Decimal places on percentiles (defaults to settings)

    Returns:
        Stat lines with last_n_days, window_start and every pct_ field

    Raises:
        InvalidWindowError: If last_n_days is not a positive integer
    """
    last_n_days = validate_window(last_n_days)
    scope = ComparisonScope(scope)
    population_team = _scope_team(team, scope)

    games = repo.fetch_games(year, team=population_team)
    profiles = _profile_index(repo, year, population_team)

    aggregates: list[RollingAggregate] = [
        rolling_aggregate(group, last_n_days)
        for group in SeasonStatsAggregator.group_games(games).values()
    ]

    lines = [to_stat_line(a, profiles.get(a.entity_key)) for a in aggregates]
    ranked = rank_stat_lines(lines, StatMode.rolling, _precision(precision))
    result = [
        line
        for line in ranked
        if line["team"] == team and (pid is None or line["pid"] == pid)
    ]

    # Rostered but without games: returned unranked, never added to the population
    if pid is not None and not result:
        profile = profiles.get((pid, team))
        if profile is not None:
            empty = rolling_aggregate(
                [],
                last_n_days,
                pid=pid,
                team=team,
                year=year,
                player_name=profile.player_name or "",
            )
            result.append(unranked(to_stat_line(empty)))

    logger.info(
        "Ranked %d of %d rolling lines for %s %d (last_n_days=%d, scope=%s)",
        len(result),
        len(ranked),
        team,
        year,
        last_n_days,
        scope.value,
    )
    return result


def get_player_game_log(
    repo: GameRecordRepository,
    team: str,
    year: int,
    pid: int,
) -> list[dict[str, Any]]:
    """
    One player's game-by-game records, oldest first.

    Returns:
        Raw GameRecord dicts (empty when the player has no games)
    """
    games = repo.fetch_games(year, team=team, pid=pid)
    return [game.model_dump() for game in sorted(games, key=lambda g: g.game_date)]


def get_team_results(repo: GameRecordRepository, year: int) -> list[dict[str, Any]]:
    """Per-team season results ordered by rank."""
    return [result.model_dump() for result in repo.fetch_team_results(year)]
