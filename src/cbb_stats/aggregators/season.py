"""
Season statistics aggregator.

Handles aggregation of game-by-game stats into season totals, per-game
averages and derived ratios. The record store returns individual game rows,
which are reduced here per (player, team, year).

Design: Pure functions over GameRecord sequences, no I/O.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Optional, Sequence

from ..core.errors import EmptyInputError, UndefinedRatioError
from ..core.models import GameRecord, SeasonAggregate
from ..core.types import (
    CONTEXT_STATS,
    COUNTING_STATS,
    GAME_MINUTES,
    RATE_STATS,
    SHOOTING_RATE_ATTEMPTS,
    SHOOTING_SPLITS,
)

logger = logging.getLogger(__name__)

GroupKey = tuple[int, str, int]


def _divide(numerator: Optional[float], denominator: Optional[float]) -> float:
    if numerator is None or denominator is None or denominator == 0:
        raise UndefinedRatioError(numerator, denominator)
    result = numerator / denominator
    if not math.isfinite(result):
        raise UndefinedRatioError(numerator, denominator)
    return result


def safe_ratio(
    numerator: Optional[float],
    denominator: Optional[float],
    scale: float = 1.0,
) -> Optional[float]:
    """Divide, returning None instead of failing on a zero or missing denominator.

    Args:
        numerator: Top of the ratio (None when not recorded)
        denominator: Bottom of the ratio (None when not recorded)
        scale: Multiplier applied to the result (100 for percentages)

    Returns:
        The scaled ratio, or None when it is undefined
    """
    try:
        return _divide(numerator, denominator) * scale
    except UndefinedRatioError as e:
        logger.debug("%s; substituting null", e)
        return None


def _is_recorded(value: Optional[float]) -> bool:
    """None and NaN both mean the value was not recorded."""
    return value is not None and not math.isnan(value)


def _sum_present(values: Iterable[Optional[float]]) -> Optional[float]:
    """Sum of recorded values; None when nothing was recorded."""
    present = [v for v in values if _is_recorded(v)]
    if not present:
        return None
    return float(sum(present))


def _mean(values: Sequence[float]) -> Optional[float]:
    return safe_ratio(_sum_present(values), len(values))


class SeasonStatsAggregator:
    """Aggregate game-by-game statistics into season-level figures."""

    @staticmethod
    def group_games(games: Iterable[GameRecord]) -> dict[GroupKey, list[GameRecord]]:
        """Partition a mixed record set into per-(pid, team, year) groups.

        Records without a team are skipped. Each group is ordered by game date.

        Args:
            games: Game records for any number of players

        Returns:
            Mapping of (pid, team, year) to that player's games
        """
        groups: dict[GroupKey, list[GameRecord]] = {}
        skipped = 0

        for game in games:
            if not game.team:
                skipped += 1
                continue
            groups.setdefault((game.pid, game.team, game.year), []).append(game)

        if skipped:
            logger.warning("Skipped %d game records with no team", skipped)

        for group in groups.values():
            group.sort(key=lambda g: g.game_date)

        return groups

    @staticmethod
    def attempt_total(game: GameRecord, attempts: tuple[str, ...]) -> Optional[float]:
        """Shot attempts in one game; None when no attempt column was recorded."""
        return _sum_present(game.stat(field) for field in attempts)

    @staticmethod
    def counts_toward_rate(game: GameRecord, stat: str) -> bool:
        """Whether a game's value for a rate stat enters the season mean.

        Shooting rates skip games whose recorded attempts sum to zero. Games
        with no attempt columns at all keep their recorded rate.
        """
        if not _is_recorded(game.stat(stat)):
            return False
        attempts = SHOOTING_RATE_ATTEMPTS.get(stat)
        if attempts is None:
            return True
        total = SeasonStatsAggregator.attempt_total(game, attempts)
        return total is None or total > 0

    @staticmethod
    def aggregate_player_stats(games: Sequence[GameRecord]) -> SeasonAggregate:
        """Aggregate one player's games into a SeasonAggregate.

        Counting stats are summed and averaged over the games that recorded
        them. Rate stats are the mean of recorded values, with shooting rates
        limited to games that had attempts. Percentages and compound ratios
        come from the aggregated totals and are None when undefined.

        Args:
            games: One player's game records for a team and season

        Returns:
            Aggregated season statistics

        Raises:
            EmptyInputError: If no games were supplied
        """
        if not games:
            raise EmptyInputError()

        first_game = games[0]
        if any(g.pid != first_game.pid for g in games):
            logger.warning(
                "Aggregating games from more than one player under pid %d", first_game.pid
            )

        fields: dict[str, Optional[float]] = {}

        # Counting stats: totals plus per-game averages over recorded games
        for stat in COUNTING_STATS:
            present = [v for v in (g.stat(stat) for g in games) if _is_recorded(v)]
            total = _sum_present(present)
            fields[f"{stat}_total"] = total
            fields[f"avg_{stat}"] = safe_ratio(total, len(present))

        # Rate and context stats: mean of recorded values
        for stat in RATE_STATS + CONTEXT_STATS:
            present = [
                g.stat(stat) for g in games if SeasonStatsAggregator.counts_toward_rate(g, stat)
            ]
            fields[f"avg_{stat}"] = _mean(present)

        # Shooting splits from made/attempt totals
        for name, (made, attempted) in SHOOTING_SPLITS.items():
            fields[name] = safe_ratio(fields[f"{made}_total"], fields[f"{attempted}_total"], 100)

        # Compound ratios
        fga = _sum_present([fields["two_pa_total"], fields["tpa_total"]])
        fields["ast_tov"] = safe_ratio(fields["ast_total"], fields["tov_total"])
        fields["ftr"] = safe_ratio(fields["fta_total"], fga)
        fields["three_pr"] = safe_ratio(fields["tpa_total"], fga, 100)
        fields["three_p_per_100"] = safe_ratio(fields["tpm_total"], fields["possessions_total"], 100)
        fields["fc_per_40"] = safe_ratio(fields["avg_pf"], fields["avg_min_per"], GAME_MINUTES)
        fields["treb"] = _sum_present([fields["avg_orb"], fields["avg_drb"]])

        player_name = first_game.player_name
        for game in games:
            if game.player_name:
                player_name = game.player_name

        return SeasonAggregate(
            pid=first_game.pid,
            player_name=player_name,
            team=first_game.team,
            year=first_game.year,
            games_played=len(games),
            first_game_date=min(g.game_date for g in games),
            last_game_date=max(g.game_date for g in games),
            **fields,
        )


def aggregate_games(games: Sequence[GameRecord]) -> SeasonAggregate:
    """Aggregate one player's games. See SeasonStatsAggregator.aggregate_player_stats."""
    return SeasonStatsAggregator.aggregate_player_stats(games)


def aggregate_season(games: Iterable[GameRecord]) -> list[SeasonAggregate]:
    """Aggregate a mixed record set into one SeasonAggregate per player stint."""
    groups = SeasonStatsAggregator.group_games(games)
    return [SeasonStatsAggregator.aggregate_player_stats(group) for group in groups.values()]
