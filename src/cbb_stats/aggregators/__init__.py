"""
Game log aggregators.

These aggregators turn per-game records into season totals and trailing
window averages. Everything here is a pure computation over GameRecords.
"""

from .season import SeasonStatsAggregator, aggregate_games, aggregate_season, safe_ratio
from .window import DEFAULT_LAST_N_DAYS, rolling_aggregate, select_window, validate_window

__all__ = [
    "SeasonStatsAggregator",
    "aggregate_games",
    "aggregate_season",
    "safe_ratio",
    "DEFAULT_LAST_N_DAYS",
    "rolling_aggregate",
    "select_window",
    "validate_window",
]
