"""
Services module for CBB Stats.

This module provides the business logic between the record store and the
HTTP/CLI surfaces:
- stats: season, rolling and percentile-annotated stat lines
- assembler: aggregate -> client stat line mapping and percentile fields

Usage:
    from cbb_stats.services.stats import get_player_stats_with_percentiles
    from cbb_stats.services.assembler import to_stat_line
"""

from .assembler import STAT_LINE_FIELDS, attach_percentiles, rank_stat_lines, to_stat_line, unranked
from .stats import (
    get_player_game_log,
    get_player_rolling_averages,
    get_player_season_averages,
    get_player_stats_with_percentiles,
    get_team_results,
)

__all__ = [
    # Assembler
    "STAT_LINE_FIELDS",
    "attach_percentiles",
    "rank_stat_lines",
    "to_stat_line",
    "unranked",
    # Stats
    "get_player_game_log",
    "get_player_rolling_averages",
    "get_player_season_averages",
    "get_player_stats_with_percentiles",
    "get_team_results",
]
