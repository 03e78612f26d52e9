"""
CBB Stats

Per-player college basketball aggregates and percentile rankings, computed
per request from stored game logs.

Key Features:
- Season totals, per-game averages and derived shooting ratios
- Trailing N-day rolling averages anchored on each player's last game
- Midpoint-rank percentiles within a team or across the league
- Inverted metrics (turnover rate, fouls per 40, defensive rating) ranked low-is-good

Usage:
    from cbb_stats import InMemoryGameRepository, get_player_stats_with_percentiles

    repo = InMemoryGameRepository.from_json_file("games.json")
    lines = get_player_stats_with_percentiles(repo, "Duke", 2026)
"""

from .aggregators import aggregate_games, aggregate_season, rolling_aggregate
from .core import ComparisonScope, GameRecord, RollingAggregate, SeasonAggregate
from .percentiles import PercentileTable
from .repositories import GameRecordRepository, InMemoryGameRepository
from .services import (
    get_player_game_log,
    get_player_rolling_averages,
    get_player_season_averages,
    get_player_stats_with_percentiles,
    get_team_results,
)

__version__ = "1.0.0"

__all__ = [
    # Aggregation
    "aggregate_games",
    "aggregate_season",
    "rolling_aggregate",
    # Models
    "ComparisonScope",
    "GameRecord",
    "RollingAggregate",
    "SeasonAggregate",
    # Ranking
    "PercentileTable",
    # Store
    "GameRecordRepository",
    "InMemoryGameRepository",
    # Pipeline
    "get_player_game_log",
    "get_player_rolling_averages",
    "get_player_season_averages",
    "get_player_stats_with_percentiles",
    "get_team_results",
]
