"""
Core module for CBB Stats.

This module provides the foundational components:
- Configuration management (config.py)
- Data models (models.py)
- Stat field registries and scope enum (types.py)
- Domain errors (errors.py)

Usage:
    from cbb_stats.core import Settings, get_settings
    from cbb_stats.core import GameRecord, SeasonAggregate, RollingAggregate
    from cbb_stats.core import ComparisonScope
"""

# Configuration
from .config import Settings, get_settings

# Errors
from .errors import EmptyInputError, InvalidWindowError, StatsError, UndefinedRatioError

# Models
from .models import (
    GameRecord,
    PlayerSeasonProfile,
    RollingAggregate,
    SeasonAggregate,
    TeamSeasonResult,
)

# Types
from .types import ComparisonScope, StatMode

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Errors
    "StatsError",
    "EmptyInputError",
    "InvalidWindowError",
    "UndefinedRatioError",
    # Models
    "GameRecord",
    "SeasonAggregate",
    "RollingAggregate",
    "PlayerSeasonProfile",
    "TeamSeasonResult",
    # Types
    "ComparisonScope",
    "StatMode",
]
