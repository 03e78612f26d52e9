"""
Core types and stat field registries for CBB Stats.

This module provides:
- ComparisonScope enum for percentile populations
- StatMode enum for season vs rolling responses
- The fixed per-game stat schema, split by how each field aggregates

Every aggregation and ranking path reads these tuples instead of
re-declaring field lists.
"""

from enum import Enum


class ComparisonScope(str, Enum):
    """Which players populate a percentile run."""

    team = "team"  # Same team + year
    league = "league"  # Every player in the year


class StatMode(str, Enum):
    """Response shape: full-season or trailing-window figures."""

    season = "season"
    rolling = "rolling"


# =============================================================================
# PER-GAME STAT SCHEMA
# =============================================================================

# Summed across games; averaged over games where the value was recorded
COUNTING_STATS: tuple[str, ...] = (
    "pts",
    "orb",
    "drb",
    "ast",
    "tov",
    "stl",
    "blk",
    "pf",
    "possessions",
    "dunks_made",
    "dunks_att",
    "rim_made",
    "rim_att",
    "mid_made",
    "mid_att",
    "two_pm",
    "two_pa",
    "tpm",
    "tpa",
    "ftm",
    "fta",
)

# Already per-game rates or ratings; season value is the mean of present games
RATE_STATS: tuple[str, ...] = (
    "min_per",
    "o_rtg",
    "usage",
    "e_fg",
    "ts_per",
    "orb_per",
    "drb_per",
    "ast_per",
    "to_per",
    "stl_per",
    "blk_per",
    "bpm_rd",
    "obpm",
    "dbpm",
    "bpm_net",
    "bpm",
    "sbpm",
)

# Opponent/game context carried on each row, averaged like rates
CONTEXT_STATS: tuple[str, ...] = (
    "inches",
    "opstyle",
    "quality",
    "win1",
    "win2",
)

# Shooting rates only count games where the listed attempts sum above zero
SHOOTING_RATE_ATTEMPTS: dict[str, tuple[str, ...]] = {
    "e_fg": ("two_pa", "tpa"),
    "ts_per": ("two_pa", "tpa", "fta"),
}

# Made/attempt pairs turned into percentages from season totals
SHOOTING_SPLITS: dict[str, tuple[str, str]] = {
    "ft_per": ("ftm", "fta"),
    "two_p_per": ("two_pm", "two_pa"),
    "tp_per": ("tpm", "tpa"),
    "rim_pct": ("rim_made", "rim_att"),
    "mid_pct": ("mid_made", "mid_att"),
    "dunk_pct": ("dunks_made", "dunks_att"),
}

# Ratios computed after aggregation
COMPOUND_RATIOS: tuple[str, ...] = (
    "ast_tov",
    "ftr",
    "three_pr",
    "three_p_per_100",
    "fc_per_40",
    "treb",
)

AVERAGED_STATS: tuple[str, ...] = COUNTING_STATS + RATE_STATS + CONTEXT_STATS
DERIVED_STATS: tuple[str, ...] = tuple(SHOOTING_SPLITS) + COMPOUND_RATIOS

# Regulation game length used by per-40 rates
GAME_MINUTES = 40
