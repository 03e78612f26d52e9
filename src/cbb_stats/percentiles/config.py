"""
Configuration for percentile calculations.

Defines which metrics are ranked in each response mode, which metrics are
inverted (lower raw value ranks higher), and the display bands clients use
to colour percentiles. The whole table is versioned and served at
/api/percentile-config so clients read it instead of re-declaring it.
"""

from __future__ import annotations

from typing import Any

from ..core.types import StatMode

# Bump whenever INVERTED_METRICS, the ranked metric lists or the bands change
PERCENTILE_CONFIG_VERSION = "1"

PERCENTILE_FIELD_PREFIX = "pct_"

# Stats where lower is better (for inverse percentile calculation)
INVERTED_METRICS: frozenset[str] = frozenset(
    {
        "to_per",  # Turnover rate
        "fc_per_40",  # Fouls committed per 40 minutes
        "drtg",  # Defensive rating (points allowed per 100 possessions)
    }
)

# Metrics ranked on full-season stat lines
SEASON_RANKED_METRICS: tuple[str, ...] = (
    # Usage and efficiency
    "min_per",
    "o_rtg",
    "usg",
    "e_fg",
    "ts_per",
    # Rebounding / playmaking rates
    "orb_per",
    "drb_per",
    "ast_per",
    "to_per",
    "stl_per",
    "blk_per",
    # Shot profile (per game)
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
    # Box score (per game)
    "pts",
    "orb",
    "drb",
    "treb",
    "ast",
    "tov",
    "stl",
    "blk",
    "pf",
    "possessions",
    # Box plus/minus
    "bpm",
    "obpm",
    "dbpm",
    "bpm_rd",
    "bpm_net",
    "sbpm",
    # Derived ratios
    "ft_per",
    "two_p_per",
    "tp_per",
    "ast_tov",
    "ftr",
    "three_pr",
    "three_p_per_100",
    "fc_per_40",
    # Season-long constants
    "porpag",
    "dporpag",
    "drtg",
    "adjoe",
)

# Metrics ranked on trailing-window stat lines. Smaller than the season list:
# season-context BPM splits and the derived shooting splits are left unranked.
ROLLING_RANKED_METRICS: tuple[str, ...] = (
    "min_per",
    "o_rtg",
    "usg",
    "e_fg",
    "ts_per",
    "orb_per",
    "drb_per",
    "ast_per",
    "to_per",
    "stl_per",
    "blk_per",
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
    "pts",
    "orb",
    "drb",
    "ast",
    "tov",
    "stl",
    "blk",
    "pf",
    "bpm",
    "obpm",
    "dbpm",
    "porpag",
    "dporpag",
    "drtg",
    "adjoe",
)

# Every metric that can carry a percentile; fixes the pct_ field set of a response
ALL_RANKED_METRICS: tuple[str, ...] = SEASON_RANKED_METRICS + tuple(
    m for m in ROLLING_RANKED_METRICS if m not in SEASON_RANKED_METRICS
)

RANKED_METRICS_BY_MODE: dict[StatMode, tuple[str, ...]] = {
    StatMode.season: SEASON_RANKED_METRICS,
    StatMode.rolling: ROLLING_RANKED_METRICS,
}

# Display bands, lower bound inclusive. Clients colour cells by band.
PERCENTILE_BANDS: tuple[dict[str, Any], ...] = (
    {"band": 0, "label": "poor", "min": 0, "max": 20},
    {"band": 1, "label": "below_average", "min": 20, "max": 40},
    {"band": 2, "label": "average", "min": 40, "max": 60},
    {"band": 3, "label": "above_average", "min": 60, "max": 80},
    {"band": 4, "label": "elite", "min": 80, "max": 100},
)


def is_inverted(metric: str) -> bool:
    """Check if a metric should have inverse percentile (lower is better)."""
    return metric in INVERTED_METRICS


def get_ranked_metrics(mode: StatMode | str) -> tuple[str, ...]:
    """Get the metrics ranked for a response mode."""
    return RANKED_METRICS_BY_MODE[StatMode(mode)]


def percentile_field(metric: str) -> str:
    """Output field name carrying a metric's percentile."""
    return f"{PERCENTILE_FIELD_PREFIX}{metric}"


def get_percentile_config() -> dict[str, Any]:
    """Versioned percentile configuration shared with clients."""
    return {
        "version": PERCENTILE_CONFIG_VERSION,
        "field_prefix": PERCENTILE_FIELD_PREFIX,
        "inverted_metrics": sorted(INVERTED_METRICS),
        "bands": list(PERCENTILE_BANDS),
        "ranked_metrics": {
            mode.value: list(metrics) for mode, metrics in RANKED_METRICS_BY_MODE.items()
        },
    }
