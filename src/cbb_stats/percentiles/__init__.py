"""
Percentile ranking for stat lines.
"""

from .calculator import PercentileTable, calculate_percentile, midpoint_percentile
from .config import (
    ALL_RANKED_METRICS,
    INVERTED_METRICS,
    PERCENTILE_CONFIG_VERSION,
    get_percentile_config,
    get_ranked_metrics,
    is_inverted,
    percentile_field,
)

__all__ = [
    "PercentileTable",
    "calculate_percentile",
    "midpoint_percentile",
    "ALL_RANKED_METRICS",
    "INVERTED_METRICS",
    "PERCENTILE_CONFIG_VERSION",
    "get_percentile_config",
    "get_ranked_metrics",
    "is_inverted",
    "percentile_field",
]
