"""
Pure Python percentile calculator - database agnostic.

Ranks each entity's value for a metric against the comparison population
built for one request.

Methodology:
- Midpoint rank: a value's percentile is the average zero-based rank of its
  tied group divided by (population size - 1), times 100
- The minimum maps to 0, the maximum to 100, an all-equal population to 50
- Populations with fewer than two values give no percentile (None)
- Nulls never enter a population
- Inverted metrics (lower is better) report 100 - percentile
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Hashable, Iterable, Mapping, Optional, Sequence

import numpy as np

from .config import is_inverted

logger = logging.getLogger(__name__)


def midpoint_percentile(sorted_values: Sequence[float] | np.ndarray, value: float) -> Optional[float]:
    """Raw percentile of value within an ascending population that contains it."""
    sorted_values = np.asarray(sorted_values, dtype=float)
    n = sorted_values.size
    if n <= 1:
        return None

    below = int(np.searchsorted(sorted_values, value, side="left"))
    equal = int(np.searchsorted(sorted_values, value, side="right")) - below

    # Average zero-based rank of the tied group containing value
    midpoint_rank = below + (equal - 1) / 2
    percentile = 100.0 * midpoint_rank / (n - 1)
    return float(min(100.0, max(0.0, percentile)))


def calculate_percentile(
    values: Sequence[float] | np.ndarray,
    target_value: float,
    inverse: bool = False,
    presorted: bool = False,
) -> Optional[float]:
    """
    Calculate the midpoint-rank percentile of a value within a distribution.

    Args:
        values: All values in the comparison group, target included
        target_value: The value to rank
        inverse: If True, lower values are better (e.g., turnover rate)
        presorted: Skip sorting when values are already ascending

    Returns:
        Percentile in [0, 100], or None when the population has fewer than two values
    """
    population = np.asarray(values, dtype=float)
    if not presorted:
        population = np.sort(population)

    percentile = midpoint_percentile(population, float(target_value))
    if percentile is None:
        return None
    return 100.0 - percentile if inverse else percentile


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


class PercentileTable:
    """
    Per-request populations for a set of metrics.

    Maps metric name -> {entity key: value}. Each population is sorted once
    when the table is built; lookups then rank in O(log n). Tables are built
    for a single comparison scope and discarded with the request.
    """

    def __init__(self, populations: Mapping[str, Mapping[Hashable, float]]):
        self._populations: dict[str, dict[Hashable, float]] = {
            metric: dict(values) for metric, values in populations.items()
        }
        self._sorted: dict[str, np.ndarray] = {
            metric: np.sort(np.fromiter(values.values(), dtype=float, count=len(values)))
            for metric, values in self._populations.items()
        }

    @classmethod
    def build(
        cls,
        records: Iterable[Mapping[str, Any]],
        metrics: Iterable[str],
        key: Callable[[Mapping[str, Any]], Hashable],
    ) -> "PercentileTable":
        """
        Build populations from flat records.

        Args:
            records: One flat mapping per entity in the comparison scope
            metrics: Metric names to collect
            key: Extracts the entity key from a record

        Returns:
            PercentileTable with one population per metric
        """
        metrics = list(metrics)
        populations: dict[str, dict[Hashable, float]] = {metric: {} for metric in metrics}

        for record in records:
            entity = key(record)
            for metric in metrics:
                value = record.get(metric)
                if _is_missing(value):
                    continue
                population = populations[metric]
                if entity in population:
                    logger.warning("Duplicate %s value for %s; keeping the first", metric, entity)
                    continue
                population[entity] = float(value)

        logger.debug(
            "Built percentile table: %d metrics, largest population %d",
            len(metrics),
            max((len(p) for p in populations.values()), default=0),
        )
        return cls(populations)

    @property
    def metrics(self) -> list[str]:
        return list(self._populations)

    def sample_size(self, metric: str) -> int:
        """Number of non-null values in a metric's population."""
        return len(self._populations.get(metric, ()))

    def percentile(self, metric: str, entity: Hashable) -> Optional[float]:
        """
        Percentile of one entity for one metric.

        Returns None when the metric is unknown, the entity has no value for it,
        or the population has fewer than two values. Inverted metrics are flipped.
        """
        population = self._populations.get(metric)
        if not population or entity not in population:
            return None

        raw = midpoint_percentile(self._sorted[metric], population[entity])
        if raw is None:
            return None
        return 100.0 - raw if is_inverted(metric) else raw

    def percentiles_for(
        self,
        entity: Hashable,
        metrics: Optional[Iterable[str]] = None,
    ) -> dict[str, Optional[float]]:
        """All percentiles for one entity, keyed by metric."""
        names = self._populations if metrics is None else metrics
        return {metric: self.percentile(metric, entity) for metric in names}
