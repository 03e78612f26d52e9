"""
Stats router - aggregated and percentile-ranked player stat lines.

Endpoints:
- GET /player-season-averages - raw season aggregates for a team
- GET /player-stats-with-percentiles - season stat lines + pct_ fields
- GET /player-rolling-averages - trailing-window stat lines + pct_ fields
- GET /percentile-config - inverted metrics, bands and ranked metrics

Everything is computed per request from the game logs; nothing is cached.
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Query

from ...core.config import get_settings
from ...core.types import ComparisonScope
from ...percentiles.config import get_percentile_config
from ...services import stats as stats_service
from ..dependencies import RepositoryDependency

logger = logging.getLogger(__name__)

router = APIRouter()

TeamQuery = Annotated[str, Query(min_length=1, description="Team name, e.g. Duke")]
YearQuery = Annotated[int | None, Query(description="Season year (defaults to current)")]
ScopeQuery = Annotated[
    ComparisonScope | None,
    Query(description="Percentile population: team (default) or league"),
]


def _year(year: int | None) -> int:
    return year if year is not None else get_settings().current_season


def _scope(scope: ComparisonScope | None) -> ComparisonScope:
    return scope if scope is not None else get_settings().default_comparison_scope


@router.get("/player-season-averages", response_model=None)
def player_season_averages(
    repo: RepositoryDependency,
    team: TeamQuery,
    year: YearQuery = None,
) -> list[dict[str, Any]]:
    """Season totals, per-game averages and derived ratios for each player."""
    return stats_service.get_player_season_averages(repo, team, _year(year))


@router.get("/player-stats-with-percentiles", response_model=None)
def player_stats_with_percentiles(
    repo: RepositoryDependency,
    team: TeamQuery,
    year: YearQuery = None,
    scope: ScopeQuery = None,
) -> list[dict[str, Any]]:
    """
    Season stat lines with percentiles.

    Every line carries a pct_ field for every rankable metric; metrics not
    ranked in season mode are null.
    """
    return stats_service.get_player_stats_with_percentiles(repo, team, _year(year), _scope(scope))


@router.get("/player-rolling-averages", response_model=None)
def player_rolling_averages(
    repo: RepositoryDependency,
    team: TeamQuery,
    year: YearQuery = None,
    last_n_days: Annotated[
        int | None,
        Query(description="Trailing window in days, counted back from each player's last game"),
    ] = None,
    scope: ScopeQuery = None,
    pid: Annotated[int | None, Query(description="Only return this player")] = None,
) -> list[dict[str, Any]]:
    """
    Trailing-window stat lines with rolling-mode percentiles.

    A non-positive last_n_days is rejected with 400 VALIDATION_ERROR.
    """
    if last_n_days is None:
        last_n_days = get_settings().default_last_n_days

    return stats_service.get_player_rolling_averages(
        repo,
        team,
        _year(year),
        last_n_days=last_n_days,
        scope=_scope(scope),
        pid=pid,
    )


@router.get("/percentile-config")
def percentile_config() -> dict[str, Any]:
    """Inverted metrics, display bands and ranked metrics per mode, versioned."""
    return get_percentile_config()
