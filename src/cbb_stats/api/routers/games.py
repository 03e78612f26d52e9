"""
Games router - raw game logs and team season results.

Endpoints:
- GET /game-stats - one player's game-by-game records
- GET /team-stats - per-team season results for a year
"""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Query

from ...core.config import get_settings
from ...services import stats as stats_service
from ..dependencies import RepositoryDependency
from ..errors import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/game-stats", response_model=None)
def game_stats(
    repo: RepositoryDependency,
    team: Annotated[str, Query(min_length=1, description="Team name")],
    pid: Annotated[int, Query(description="Player ID")],
    year: Annotated[int | None, Query(description="Season year (defaults to current)")] = None,
) -> list[dict[str, Any]]:
    """Game log for one player, oldest game first."""
    year = year if year is not None else get_settings().current_season
    games = stats_service.get_player_game_log(repo, team, year, pid)
    if not games:
        raise NotFoundError(resource="Player games", identifier=pid, context=f"{team} {year}")
    return games


@router.get("/team-stats", response_model=None)
def team_stats(
    repo: RepositoryDependency,
    year: Annotated[int | None, Query(description="Season year (defaults to current)")] = None,
) -> list[dict[str, Any]]:
    """Team season results ordered by rank."""
    year = year if year is not None else get_settings().current_season
    return stats_service.get_team_results(repo, year)
