"""
Rolling window selection.

Filters a player's games to a trailing N-day window and aggregates them.
The window ends at the most recent game date in the records themselves,
never at today's date, so a fixed record set always gives the same result.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional, Sequence

from ..core.errors import EmptyInputError, InvalidWindowError
from ..core.models import GameRecord, RollingAggregate
from .season import SeasonStatsAggregator

logger = logging.getLogger(__name__)

DEFAULT_LAST_N_DAYS = 30


def validate_window(last_n_days: object) -> int:
    """Return last_n_days if it is a positive integer, else raise InvalidWindowError."""
    if isinstance(last_n_days, bool) or not isinstance(last_n_days, int) or last_n_days < 1:
        raise InvalidWindowError(last_n_days)
    return last_n_days


def select_window(
    games: Sequence[GameRecord],
    last_n_days: int = DEFAULT_LAST_N_DAYS,
) -> tuple[list[GameRecord], Optional[date]]:
    """Filter games to [latest_date - last_n_days, latest_date].

    Args:
        games: One player's game records
        last_n_days: Window length in days (>= 1)

    Returns:
        Tuple of (games inside the window in input order, inclusive lower bound).
        The lower bound is None when there are no games.

    Raises:
        InvalidWindowError: If last_n_days is not a positive integer
    """
    validate_window(last_n_days)
    if not games:
        return [], None

    max_date = max(g.game_date for g in games)
    lower_bound = max_date - timedelta(days=last_n_days)
    window = [g for g in games if lower_bound <= g.game_date <= max_date]
    return window, lower_bound


def rolling_aggregate(
    games: Sequence[GameRecord],
    last_n_days: int = DEFAULT_LAST_N_DAYS,
    *,
    pid: Optional[int] = None,
    team: Optional[str] = None,
    year: Optional[int] = None,
    player_name: str = "",
) -> RollingAggregate:
    """Aggregate a player's games inside the trailing window.

    An empty window yields an empty RollingAggregate rather than an error,
    provided the caller passes the identity keywords to label it. Without
    them there is nothing to build the aggregate from, and EmptyInputError
    is raised instead. With games present the identity comes from the
    records and the keywords are ignored.

    Args:
        games: One player's game records, any order
        last_n_days: Window length in days (>= 1)
        pid: Player ID for an empty result
        team: Team for an empty result
        year: Season year for an empty result
        player_name: Player name for an empty result

    Returns:
        RollingAggregate over the window, or an empty one (games_played = 0)

    Raises:
        InvalidWindowError: If last_n_days is not a positive integer
        EmptyInputError: If there are no games and no identity to label the result
    """
    window, lower_bound = select_window(games, last_n_days)

    if not window:
        if pid is None or team is None or year is None:
            raise EmptyInputError("rolling window without player identity")
        logger.debug("No games in window for pid %d (%s %d)", pid, team, year)
        return RollingAggregate.empty(pid, player_name, team, year, last_n_days)

    season = SeasonStatsAggregator.aggregate_player_stats(window)
    return RollingAggregate(
        **season.model_dump(),
        last_n_days=last_n_days,
        window_start=lower_bound,
    )
