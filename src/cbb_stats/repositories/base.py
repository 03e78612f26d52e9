"""
Base repository protocol.

Defines the abstract record store interface the stat pipeline reads from,
so the pipeline never knows which database (if any) sits behind it.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Optional

from ..core.models import GameRecord, PlayerSeasonProfile, TeamSeasonResult


class GameRecordRepository(ABC):
    """
    Abstract interface for game log and season table access.

    Store failures propagate to the caller unchanged; implementations do not
    retry or substitute empty results.
    """

    @abstractmethod
    def fetch_games(
        self,
        year: int,
        team: Optional[str] = None,
        pid: Optional[int] = None,
    ) -> list[GameRecord]:
        """
        Fetch game records for a season.

        Args:
            year: Season year
            team: Restrict to one team (None for every team)
            pid: Restrict to one player

        Returns:
            Game records ordered by (pid, game_date)
        """
        ...

    @abstractmethod
    def fetch_player_profiles(
        self,
        year: int,
        team: Optional[str] = None,
    ) -> list[PlayerSeasonProfile]:
        """
        Fetch season profile rows (role, class, height, season ratings).

        Args:
            year: Season year
            team: Restrict to one team (None for every team)

        Returns:
            Profile rows, any order
        """
        ...

    @abstractmethod
    def fetch_team_results(self, year: int) -> list[TeamSeasonResult]:
        """
        Fetch per-team season results.

        Args:
            year: Season year

        Returns:
            Team rows ordered by rank
        """
        ...

    @abstractmethod
    def save_games(self, games: Iterable[GameRecord]) -> int:
        """
        Insert or replace game records.

        A record replaces an existing one with the same (pid, team, game_date).

        Returns:
            Number of records written
        """
        ...

    @abstractmethod
    def save_player_profiles(self, profiles: Iterable[PlayerSeasonProfile]) -> int:
        """Insert or replace profile rows keyed by (pid, team, year)."""
        ...

    @abstractmethod
    def save_team_results(self, results: Iterable[TeamSeasonResult]) -> int:
        """Insert or replace team rows keyed by (team, year)."""
        ...
