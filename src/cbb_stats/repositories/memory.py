"""
In-memory repository.

Holds records in dicts keyed like the Postgres tables' primary keys. Used by
the test suite and by `cbb-stats report --games FILE` to run the pipeline
over a JSON file without a database.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Optional

from ..core.models import GameRecord, PlayerSeasonProfile, TeamSeasonResult
from .base import GameRecordRepository

logger = logging.getLogger(__name__)


class InMemoryGameRepository(GameRecordRepository):
    """Dict-backed implementation of GameRecordRepository."""

    def __init__(
        self,
        games: Iterable[GameRecord] = (),
        profiles: Iterable[PlayerSeasonProfile] = (),
        team_results: Iterable[TeamSeasonResult] = (),
    ):
        self._games: dict[tuple, GameRecord] = {}
        self._profiles: dict[tuple, PlayerSeasonProfile] = {}
        self._team_results: dict[tuple, TeamSeasonResult] = {}

        self.save_games(games)
        self.save_player_profiles(profiles)
        self.save_team_results(team_results)

    @classmethod
    def from_rows(
        cls,
        games: Iterable[dict[str, Any]] = (),
        profiles: Iterable[dict[str, Any]] = (),
        team_results: Iterable[dict[str, Any]] = (),
    ) -> "InMemoryGameRepository":
        """Build from raw dict rows (upstream column names are accepted)."""
        return cls(
            games=[GameRecord.model_validate(row) for row in games],
            profiles=[PlayerSeasonProfile.model_validate(row) for row in profiles],
            team_results=[TeamSeasonResult.model_validate(row) for row in team_results],
        )

    @classmethod
    def from_json_file(cls, path: str | Path) -> "InMemoryGameRepository":
        """Load a JSON array of game rows."""
        rows = json.loads(Path(path).read_text())
        logger.info("Loaded %d game rows from %s", len(rows), path)
        return cls.from_rows(games=rows)

    def fetch_games(
        self,
        year: int,
        team: Optional[str] = None,
        pid: Optional[int] = None,
    ) -> list[GameRecord]:
        games = [
            g
            for g in self._games.values()
            if g.year == year
            and (team is None or g.team == team)
            and (pid is None or g.pid == pid)
        ]
        return sorted(games, key=lambda g: (g.pid, g.game_date))

    def fetch_player_profiles(
        self,
        year: int,
        team: Optional[str] = None,
    ) -> list[PlayerSeasonProfile]:
        return [
            p
            for p in self._profiles.values()
            if p.year == year and (team is None or p.team == team)
        ]

    def fetch_team_results(self, year: int) -> list[TeamSeasonResult]:
        results = [r for r in self._team_results.values() if r.year == year]
        # Unranked teams last
        return sorted(results, key=lambda r: (r.rank is None, r.rank or 0, r.team))

    def save_games(self, games: Iterable[GameRecord]) -> int:
        count = 0
        for game in games:
            self._games[(game.pid, game.team, game.game_date)] = game
            count += 1
        return count

    def save_player_profiles(self, profiles: Iterable[PlayerSeasonProfile]) -> int:
        count = 0
        for profile in profiles:
            self._profiles[(profile.pid, profile.team, profile.year)] = profile
            count += 1
        return count

    def save_team_results(self, results: Iterable[TeamSeasonResult]) -> int:
        count = 0
        for result in results:
            self._team_results[(result.team, result.year)] = result
            count += 1
        return count
