"""
PostgreSQL repository implementation.

Reads game logs from game_stats, season profiles from player_stats and
team results from team_stats. Column names match the pydantic model field
names, so rows validate straight into models.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, Optional

from pydantic import BaseModel

from ..core.models import GameRecord, PlayerSeasonProfile, TeamSeasonResult
from .base import GameRecordRepository

if TYPE_CHECKING:
    from ..pg_connection import PostgresDB

logger = logging.getLogger(__name__)

GAME_STATS_TABLE = "game_stats"
PLAYER_STATS_TABLE = "player_stats"
TEAM_STATS_TABLE = "team_stats"

GAME_COLUMNS: tuple[str, ...] = tuple(GameRecord.model_fields)
PROFILE_COLUMNS: tuple[str, ...] = tuple(PlayerSeasonProfile.model_fields)
TEAM_COLUMNS: tuple[str, ...] = tuple(TeamSeasonResult.model_fields)


def _upsert_query(table: str, columns: tuple[str, ...], key: tuple[str, ...]) -> str:
    """INSERT ... ON CONFLICT DO UPDATE over every non-key column."""
    columns_str = ", ".join(columns)
    placeholders = ", ".join(["%s"] * len(columns))
    update_str = ", ".join(f"{col} = excluded.{col}" for col in columns if col not in key)
    return f"""
        INSERT INTO {table} ({columns_str})
        VALUES ({placeholders})
        ON CONFLICT ({", ".join(key)}) DO UPDATE SET {update_str}
    """


def _row_params(model: BaseModel, columns: tuple[str, ...]) -> tuple[Any, ...]:
    return tuple(getattr(model, col) for col in columns)


class PostgresGameRepository(GameRecordRepository):
    """PostgreSQL implementation of GameRecordRepository."""

    def __init__(self, db: "PostgresDB"):
        self.db = db

    def fetch_games(
        self,
        year: int,
        team: Optional[str] = None,
        pid: Optional[int] = None,
    ) -> list[GameRecord]:
        conditions = ["year = %s"]
        params: list[Any] = [year]
        if team is not None:
            conditions.append("team = %s")
            params.append(team)
        if pid is not None:
            conditions.append("pid = %s")
            params.append(pid)

        query = f"""
            SELECT {", ".join(GAME_COLUMNS)}
            FROM {GAME_STATS_TABLE}
            WHERE {" AND ".join(conditions)}
            ORDER BY pid, game_date
        """
        rows = self.db.fetchall(query, tuple(params))
        logger.debug("Fetched %d game rows (year=%s team=%s pid=%s)", len(rows), year, team, pid)
        return [GameRecord.model_validate(row) for row in rows]

    def fetch_player_profiles(
        self,
        year: int,
        team: Optional[str] = None,
    ) -> list[PlayerSeasonProfile]:
        query = f"SELECT {', '.join(PROFILE_COLUMNS)} FROM {PLAYER_STATS_TABLE} WHERE year = %s"
        params: tuple[Any, ...] = (year,)
        if team is not None:
            query += " AND team = %s"
            params = (year, team)
        rows = self.db.fetchall(query, params)
        return [PlayerSeasonProfile.model_validate(row) for row in rows]

    def fetch_team_results(self, year: int) -> list[TeamSeasonResult]:
        rows = self.db.fetchall(
            f"""
            SELECT {", ".join(TEAM_COLUMNS)}
            FROM {TEAM_STATS_TABLE}
            WHERE year = %s
            ORDER BY rank NULLS LAST, team
            """,
            (year,),
        )
        return [TeamSeasonResult.model_validate(row) for row in rows]

    def save_games(self, games: Iterable[GameRecord]) -> int:
        params = [_row_params(game, GAME_COLUMNS) for game in games]
        self.db.executemany(
            _upsert_query(GAME_STATS_TABLE, GAME_COLUMNS, ("pid", "team", "game_date")),
            params,
        )
        logger.info("Saved %d game rows", len(params))
        return len(params)

    def save_player_profiles(self, profiles: Iterable[PlayerSeasonProfile]) -> int:
        params = [_row_params(profile, PROFILE_COLUMNS) for profile in profiles]
        self.db.executemany(
            _upsert_query(PLAYER_STATS_TABLE, PROFILE_COLUMNS, ("pid", "team", "year")),
            params,
        )
        logger.info("Saved %d player profile rows", len(params))
        return len(params)

    def save_team_results(self, results: Iterable[TeamSeasonResult]) -> int:
        params = [_row_params(result, TEAM_COLUMNS) for result in results]
        self.db.executemany(
            _upsert_query(TEAM_STATS_TABLE, TEAM_COLUMNS, ("team", "year")),
            params,
        )
        logger.info("Saved %d team rows", len(params))
        return len(params)
