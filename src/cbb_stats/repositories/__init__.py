"""
Repository abstraction layer.

Provides a database-agnostic interface to the record store, so the stat
pipeline runs the same over PostgreSQL or plain in-memory records.

Usage:
    from cbb_stats.repositories import get_repository

    repo = get_repository(db)
    games = repo.fetch_games(2026, team="Duke")
"""

from typing import TYPE_CHECKING

from .base import GameRecordRepository
from .memory import InMemoryGameRepository

if TYPE_CHECKING:
    from ..pg_connection import PostgresDB

__all__ = [
    "GameRecordRepository",
    "InMemoryGameRepository",
    "get_repository",
]


def get_repository(db: "PostgresDB") -> GameRecordRepository:
    """
    Get the record store repository for a database connection.

    Args:
        db: Database connection

    Returns:
        PostgresGameRepository bound to db
    """
    from .postgres import PostgresGameRepository

    return PostgresGameRepository(db)
