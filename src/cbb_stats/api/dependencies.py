"""
Dependency injection for API endpoints.

Routes depend on a GameRecordRepository, never on the database directly.
Tests swap the repository with app.dependency_overrides[get_repository].

Routes are sync: psycopg's pooled connections are blocking, and FastAPI
runs sync dependencies and routes in its thread pool.
"""

import logging
from typing import Annotated

from fastapi import Depends

from ..pg_connection import PostgresDB, close_postgres_db, get_postgres_db
from ..repositories import GameRecordRepository
from ..repositories.postgres import PostgresGameRepository
from .errors import ServiceUnavailableError

logger = logging.getLogger(__name__)


def get_db() -> PostgresDB:
    """
    Dependency that provides the pooled database connection.

    Raises:
        ServiceUnavailableError: If no database is configured
    """
    try:
        return get_postgres_db()
    except ValueError as e:
        logger.error("Database not configured: %s", e)
        raise ServiceUnavailableError("Database") from e


def close_db() -> None:
    """Close the global database connection. Called at app shutdown."""
    close_postgres_db()


def get_repository(db: Annotated[PostgresDB, Depends(get_db)]) -> GameRecordRepository:
    """Dependency that provides the record store."""
    return PostgresGameRepository(db)


# Type alias for dependency injection
RepositoryDependency = Annotated[GameRecordRepository, Depends(get_repository)]
