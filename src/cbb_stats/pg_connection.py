"""
PostgreSQL connection manager.

Thin wrapper over a psycopg 3 connection pool that returns rows as dicts.
The record store repository and the schema manager both go through it.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence

import psycopg
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from .core.config import get_settings

logger = logging.getLogger(__name__)


class PostgresDB:
    """
    PostgreSQL database connection manager with connection pooling.

    The pool is created closed; it opens on first use or on an explicit
    open() (the API does this at startup).
    """

    def __init__(
        self,
        connection_string: Optional[str] = None,
        min_pool_size: int = 1,
        max_pool_size: Optional[int] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the PostgreSQL connection manager.

        Args:
            connection_string: PostgreSQL connection URL. Defaults to settings.database_url.
            min_pool_size: Minimum connections to keep in pool.
            max_pool_size: Maximum connections in pool. Defaults to settings.database_pool_size.
            timeout: Seconds to wait for a pooled connection. Defaults to settings.database_pool_timeout.
        """
        settings = get_settings()
        self.connection_string = connection_string or settings.db_url
        if not self.connection_string:
            raise ValueError(
                "DATABASE_URL environment variable required or connection_string must be provided"
            )

        self._min_pool_size = min_pool_size
        self._max_pool_size = max(max_pool_size or settings.database_pool_size, min_pool_size)

        self._pool = ConnectionPool(
            self.connection_string,
            min_size=self._min_pool_size,
            max_size=self._max_pool_size,
            timeout=timeout or settings.database_pool_timeout,
            kwargs={"row_factory": dict_row},
            open=False,
        )
        self._opened = False

    def open(self) -> None:
        """Open the pool and establish min_size connections."""
        if not self._opened:
            self._pool.open(wait=True)
            self._opened = True
            logger.info(
                "Database connection pool opened (min_size=%d, max_size=%d)",
                self._min_pool_size,
                self._max_pool_size,
            )

    @contextmanager
    def get_connection(self) -> Iterator[psycopg.Connection]:
        """Get a connection from the pool."""
        self.open()
        with self._pool.connection() as conn:
            yield conn

    @contextmanager
    def transaction(self) -> Iterator[psycopg.Connection]:
        """
        Execute queries within a transaction.

        Automatically commits on success, rolls back on failure.
        """
        with self.get_connection() as conn:
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise

    def execute(self, query: str, params: Sequence[Any] = ()) -> None:
        """Execute a single query without returning results."""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
            conn.commit()

    def executemany(self, query: str, params_list: list[Sequence[Any]]) -> None:
        """Execute a query with multiple parameter sets."""
        if not params_list:
            return
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.executemany(query, params_list)
            conn.commit()

    def fetchone(self, query: str, params: Sequence[Any] = ()) -> Optional[dict[str, Any]]:
        """Execute a query and fetch one result as a dict."""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                row = cur.fetchone()
                return dict(row) if row else None

    def fetchall(self, query: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Execute a query and fetch all results as dicts."""
        with self.get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return [dict(row) for row in cur.fetchall()]

    def close(self) -> None:
        """Close the connection pool."""
        self._pool.close()
        self._opened = False

    def table_exists(self, table_name: str) -> bool:
        """Check whether a table exists in the current schema."""
        result = self.fetchone(
            "SELECT EXISTS(SELECT 1 FROM information_schema.tables WHERE table_name = %s) AS exists",
            (table_name,),
        )
        return bool(result and result["exists"])


# =========================================================================
# Global Instance
# =========================================================================

_postgres_db: Optional[PostgresDB] = None


def get_postgres_db() -> PostgresDB:
    """
    Get the global PostgreSQL database instance.

    Returns:
        Shared PostgresDB instance
    """
    global _postgres_db

    if _postgres_db is None:
        _postgres_db = PostgresDB()

    return _postgres_db


def close_postgres_db() -> None:
    """Close the global PostgreSQL database connection."""
    global _postgres_db
    if _postgres_db is not None:
        _postgres_db.close()
        _postgres_db = None
