"""
Database schema management for the stats database.

Handles initialization and migration tracking. Migrations are the ordered
SQL files in the migrations/ directory next to this module.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .pg_connection import PostgresDB

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "migrations"

# Tables the record store reads; all must exist for the API to serve
REQUIRED_TABLES: tuple[str, ...] = ("game_stats", "player_stats", "team_stats")


def get_migration_files() -> list[Path]:
    """Get all SQL migration files in order."""
    if not MIGRATIONS_DIR.exists():
        return []

    return sorted(MIGRATIONS_DIR.glob("*.sql"))


def get_applied_migrations(db: "PostgresDB") -> set[str]:
    """Names of migrations already recorded in schema_migrations."""
    if not db.table_exists("schema_migrations"):
        return set()
    rows = db.fetchall("SELECT name FROM schema_migrations")
    return {row["name"] for row in rows}


def run_migrations(db: "PostgresDB", force: bool = False) -> int:
    """
    Run all pending migrations.

    Args:
        db: Database connection
        force: If True, run all migrations even if already applied

    Returns:
        Number of migrations applied
    """
    migration_files = get_migration_files()
    if not migration_files:
        logger.warning("No migration files found in %s", MIGRATIONS_DIR)
        return 0

    applied_names = set() if force else get_applied_migrations(db)
    applied = 0

    for migration_file in migration_files:
        migration_name = migration_file.stem

        if migration_name in applied_names:
            logger.debug("Skipping already applied migration: %s", migration_name)
            continue

        logger.info("Applying migration: %s", migration_name)

        try:
            with db.transaction() as conn:
                conn.execute(migration_file.read_text())
                conn.execute(
                    """
                    INSERT INTO schema_migrations (name) VALUES (%s)
                    ON CONFLICT (name) DO UPDATE SET applied_at = now()
                    """,
                    (migration_name,),
                )
        except Exception as e:
            logger.error("Failed to apply migration %s: %s", migration_name, e)
            raise

        applied += 1
        logger.info("Successfully applied migration: %s", migration_name)

    return applied


def init_database(db: "PostgresDB", force: bool = False) -> int:
    """
    Initialize the database with the full schema.

    Args:
        db: Database connection
        force: Re-run migrations that are already recorded

    Returns:
        Number of migrations applied
    """
    logger.info("Initializing stats database")
    applied = run_migrations(db, force=force)
    logger.info("Database initialized with %d migrations", applied)
    return applied


def is_initialized(db: "PostgresDB") -> bool:
    """Check that every table the record store reads exists."""
    return all(db.table_exists(table) for table in REQUIRED_TABLES)


def get_table_counts(db: "PostgresDB") -> dict[str, int]:
    """Get row counts for the record store tables."""
    counts = {}
    for table in REQUIRED_TABLES:
        if not db.table_exists(table):
            continue
        result = db.fetchone(f"SELECT COUNT(*) AS count FROM {table}")
        counts[table] = result["count"] if result else 0
    return counts
