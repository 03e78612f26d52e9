#!/usr/bin/env python3
"""
Command-line interface for CBB Stats.

Usage:
    cbb-stats init                                  # Create tables
    cbb-stats status                                # Table row counts
    cbb-stats load-games games.json                 # Load game rows
    cbb-stats load-profiles players.json            # Load season profile rows
    cbb-stats load-teams teams.json                 # Load team result rows
    cbb-stats report --team Duke --year 2026        # Season lines + percentiles
    cbb-stats report --team Duke --year 2026 --last-n-days 14 --scope league
    cbb-stats report --team Duke --year 2026 --games games.json   # No database
    cbb-stats serve --port 8000
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Callable

import msgspec
from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError

from .core.config import get_settings
from .core.errors import StatsError
from .core.models import GameRecord, PlayerSeasonProfile, TeamSeasonResult
from .core.types import ComparisonScope

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("cbb_stats.cli")


def get_db():
    """Get the pooled database connection."""
    from .pg_connection import PostgresDB

    return PostgresDB()


def _read_rows(path: str) -> list[dict[str, Any]]:
    """Read a JSON array of row objects."""
    rows = json.loads(Path(path).read_text())
    if not isinstance(rows, list):
        raise ValueError(f"{path}: expected a JSON array of rows")
    return rows


def cmd_init(args: argparse.Namespace) -> int:
    """Initialize the database with schema."""
    from .schema import init_database

    db = get_db()

    try:
        logger.info("Initializing stats database...")
        applied = init_database(db, force=args.force)
        logger.info("Database initialized successfully (%d migrations applied)", applied)
        return 0
    except Exception as e:
        logger.error("Failed to initialize database: %s", e)
        return 1
    finally:
        db.close()


def cmd_status(args: argparse.Namespace) -> int:
    """Show database status."""
    from .schema import get_applied_migrations, get_table_counts, is_initialized

    db = get_db()

    try:
        if not is_initialized(db):
            logger.info("Database is not initialized; run `cbb-stats init`")
            return 1

        print("\nStats Database Status")
        print("=" * 50)
        print(f"Migrations: {', '.join(sorted(get_applied_migrations(db))) or 'none'}")
        print()
        print("Table Counts:")
        for table, count in sorted(get_table_counts(db).items()):
            print(f"  {table}: {count:,}")
        return 0

    except Exception as e:
        logger.error("Failed to get status: %s", e)
        return 1
    finally:
        db.close()


def _load(path: str, model: type[BaseModel], save: Callable[[Any], Callable[[list], int]]) -> int:
    """Validate rows from a JSON file and write them with a repository save method."""
    from .repositories import get_repository

    try:
        records = [model.model_validate(row) for row in _read_rows(path)]
    except (OSError, ValueError, ModelValidationError) as e:
        logger.error("Could not read %s: %s", path, e)
        return 1

    db = get_db()
    try:
        count = save(get_repository(db))(records)
        logger.info("Loaded %d %s rows from %s", count, model.__name__, path)
        return 0
    except Exception as e:
        logger.error("Failed to load %s: %s", path, e)
        return 1
    finally:
        db.close()


def cmd_load_games(args: argparse.Namespace) -> int:
    """Load game log rows from a JSON file."""
    return _load(args.file, GameRecord, lambda repo: repo.save_games)


def cmd_load_profiles(args: argparse.Namespace) -> int:
    """Load player season profile rows from a JSON file."""
    return _load(args.file, PlayerSeasonProfile, lambda repo: repo.save_player_profiles)


def cmd_load_teams(args: argparse.Namespace) -> int:
    """Load team season result rows from a JSON file."""
    return _load(args.file, TeamSeasonResult, lambda repo: repo.save_team_results)


def cmd_report(args: argparse.Namespace) -> int:
    """Print stat lines with percentiles as JSON."""
    from .repositories import InMemoryGameRepository, get_repository
    from .services.stats import get_player_rolling_averages, get_player_stats_with_percentiles

    settings = get_settings()
    year = args.year or settings.current_season
    scope = ComparisonScope(args.scope or settings.default_comparison_scope)

    db = None
    try:
        if args.games:
            repo = InMemoryGameRepository.from_json_file(args.games)
        else:
            db = get_db()
            repo = get_repository(db)

        if args.last_n_days is not None:
            lines = get_player_rolling_averages(
                repo, args.team, year, last_n_days=args.last_n_days, scope=scope, pid=args.pid
            )
        else:
            lines = get_player_stats_with_percentiles(repo, args.team, year, scope=scope)
            if args.pid is not None:
                lines = [line for line in lines if line["pid"] == args.pid]

    except StatsError as e:
        logger.error("%s", e)
        return 1
    except Exception as e:
        logger.error("Failed to build report: %s", e)
        return 1
    finally:
        if db is not None:
            db.close()

    if not lines:
        logger.warning("No players found for %s %d", args.team, year)

    print(msgspec.json.format(msgspec.json.encode(lines), indent=2).decode())
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    """Run the API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "cbb_stats.api.main:app",
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        reload=args.reload,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="College basketball stat aggregation and percentile service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # init command
    init_parser = subparsers.add_parser("init", help="Initialize the database")
    init_parser.add_argument("--force", action="store_true", help="Re-run applied migrations")

    # status command
    subparsers.add_parser("status", help="Show database status")

    # load commands
    for name, help_text in (
        ("load-games", "Load game log rows from a JSON array"),
        ("load-profiles", "Load player season profile rows from a JSON array"),
        ("load-teams", "Load team season result rows from a JSON array"),
    ):
        load_parser = subparsers.add_parser(name, help=help_text)
        load_parser.add_argument("file", help="Path to JSON file")

    # report command
    report_parser = subparsers.add_parser("report", help="Print stat lines with percentiles")
    report_parser.add_argument("--team", required=True, help="Team name")
    report_parser.add_argument("--year", type=int, help="Season year (default: current season)")
    report_parser.add_argument(
        "--last-n-days",
        type=int,
        help="Rolling window in days (omit for full-season lines)",
    )
    report_parser.add_argument(
        "--scope",
        choices=[s.value for s in ComparisonScope],
        help="Percentile population (default: team)",
    )
    report_parser.add_argument("--pid", type=int, help="Only print this player")
    report_parser.add_argument("--games", help="Read game rows from a JSON file instead of the database")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", help="Bind host (default: settings.api_host)")
    serve_parser.add_argument("--port", type=int, help="Bind port (default: settings.api_port)")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "init": cmd_init,
        "status": cmd_status,
        "load-games": cmd_load_games,
        "load-profiles": cmd_load_profiles,
        "load-teams": cmd_load_teams,
        "report": cmd_report,
        "serve": cmd_serve,
    }

    cmd_func = commands.get(args.command)
    if cmd_func:
        return cmd_func(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
