"""
Pytest configuration for cbb-stats tests.

Provides game record builders and a small two-team season held in an
in-memory repository, so the pipeline and API run without a database.
"""

import os
from datetime import date, timedelta

import pytest

from cbb_stats.core.models import GameRecord, PlayerSeasonProfile, TeamSeasonResult
from cbb_stats.repositories import InMemoryGameRepository

SEASON = 2026
SEASON_START = date(2025, 11, 3)


@pytest.fixture
def make_game():
    """Factory for GameRecords with sensible identity defaults."""

    def _make_game(
        pid: int = 1,
        team: str = "Duke",
        day: int = 0,
        year: int = SEASON,
        player_name: str | None = None,
        **stats,
    ) -> GameRecord:
        return GameRecord(
            pid=pid,
            player_name=player_name if player_name is not None else f"Player {pid}",
            team=team,
            year=year,
            game_date=SEASON_START + timedelta(days=day),
            opponent="Opponent",
            **stats,
        )

    return _make_game


@pytest.fixture
def season_games(make_game):
    """
    Two Duke players, one Duke bench player and one UNC player.

    pid 1: pts 10/14 -> avg 12, low turnover rate
    pid 2: pts 20/24 -> avg 22
    pid 3: pts 30/34 -> avg 32, high turnover rate, one game late in the season
    pid 4 (UNC): pts 40/44 -> avg 42
    """
    shooting = dict(two_pm=3, two_pa=6, tpm=1, tpa=3, ftm=2, fta=4)
    return [
        make_game(1, day=0, pts=10, ast=2, tov=1, to_per=10.0, usage=18.0, pf=2, min_per=50.0, **shooting),
        make_game(1, day=2, pts=14, ast=4, tov=1, to_per=12.0, usage=20.0, pf=2, min_per=50.0, **shooting),
        make_game(2, day=0, pts=20, ast=3, tov=2, to_per=15.0, usage=22.0, pf=3, min_per=60.0, **shooting),
        make_game(2, day=2, pts=24, ast=3, tov=2, to_per=17.0, usage=24.0, pf=3, min_per=60.0, **shooting),
        make_game(3, day=0, pts=30, ast=1, tov=3, to_per=25.0, usage=28.0, pf=4, min_per=70.0, **shooting),
        make_game(3, day=60, pts=34, ast=1, tov=3, to_per=27.0, usage=30.0, pf=4, min_per=70.0, **shooting),
        make_game(4, team="UNC", day=0, pts=40, ast=5, tov=1, to_per=8.0, usage=32.0, pf=1, min_per=80.0, **shooting),
        make_game(4, team="UNC", day=2, pts=44, ast=5, tov=1, to_per=8.0, usage=32.0, pf=1, min_per=80.0, **shooting),
    ]


@pytest.fixture
def profiles():
    return [
        PlayerSeasonProfile(pid=1, team="Duke", year=SEASON, player_name="Player 1", yr="Fr", drtg=95.0),
        PlayerSeasonProfile(pid=2, team="Duke", year=SEASON, player_name="Player 2", yr="So", drtg=100.0),
        PlayerSeasonProfile(pid=3, team="Duke", year=SEASON, player_name="Player 3", yr="Sr", drtg=105.0),
        PlayerSeasonProfile(pid=5, team="Duke", year=SEASON, player_name="Walk On", yr="Fr", drtg=110.0),
        PlayerSeasonProfile(pid=4, team="UNC", year=SEASON, player_name="Player 4", yr="Jr", drtg=90.0),
    ]


@pytest.fixture
def team_results():
    return [
        TeamSeasonResult(team="UNC", year=SEASON, rank=12, conf="ACC", record="20-8"),
        TeamSeasonResult(team="Duke", year=SEASON, rank=3, conf="ACC", record="25-3", adjoe=121.4),
    ]


@pytest.fixture
def repo(season_games, profiles, team_results):
    """In-memory record store holding the fixture season."""
    return InMemoryGameRepository(
        games=season_games,
        profiles=profiles,
        team_results=team_results,
    )


@pytest.fixture(scope="session")
def database_url():
    """Get the test database URL."""
    url = os.environ.get("DATABASE_URL")
    if not url:
        pytest.skip("DATABASE_URL not set")
    return url
