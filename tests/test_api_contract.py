"""
API contract tests for CBB Stats API.

These tests validate response shapes, percentile fields and error envelopes
for every endpoint. The record store is swapped for the in-memory fixture
season through FastAPI dependency overrides, so no database is needed.
"""

from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from cbb_stats.api.dependencies import get_repository
from cbb_stats.api.main import create_app
from cbb_stats.percentiles import ALL_RANKED_METRICS


@pytest.fixture
def client(repo):
    """Sync test client over a fresh app bound to the fixture repository.

    The client is not used as a context manager, so the lifespan (which
    opens the database pool) does not run.
    """
    app = create_app()
    app.dependency_overrides[get_repository] = lambda: repo
    return TestClient(app)


def _by_pid(rows):
    return {row["pid"]: row for row in rows}


def _assert_error_envelope(response, status_code: int, code: str):
    assert response.status_code == status_code
    data = response.json()
    assert "error" in data
    assert data["error"]["code"] == code
    assert "message" in data["error"]


# =========================================================================
# Health endpoints
# =========================================================================


class TestHealthEndpoints:
    """Health endpoints must always return a consistent shape."""

    def test_health_basic(self, client):
        r = client.get("/health")
        assert r.status_code == 200
        data = r.json()
        assert data["status"] == "healthy"
        assert "timestamp" in data

    def test_health_db(self, client):
        r = client.get("/health/db")
        # 200 or 503 depending on whether a database is reachable
        assert r.status_code in (200, 503)
        data = r.json()
        assert "status" in data
        assert "database" in data
        assert "timestamp" in data

    def test_root(self, client):
        r = client.get("/")
        assert r.status_code == 200
        data = r.json()
        assert data["name"] == "CBB Stats API"
        assert "version" in data


# =========================================================================
# Stat line endpoints
# =========================================================================


class TestSeasonAveragesContract:
    """GET /api/player-season-averages"""

    def test_shape(self, client):
        r = client.get("/api/player-season-averages", params={"team": "Duke", "year": 2026})
        assert r.status_code == 200
        rows = r.json()
        assert [row["pid"] for row in rows] == [1, 2, 3]
        assert rows[0]["avg_pts"] == pytest.approx(12.0)
        assert rows[0]["first_game_date"] == "2025-11-03"

    def test_missing_team(self, client):
        r = client.get("/api/player-season-averages", params={"year": 2026})
        assert r.status_code == 422

    def test_computed_responses_not_cached(self, client):
        r = client.get("/api/player-season-averages", params={"team": "Duke", "year": 2026})
        assert r.headers["Cache-Control"] == "no-store"
        assert r.headers["X-Process-Time"].endswith("ms")


class TestStatsWithPercentilesContract:
    """GET /api/player-stats-with-percentiles"""

    def test_percentile_fields(self, client):
        r = client.get("/api/player-stats-with-percentiles", params={"team": "Duke", "year": 2026})
        assert r.status_code == 200
        rows = r.json()

        for row in rows:
            for metric in ALL_RANKED_METRICS:
                assert f"pct_{metric}" in row
        assert len({frozenset(row) for row in rows}) == 1

    def test_team_scope_values(self, client):
        r = client.get("/api/player-stats-with-percentiles", params={"team": "Duke", "year": 2026})
        rows = _by_pid(r.json())

        assert rows[1]["pct_pts"] == 0.0
        assert rows[3]["pct_pts"] == 100.0
        assert rows[1]["pct_to_per"] == 100.0
        assert rows[1]["usg"] == pytest.approx(19.0)

    def test_league_scope(self, client):
        r = client.get(
            "/api/player-stats-with-percentiles",
            params={"team": "Duke", "year": 2026, "scope": "league"},
        )
        rows = _by_pid(r.json())

        assert set(rows) == {1, 2, 3}
        assert rows[2]["pct_pts"] == 33.3

    def test_invalid_scope(self, client):
        r = client.get(
            "/api/player-stats-with-percentiles",
            params={"team": "Duke", "year": 2026, "scope": "galaxy"},
        )
        assert r.status_code == 422


class TestRollingAveragesContract:
    """GET /api/player-rolling-averages"""

    def test_default_window(self, client):
        r = client.get("/api/player-rolling-averages", params={"team": "Duke", "year": 2026})
        assert r.status_code == 200
        rows = _by_pid(r.json())

        assert rows[3]["gp"] == 1
        assert rows[3]["last_n_days"] == 30
        assert rows[1]["pct_treb"] is None

    def test_single_player(self, client):
        r = client.get(
            "/api/player-rolling-averages",
            params={"team": "Duke", "year": 2026, "pid": 2, "last_n_days": 14},
        )
        rows = r.json()

        assert len(rows) == 1
        assert rows[0]["pid"] == 2
        assert rows[0]["last_n_days"] == 14

    @pytest.mark.parametrize("last_n_days", [0, -3])
    def test_non_positive_window(self, client, last_n_days):
        r = client.get(
            "/api/player-rolling-averages",
            params={"team": "Duke", "year": 2026, "last_n_days": last_n_days},
        )
        _assert_error_envelope(r, 400, "VALIDATION_ERROR")
        assert "last_n_days" in r.json()["error"]["detail"]

    def test_non_integer_window(self, client):
        r = client.get(
            "/api/player-rolling-averages",
            params={"team": "Duke", "year": 2026, "last_n_days": "week"},
        )
        assert r.status_code == 422


# =========================================================================
# Game log and team endpoints
# =========================================================================


class TestGameStatsContract:
    """GET /api/game-stats"""

    def test_game_log(self, client):
        r = client.get("/api/game-stats", params={"team": "Duke", "year": 2026, "pid": 3})
        assert r.status_code == 200
        rows = r.json()

        assert [row["pts"] for row in rows] == [30.0, 34.0]
        assert rows[0]["game_date"] == "2025-11-03"
        assert rows[0]["player_name"] == "Player 3"

    def test_unknown_player(self, client):
        r = client.get("/api/game-stats", params={"team": "Duke", "year": 2026, "pid": 999})
        _assert_error_envelope(r, 404, "NOT_FOUND")

    def test_missing_pid(self, client):
        r = client.get("/api/game-stats", params={"team": "Duke", "year": 2026})
        assert r.status_code == 422


class TestTeamStatsContract:
    """GET /api/team-stats"""

    def test_ordered_by_rank(self, client):
        r = client.get("/api/team-stats", params={"year": 2026})
        assert r.status_code == 200
        assert [row["team"] for row in r.json()] == ["Duke", "UNC"]


class TestPercentileConfigContract:
    """GET /api/percentile-config"""

    def test_shape(self, client):
        r = client.get("/api/percentile-config")
        assert r.status_code == 200
        data = r.json()

        assert data["version"] == "1"
        assert "to_per" in data["inverted_metrics"]
        assert [band["min"] for band in data["bands"]] == [0, 20, 40, 60, 80]
        assert "pts" in data["ranked_metrics"]["rolling"]


class TestDatabaseUnavailable:
    """Without an override and without a database, data routes report 503."""

    def test_service_unavailable(self, monkeypatch):
        from cbb_stats.core import config
        from cbb_stats import pg_connection

        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setattr(pg_connection, "_postgres_db", None)
        config.get_settings.cache_clear()
        try:
            client = TestClient(create_app())
            r = client.get("/api/team-stats", params={"year": 2026})
        finally:
            config.get_settings.cache_clear()

        _assert_error_envelope(r, 503, "SERVICE_UNAVAILABLE")
