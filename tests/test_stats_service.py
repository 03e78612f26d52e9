"""
Tests for the stats pipeline over the in-memory fixture season.

Fixture (see conftest): Duke pids 1, 2, 3 average 12, 22 and 32 points;
UNC pid 4 averages 42. pid 3's second game is 60 days after the first.
"""

import pytest

from cbb_stats.core.errors import InvalidWindowError
from cbb_stats.core.types import ComparisonScope
from cbb_stats.percentiles import ALL_RANKED_METRICS
from cbb_stats.services.stats import (
    get_player_game_log,
    get_player_rolling_averages,
    get_player_season_averages,
    get_player_stats_with_percentiles,
    get_team_results,
)


def _by_pid(lines):
    return {line["pid"]: line for line in lines}


class TestSeasonAverages:
    """Raw season aggregates."""

    def test_team_players_only(self, repo):
        result = get_player_season_averages(repo, "Duke", 2026)

        assert [r["pid"] for r in result] == [1, 2, 3]
        assert result[0]["avg_pts"] == pytest.approx(12.0)
        assert result[0]["pts_total"] == pytest.approx(24.0)
        assert result[0]["games_played"] == 2

    def test_unknown_team(self, repo):
        assert get_player_season_averages(repo, "Nowhere", 2026) == []


class TestStatsWithPercentiles:
    """Season stat lines ranked within a comparison scope."""

    def test_team_scope(self, repo):
        lines = _by_pid(get_player_stats_with_percentiles(repo, "Duke", 2026))

        assert set(lines) == {1, 2, 3}
        assert [lines[pid]["pct_pts"] for pid in (1, 2, 3)] == [0.0, 50.0, 100.0]

    def test_inverted_metrics(self, repo):
        lines = _by_pid(get_player_stats_with_percentiles(repo, "Duke", 2026))

        # Lowest turnover rate and lowest defensive rating rank highest
        assert lines[1]["pct_to_per"] == 100.0
        assert lines[3]["pct_to_per"] == 0.0
        assert lines[1]["pct_drtg"] == 100.0
        assert lines[3]["pct_drtg"] == 0.0

    def test_league_scope(self, repo):
        lines = _by_pid(
            get_player_stats_with_percentiles(repo, "Duke", 2026, scope=ComparisonScope.league)
        )

        assert set(lines) == {1, 2, 3}
        assert [lines[pid]["pct_pts"] for pid in (1, 2, 3)] == [0.0, 33.3, 66.7]

    def test_scope_as_string(self, repo):
        lines = get_player_stats_with_percentiles(repo, "Duke", 2026, scope="league")
        assert max(line["pct_pts"] for line in lines) == 66.7

    def test_every_line_has_every_percentile_field(self, repo):
        lines = get_player_stats_with_percentiles(repo, "Duke", 2026)
        for line in lines:
            for metric in ALL_RANKED_METRICS:
                assert f"pct_{metric}" in line

    def test_profile_joined(self, repo):
        lines = _by_pid(get_player_stats_with_percentiles(repo, "Duke", 2026))
        assert lines[3]["yr"] == "Sr"

    def test_precision_override(self, repo):
        lines = _by_pid(
            get_player_stats_with_percentiles(repo, "Duke", 2026, scope="league", precision=0)
        )
        assert lines[2]["pct_pts"] == 33.0


class TestRollingAverages:
    """Trailing-window stat lines."""

    def test_default_window(self, repo):
        lines = _by_pid(get_player_rolling_averages(repo, "Duke", 2026))

        # pid 3's first game is 60 days before the last one
        assert lines[3]["gp"] == 1
        assert lines[3]["pts"] == pytest.approx(34.0)
        assert lines[1]["gp"] == 2
        assert lines[1]["last_n_days"] == 30

    def test_wide_window_matches_season(self, repo):
        rolling = _by_pid(get_player_rolling_averages(repo, "Duke", 2026, last_n_days=365))
        season = _by_pid(get_player_stats_with_percentiles(repo, "Duke", 2026))

        for pid in (1, 2, 3):
            assert rolling[pid]["pts"] == season[pid]["pts"]
            assert rolling[pid]["gp"] == season[pid]["gp"]

    def test_rolling_percentiles(self, repo):
        lines = _by_pid(get_player_rolling_averages(repo, "Duke", 2026))

        assert [lines[pid]["pct_pts"] for pid in (1, 2, 3)] == [0.0, 50.0, 100.0]
        assert lines[1]["pct_treb"] is None

    def test_pid_filter_keeps_population(self, repo):
        lines = get_player_rolling_averages(repo, "Duke", 2026, pid=2)

        assert len(lines) == 1
        assert lines[0]["pid"] == 2
        assert lines[0]["pct_pts"] == 50.0

    def test_rostered_player_without_games(self, repo):
        lines = get_player_rolling_averages(repo, "Duke", 2026, pid=5)

        assert len(lines) == 1
        assert lines[0]["gp"] == 0
        assert lines[0]["player_name"] == "Walk On"
        assert lines[0]["pts"] is None
        assert lines[0]["drtg"] is None
        for metric in ALL_RANKED_METRICS:
            assert lines[0][f"pct_{metric}"] is None

    def test_rostered_player_without_games_left_out_of_team_lines(self, repo):
        lines = _by_pid(get_player_rolling_averages(repo, "Duke", 2026))

        assert 5 not in lines
        assert lines[3]["pct_drtg"] == 0.0

    def test_unknown_player(self, repo):
        assert get_player_rolling_averages(repo, "Duke", 2026, pid=99) == []

    @pytest.mark.parametrize("last_n_days", [0, -7])
    def test_invalid_window(self, repo, last_n_days):
        with pytest.raises(InvalidWindowError):
            get_player_rolling_averages(repo, "Duke", 2026, last_n_days=last_n_days)


class TestGameLogAndTeams:
    """Raw game logs and team results."""

    def test_game_log_oldest_first(self, repo):
        games = get_player_game_log(repo, "Duke", 2026, 3)

        assert [g["pts"] for g in games] == [30.0, 34.0]
        assert games[0]["game_date"] < games[1]["game_date"]

    def test_game_log_unknown_player(self, repo):
        assert get_player_game_log(repo, "Duke", 2026, 99) == []

    def test_team_results_by_rank(self, repo):
        teams = get_team_results(repo, 2026)

        assert [t["team"] for t in teams] == ["Duke", "UNC"]
        assert teams[0]["adjoe"] == pytest.approx(121.4)

    def test_team_results_other_year(self, repo):
        assert get_team_results(repo, 2020) == []
