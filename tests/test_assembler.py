"""
Tests for the aggregate -> stat line mapping and percentile attachment.
"""

import pytest

from cbb_stats.aggregators import aggregate_games, rolling_aggregate
from cbb_stats.core.models import PlayerSeasonProfile
from cbb_stats.percentiles import ALL_RANKED_METRICS, PercentileTable
from cbb_stats.services.assembler import (
    STAT_LINE_FIELDS,
    attach_percentiles,
    rank_stat_lines,
    stat_line_key,
    to_stat_line,
    unranked,
)


class TestStatLineFields:
    """The client field mapping."""

    def test_renamed_fields(self):
        assert STAT_LINE_FIELDS["usg"] == "avg_usage"
        assert STAT_LINE_FIELDS["gp"] == "games_played"
        assert STAT_LINE_FIELDS["pts"] == "avg_pts"
        assert STAT_LINE_FIELDS["ft_per"] == "ft_per"

    def test_every_ranked_metric_has_a_source(self):
        profile_fields = {"porpag", "dporpag", "drtg", "adjoe"}
        for metric in ALL_RANKED_METRICS:
            assert metric in STAT_LINE_FIELDS or metric in profile_fields, metric


class TestToStatLine:
    """Flattening aggregates and profiles."""

    def test_season_line(self, make_game):
        agg = aggregate_games([make_game(day=0, pts=10, usage=20.0), make_game(day=1, pts=20, usage=24.0)])

        line = to_stat_line(agg)

        assert line["pid"] == 1
        assert line["gp"] == 2
        assert line["pts"] == pytest.approx(15.0)
        assert line["usg"] == pytest.approx(22.0)
        assert "last_n_days" not in line
        assert line["drtg"] is None

    def test_profile_fields_joined(self, make_game):
        agg = aggregate_games([make_game(pts=10)])
        profile = PlayerSeasonProfile(pid=1, team="Duke", year=2026, yr="Jr", ht="6-8", drtg=98.5)

        line = to_stat_line(agg, profile)

        assert line["yr"] == "Jr"
        assert line["ht"] == "6-8"
        assert line["drtg"] == 98.5

    def test_rolling_line_carries_window(self, make_game):
        agg = rolling_aggregate([make_game(day=0, pts=10), make_game(day=40, pts=30)], 30)

        line = to_stat_line(agg)

        assert line["last_n_days"] == 30
        assert line["window_start"] is not None
        assert line["pts"] == pytest.approx(30.0)

    def test_name_from_profile_when_missing(self):
        agg = rolling_aggregate([], 30, pid=5, team="Duke", year=2026)
        profile = PlayerSeasonProfile(pid=5, team="Duke", year=2026, player_name="Walk On")

        assert to_stat_line(agg, profile)["player_name"] == "Walk On"


class TestAttachPercentiles:
    """Every line gets the full set of pct_ fields."""

    def _lines(self, make_game):
        return [
            to_stat_line(aggregate_games([make_game(pid=pid, pts=pts, to_per=to_per)]))
            for pid, pts, to_per in [(1, 10, 5.0), (2, 20, 10.0), (3, 30, 15.0)]
        ]

    def test_all_fields_present(self, make_game):
        lines = self._lines(make_game)
        table = PercentileTable.build(lines, ["pts"], key=stat_line_key)

        annotated = attach_percentiles(lines[0], table, ["pts"])

        for metric in ALL_RANKED_METRICS:
            assert f"pct_{metric}" in annotated
        assert annotated["pct_pts"] == 0.0
        assert annotated["pct_ast"] is None

    def test_input_line_not_mutated(self, make_game):
        lines = self._lines(make_game)
        table = PercentileTable.build(lines, ["pts"], key=stat_line_key)

        attach_percentiles(lines[0], table, ["pts"])

        assert "pct_pts" not in lines[0]

    def test_unranked_metric_is_null_even_with_data(self, make_game):
        lines = self._lines(make_game)
        table = PercentileTable.build(lines, ["pts", "to_per"], key=stat_line_key)

        annotated = attach_percentiles(lines[2], table, ["pts"])

        assert annotated["pct_pts"] == 100.0
        assert annotated["pct_to_per"] is None

    def test_precision(self):
        lines = [{"pid": i, "team": "Duke", "pts": v} for i, v in enumerate([1, 2, 3, 4])]
        table = PercentileTable.build(lines, ["pts"], key=stat_line_key)

        assert attach_percentiles(lines[1], table, ["pts"], precision=1)["pct_pts"] == 33.3
        assert attach_percentiles(lines[1], table, ["pts"], precision=0)["pct_pts"] == 33.0

    def test_unranked_line_has_null_percentiles(self, make_game):
        lines = self._lines(make_game)
        table = PercentileTable.build(lines, ["pts"], key=stat_line_key)

        line = unranked(lines[2])

        assert set(line) == set(attach_percentiles(lines[2], table, ["pts"]))
        assert all(line[f"pct_{metric}"] is None for metric in ALL_RANKED_METRICS)
        assert "pct_pts" not in lines[2]


class TestRankStatLines:
    """Ranking a whole population in one mode."""

    def test_season_mode(self, make_game):
        lines = [
            to_stat_line(aggregate_games([make_game(pid=pid, pts=pts, to_per=to_per)]))
            for pid, pts, to_per in [(1, 10, 5.0), (2, 20, 10.0), (3, 30, 15.0)]
        ]

        ranked = rank_stat_lines(lines, "season")

        assert [line["pct_pts"] for line in ranked] == [0.0, 50.0, 100.0]
        assert [line["pct_to_per"] for line in ranked] == [100.0, 50.0, 0.0]

    def test_uniform_shape(self, season_games):
        from cbb_stats.aggregators import aggregate_season

        lines = [to_stat_line(a) for a in aggregate_season(season_games)]
        ranked = rank_stat_lines(lines, "rolling")

        assert len({frozenset(line) for line in ranked}) == 1
        assert all(line["pct_treb"] is None for line in ranked)
