"""Tests for timing point parsing and point-in-time lookup."""

import pytest

from osu_beatmap.parsers.beatmap_parser import parse_beatmap
from osu_beatmap.parsers.timing_parser import parse_timing_point
from osu_beatmap.schemas.beatmap import DEFAULT_BEAT_LENGTH, Beatmap
from osu_beatmap.schemas.timing import (
    TimingPointType,
    UninheritedTimingPoint,
    resolve_timing_point,
    speed_multiplier_for,
)


def _beatmap(*lines: str, version: int = 14) -> Beatmap:
    beatmap = Beatmap(format_version=version)
    for line in lines:
        parse_timing_point(line, beatmap)
    return beatmap


class TestTimingParser:
    def test_uninherited_point(self):
        beatmap = _beatmap("0,500,4,2,0,60,1,0")
        point = beatmap.timing_points[0]
        assert point.point_type is TimingPointType.UNINHERITED
        assert point.beat_length == 500.0
        assert point.speed_multiplier == 1.0
        assert point.sample_set == 2
        assert point.volume == 60
        assert beatmap.uninherited_points[0].bpm == pytest.approx(120.0)
        assert beatmap.inherited_points == []

    def test_inherited_point(self):
        beatmap = _beatmap("0,500,4,2,0,60,1,0", "2000,-50,4,2,0,60,0,1")
        inherited = beatmap.inherited_points[0]
        assert inherited.speed_multiplier == pytest.approx(2.0)
        assert inherited.inherited_from == 0
        assert beatmap.timing_points[1].point_type is TimingPointType.INHERITED
        assert beatmap.timing_points[1].is_kiai

    def test_inherited_from_tracks_latest_uninherited(self):
        beatmap = _beatmap(
            "0,500,4,2,0,60,1,0",
            "1000,400,4,2,0,60,1,0",
            "1500,-200,4,2,0,60,0,0",
        )
        assert beatmap.inherited_points[0].inherited_from == 1
        assert beatmap.inherited_points[0].speed_multiplier == pytest.approx(0.5)

    @pytest.mark.parametrize("beat_length, expected", [
        (-100.0, 1.0),
        (-50.0, 2.0),
        (-200.0, 0.5),
        (250.0, 1.0),
        (-1.0, 10.0),
        (-5000.0, 0.1),
    ])
    def test_inherited_multiplier(self, beat_length, expected):
        beatmap = _beatmap(f"0,{beat_length},4,2,0,60,0,0")
        assert beatmap.inherited_points[0].speed_multiplier == pytest.approx(expected)
        assert speed_multiplier_for(beat_length) == pytest.approx(expected)

    def test_missing_uninherited_field_is_inherited(self):
        beatmap = _beatmap("0,500,4")
        assert beatmap.uninherited_points == []
        assert beatmap.inherited_points[0].inherited_from is None
        assert beatmap.timing_points[0].time_signature == 4

    def test_zero_meter_defaults_to_four(self):
        beatmap = _beatmap("0,500,0,2,0,60,1,0")
        assert beatmap.uninherited_points[0].time_signature == 4

    def test_short_line_ignored(self):
        beatmap = _beatmap("1000")
        assert beatmap.timing_points == []

    def test_legacy_offset_before_v5(self):
        old = _beatmap("1000,500,4,2,0,60,1,0", version=4)
        new = _beatmap("1000,500,4,2,0,60,1,0", version=5)
        assert old.timing_points[0].time == 1024.0
        assert new.timing_points[0].time == 1000.0

    def test_legacy_offset_via_parser(self):
        beatmap = parse_beatmap("osu file format v3\n[TimingPoints]\n100,500,4,1,0,100,1,0\n")
        assert beatmap.uninherited_points[0].time == 124.0


class TestResolve:
    @pytest.fixture
    def points(self):
        return [
            UninheritedTimingPoint(time=2000, beat_length=300),
            UninheritedTimingPoint(time=0, beat_length=500),
            UninheritedTimingPoint(time=1000, beat_length=400),
        ]

    @pytest.mark.parametrize("time, expected", [
        (-500.0, 0),
        (0.0, 0),
        (999.0, 0),
        (1000.0, 1000),
        (1500.0, 1000),
        (2000.0, 2000),
        (1e9, 2000),
    ])
    def test_governing_point(self, points, time, expected):
        assert resolve_timing_point(points, time).time == expected

    def test_lookup_is_idempotent(self, points):
        first = resolve_timing_point(points, 1500)
        assert resolve_timing_point(points, 1500) is first

    def test_does_not_reorder_input(self, points):
        resolve_timing_point(points, 1500)
        assert [p.time for p in points] == [2000, 0, 1000]

    def test_empty(self):
        assert resolve_timing_point([], 100) is None

    def test_same_time_later_point_wins(self):
        points = [
            UninheritedTimingPoint(time=0, beat_length=500),
            UninheritedTimingPoint(time=0, beat_length=250),
        ]
        assert resolve_timing_point(points, 10).beat_length == 250

    def test_beatmap_lookups(self):
        beatmap = _beatmap("0,500,4,2,0,60,1,0", "2000,-50,4,2,0,60,0,0")
        assert beatmap.timing_point_at(2500).point_type is TimingPointType.INHERITED
        assert beatmap.uninherited_point_at(2500).beat_length == 500.0
        assert beatmap.inherited_point_at(100).time == 2000.0  # fallback to first
        assert beatmap.beat_length_at(2500) == 500.0

    def test_beat_length_fallbacks(self):
        assert Beatmap().beat_length_at(0) == DEFAULT_BEAT_LENGTH
        assert _beatmap("0,400,4").beat_length_at(0) == 400.0
