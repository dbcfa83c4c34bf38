"""Tests for slider body resampling and position lookup."""

import numpy as np
import pytest

from osu_beatmap.geometry.slider_path import SliderBody, build_slider_body, path_length
from osu_beatmap.geometry.vector import Vector2


def V(x, y):
    return Vector2(x, y)


class TestBuildSliderBody:
    def test_exact_length_unchanged(self):
        body = build_slider_body([V(0, 0), V(100, 0), V(200, 0)], 200)
        assert body.path == [V(0, 0), V(100, 0), V(200, 0)]
        np.testing.assert_allclose(body.lengths, [0, 100, 200])

    def test_clip(self):
        body = build_slider_body([V(0, 0), V(100, 0), V(200, 0)], 150)
        assert body.path == [V(0, 0), V(100, 0), V(150, 0)]
        np.testing.assert_allclose(body.lengths, [0, 100, 150])
        assert body.distance == 150

    def test_clip_inside_first_segment(self):
        body = build_slider_body([V(0, 0), V(0, 100), V(100, 100)], 50)
        assert body.path == [V(0, 0), V(0, 50)]

    def test_extend(self):
        body = build_slider_body([V(0, 0), V(100, 0)], 150)
        assert body.path == [V(0, 0), V(150, 0)]
        assert body.distance == 150

    def test_zero_length_final_segment_not_extended(self):
        body = build_slider_body([V(0, 0), V(100, 0), V(100, 0)], 150)
        assert body.path[-1] == V(100, 0)
        assert body.distance == pytest.approx(100)

    def test_zero_expected_length(self):
        body = build_slider_body([V(0, 0), V(100, 0)], 0)
        assert body.distance == 0
        assert body.position_at(10) == V(0, 0)

    def test_negative_expected_length_clamped(self):
        body = build_slider_body([V(0, 0), V(100, 0)], -20)
        assert body.distance == 0

    def test_does_not_mutate_input(self):
        path = [V(0, 0), V(100, 0), V(200, 0)]
        build_slider_body(path, 150)
        assert path == [V(0, 0), V(100, 0), V(200, 0)]

    def test_degenerate_inputs(self):
        assert build_slider_body([], 100).path == []
        single = build_slider_body([V(5, 5)], 100)
        assert single.position_at(50) == V(5, 5)


class TestPositionAt:
    @pytest.fixture
    def body(self):
        return build_slider_body([V(0, 0), V(100, 0), V(100, 100)], 200)

    @pytest.mark.parametrize("distance, expected", [
        (0, (0, 0)),
        (50, (50, 0)),
        (100, (100, 0)),
        (150, (100, 50)),
        (200, (100, 100)),
        (-10, (0, 0)),
        (500, (100, 100)),
    ])
    def test_interpolation(self, body, distance, expected):
        assert body.position_at(distance).as_tuple() == pytest.approx(expected)

    def test_progress(self, body):
        assert body.position_at_progress(0.25) == V(50, 0)
        assert body.position_at_progress(2.0) == V(100, 100)

    def test_equal_lengths_return_earlier_vertex(self):
        body = SliderBody(
            path=[V(0, 0), V(100, 0), V(100, 0)],
            lengths=np.array([0.0, 100.0, 100.0]),
        )
        assert body.position_at(100) == V(100, 0)

    def test_empty_body(self):
        body = SliderBody()
        assert body.distance == 0
        assert body.position_at(5) == V(0, 0)


def test_path_length():
    assert path_length([V(0, 0), V(3, 4), V(3, 10)]) == pytest.approx(11)
    assert path_length([V(1, 1)]) == 0
