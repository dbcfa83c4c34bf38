"""Tests for the stacking pass."""

import pytest

from osu_beatmap.geometry.stacking import (
    apply_stacking,
    circle_scale,
    stack_offset,
    stacked_position,
    time_preempt,
)
from osu_beatmap.geometry.vector import Vector2
from osu_beatmap.schemas.objects import HitObject, HitType

AR = 9.0  # 600ms preempt
LENIENCY = 0.7  # 420ms stack window


def circle(x, y, time):
    position = Vector2(x, y)
    return HitObject(position=position, end_position=position, start_time=time, hit_type=HitType.CIRCLE)


def slider(x, y, time, end_x, end_y, end_time):
    return HitObject(
        position=Vector2(x, y),
        end_position=Vector2(end_x, end_y),
        start_time=time,
        end_time=end_time,
        hit_type=HitType.SLIDER,
    )


def spinner(time, end_time):
    position = Vector2(256, 192)
    return HitObject(
        position=position,
        end_position=position,
        start_time=time,
        end_time=end_time,
        hit_type=HitType.SPINNER,
    )


def heights(objects):
    return [o.stack_height for o in objects]


class TestFormulas:
    @pytest.mark.parametrize("ar, expected", [
        (0, 1800),
        (5, 1200),
        (9, 600),
        (10, 450),
    ])
    def test_time_preempt(self, ar, expected):
        assert time_preempt(ar) == pytest.approx(expected)

    def test_circle_scale(self):
        assert circle_scale(5) == pytest.approx(0.5)

    def test_stack_offset(self):
        offset = stack_offset(1, 4)
        assert offset.x == pytest.approx(-3.648)
        assert offset.y == pytest.approx(-3.648)
        assert stack_offset(0, 4) == Vector2(0, 0)

    def test_stacked_position(self):
        obj = circle(100, 100, 0)
        obj.stack_height = 2
        position = stacked_position(obj, 5)
        assert position.x == pytest.approx(100 - 6.4)
        assert position.y == pytest.approx(100 - 6.4)


class TestApplyStacking:
    def test_circles_on_same_spot(self):
        objects = [circle(100, 100, 0), circle(100, 100, 100), circle(100, 100, 200)]
        apply_stacking(objects, AR, LENIENCY)
        assert heights(objects) == [2, 1, 0]

    def test_within_distance_threshold(self):
        objects = [circle(100, 100, 0), circle(102, 100, 100)]
        apply_stacking(objects, AR, LENIENCY)
        assert heights(objects) == [1, 0]

    def test_outside_distance_threshold(self):
        objects = [circle(100, 100, 0), circle(104, 100, 100)]
        apply_stacking(objects, AR, LENIENCY)
        assert heights(objects) == [0, 0]

    def test_outside_time_window(self):
        objects = [circle(100, 100, 0), circle(100, 100, 1000)]
        apply_stacking(objects, AR, LENIENCY)
        assert heights(objects) == [0, 0]

    def test_leniency_widens_window(self):
        objects = [circle(100, 100, 0), circle(100, 100, 1000)]
        apply_stacking(objects, AR, 2.0)
        assert heights(objects) == [1, 0]

    def test_circles_under_slider_end(self):
        objects = [
            slider(0, 0, 0, 100, 0, 100),
            circle(100, 0, 200),
            circle(100, 0, 300),
        ]
        apply_stacking(objects, AR, LENIENCY)
        assert heights(objects) == [0, -1, -2]

    def test_slider_stacks_on_circle(self):
        objects = [circle(50, 50, 0), slider(50, 50, 100, 150, 50, 300)]
        apply_stacking(objects, AR, LENIENCY)
        assert heights(objects) == [1, 0]

    def test_spinners_ignored(self):
        objects = [circle(256, 192, 0), spinner(100, 150), circle(256, 192, 200)]
        apply_stacking(objects, AR, LENIENCY)
        assert heights(objects) == [1, 0, 0]

    def test_spinner_ends_forward_scan(self):
        objects = [circle(256, 192, 0), spinner(100, 150), circle(256, 192, 200)]
        apply_stacking(objects, AR, LENIENCY, start_index=0, end_index=0)
        assert heights(objects) == [0, 0, 0]

    def test_partial_range_extends_to_later_objects(self):
        objects = [circle(100, 100, 0), circle(100, 100, 100), circle(100, 100, 200)]
        apply_stacking(objects, AR, LENIENCY, start_index=0, end_index=0)
        assert heights(objects) == [2, 1, 0]

    def test_idempotent(self):
        objects = [
            circle(100, 100, 0),
            circle(100, 100, 100),
            slider(0, 0, 200, 100, 0, 300),
            circle(100, 0, 400),
        ]
        apply_stacking(objects, AR, LENIENCY)
        first = heights(objects)
        apply_stacking(objects, AR, LENIENCY)
        assert heights(objects) == first

    def test_empty(self):
        apply_stacking([], AR, LENIENCY)
