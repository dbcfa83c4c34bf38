"""Derive slider timing and its nested scoring events.

A slider travels its path ``span_count`` times (once, plus once per repeat),
alternating direction. Velocity comes from the slider multiplier and the
timing point in effect at the slider's start.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from osu_beatmap.geometry.slider_path import SliderBody
from osu_beatmap.geometry.vector import Vector2
from osu_beatmap.schemas.beatmap import Beatmap
from osu_beatmap.schemas.objects import SliderObject, SliderObjectType

logger = logging.getLogger(__name__)

MAX_SLIDER_LENGTH = 100000.0
LEGACY_TICK_OFFSET = 36.0
# Sliders needing more ticks per span than this get none.
# Clamped difficulty and timing values never exceed it.
MAX_TICKS_PER_SPAN = 200000

# Ticks closer than this many milliseconds of travel to a span end are dropped.
_TICK_END_MARGIN_MS = 10.0


@dataclass
class SliderTiming:
    scoring_distance: float  # osu! pixels per beat
    velocity: float  # osu! pixels per ms
    tick_distance: float  # osu! pixels between ticks


def compute_slider_timing(beatmap: Beatmap, start_time: float) -> SliderTiming:
    """Velocity and tick spacing for a slider starting at *start_time*."""
    point = beatmap.timing_point_at(start_time)
    speed_multiplier = point.speed_multiplier if point is not None else 1.0

    scoring_distance = 100.0 * beatmap.difficulty.slider_multiplier * speed_multiplier
    velocity = scoring_distance / beatmap.beat_length_at(start_time)

    tick_rate = beatmap.difficulty.slider_tick_rate
    tick_distance = scoring_distance / tick_rate if tick_rate > 0 else 0.0

    return SliderTiming(
        scoring_distance=scoring_distance,
        velocity=velocity,
        tick_distance=tick_distance,
    )


def slider_duration(expected_length: float, span_count: int, velocity: float) -> float:
    if velocity <= 0:
        return 0.0
    return span_count * expected_length / velocity


def generate_slider_objects(
    position: Vector2,
    start_time: float,
    body: SliderBody,
    expected_length: float,
    span_count: int,
    timing: SliderTiming,
    max_length: float = MAX_SLIDER_LENGTH,
    legacy_tick_offset: float = LEGACY_TICK_OFFSET,
) -> list[SliderObject]:
    """Build head, ticks, repeats and end of a slider, sorted by time.

    *position* is the slider head; *body* holds the path relative to it.
    """
    duration = slider_duration(expected_length, span_count, timing.velocity)
    end_time = start_time + duration
    span_duration = duration / span_count

    def at_distance(distance: float) -> Vector2:
        return position + body.position_at(distance)

    objects = [
        SliderObject(
            slider_object_type=SliderObjectType.HEAD,
            position=position,
            start_time=start_time,
            span_start_time=start_time,
        )
    ]

    length = min(max_length, expected_length)
    tick_distance = min(max(timing.tick_distance, 0.0), length)
    min_distance_from_end = timing.velocity * _TICK_END_MARGIN_MS
    tick_count = math.ceil(length / tick_distance) if tick_distance > 0 else 0
    if tick_count > MAX_TICKS_PER_SPAN:
        logger.warning(
            "Dropping ticks of slider at %.0f ms: %d ticks per span", start_time, tick_count
        )
        tick_count = 0

    for span in range(span_count):
        span_start = start_time + span * span_duration
        reversed_span = span % 2 == 1

        ticks = []
        for k in range(1, tick_count + 1):
            d = k * tick_distance
            if d > length or d >= length - min_distance_from_end:
                break
            path_progress = d / length
            time_progress = 1 - path_progress if reversed_span else path_progress
            ticks.append(SliderObject(
                slider_object_type=SliderObjectType.TICK,
                position=at_distance(path_progress * expected_length),
                start_time=span_start + time_progress * span_duration,
                span_index=span,
                span_start_time=span_start,
            ))

        # Reversed spans meet their ticks from the far end first
        if reversed_span:
            ticks.reverse()
        objects.extend(ticks)

        if span < span_count - 1:
            repeat = span + 1
            objects.append(SliderObject(
                slider_object_type=SliderObjectType.REPEAT,
                position=at_distance((repeat % 2) * expected_length),
                start_time=start_time + repeat * span_duration,
                span_index=span,
                repeat_index=span,
                span_start_time=span_start,
            ))

    objects.append(SliderObject(
        slider_object_type=SliderObjectType.END,
        position=at_distance(expected_length),
        start_time=max(start_time + duration / 2, end_time - legacy_tick_offset),
        span_index=span_count - 1,
        span_start_time=start_time + (span_count - 1) * span_duration,
    ))

    objects.sort(key=lambda o: o.start_time)
    return objects
