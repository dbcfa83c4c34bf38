"""Parse [HitObjects] lines into HitObject instances.

Line format::

    x,y,time,type,hitSound[,objectParams...][,hitSample]

    circle   x,y,time,type,hitSound,hitSample
    slider   x,y,time,type,hitSound,curve|x:y|...,slides,length,edgeSounds,edgeSets,hitSample
    spinner  x,y,time,type,hitSound,endTime,hitSample
    hold     x,y,time,type,hitSound,endTime:hitSample

Sliders get their full geometry here: flattened path, resampled body,
end time and nested events.
"""

from __future__ import annotations

from osu_beatmap.config import DEFAULT_CONFIG, ParserConfig
from osu_beatmap.errors import MalformedField, MalformedSliderDescriptor
from osu_beatmap.geometry.curves import approximate_path, is_nearly_linear
from osu_beatmap.geometry.slider_events import (
    compute_slider_timing,
    generate_slider_objects,
    slider_duration,
)
from osu_beatmap.geometry.slider_path import build_slider_body, path_length
from osu_beatmap.geometry.vector import Vector2
from osu_beatmap.parsers.sections import parse_float, parse_int
from osu_beatmap.schemas.beatmap import Beatmap
from osu_beatmap.schemas.objects import (
    CurveType,
    HitObject,
    HitSample,
    HitType,
    SliderData,
)

# Index of the hitSample field for each object kind
_CIRCLE_SAMPLE_INDEX = 5
_SPINNER_SAMPLE_INDEX = 6
_SLIDER_SAMPLE_INDEX = 10

# Sliders repeating more often than this are rejected
MAX_REPEAT_COUNT = 9000


def parse_hit_sample(value: str) -> HitSample:
    """Parse ``normalSet:additionSet:index:volume:filename``; missing parts default."""
    parts = value.split(":")
    numbers = parts[:4] + [""] * (4 - len(parts[:4]))
    return HitSample(
        normal_set=parse_int(numbers[0]),
        addition_set=parse_int(numbers[1]),
        index=parse_int(numbers[2]),
        volume=parse_int(numbers[3]),
        filename=":".join(parts[4:]),
    )


def _mandatory_float(values: list[str], index: int, name: str, line_index: int, line: str) -> float:
    try:
        return float(values[index])
    except ValueError:
        raise MalformedField(
            f"{name} is not numeric: {values[index]!r}", line_index, line
        ) from None


def _parse_point(token: str) -> Vector2:
    x, _, y = token.partition(":")
    return Vector2(parse_float(x), parse_float(y))


def _parse_edge_sets(value: str) -> list[tuple[int, int]]:
    edge_sets = []
    for token in value.split("|"):
        if not token:
            continue
        normal, _, addition = token.partition(":")
        edge_sets.append((parse_int(normal), parse_int(addition)))
    return edge_sets


def parse_slider(
    hit_object: HitObject,
    values: list[str],
    beatmap: Beatmap,
    line_index: int = -1,
    line: str = "",
    config: ParserConfig = DEFAULT_CONFIG,
) -> None:
    """Fill in slider data, end time and nested objects of *hit_object*.

    Raises:
        MalformedSliderDescriptor: If the curve descriptor field is missing.
        MalformedField: If the slider repeats more than MAX_REPEAT_COUNT times.
    """
    descriptor = values[5].strip() if len(values) > 5 else ""
    if not descriptor:
        raise MalformedSliderDescriptor("Slider has no curve descriptor", line_index, line)

    code, *tokens = descriptor.split("|")
    curve_type = CurveType.from_code(code)

    base_points = [_parse_point(t) for t in tokens if ":" in t]
    slider_points = [Vector2()] + [p - hit_object.position for p in base_points]

    # Three nearly collinear points cannot define a usable arc
    if (
        curve_type is CurveType.PERFECT_CURVE
        and len(slider_points) == 3
        and is_nearly_linear(*slider_points, tolerance=config.linear_tolerance)
    ):
        curve_type = CurveType.LINEAR

    slides = parse_int(values[6]) if len(values) > 6 else 0
    repeat_count = max(0, slides - 1)
    if repeat_count > MAX_REPEAT_COUNT:
        raise MalformedField(f"Repeat count is too high: {repeat_count}", line_index, line)

    path = approximate_path(
        slider_points,
        curve_type,
        bezier_tolerance=config.bezier_tolerance,
        circular_arc_tolerance=config.circular_arc_tolerance,
        catmull_detail=config.catmull_detail,
    )

    # A missing length means "use the curve as drawn"
    if len(values) > 7 and values[7].strip():
        expected_length = max(0.0, parse_float(values[7]))
    else:
        expected_length = path_length(path)

    body = build_slider_body(path, expected_length)

    hit_object.slider_data = SliderData(
        curve_type=curve_type,
        base_points=base_points,
        slider_points=slider_points,
        repeat_count=repeat_count,
        pixel_length=expected_length,
        slider_body=body,
        edge_sounds=[parse_int(s) for s in values[8].split("|") if s] if len(values) > 8 else [],
        edge_sets=_parse_edge_sets(values[9]) if len(values) > 9 else [],
    )

    span_count = hit_object.slider_data.span_count
    timing = compute_slider_timing(beatmap, hit_object.start_time)
    hit_object.end_time = hit_object.start_time + slider_duration(
        expected_length, span_count, timing.velocity
    )
    hit_object.end_position = hit_object.position + body.position_at(expected_length)
    hit_object.slider_objects = generate_slider_objects(
        hit_object.position,
        hit_object.start_time,
        body,
        expected_length,
        span_count,
        timing,
        max_length=config.max_slider_length,
        legacy_tick_offset=config.legacy_tick_offset,
    )


def parse_hit_object(
    line: str,
    beatmap: Beatmap,
    line_index: int = -1,
    config: ParserConfig = DEFAULT_CONFIG,
) -> HitObject:
    """Parse one hit object line. Timing points must already be parsed.

    Raises:
        MalformedField: If a base field is missing or x/y/time/type is not numeric.
        MalformedSliderDescriptor: If a slider has no curve descriptor.
    """
    values = [v.strip() for v in line.split(",")]
    if len(values) < 5:
        raise MalformedField(
            f"Expected at least 5 fields, got {len(values)}", line_index, line
        )

    x = _mandatory_float(values, 0, "x", line_index, line)
    y = _mandatory_float(values, 1, "y", line_index, line)
    start_time = _mandatory_float(values, 2, "time", line_index, line)
    try:
        hit_type = HitType(int(values[3]))
    except ValueError:
        raise MalformedField(f"type is not an integer: {values[3]!r}", line_index, line) from None

    position = Vector2(x, y)
    hit_object = HitObject(
        position=position,
        end_position=position,
        start_time=start_time,
        hit_type=hit_type,
        hit_sound=parse_int(values[4]),
    )

    if hit_object.is_hold:
        if len(values) > 5:
            end_time, _, sample = values[5].partition(":")
            hit_object.end_time = parse_float(end_time)
            if sample:
                hit_object.hit_sample = parse_hit_sample(sample)
        return hit_object

    if hit_object.is_slider:
        parse_slider(hit_object, values, beatmap, line_index, line, config)
        sample_index = _SLIDER_SAMPLE_INDEX
    elif hit_object.is_spinner:
        hit_object.end_time = parse_float(values[5]) if len(values) > 5 else 0.0
        sample_index = _SPINNER_SAMPLE_INDEX
    else:
        sample_index = _CIRCLE_SAMPLE_INDEX

    if len(values) > sample_index and ":" in values[sample_index]:
        hit_object.hit_sample = parse_hit_sample(values[sample_index])
    elif hit_object.is_spinner:
        hit_object.hit_sample = HitSample()

    return hit_object
