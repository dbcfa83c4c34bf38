"""Parse [TimingPoints] lines.

Line format: ``time,beatLength,meter,sampleSet,sampleIndex,volume,uninherited,effects``.
Only the first two fields are required.
"""

from osu_beatmap.parsers.sections import parse_float, parse_int
from osu_beatmap.schemas.beatmap import Beatmap
from osu_beatmap.schemas.timing import (
    InheritedTimingPoint,
    TimingPoint,
    TimingPointType,
    UninheritedTimingPoint,
    speed_multiplier_for,
)

# Files before v5 were authored against a 24 ms audio offset.
LEGACY_TIME_OFFSET = 24.0


def _field(values: list[str], index: int) -> str:
    return values[index] if index < len(values) else ""


def parse_timing_point(line: str, beatmap: Beatmap) -> TimingPoint | None:
    """Parse one timing point line and append it to *beatmap*.

    Returns the combined-list entry, or None when the line has fewer than
    two fields.
    """
    values = line.split(",")
    if len(values) < 2:
        return None

    time = parse_float(values[0])
    if beatmap.format_version < 5:
        time += LEGACY_TIME_OFFSET

    beat_length = parse_float(values[1])
    meter = parse_int(_field(values, 2))
    time_signature = meter if meter > 0 else 4
    uninherited = parse_int(_field(values, 6), default=-1) == 1
    speed_multiplier = speed_multiplier_for(beat_length)

    if uninherited:
        beatmap.uninherited_points.append(UninheritedTimingPoint(
            time=time,
            beat_length=beat_length,
            time_signature=time_signature,
        ))
        point_type = TimingPointType.UNINHERITED
    else:
        parent = len(beatmap.uninherited_points) - 1
        beatmap.inherited_points.append(InheritedTimingPoint(
            time=time,
            speed_multiplier=speed_multiplier,
            inherited_from=parent if parent >= 0 else None,
        ))
        point_type = TimingPointType.INHERITED

    point = TimingPoint(
        time=time,
        beat_length=beat_length,
        time_signature=time_signature,
        speed_multiplier=speed_multiplier,
        point_type=point_type,
        sample_set=parse_int(_field(values, 3)),
        sample_index=parse_int(_field(values, 4)),
        volume=parse_int(_field(values, 5), default=100),
        effects=parse_int(_field(values, 7)),
    )
    beatmap.timing_points.append(point)
    return point
