"""Timing point dataclasses and point-in-time lookup.

A beatmap carries two kinds of timing points. Uninherited points define the
tempo (milliseconds per beat) from their time onward; inherited points only
scale slider velocity and encode the multiplier as a negative beat length
(-100 = 1.0x, -50 = 2.0x).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, TypeVar

EFFECT_KIAI = 1

MIN_SPEED_MULTIPLIER = 0.1
MAX_SPEED_MULTIPLIER = 10.0


class TimingPointType(Enum):
    UNINHERITED = "uninherited"
    INHERITED = "inherited"


@dataclass
class TimingPoint:
    """One entry of the combined, type-tagged timing point list."""

    time: float  # ms
    beat_length: float  # ms per beat; negative for inherited points
    time_signature: int
    speed_multiplier: float
    point_type: TimingPointType
    sample_set: int = 0
    sample_index: int = 0
    volume: int = 100
    effects: int = 0

    @property
    def is_kiai(self) -> bool:
        return bool(self.effects & EFFECT_KIAI)


@dataclass
class UninheritedTimingPoint:
    time: float
    beat_length: float
    time_signature: int = 4

    @property
    def bpm(self) -> float:
        if self.beat_length <= 0:
            return 0.0
        return 60000.0 / self.beat_length


@dataclass
class InheritedTimingPoint:
    time: float
    speed_multiplier: float
    inherited_from: int | None = None  # index into Beatmap.uninherited_points


def speed_multiplier_for(beat_length: float) -> float:
    """Velocity multiplier encoded by a timing point's beat length, clamped to 0.1-10."""
    if beat_length < 0:
        return min(max(100.0 / -beat_length, MIN_SPEED_MULTIPLIER), MAX_SPEED_MULTIPLIER)
    return 1.0


_P = TypeVar("_P", TimingPoint, UninheritedTimingPoint, InheritedTimingPoint)


def resolve_timing_point(points: Sequence[_P], time: float) -> _P | None:
    """Return the point governing *time*.

    The governing point is the last one (in time order, file order for ties)
    whose time is at or before *time*. Queries before the first point fall
    back to the first point. Returns None only when *points* is empty.
    """
    if not points:
        return None

    ordered = sorted(points, key=lambda p: p.time)

    index = len(ordered) - 1
    for i, point in enumerate(ordered):
        if point.time > time:
            index = max(i - 1, 0)
            break

    governing = ordered[index]
    if governing.time > time:
        return ordered[0]
    return governing
