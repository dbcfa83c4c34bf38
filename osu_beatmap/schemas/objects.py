"""Hit object dataclasses for parsed osu! beatmaps.

A hit object line carries a bit-set of type flags; sliders additionally carry
a curve descriptor from which the path geometry and nested slider events
(head, ticks, repeats, end) are derived.
"""

from dataclasses import dataclass, field
from enum import Enum, IntFlag

from osu_beatmap.geometry.slider_path import SliderBody
from osu_beatmap.geometry.vector import Vector2


class HitType(IntFlag):
    CIRCLE = 1
    SLIDER = 2
    NEW_COMBO = 4
    SPINNER = 8
    COMBO_SKIP_1 = 16
    COMBO_SKIP_2 = 32
    COMBO_SKIP_4 = 64
    HOLD = 128  # osu!mania long note


_COMBO_SKIP_MASK = HitType.COMBO_SKIP_1 | HitType.COMBO_SKIP_2 | HitType.COMBO_SKIP_4


class CurveType(Enum):
    LINEAR = "L"
    BEZIER = "B"
    CATMULL = "C"
    PERFECT_CURVE = "P"

    @classmethod
    def from_code(cls, code: str) -> "CurveType":
        """Map a one-letter descriptor code; unknown codes are Catmull-Rom."""
        try:
            return cls(code.strip().upper())
        except ValueError:
            return cls.CATMULL


class SliderObjectType(Enum):
    HEAD = "head"
    TICK = "tick"
    REPEAT = "repeat"
    END = "end"


@dataclass
class HitSample:
    """Custom sample information from the trailing colon-delimited field."""

    normal_set: int = 0
    addition_set: int = 0
    index: int = 0
    volume: int = 0  # 0 = use the timing point's volume
    filename: str = ""


@dataclass
class SliderData:
    curve_type: CurveType
    base_points: list[Vector2] = field(default_factory=list)  # absolute, as written
    slider_points: list[Vector2] = field(default_factory=list)  # relative, origin first
    repeat_count: int = 0  # slides - 1
    pixel_length: float = 0.0  # expected length after resampling
    slider_body: SliderBody = field(default_factory=SliderBody)
    edge_sounds: list[int] = field(default_factory=list)
    edge_sets: list[tuple[int, int]] = field(default_factory=list)

    @property
    def span_count(self) -> int:
        return self.repeat_count + 1


@dataclass
class SliderObject:
    """A nested scoring event of a slider."""

    slider_object_type: SliderObjectType
    position: Vector2  # absolute
    start_time: float
    span_index: int = 0
    repeat_index: int = 0
    span_start_time: float = 0.0


@dataclass
class HitObject:
    position: Vector2
    start_time: float
    hit_type: HitType
    hit_sound: int = 0
    end_time: float = 0.0  # only set for sliders, spinners and holds
    end_position: Vector2 = field(default_factory=Vector2)
    hit_sample: HitSample | None = None
    slider_data: SliderData | None = None
    slider_objects: list[SliderObject] | None = None
    stack_height: int = 0  # assigned by the stacking pass

    @property
    def x(self) -> float:
        return self.position.x

    @property
    def y(self) -> float:
        return self.position.y

    @property
    def is_circle(self) -> bool:
        return bool(self.hit_type & HitType.CIRCLE)

    @property
    def is_slider(self) -> bool:
        return bool(self.hit_type & HitType.SLIDER)

    @property
    def is_spinner(self) -> bool:
        return bool(self.hit_type & HitType.SPINNER)

    @property
    def is_hold(self) -> bool:
        return bool(self.hit_type & HitType.HOLD)

    @property
    def is_new_combo(self) -> bool:
        return bool(self.hit_type & HitType.NEW_COMBO)

    @property
    def combo_skip(self) -> int:
        """Number of combo colours to skip (0-7)."""
        return int(self.hit_type & _COMBO_SKIP_MASK) >> 4

    @property
    def stack_end_time(self) -> float:
        """End time used for stacking: slider end, otherwise the start time."""
        return self.end_time if self.is_slider else self.start_time

    @property
    def stack_end_position(self) -> Vector2:
        return self.end_position if self.is_slider else self.position
