"""Root aggregate for one parsed .osu difficulty."""

from dataclasses import dataclass, field
from enum import IntEnum

from osu_beatmap.errors import BeatmapError
from osu_beatmap.schemas.objects import HitObject
from osu_beatmap.schemas.timing import (
    InheritedTimingPoint,
    TimingPoint,
    UninheritedTimingPoint,
    resolve_timing_point,
)

# Beat length used when a map has no usable timing point (60 BPM).
DEFAULT_BEAT_LENGTH = 1000.0


class Gamemode(IntEnum):
    STANDARD = 0
    TAIKO = 1
    CATCH = 2
    MANIA = 3

    @classmethod
    def parse(cls, value: str) -> "Gamemode":
        """Parse ``0``-``3`` or a mode name; anything else is STANDARD."""
        value = value.strip()
        for mode in cls:
            if value == str(mode.value) or value.lower() == mode.name.lower():
                return mode
        return cls.STANDARD


@dataclass
class AudioMetadata:
    filename: str = ""
    lead_in: int = 0  # ms of silence before the audio starts


@dataclass
class DifficultyMetadata:
    hp_drain: float = 5.0
    circle_size: float = 5.0
    overall_difficulty: float = 5.0
    approach_rate: float = 5.0
    slider_multiplier: float = 1.4
    slider_tick_rate: float = 1.0


@dataclass
class Metadata:
    tags: list[str] = field(default_factory=list)
    preview_time: int = -1


@dataclass
class Beatmap:
    """Complete parse result for one beatmap difficulty."""

    format_version: int = 0

    title: str = ""
    title_unicode: str = ""
    artist: str = ""
    artist_unicode: str = ""
    creator: str = ""
    source: str = ""
    difficulty_name: str = ""
    beatmap_id: int = 0
    beatmap_set_id: int = -1
    gamemode: Gamemode = Gamemode.STANDARD
    stack_leniency: float = 0.7

    audio: AudioMetadata = field(default_factory=AudioMetadata)
    difficulty: DifficultyMetadata = field(default_factory=DifficultyMetadata)
    metadata: Metadata = field(default_factory=Metadata)

    timing_points: list[TimingPoint] = field(default_factory=list)  # file order
    uninherited_points: list[UninheritedTimingPoint] = field(default_factory=list)
    inherited_points: list[InheritedTimingPoint] = field(default_factory=list)

    hit_objects: list[HitObject] = field(default_factory=list)  # file order

    # Recoverable problems hit while parsing (skipped lines, bad headers)
    errors: list[BeatmapError] = field(default_factory=list)
    checksum: str = ""  # MD5 of the source file, filled by the pipeline

    def timing_point_at(self, time: float) -> TimingPoint | None:
        return resolve_timing_point(self.timing_points, time)

    def uninherited_point_at(self, time: float) -> UninheritedTimingPoint | None:
        return resolve_timing_point(self.uninherited_points, time)

    def inherited_point_at(self, time: float) -> InheritedTimingPoint | None:
        return resolve_timing_point(self.inherited_points, time)

    def beat_length_at(self, time: float) -> float:
        """Milliseconds per beat in effect at *time*."""
        uninherited = self.uninherited_point_at(time)
        if uninherited is not None and uninherited.beat_length > 0:
            return uninherited.beat_length
        point = self.timing_point_at(time)
        if point is not None and point.beat_length > 0:
            return point.beat_length
        return DEFAULT_BEAT_LENGTH

    @property
    def display_name(self) -> str:
        return f"{self.artist} - {self.title} [{self.difficulty_name}]"
