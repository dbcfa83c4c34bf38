"""Resample a flattened slider path to its declared pixel length.

The mapper writes an expected length for every slider. The flattened curve
is cut off where it reaches that length, or its last segment is stretched
when the curve falls short, so the slider always travels exactly the
declared distance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np

from osu_beatmap.geometry.vector import Vector2


def _empty_lengths() -> np.ndarray:
    return np.zeros(0, dtype=np.float64)


@dataclass
class SliderBody:
    """Resampled polyline plus its cumulative arc length table.

    ``lengths[i]`` is the distance travelled along ``path`` up to vertex i,
    so ``lengths[0] == 0`` and ``lengths[-1]`` is the expected length.
    """

    path: list[Vector2] = field(default_factory=list)
    lengths: np.ndarray = field(default_factory=_empty_lengths)

    @property
    def distance(self) -> float:
        if len(self.lengths) == 0:
            return 0.0
        return float(self.lengths[-1])

    def position_at(self, distance: float) -> Vector2:
        """Position (relative to the slider head) after travelling *distance*."""
        if not self.path:
            return Vector2()

        d = min(max(distance, 0.0), self.distance)
        # First cumulative length strictly greater than d, else the last entry
        index = int(np.searchsorted(self.lengths, d, side="right"))
        if index >= len(self.lengths):
            index = len(self.lengths) - 1

        if index <= 0:
            return self.path[0]
        if index >= len(self.path):
            return self.path[-1]

        start, end = self.path[index - 1], self.path[index]
        d0, d1 = float(self.lengths[index - 1]), float(self.lengths[index])
        if d0 == d1:
            return start
        return start + (end - start) * ((d - d0) / (d1 - d0))

    def position_at_progress(self, progress: float) -> Vector2:
        """Position at a fraction (0..1) of the whole path."""
        return self.position_at(min(max(progress, 0.0), 1.0) * self.distance)


def path_length(path: Sequence[Vector2]) -> float:
    """Total length of a polyline."""
    if len(path) < 2:
        return 0.0
    points = np.array([p.as_tuple() for p in path], dtype=np.float64)
    return float(np.hypot(*np.diff(points, axis=0).T).sum())


def build_slider_body(path: Sequence[Vector2], expected_length: float) -> SliderBody:
    """Clip or extend *path* so that it is exactly *expected_length* long."""
    expected = max(0.0, expected_length)
    vertices = list(path)
    if not vertices:
        return SliderBody()
    if len(vertices) == 1:
        return SliderBody(path=vertices, lengths=np.zeros(1, dtype=np.float64))

    points = np.array([p.as_tuple() for p in vertices], dtype=np.float64)
    segments = np.hypot(*np.diff(points, axis=0).T)
    lengths = np.concatenate(([0.0], np.cumsum(segments)))

    # First vertex whose cumulative length overshoots the expected length
    cut = int(np.searchsorted(lengths, expected, side="right"))
    if cut < len(lengths):
        previous = vertices[cut - 1]
        segment = float(segments[cut - 1])
        remaining = expected - float(lengths[cut - 1])
        vertices[cut] = previous + (vertices[cut] - previous) * (remaining / segment)
        del vertices[cut + 1:]
        lengths = lengths[:cut + 1].copy()
        lengths[cut] = expected
        return SliderBody(path=vertices, lengths=lengths)

    # Too short: stretch the final segment along its direction
    calculated = float(lengths[-1])
    if calculated < expected:
        final = vertices[-1] - vertices[-2]
        final_length = final.length()
        if final_length > 0:
            vertices[-1] = vertices[-1] + final * ((expected - calculated) / final_length)
            lengths[-1] = expected

    return SliderBody(path=vertices, lengths=lengths)
