"""Flatten slider control points into polylines.

Each curve family turns a run of control points into a list of vertices that
are close enough to the true curve to be treated as straight segments:

    Linear        control points used as-is
    Bezier        adaptive de Casteljau subdivision until flat
    PerfectCurve  circular arc through exactly three points
    Catmull       Catmull-Rom spline, fixed samples per segment

A slider's control points are split into sub-paths at every pair of
consecutive identical points ("red anchors"); each sub-path is flattened on
its own and the results are concatenated.
"""

from __future__ import annotations

import math
from typing import Sequence

from osu_beatmap.geometry.vector import Vector2
from osu_beatmap.schemas.objects import CurveType

BEZIER_TOLERANCE = 0.25
CIRCULAR_ARC_TOLERANCE = 0.1
CATMULL_DETAIL = 50
LINEAR_TOLERANCE = 0.001
PRECISION_LENIENCE = 0.001


# ── Bezier ──────────────────────────────────────────────────────────────────


def _is_flat_enough(points: Sequence[Vector2], tolerance: float) -> bool:
    limit = tolerance * tolerance * 4
    for i in range(1, len(points) - 1):
        second_difference = points[i - 1] - points[i] * 2 + points[i + 1]
        if second_difference.length_squared() > limit:
            return False
    return True


def _subdivide(points: Sequence[Vector2]) -> tuple[list[Vector2], list[Vector2]]:
    """Split a Bezier control polygon at t=0.5 into left and right halves."""
    count = len(points)
    midpoints = list(points)
    left = [Vector2()] * count
    right = [Vector2()] * count

    for i in range(count):
        left[i] = midpoints[0]
        right[count - i - 1] = midpoints[count - i - 1]
        for j in range(count - i - 1):
            midpoints[j] = (midpoints[j] + midpoints[j + 1]) / 2

    return left, right


def _emit_flat(points: Sequence[Vector2], output: list[Vector2]) -> None:
    """Append the vertices of a flat-enough control polygon to *output*."""
    count = len(points)
    left, right = _subdivide(points)
    joined = left + right[1:]

    output.append(points[0])
    for i in range(1, count - 1):
        index = 2 * i
        output.append((joined[index - 1] + joined[index] * 2 + joined[index + 1]) * 0.25)


def approximate_bezier(
    control_points: Sequence[Vector2], tolerance: float = BEZIER_TOLERANCE
) -> list[Vector2]:
    """Flatten a Bezier curve of arbitrary degree.

    Control polygons still waiting to be flattened live on an explicit stack;
    the left half is always pushed last so the output stays in curve order.
    """
    output: list[Vector2] = []
    if not control_points:
        return output

    to_flatten: list[list[Vector2]] = [list(control_points)]
    while to_flatten:
        parent = to_flatten.pop()
        if _is_flat_enough(parent, tolerance):
            _emit_flat(parent, output)
            continue

        left, right = _subdivide(parent)
        to_flatten.append(right)
        to_flatten.append(left)

    output.append(control_points[-1])
    return output


# ── Circular arc ────────────────────────────────────────────────────────────


def is_nearly_linear(
    a: Vector2, b: Vector2, c: Vector2, tolerance: float = LINEAR_TOLERANCE
) -> bool:
    """True when the three points are too close to a line to define an arc."""
    return abs((b - a).cross(c - a)) <= tolerance


def approximate_perfect_curve(
    control_points: Sequence[Vector2], tolerance: float = CIRCULAR_ARC_TOLERANCE
) -> list[Vector2]:
    """Flatten the circular arc from a through b to c.

    Returns an empty list for degenerate input so the caller can fall back
    to a Bezier approximation.
    """
    a, b, c = control_points

    a_sq = (b - c).length_squared()
    b_sq = (a - c).length_squared()
    c_sq = (a - b).length_squared()

    if (
        abs(a_sq) <= PRECISION_LENIENCE
        or abs(b_sq) <= PRECISION_LENIENCE
        or abs(c_sq) <= PRECISION_LENIENCE
    ):
        return []

    # Barycentric weights of the circumcentre
    s = a_sq * (b_sq + c_sq - a_sq)
    t = b_sq * (a_sq + c_sq - b_sq)
    u = c_sq * (a_sq + b_sq - c_sq)
    weight_sum = s + t + u

    if abs(weight_sum) <= PRECISION_LENIENCE:
        return []

    centre = (a * s + b * t + c * u) / weight_sum
    d_a = a - centre
    d_c = c - centre
    radius = d_a.length()

    theta_start = math.atan2(d_a.y, d_a.x)
    theta_end = math.atan2(d_c.y, d_c.x)
    while theta_end < theta_start:
        theta_end += 2 * math.pi

    direction = 1.0
    theta_range = theta_end - theta_start

    # Rotate the chord by 90 degrees; b on the negative side means clockwise.
    chord = c - a
    ortho_a_to_c = Vector2(chord.y, -chord.x)
    if ortho_a_to_c.dot(b - a) < 0:
        direction = -direction
        theta_range = 2 * math.pi - theta_range

    if 2 * radius <= tolerance:
        amount = 2
    else:
        amount = max(2, math.ceil(theta_range / (2 * math.acos(1 - tolerance / radius))))

    output = []
    for i in range(amount):
        fraction = i / (amount - 1)
        theta = theta_start + direction * fraction * theta_range
        output.append(centre + Vector2(math.cos(theta), math.sin(theta)) * radius)
    return output


# ── Catmull-Rom ─────────────────────────────────────────────────────────────


def _catmull_point(
    v1: Vector2, v2: Vector2, v3: Vector2, v4: Vector2, t: float
) -> Vector2:
    t2 = t * t
    t3 = t * t2
    x = 0.5 * (
        2 * v2.x
        + (-v1.x + v3.x) * t
        + (2 * v1.x - 5 * v2.x + 4 * v3.x - v4.x) * t2
        + (-v1.x + 3 * v2.x - 3 * v3.x + v4.x) * t3
    )
    y = 0.5 * (
        2 * v2.y
        + (-v1.y + v3.y) * t
        + (2 * v1.y - 5 * v2.y + 4 * v3.y - v4.y) * t2
        + (-v1.y + 3 * v2.y - 3 * v3.y + v4.y) * t3
    )
    return Vector2(x, y)


def approximate_catmull(
    control_points: Sequence[Vector2], detail: int = CATMULL_DETAIL
) -> list[Vector2]:
    output: list[Vector2] = []
    count = len(control_points)

    for i in range(count - 1):
        v1 = control_points[i - 1] if i > 0 else control_points[i]
        v2 = control_points[i]
        v3 = control_points[i + 1] if i < count - 1 else v2 + v2 - v1
        v4 = control_points[i + 2] if i < count - 2 else v3 + v3 - v2

        for c in range(detail):
            output.append(_catmull_point(v1, v2, v3, v4, c / detail))
            output.append(_catmull_point(v1, v2, v3, v4, (c + 1) / detail))

    return output


# ── Whole slider ────────────────────────────────────────────────────────────


def approximate_sub_path(
    sub_path: Sequence[Vector2],
    curve_type: CurveType,
    total_points: int,
    bezier_tolerance: float = BEZIER_TOLERANCE,
    circular_arc_tolerance: float = CIRCULAR_ARC_TOLERANCE,
    catmull_detail: int = CATMULL_DETAIL,
) -> list[Vector2]:
    """Flatten one run of control points.

    *total_points* is the control point count of the whole slider: a perfect
    curve is only drawn as an arc when the slider has exactly three points.
    """
    if curve_type is CurveType.LINEAR:
        return list(sub_path)

    if curve_type is CurveType.PERFECT_CURVE:
        if total_points == 3 and len(sub_path) == 3:
            arc = approximate_perfect_curve(sub_path, circular_arc_tolerance)
            if arc:
                return arc
        return approximate_bezier(sub_path, bezier_tolerance)

    if curve_type is CurveType.CATMULL:
        return approximate_catmull(sub_path, catmull_detail)

    return approximate_bezier(sub_path, bezier_tolerance)


def split_sub_paths(points: Sequence[Vector2]) -> list[list[Vector2]]:
    """Split control points at every pair of consecutive identical points."""
    sub_paths = []
    start = 0
    for i in range(len(points)):
        if i == len(points) - 1 or points[i] == points[i + 1]:
            sub_paths.append(list(points[start:i + 1]))
            start = i + 1
    return sub_paths


def approximate_path(
    points: Sequence[Vector2],
    curve_type: CurveType,
    bezier_tolerance: float = BEZIER_TOLERANCE,
    circular_arc_tolerance: float = CIRCULAR_ARC_TOLERANCE,
    catmull_detail: int = CATMULL_DETAIL,
) -> list[Vector2]:
    """Flatten all of a slider's control points into a single polyline."""
    path: list[Vector2] = []
    for sub_path in split_sub_paths(points):
        for vertex in approximate_sub_path(
            sub_path,
            curve_type,
            total_points=len(points),
            bezier_tolerance=bezier_tolerance,
            circular_arc_tolerance=circular_arc_tolerance,
            catmull_detail=catmull_detail,
        ):
            if not path or path[-1] != vertex:
                path.append(vertex)
    return path
