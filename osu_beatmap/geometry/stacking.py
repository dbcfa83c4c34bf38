"""Stack offsets for objects placed on (nearly) the same spot.

When objects share a position within a short time window the game draws
each earlier one slightly up and to the left so they stay readable. This
module assigns the integer ``stack_height`` of every hit object; the drawn
offset is ``stack_offset(stack_height, circle_size)``.

The pass is index driven and mutates the list in place: later decisions
depend on heights written earlier in the same pass.
"""

from __future__ import annotations

import logging
from typing import Sequence

from osu_beatmap.geometry.vector import Vector2
from osu_beatmap.schemas.objects import HitObject

logger = logging.getLogger(__name__)

STACK_DISTANCE = 3.0  # osu! pixels


def time_preempt(approach_rate: float) -> float:
    """Milliseconds an object is visible before it must be hit."""
    if approach_rate > 5:
        return 1200 + (450 - 1200) * (approach_rate - 5) / 5
    if approach_rate < 5:
        return 1200 + (1800 - 1200) * (5 - approach_rate) / 5
    return 1200.0


def circle_scale(circle_size: float) -> float:
    return (1.0 - 0.7 * (circle_size - 5) / 5) / 2


def stack_offset(stack_height: int, circle_size: float) -> Vector2:
    """Drawn displacement for an object with the given stack height."""
    offset = -stack_height * circle_scale(circle_size) * 6.4
    return Vector2(offset, offset)


def stacked_position(hit_object: HitObject, circle_size: float) -> Vector2:
    return hit_object.position + stack_offset(hit_object.stack_height, circle_size)


def apply_stacking(
    hit_objects: Sequence[HitObject],
    approach_rate: float,
    stack_leniency: float,
    start_index: int = 0,
    end_index: int | None = None,
    stack_distance: float = STACK_DISTANCE,
) -> None:
    """Assign stack heights to ``hit_objects[start_index:end_index + 1]`` in place.

    Objects must be in time order. Heights in the range are reset first, so
    running the pass twice gives the same result.
    """
    if not hit_objects:
        return

    last = len(hit_objects) - 1
    if end_index is None:
        end_index = last
    start_index = max(0, start_index)
    end_index = min(end_index, last)

    for obj in hit_objects[start_index:end_index + 1]:
        obj.stack_height = 0

    stack_threshold = time_preempt(approach_rate) * stack_leniency

    # Pass 1: objects after the range that stack onto objects inside it must
    # be recalculated too, so walk backwards and extend the end index.
    extended_end = end_index
    if end_index < last:
        for i in range(end_index, start_index - 1, -1):
            stack_base = i
            for n in range(stack_base + 1, len(hit_objects)):
                base = hit_objects[stack_base]
                if base.is_spinner:
                    break

                obj_n = hit_objects[n]
                # A spinner on either side ends the forward scan
                if obj_n.is_spinner:
                    break

                if obj_n.start_time - base.stack_end_time > stack_threshold:
                    break

                if (
                    base.position.distance(obj_n.position) < stack_distance
                    or (base.is_slider and base.end_position.distance(obj_n.position) < stack_distance)
                ):
                    stack_base = n
                    # Not reset above since it lies past the requested range
                    obj_n.stack_height = 0

            if stack_base > extended_end:
                extended_end = stack_base
                if extended_end == last:
                    break

    # Pass 2: walk backwards assigning heights.
    extended_start = start_index
    for i in range(extended_end, start_index, -1):
        obj_i = hit_objects[i]
        # Already stacked onto a later object, or never stacks
        if obj_i.stack_height != 0 or obj_i.is_spinner:
            continue

        n = i
        if obj_i.is_slider:
            # A slider starts a stack that always grows upwards
            while n > start_index:
                n -= 1
                obj_n = hit_objects[n]
                if obj_n.is_spinner:
                    continue

                if obj_i.start_time - obj_n.start_time > stack_threshold:
                    break

                if obj_n.stack_end_position.distance(obj_i.position) < stack_distance:
                    obj_n.stack_height = obj_i.stack_height + 1
                    obj_i = obj_n

        elif obj_i.is_circle:
            while n > 0:
                n -= 1
                obj_n = hit_objects[n]
                if obj_n.is_spinner:
                    continue

                if obj_i.start_time - obj_n.stack_end_time > stack_threshold:
                    break

                # Objects before the range have not been reset yet
                if n < extended_start:
                    obj_n.stack_height = 0
                    extended_start = n

                if obj_n.is_slider and obj_n.end_position.distance(obj_i.position) < stack_distance:
                    # Circles stacked under a slider's end go down and right
                    # of it instead; the slider is handled later as a new base.
                    offset = obj_i.stack_height - obj_n.stack_height + 1
                    for j in range(n + 1, i + 1):
                        obj_j = hit_objects[j]
                        if obj_n.end_position.distance(obj_j.position) < stack_distance:
                            obj_j.stack_height -= offset
                    break

                if obj_n.position.distance(obj_i.position) < stack_distance:
                    obj_n.stack_height = obj_i.stack_height + 1
                    obj_i = obj_n

    logger.debug(
        "Stacking applied to objects %d-%d (threshold %.1f ms)",
        extended_start, extended_end, stack_threshold,
    )
