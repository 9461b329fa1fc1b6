"""Segment expansion: flattens a structure into a chronological timeline.

Every step becomes ``cycles x len(items)`` segments (a single step without
legacy items counts as one synthetic item), in step order, then cycle
order, then item order. Consumers render and aggregate in this order.

Expansion never raises. Missing or non-numeric intensities degrade to 0,
fractional durations round half up with a one-minute floor, and inverted
bands are normalised so ``intensity_min <= intensity_max``.
"""

from __future__ import annotations

import logging
import math
from typing import Protocol

from workout_engine.math.rounding import round_half_up
from workout_engine.models.enums import (
    PERCENT_MAX,
    RPE_MAX,
    IntensityMode,
    IntensityUnit,
)
from workout_engine.models.structure import (
    Item,
    PreviewGroup,
    Segment,
    Step,
    Structure,
)

logger = logging.getLogger(__name__)


class IntensitySource(Protocol):
    """Anything carrying a target and a range (items and single steps)."""

    target: float | None
    range_min: float | None
    range_max: float | None


def as_number(value) -> float | None:
    """Return *value* as a finite float, or None if it is absent or invalid."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def resolve_intensity_bounds(
    source: IntensitySource, mode: IntensityMode,
) -> tuple[float, float]:
    """Resolve the (min, max) intensity band of a step or item.

    Target mode uses the point value for both bounds. Range mode falls back
    from the range bounds to the target and finally to 0, then orders the
    pair so min <= max even on legacy data.
    """
    target = as_number(source.target)
    if mode == IntensityMode.TARGET:
        value = target if target is not None else 0.0
        return value, value

    low = as_number(source.range_min)
    if low is None:
        low = target if target is not None else 0.0
    high = as_number(source.range_max)
    if high is None:
        high = target if target is not None else low
    return min(low, high), max(low, high)


def clamp_intensity(value: float, unit: IntensityUnit) -> float:
    """Clamp to 0-10 for RPE and 0-200 for percent units."""
    ceiling = RPE_MAX if unit == IntensityUnit.RPE else PERCENT_MAX
    return max(0.0, min(ceiling, value))


def segment_duration(value) -> int:
    """Duration used for a segment: whole minutes rounded half up, never below one."""
    number = as_number(value)
    if number is None:
        return 1
    return max(1, round_half_up(number))


def effective_items(step: Step) -> tuple[Item, ...]:
    """The items a step plays per cycle; single steps yield one synthetic item."""
    if step.items is not None:
        return step.items
    return (Item(
        id=f"{step.id}-base",
        label=step.block_type.value,
        duration_minutes=step.duration_minutes,
        target=step.target,
        range_min=step.range_min,
        range_max=step.range_max,
    ),)


def expand_step(
    step: Step, mode: IntensityMode, unit: IntensityUnit,
) -> list[Segment]:
    """Expand a single step into its segments (cycle-then-item order)."""
    items = effective_items(step)
    segments: list[Segment] = []
    for cycle_index in range(step.cycles):
        for item_index, item in enumerate(items):
            low, high = resolve_intensity_bounds(item, mode)
            segments.append(Segment(
                duration_minutes=segment_duration(item.duration_minutes),
                block_type=step.block_type,
                intensity_min=clamp_intensity(low, unit),
                intensity_max=clamp_intensity(high, unit),
                step_id=step.id,
                cycle_index=cycle_index,
                item_index=item_index,
            ))
    return segments


def expand_segments(structure: Structure | None) -> list[Segment]:
    """Expand a whole structure into its ordered segment timeline.

    Args:
        structure: The structure to expand. ``None`` yields an empty list.

    Returns:
        Segments in step, cycle and item order.
    """
    if structure is None:
        return []
    segments: list[Segment] = []
    for step in structure.steps:
        segments.extend(expand_step(step, structure.mode, structure.unit))
    logger.debug(
        "Expanded %d steps into %d segments", len(structure.steps), len(segments),
    )
    return segments


def preview_groups(structure: Structure | None) -> list[PreviewGroup]:
    """Group expanded segments back under the step that produced them."""
    if structure is None:
        return []
    groups: list[PreviewGroup] = []
    for step_index, step in enumerate(structure.steps):
        segments = expand_step(step, structure.mode, structure.unit)
        groups.append(PreviewGroup(
            step_id=step.id,
            step_index=step_index,
            total_duration_minutes=sum(s.duration_minutes for s in segments),
            pattern_label=step.pattern_label,
            segments=tuple(segments),
        ))
    return groups
