"""Structure templates: default structures per sport and catalog-driven steps.

Cycling and running start from a warmup -> active -> recovery -> two-step
repeats -> ramp down -> cooldown template in range mode; every other sport
starts from a single RPE target block.
"""

from __future__ import annotations

import dataclasses

from workout_engine.models.enums import (
    DEFAULT_REPEAT_COUNT,
    DEFAULT_SINGLE_SPORT_DURATION_MIN,
    MIN_REPEAT_ITEMS,
    PATTERN_BLOCK_TYPES,
    PATTERN_ITEM_COUNTS,
    BlockType,
    IntensityMode,
    IntensityUnit,
)
from workout_engine.models.structure import (
    Item,
    PatternStep,
    SingleStep,
    Step,
    Structure,
)
from workout_engine.workout_builder.catalog import (
    block_definition,
    default_intensity_for_type,
    default_item_labels,
)

_CYCLING_SPORTS = frozenset({"bike", "cycling", "ride"})
_RUNNING_SPORTS = frozenset({"run", "running"})

# (block type, duration) of the endurance template.
_ENDURANCE_TEMPLATE: tuple[tuple[BlockType, int], ...] = (
    (BlockType.WARMUP, 12),
    (BlockType.ACTIVE, 8),
    (BlockType.RECOVERY, 4),
    (BlockType.TWO_STEP_REPEATS, 8),
    (BlockType.RAMP_DOWN, 8),
    (BlockType.COOLDOWN, 10),
)


def create_default_structure(sport: str) -> Structure:
    """Build the starting structure when structured planning is enabled.

    Args:
        sport: Session sport key (``bike``, ``run``, ``swim``, ...).

    Returns:
        A fresh Structure with deterministic step ids (``step-0`` ...).
    """
    key = sport.strip().lower()
    if key in _CYCLING_SPORTS or key in _RUNNING_SPORTS:
        unit = (
            IntensityUnit.FTP_PERCENT if key in _CYCLING_SPORTS
            else IntensityUnit.THRESHOLD_HR_PERCENT
        )
        steps = tuple(
            create_step(block_type, unit, f"step-{index}", duration)
            for index, (block_type, duration) in enumerate(_ENDURANCE_TEMPLATE)
        )
        return Structure(unit=unit, mode=IntensityMode.RANGE, steps=steps)

    return Structure(
        unit=IntensityUnit.RPE,
        mode=IntensityMode.TARGET,
        steps=(create_step(
            BlockType.ACTIVE, IntensityUnit.RPE, "step-0",
            DEFAULT_SINGLE_SPORT_DURATION_MIN,
        ),),
    )


def default_item_count(block_type: BlockType) -> int:
    """Number of items a freshly created pattern step carries."""
    if block_type == BlockType.REPEATS:
        return MIN_REPEAT_ITEMS
    return PATTERN_ITEM_COUNTS.get(block_type, 0)


def create_item(
    block_type: BlockType,
    unit: IntensityUnit,
    item_id: str,
    item_index: int,
    label: str | None = None,
) -> Item:
    """Catalog item for position *item_index* of a pattern step."""
    defaults = default_intensity_for_type(block_type, unit, item_index)
    labels = default_item_labels(block_type)
    if label is None:
        label = labels[item_index] if item_index < len(labels) else f"Step {item_index + 1}"
    return Item(
        id=item_id,
        label=label,
        duration_minutes=max(1, defaults.duration_minutes),
        target=defaults.target,
        range_min=defaults.range_min,
        range_max=defaults.range_max,
    )


def create_items(
    block_type: BlockType, unit: IntensityUnit, step_id: str,
) -> tuple[Item, ...]:
    return tuple(
        create_item(block_type, unit, f"{step_id}-item-{index}", index)
        for index in range(default_item_count(block_type))
    )


def create_step(
    block_type: BlockType,
    unit: IntensityUnit,
    step_id: str,
    duration_minutes: int | None = None,
    note: str = "",
) -> Step:
    """Create a step of *block_type* with catalog intensities for *unit*."""
    if duration_minutes is None:
        duration_minutes = block_definition(block_type).default_duration
    defaults = default_intensity_for_type(block_type, unit)

    if block_type in PATTERN_BLOCK_TYPES:
        return PatternStep(
            id=step_id,
            block_type=block_type,
            items=create_items(block_type, unit, step_id),
            repeat_count=DEFAULT_REPEAT_COUNT if block_type == BlockType.REPEATS else 1,
            duration_minutes=duration_minutes,
            target=defaults.target,
            range_min=defaults.range_min,
            range_max=defaults.range_max,
            note=note,
        )
    return SingleStep(
        id=step_id,
        block_type=block_type,
        duration_minutes=duration_minutes,
        target=defaults.target,
        range_min=defaults.range_min,
        range_max=defaults.range_max,
        note=note,
    )


def reset_step_for_type(
    block_type: BlockType,
    unit: IntensityUnit,
    current: Step,
) -> Step:
    """Rebuild *current* as a *block_type* step, keeping its id, duration and note."""
    return create_step(
        block_type, unit, current.id, current.duration_minutes, current.note,
    )


def convert_step_unit(step: Step, unit: IntensityUnit) -> Step:
    """Re-derive a step's intensities from the catalog under a new unit.

    Ids, durations, labels, notes and repeat counts are kept; only the
    intensity numbers change, so nothing out of range is carried across
    (e.g. 92 % never becomes RPE 92).
    """
    defaults = default_intensity_for_type(step.block_type, unit)
    intensity = dict(
        target=defaults.target,
        range_min=defaults.range_min,
        range_max=defaults.range_max,
    )
    if step.items is not None:
        items = []
        for index, item in enumerate(step.items):
            item_defaults = default_intensity_for_type(step.block_type, unit, index)
            items.append(dataclasses.replace(
                item,
                target=item_defaults.target,
                range_min=item_defaults.range_min,
                range_max=item_defaults.range_max,
            ))
        key = "items" if isinstance(step, PatternStep) else "legacy_items"
        intensity[key] = tuple(items)
    return dataclasses.replace(step, **intensity)


def convert_structure_unit(structure: Structure, unit: IntensityUnit) -> Structure:
    """Switch a structure's unit, re-deriving every step from the catalog."""
    if unit == structure.unit:
        return structure
    return Structure(
        unit=unit,
        mode=structure.mode,
        steps=tuple(convert_step_unit(step, unit) for step in structure.steps),
    )
