"""JSON codec for the persisted ``planned_structure`` field.

Converts between Structure objects and the snake_case JSON shape stored on a
session, and computes the advisory duration/TSS snapshot written beside it.

Loading is tolerant: records written under older schemas are clamped and
default-filled instead of rejected. All functions are pure (no I/O).
"""

from __future__ import annotations

import dataclasses
import json
import logging
from dataclasses import dataclass
from typing import Any

from workout_engine.math.rounding import round_half_up
from workout_engine.math.segments import as_number
from workout_engine.math.training_load import estimate_tss, total_duration_minutes
from workout_engine.models.enums import (
    LOADED_REPEAT_COUNT_CEILING,
    MIN_REPEAT_COUNT,
    PATTERN_BLOCK_TYPES,
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
from workout_engine.workout_builder.catalog import block_label

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanSnapshot:
    """Values written next to a structure when a session is saved.

    The snapshot is a cache; the structure stays the source of truth.
    """

    duration_minutes: int | None
    estimated_tss: int | None
    planned_structure: dict | None


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def structure_from_dict(data: Any) -> Structure | None:
    """Load a persisted structure, degrading instead of rejecting.

    Args:
        data: Decoded JSON value of the ``planned_structure`` field.

    Returns:
        A Structure, or None when *data* is not a JSON object.
    """
    if not isinstance(data, dict):
        return None

    unit = _enum_or_none(IntensityUnit, data.get("unit"))
    if unit is None:
        logger.debug("Unknown structure unit %r, falling back to rpe", data.get("unit"))
        unit = IntensityUnit.RPE

    mode = _enum_or_none(IntensityMode, data.get("mode"))
    if mode is None:
        mode = IntensityMode.TARGET if unit == IntensityUnit.RPE else IntensityMode.RANGE
        logger.debug("Unknown structure mode %r, using %s", data.get("mode"), mode.value)

    raw_steps = data.get("steps")
    if not isinstance(raw_steps, list):
        raw_steps = []

    steps: list[Step] = []
    seen_ids: set[str] = set()
    for index, raw_step in enumerate(raw_steps):
        if not isinstance(raw_step, dict):
            logger.debug("Skipping non-object step at index %d", index)
            continue
        step = _step_from_dict(raw_step, index)
        if step.id in seen_ids:
            step = _with_id(step, f"{step.id}-{index}")
        seen_ids.add(step.id)
        steps.append(step)

    return Structure(unit=unit, mode=mode, steps=tuple(steps))


def structure_from_json(text: str | None) -> Structure | None:
    """Decode and load a JSON string; undecodable input loads as None."""
    if not text:
        return None
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        logger.debug("Planned structure is not valid JSON")
        return None
    return structure_from_dict(data)


def _step_from_dict(raw: dict, index: int) -> Step:
    block_type = _enum_or_none(BlockType, raw.get("type"))
    if block_type is None:
        logger.debug("Unknown block type %r at step %d, using active", raw.get("type"), index)
        block_type = BlockType.ACTIVE

    step_id = _text(raw.get("id")) or f"step-{index}-{block_type.value}"
    fields = dict(
        duration_minutes=coerce_duration(_get(raw, "duration_minutes", "durationMinutes")),
        target=coerce_intensity(raw.get("target")),
        range_min=coerce_intensity(_get(raw, "range_min", "rangeMin")),
        range_max=coerce_intensity(_get(raw, "range_max", "rangeMax")),
        note=_text(raw.get("note")),
    )

    if block_type not in PATTERN_BLOCK_TYPES:
        legacy_items = _items_from_list(raw.get("items"), step_id, block_type, index)
        if legacy_items:
            logger.debug(
                "Keeping %d legacy items on %s step %s",
                len(legacy_items), block_type.value, step_id,
            )
        return SingleStep(
            id=step_id, block_type=block_type, legacy_items=legacy_items, **fields,
        )

    repeat_count = as_number(_get(raw, "repeat_count", "repeatCount"))
    repeat_count = int(repeat_count) if repeat_count is not None else 1
    if block_type == BlockType.REPEATS:
        repeat_count = max(MIN_REPEAT_COUNT, repeat_count)
        if repeat_count > LOADED_REPEAT_COUNT_CEILING:
            logger.debug(
                "Clamping repeat count %d of step %s to %d",
                repeat_count, step_id, LOADED_REPEAT_COUNT_CEILING,
            )
            repeat_count = LOADED_REPEAT_COUNT_CEILING
    else:
        repeat_count = 1

    items = _items_from_list(raw.get("items"), step_id, block_type, index)
    if not items:
        # Legacy rows stored pattern blocks without items; play the step itself.
        items = (Item(
            id=f"{step_id}-base",
            label=block_label(block_type),
            duration_minutes=fields["duration_minutes"],
            target=fields["target"],
            range_min=fields["range_min"],
            range_max=fields["range_max"],
        ),)

    return PatternStep(
        id=step_id,
        block_type=block_type,
        items=items,
        repeat_count=repeat_count,
        **fields,
    )


def _items_from_list(
    raw_items: Any, step_id: str, block_type: BlockType, step_index: int,
) -> tuple[Item, ...]:
    if not isinstance(raw_items, list):
        return ()
    items: list[Item] = []
    for item_index, raw in enumerate(raw_items):
        if not isinstance(raw, dict):
            continue
        items.append(Item(
            id=_text(raw.get("id")) or f"item-{step_index}-{block_type.value}-{item_index}",
            label=_text(raw.get("label")) or f"Step {item_index + 1}",
            duration_minutes=coerce_duration(_get(raw, "duration_minutes", "durationMinutes")),
            target=coerce_intensity(raw.get("target")),
            range_min=coerce_intensity(_get(raw, "range_min", "rangeMin")),
            range_max=coerce_intensity(_get(raw, "range_max", "rangeMax")),
        ))
    return tuple(items)


def coerce_duration(value: Any) -> int:
    """Whole minutes (rounded half up), at least one; garbage becomes one minute."""
    number = as_number(value)
    if number is None:
        return 1
    return max(1, round_half_up(number))


def coerce_intensity(value: Any) -> float | None:
    """Non-negative intensity or None; garbage becomes None."""
    number = as_number(value)
    if number is None:
        return None
    return max(0.0, number)


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def structure_to_dict(structure: Structure) -> dict:
    """Convert a Structure to the persisted snake_case dict."""
    return {
        "unit": structure.unit.value,
        "mode": structure.mode.value,
        "steps": [_step_to_dict(step) for step in structure.steps],
    }


def to_json_string(structure: Structure, indent: int | None = None) -> str:
    return json.dumps(structure_to_dict(structure), indent=indent)


def _step_to_dict(step: Step) -> dict:
    items = None
    if step.items is not None:
        items = [
            {
                "id": item.id,
                "label": item.label,
                "duration_minutes": coerce_duration(item.duration_minutes),
                "target": _json_number(item.target),
                "range_min": _json_number(item.range_min),
                "range_max": _json_number(item.range_max),
            }
            for item in step.items
        ]
    note = step.note.strip()
    return {
        "id": step.id,
        "type": step.block_type.value,
        "duration_minutes": coerce_duration(step.duration_minutes),
        "target": _json_number(step.target),
        "range_min": _json_number(step.range_min),
        "range_max": _json_number(step.range_max),
        "repeat_count": max(1, int(step.repeat_count)),
        "note": note or None,
        "items": items,
    }


def build_plan_snapshot(structure: Structure | None) -> PlanSnapshot:
    """Compute the advisory duration/TSS values saved with a structure.

    A missing or empty structure produces an all-None snapshot so the
    session's separately entered values are left alone.
    """
    if structure is None or not structure.steps:
        return PlanSnapshot(None, None, None)
    return PlanSnapshot(
        duration_minutes=max(1, total_duration_minutes(structure)),
        estimated_tss=estimate_tss(structure),
        planned_structure=structure_to_dict(structure),
    )


def plan_fields(
    structure: Structure | None,
    entered_duration_minutes: int | None = None,
    entered_tss: int | None = None,
) -> dict:
    """Session plan fields for a save payload.

    With a structure, duration and TSS come from the snapshot. Without one,
    the separately entered values pass through untouched.
    """
    snapshot = build_plan_snapshot(structure)
    if snapshot.planned_structure is None:
        return {
            "planned_duration_minutes": entered_duration_minutes or 0,
            "planned_tss": entered_tss,
            "planned_structure": None,
        }
    return {
        "planned_duration_minutes": snapshot.duration_minutes,
        "planned_tss": snapshot.estimated_tss,
        "planned_structure": snapshot.planned_structure,
    }


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _get(raw: dict, key: str, legacy_key: str) -> Any:
    if key in raw:
        return raw[key]
    return raw.get(legacy_key)


def _enum_or_none(enum_cls, value):
    try:
        return enum_cls(value)
    except (TypeError, ValueError):
        return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _json_number(value: float | None) -> float | int | None:
    number = as_number(value)
    if number is None:
        return None
    return int(number) if number.is_integer() else number


def _with_id(step: Step, step_id: str) -> Step:
    return dataclasses.replace(step, id=step_id)
