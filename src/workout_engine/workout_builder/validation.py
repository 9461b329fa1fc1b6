"""Structure normalization and authoring-boundary validation.

``normalize_structure`` is the tolerant path used after every edit: it
clamps and default-fills so a structure can always be expanded and shown.

``validate_structure`` is the strict path for the one place a true error is
appropriate: when a structure is first accepted from user input. It checks
the raw JSON payload and reports every problem keyed by dotted field path.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from workout_engine.exceptions import StructureValidationError
from workout_engine.math.rounding import round_half_up
from workout_engine.math.segments import as_number
from workout_engine.models.enums import (
    AUTHORING_INTENSITY_MAX,
    MAX_DURATION_MIN,
    MAX_REPEAT_COUNT,
    MIN_DURATION_MIN,
    MIN_REPEAT_COUNT,
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

_MAX_NOTE_LENGTH = 500
_MAX_LABEL_LENGTH = 80
_MAX_ID_LENGTH = 64
_INTENSITY_FIELDS = ("target", "range_min", "range_max")

# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def _normalize_duration(value: Any) -> int:
    number = as_number(value)
    if not number:
        return MIN_DURATION_MIN
    return max(MIN_DURATION_MIN, round_half_up(number))


def _normalize_optional(value: Any) -> float | None:
    number = as_number(value)
    if number is None:
        return None
    return max(0.0, number)


def normalize_item(item: Item) -> Item:
    return dataclasses.replace(
        item,
        duration_minutes=_normalize_duration(item.duration_minutes),
        target=_normalize_optional(item.target),
        range_min=_normalize_optional(item.range_min),
        range_max=_normalize_optional(item.range_max),
    )


def normalize_step(step: Step) -> Step:
    """Clamp durations, drop invalid numbers and clamp the repeat count."""
    changes = dict(
        duration_minutes=_normalize_duration(step.duration_minutes),
        target=_normalize_optional(step.target),
        range_min=_normalize_optional(step.range_min),
        range_max=_normalize_optional(step.range_max),
    )
    if isinstance(step, SingleStep):
        changes["legacy_items"] = tuple(normalize_item(item) for item in step.legacy_items)
    if isinstance(step, PatternStep):
        repeat_count = 1
        if step.block_type == BlockType.REPEATS:
            repeat_count = max(MIN_REPEAT_COUNT, int(as_number(step.repeat_count) or 0))
        changes["items"] = tuple(normalize_item(item) for item in step.items)
        changes["repeat_count"] = repeat_count
    return dataclasses.replace(step, **changes)


def normalize_structure(structure: Structure) -> Structure:
    return dataclasses.replace(
        structure, steps=tuple(normalize_step(step) for step in structure.steps),
    )


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_structure(data: Any, raise_on_error: bool = False) -> dict[str, str]:
    """Validate a structure payload received from the authoring surface.

    Args:
        data: Decoded JSON of the ``planned_structure`` field.
        raise_on_error: Raise StructureValidationError instead of returning
            a non-empty error dict.

    Returns:
        Mapping of dotted field path to message; empty when valid.
    """
    errors: dict[str, str] = {}
    _validate_payload(data, errors)
    if errors and raise_on_error:
        raise StructureValidationError(errors)
    return errors


def _validate_payload(data: Any, errors: dict[str, str]) -> None:
    if not isinstance(data, dict):
        errors["planned_structure"] = "The planned structure must be an object."
        return

    if data.get("unit") not in {unit.value for unit in IntensityUnit}:
        errors["unit"] = "The selected unit is invalid."
    mode_value = data.get("mode")
    if mode_value not in {mode.value for mode in IntensityMode}:
        errors["mode"] = "The selected mode is invalid."
        mode = None
    else:
        mode = IntensityMode(mode_value)

    steps = data.get("steps")
    if not isinstance(steps, list) or not steps:
        errors["steps"] = "A structured workout needs at least one block."
        return

    for index, step in enumerate(steps):
        _validate_step(step, f"steps.{index}", mode, errors)


def _validate_step(
    step: Any, prefix: str, mode: IntensityMode | None, errors: dict[str, str],
) -> None:
    if not isinstance(step, dict):
        errors[prefix] = "Each block must be an object."
        return

    type_value = step.get("type")
    if type_value not in {block.value for block in BlockType}:
        errors[f"{prefix}.type"] = "The selected block type is invalid."
        block_type = None
    else:
        block_type = BlockType(type_value)

    _check_text(step.get("id"), f"{prefix}.id", _MAX_ID_LENGTH, errors)
    _check_text(step.get("note"), f"{prefix}.note", _MAX_NOTE_LENGTH, errors)
    _check_number(
        step.get("duration_minutes"), f"{prefix}.duration_minutes",
        MIN_DURATION_MIN, MAX_DURATION_MIN, errors, integer=True, required=True,
    )
    _check_number(
        step.get("repeat_count"), f"{prefix}.repeat_count",
        1, MAX_REPEAT_COUNT, errors, integer=True,
    )
    for field in _INTENSITY_FIELDS:
        _check_number(
            step.get(field), f"{prefix}.{field}", 0, AUTHORING_INTENSITY_MAX, errors,
        )

    items = step.get("items")
    has_items = isinstance(items, list) and len(items) > 0
    if items is not None and not isinstance(items, list):
        errors[f"{prefix}.items"] = "Block items must be a list."

    if block_type is not None and block_type not in PATTERN_BLOCK_TYPES and has_items:
        errors[f"{prefix}.items"] = (
            f"{block_type.value} blocks do not carry nested items."
        )
    if block_type in PATTERN_BLOCK_TYPES:
        _check_cardinality(block_type, items if has_items else [], prefix, errors)

    if has_items:
        for item_index, item in enumerate(items):
            item_prefix = f"{prefix}.items.{item_index}"
            if not isinstance(item, dict):
                errors[item_prefix] = "Each item must be an object."
                continue
            _validate_item(item, item_prefix, errors)
            _check_mode_fields(item, item_prefix, mode, errors)
        if block_type in (BlockType.RAMP_UP, BlockType.RAMP_DOWN) and mode is not None:
            _check_ramp_direction(block_type, items, prefix, mode, errors)
    else:
        _check_mode_fields(step, prefix, mode, errors)


def _validate_item(item: dict, prefix: str, errors: dict[str, str]) -> None:
    _check_text(item.get("id"), f"{prefix}.id", _MAX_ID_LENGTH, errors)
    _check_text(item.get("label"), f"{prefix}.label", _MAX_LABEL_LENGTH, errors)
    _check_number(
        item.get("duration_minutes"), f"{prefix}.duration_minutes",
        MIN_DURATION_MIN, MAX_DURATION_MIN, errors, integer=True, required=True,
    )
    for field in _INTENSITY_FIELDS:
        _check_number(
            item.get(field), f"{prefix}.{field}", 0, AUTHORING_INTENSITY_MAX, errors,
        )


def _check_mode_fields(
    source: dict, prefix: str, mode: IntensityMode | None, errors: dict[str, str],
) -> None:
    if mode == IntensityMode.RANGE:
        low = as_number(source.get("range_min"))
        high = as_number(source.get("range_max"))
        if source.get("range_min") is None or source.get("range_max") is None:
            errors.setdefault(
                f"{prefix}.range_min",
                "Range mode requires minimum and maximum targets for each block.",
            )
        if low is not None and high is not None and high < low:
            errors.setdefault(
                f"{prefix}.range_max",
                "Range maximum must be greater than or equal to minimum.",
            )
    elif mode == IntensityMode.TARGET and source.get("target") is None:
        errors.setdefault(
            f"{prefix}.target", "Target mode requires a target value for each block.",
        )


def _check_cardinality(
    block_type: BlockType, items: list, prefix: str, errors: dict[str, str],
) -> None:
    if block_type == BlockType.REPEATS:
        if len(items) < MIN_REPEAT_ITEMS:
            errors[f"{prefix}.items"] = (
                f"Repeats need at least {MIN_REPEAT_ITEMS} items."
            )
        return
    expected = PATTERN_ITEM_COUNTS[block_type]
    if len(items) != expected:
        errors[f"{prefix}.items"] = (
            f"{block_type.value} blocks need exactly {expected} items."
        )


def _check_ramp_direction(
    block_type: BlockType,
    items: list,
    prefix: str,
    mode: IntensityMode,
    errors: dict[str, str],
) -> None:
    midpoints = []
    for item in items:
        if not isinstance(item, dict):
            return
        midpoints.append(_payload_midpoint(item, mode))
    pairs = list(zip(midpoints, midpoints[1:]))
    if block_type == BlockType.RAMP_UP:
        ordered = all(before <= after for before, after in pairs)
        message = "Ramp up items must not decrease in intensity."
    else:
        ordered = all(before >= after for before, after in pairs)
        message = "Ramp down items must not increase in intensity."
    if not ordered:
        errors.setdefault(f"{prefix}.items", message)


def _payload_midpoint(item: dict, mode: IntensityMode) -> float:
    target = as_number(item.get("target"))
    if mode == IntensityMode.TARGET:
        return target or 0.0
    low = as_number(item.get("range_min"))
    high = as_number(item.get("range_max"))
    low = low if low is not None else (target or 0.0)
    high = high if high is not None else (target if target is not None else low)
    return (low + high) / 2


def _check_number(
    value: Any,
    path: str,
    minimum: float,
    maximum: float,
    errors: dict[str, str],
    integer: bool = False,
    required: bool = False,
) -> None:
    if value is None:
        if required:
            errors[path] = "This field is required."
        return
    number = as_number(value)
    if number is None or isinstance(value, str):
        errors[path] = "This field must be a number."
        return
    if integer and not number.is_integer():
        errors[path] = "This field must be an integer."
        return
    if number < minimum or number > maximum:
        errors[path] = f"This field must be between {minimum:g} and {maximum:g}."


def _check_text(value: Any, path: str, max_length: int, errors: dict[str, str]) -> None:
    if value is None:
        return
    if not isinstance(value, str):
        errors[path] = "This field must be a string."
    elif len(value) > max_length:
        errors[path] = f"This field may not be greater than {max_length} characters."
