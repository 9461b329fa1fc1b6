"""Block catalog: default durations and intensities per block type and unit.

This catalog is the single source of truth whenever a step is created, its
type changes, or the structure's unit changes. Percent defaults stay within
0-115; RPE defaults stay within 0-10.
"""

from __future__ import annotations

from dataclasses import dataclass

from workout_engine.models.enums import BlockType, IntensityUnit


@dataclass(frozen=True)
class BlockDefinition:
    """Authoring metadata for a block type.

    Attributes:
        block_type: The block type described.
        label: Human label shown in the builder and previews.
        default_duration: Step duration in minutes when the block is added.
        helper_text: One-line description for the block palette.
        item_labels: Default item labels for pattern blocks (empty for
            single blocks).
    """

    block_type: BlockType
    label: str
    default_duration: int
    helper_text: str
    item_labels: tuple[str, ...] = ()


@dataclass(frozen=True)
class IntensityDefaults:
    """Default duration (minutes) and intensity values for one step or item."""

    duration_minutes: int
    target: float
    range_min: float
    range_max: float


BLOCK_DEFINITIONS: dict[BlockType, BlockDefinition] = {
    BlockType.WARMUP: BlockDefinition(
        BlockType.WARMUP, "Warmup", 12, "Single preparation block.",
    ),
    BlockType.ACTIVE: BlockDefinition(
        BlockType.ACTIVE, "Active", 8, "Main work effort.",
    ),
    BlockType.RECOVERY: BlockDefinition(
        BlockType.RECOVERY, "Recovery", 4, "Low-intensity reset block.",
    ),
    BlockType.COOLDOWN: BlockDefinition(
        BlockType.COOLDOWN, "Cool Down", 10, "Easy finish and de-load.",
    ),
    BlockType.TWO_STEP_REPEATS: BlockDefinition(
        BlockType.TWO_STEP_REPEATS, "Two Step Repeats", 8,
        "Two-item repeating pattern with editable inner blocks.",
        item_labels=("Work", "Recover"),
    ),
    BlockType.THREE_STEP_REPEATS: BlockDefinition(
        BlockType.THREE_STEP_REPEATS, "Three Step Repeats", 9,
        "Three-item repeating pattern with editable inner blocks.",
        item_labels=("Build", "Recover", "Peak"),
    ),
    BlockType.REPEATS: BlockDefinition(
        BlockType.REPEATS, "Repeats", 6,
        "Custom repeat cycle. Repeat count only lives here.",
        item_labels=("Hard", "Easy"),
    ),
    BlockType.RAMP_UP: BlockDefinition(
        BlockType.RAMP_UP, "Ramp Up", 8,
        "Predefined 4-step progressive build.",
        item_labels=("Step 1", "Step 2", "Step 3", "Step 4"),
    ),
    BlockType.RAMP_DOWN: BlockDefinition(
        BlockType.RAMP_DOWN, "Ramp Down", 8,
        "Predefined 4-step progressive unload.",
        item_labels=("Step 1", "Step 2", "Step 3", "Step 4"),
    ),
}

# (duration, target, range_min, range_max) per block type.
_PERCENT_DEFAULTS: dict[BlockType, tuple[int, float, float, float]] = {
    BlockType.WARMUP: (12, 60, 50, 70),
    BlockType.ACTIVE: (8, 92, 85, 100),
    BlockType.RECOVERY: (4, 60, 55, 65),
    BlockType.COOLDOWN: (10, 55, 45, 60),
    BlockType.TWO_STEP_REPEATS: (4, 96, 90, 105),
    BlockType.THREE_STEP_REPEATS: (3, 100, 92, 110),
    BlockType.REPEATS: (3, 98, 90, 108),
    BlockType.RAMP_UP: (2, 90, 80, 95),
    BlockType.RAMP_DOWN: (2, 85, 75, 90),
}

_RPE_DEFAULTS: dict[BlockType, tuple[int, float, float, float]] = {
    BlockType.WARMUP: (12, 3, 2, 4),
    BlockType.ACTIVE: (8, 7, 6, 8),
    BlockType.RECOVERY: (4, 3, 2, 4),
    BlockType.COOLDOWN: (10, 3, 2, 3),
    BlockType.TWO_STEP_REPEATS: (4, 7, 6, 8),
    BlockType.THREE_STEP_REPEATS: (3, 8, 7, 9),
    BlockType.REPEATS: (3, 7, 6, 8),
    BlockType.RAMP_UP: (2, 6, 5, 7),
    BlockType.RAMP_DOWN: (2, 6, 5, 7),
}

# Easy and peak bands shared by the repeating patterns.
_EASY_PERCENT = (60, 55, 65)
_EASY_RPE = (3, 2, 4)
_PEAK_PERCENT = (105, 98, 115)
_PEAK_RPE = (8.5, 7.5, 9.5)

# Ramps move one band per item: 8 % or 1 RPE point.
_RAMP_STEP_PERCENT = 8
_RAMP_STEP_RPE = 1


def block_definition(block_type: BlockType) -> BlockDefinition:
    return BLOCK_DEFINITIONS[block_type]


def block_label(block_type: BlockType) -> str:
    return BLOCK_DEFINITIONS[block_type].label


def default_item_labels(block_type: BlockType) -> tuple[str, ...]:
    return BLOCK_DEFINITIONS[block_type].item_labels


def default_intensity_for_type(
    block_type: BlockType,
    unit: IntensityUnit,
    item_index: int = 0,
) -> IntensityDefaults:
    """Look up the default duration and intensity band for a block or item.

    Args:
        block_type: Block type of the owning step.
        unit: Intensity unit of the structure.
        item_index: Position of the item inside a pattern step. Ignored for
            single blocks.

    Returns:
        IntensityDefaults for that slot.
    """
    is_rpe = unit == IntensityUnit.RPE
    table = _RPE_DEFAULTS if is_rpe else _PERCENT_DEFAULTS
    duration, target, range_min, range_max = table[block_type]

    easy = _EASY_RPE if is_rpe else _EASY_PERCENT
    is_easy_item = (
        (block_type == BlockType.TWO_STEP_REPEATS and item_index == 1)
        or (block_type == BlockType.THREE_STEP_REPEATS and item_index == 1)
        or (block_type == BlockType.REPEATS and item_index % 2 == 1)
    )
    if is_easy_item:
        return IntensityDefaults(duration, *easy)

    if block_type == BlockType.THREE_STEP_REPEATS and item_index == 2:
        peak = _PEAK_RPE if is_rpe else _PEAK_PERCENT
        return IntensityDefaults(duration, *peak)

    step = _RAMP_STEP_RPE if is_rpe else _RAMP_STEP_PERCENT
    if block_type == BlockType.RAMP_UP:
        low = (5 if is_rpe else 75) + item_index * step
        high = (6 if is_rpe else 82) + item_index * step
        return IntensityDefaults(duration, (low + high) / 2, low, high)

    if block_type == BlockType.RAMP_DOWN:
        low = (8 if is_rpe else 98) - item_index * step
        high = (9 if is_rpe else 106) - item_index * step
        return IntensityDefaults(duration, (low + high) / 2, low, high)

    return IntensityDefaults(duration, target, range_min, range_max)
