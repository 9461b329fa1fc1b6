"""Structured workout models: structure, steps, items and expanded segments.

A step is a tagged variant on ``block_type``:

* ``SingleStep`` (warmup / active / recovery / cooldown) carries its own
  duration and intensity, or plays the items of a legacy row.
* ``PatternStep`` (two/three-step repeats, repeats, ramps) carries an ordered,
  non-empty tuple of ``Item``s that is expanded once per repeat cycle.

All models are frozen; edits go through ``StructureEditor`` which produces
new values.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from workout_engine.exceptions import StructureError
from workout_engine.models.enums import (
    MIN_REPEAT_COUNT,
    PATTERN_BLOCK_TYPES,
    SINGLE_BLOCK_TYPES,
    BlockType,
    IntensityMode,
    IntensityUnit,
)


_PATTERN_LABELS = {
    BlockType.TWO_STEP_REPEATS: "2-step",
    BlockType.THREE_STEP_REPEATS: "3-step",
    BlockType.RAMP_UP: "ramp up",
    BlockType.RAMP_DOWN: "ramp down",
}


def _ordered_range(
    range_min: float | None, range_max: float | None,
) -> tuple[float | None, float | None]:
    numeric = (int, float)
    if (
        isinstance(range_min, numeric) and isinstance(range_max, numeric)
        and range_min > range_max
    ):
        return range_max, range_min
    return range_min, range_max


@dataclass(frozen=True)
class Item:
    """One duration/intensity pair inside a pattern step.

    Only ``target`` or the ``(range_min, range_max)`` pair is meaningful,
    selected by the owning structure's mode. An inverted range is swapped.
    """

    id: str
    label: str = ""
    duration_minutes: int = 1
    target: float | None = None
    range_min: float | None = None
    range_max: float | None = None

    def __post_init__(self) -> None:
        low, high = _ordered_range(self.range_min, self.range_max)
        object.__setattr__(self, "range_min", low)
        object.__setattr__(self, "range_max", high)


@dataclass(frozen=True)
class SingleStep:
    """A block whose own fields are authoritative.

    Authored single steps carry no items. Rows stored before the item model
    was tied to the block type may still hold an item list on a single
    block; those are kept in ``legacy_items`` and played instead of the
    step's own fields so historical totals do not change.
    """

    id: str
    block_type: BlockType
    duration_minutes: int = 1
    target: float | None = None
    range_min: float | None = None
    range_max: float | None = None
    note: str = ""
    legacy_items: tuple[Item, ...] = ()

    def __post_init__(self) -> None:
        if self.block_type not in SINGLE_BLOCK_TYPES:
            raise StructureError(
                f"{self.block_type.value!r} blocks carry items; use PatternStep"
            )
        low, high = _ordered_range(self.range_min, self.range_max)
        object.__setattr__(self, "range_min", low)
        object.__setattr__(self, "range_max", high)
        object.__setattr__(self, "legacy_items", tuple(self.legacy_items))

    @property
    def items(self) -> tuple[Item, ...] | None:
        return self.legacy_items or None

    @property
    def repeat_count(self) -> int:
        return 1

    @property
    def cycles(self) -> int:
        return 1

    @property
    def pattern_label(self) -> str | None:
        return None


@dataclass(frozen=True)
class PatternStep:
    """A block expanded from its items, ``cycles`` times in a row.

    The step-level duration/intensity fields mirror the persisted shape and
    are kept for lossless round trips; expansion only reads ``items``.
    """

    id: str
    block_type: BlockType
    items: tuple[Item, ...]
    repeat_count: int = 1
    duration_minutes: int = 1
    target: float | None = None
    range_min: float | None = None
    range_max: float | None = None
    note: str = ""

    def __post_init__(self) -> None:
        if self.block_type not in PATTERN_BLOCK_TYPES:
            raise StructureError(
                f"{self.block_type.value!r} blocks have no items; use SingleStep"
            )
        items = tuple(self.items)
        if not items:
            raise StructureError(f"Step {self.id!r} needs at least one item")
        object.__setattr__(self, "items", items)
        low, high = _ordered_range(self.range_min, self.range_max)
        object.__setattr__(self, "range_min", low)
        object.__setattr__(self, "range_max", high)

    @property
    def cycles(self) -> int:
        """Number of times the item list is played back-to-back."""
        if self.block_type == BlockType.REPEATS:
            return max(MIN_REPEAT_COUNT, self.repeat_count)
        return 1

    @property
    def pattern_label(self) -> str | None:
        """Short badge shown above the step in previews (``x3``, ``2-step``)."""
        return _PATTERN_LABELS.get(self.block_type) or f"x{self.cycles}"


Step = Union[SingleStep, PatternStep]


@dataclass(frozen=True)
class Structure:
    """The full structured-workout definition for one planned session."""

    unit: IntensityUnit
    mode: IntensityMode
    steps: tuple[Step, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "steps", tuple(self.steps))

    def step_by_id(self, step_id: str) -> Step | None:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None


@dataclass(frozen=True)
class Segment:
    """One flattened (duration, intensity band) unit of an expanded structure.

    ``step_id``, ``cycle_index`` and ``item_index`` locate the segment in the
    authored structure so previews can group it back under its step.
    """

    duration_minutes: int
    block_type: BlockType
    intensity_min: float
    intensity_max: float
    step_id: str = ""
    cycle_index: int = 0
    item_index: int = 0

    @property
    def midpoint(self) -> float:
        return (self.intensity_min + self.intensity_max) / 2


@dataclass(frozen=True)
class PreviewGroup:
    """Segments of one authored step, in order, with its summed duration."""

    step_id: str
    step_index: int
    total_duration_minutes: int
    pattern_label: str | None
    segments: tuple[Segment, ...]
