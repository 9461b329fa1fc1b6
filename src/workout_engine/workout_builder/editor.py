"""StructureEditor: id-keyed authoring operations on a structure.

Steps live in an arena keyed by their stable id plus an ordered list of
keys. Every operation addresses steps and items by id, so a reorder that
lands in the middle of an edit cannot make the edit hit the wrong step.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Callable

from workout_engine.exceptions import StructureError, UnknownStepError
from workout_engine.math.rounding import round_half_up
from workout_engine.models.enums import (
    MIN_REPEAT_COUNT,
    MIN_REPEAT_ITEMS,
    BlockType,
    IntensityMode,
    IntensityUnit,
)
from workout_engine.models.structure import Item, PatternStep, Step, Structure
from workout_engine.workout_builder.templates import (
    convert_step_unit,
    create_default_structure,
    create_item,
    create_step,
    reset_step_for_type,
)

logger = logging.getLogger(__name__)


class StructureEditor:
    """Mutable authoring session over an immutable Structure.

    Usage::

        editor = StructureEditor.for_sport("bike")
        step_id = editor.add_step(BlockType.REPEATS)
        editor.set_repeat_count(step_id, 5)
        editor.move_step(step_id, 1)
        structure = editor.build()
    """

    def __init__(
        self,
        unit: IntensityUnit,
        mode: IntensityMode,
        steps: tuple[Step, ...] | list[Step] = (),
    ) -> None:
        self.unit = unit
        self.mode = mode
        self._steps: dict[str, Step] = {}
        self._order: list[str] = []
        self._id_counter = 0
        for step in steps:
            if step.id in self._steps:
                raise StructureError(f"Duplicate step id: {step.id!r}")
            self._steps[step.id] = step
            self._order.append(step.id)

    @classmethod
    def from_structure(cls, structure: Structure) -> StructureEditor:
        return cls(structure.unit, structure.mode, structure.steps)

    @classmethod
    def for_sport(cls, sport: str) -> StructureEditor:
        return cls.from_structure(create_default_structure(sport))

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._order)

    @property
    def order(self) -> tuple[str, ...]:
        return tuple(self._order)

    def get(self, step_id: str) -> Step:
        try:
            return self._steps[step_id]
        except KeyError:
            raise UnknownStepError(step_id) from None

    def index_of(self, step_id: str) -> int:
        self.get(step_id)
        return self._order.index(step_id)

    def build(self) -> Structure:
        """Snapshot the arena as an immutable Structure in current order."""
        return Structure(
            unit=self.unit,
            mode=self.mode,
            steps=tuple(self._steps[step_id] for step_id in self._order),
        )

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def add_step(self, block_type: BlockType) -> str:
        """Append a catalog step of *block_type*; returns its id."""
        return self.insert_step(block_type, len(self._order))

    def insert_step(self, block_type: BlockType, position: int) -> str:
        """Insert a catalog step at *position* (clamped); returns its id."""
        step_id = self._new_step_id()
        self._steps[step_id] = create_step(block_type, self.unit, step_id)
        self._order.insert(self._clamp_position(position, len(self._order)), step_id)
        return step_id

    def remove_step(self, step_id: str) -> Step:
        step = self.get(step_id)
        del self._steps[step_id]
        self._order.remove(step_id)
        return step

    def move_step(self, step_id: str, position: int) -> None:
        """Move a step so it ends up at index *position* (clamped)."""
        self.get(step_id)
        self._order.remove(step_id)
        self._order.insert(self._clamp_position(position, len(self._order)), step_id)

    def move_step_by_one(self, step_id: str, direction: int) -> None:
        """Swap with the neighbour before (-1) or after (+1); no-op at the ends."""
        index = self.index_of(step_id)
        target = index + (1 if direction > 0 else -1)
        if 0 <= target < len(self._order):
            self.move_step(step_id, target)

    def replace_step(self, step_id: str, updater: Callable[[Step], Step]) -> Step:
        """Replace a step with ``updater(step)``; the id must not change."""
        updated = updater(self.get(step_id))
        if updated.id != step_id:
            raise StructureError(
                f"Replacement for {step_id!r} changed its id to {updated.id!r}"
            )
        self._steps[step_id] = updated
        return updated

    def update_step(self, step_id: str, **changes) -> Step:
        """Change plain fields of a step (duration, target, range, note)."""
        if "id" in changes or "block_type" in changes:
            raise StructureError("Use change_step_type() to change a step's type")
        if "duration_minutes" in changes:
            changes["duration_minutes"] = max(1, round_half_up(changes["duration_minutes"]))
        try:
            return self.replace_step(
                step_id, lambda step: dataclasses.replace(step, **changes),
            )
        except TypeError as exc:
            raise StructureError(str(exc)) from exc

    def change_step_type(self, step_id: str, block_type: BlockType) -> Step:
        """Switch a step's type, re-deriving intensities and items from the catalog."""
        current = self.get(step_id)
        if current.block_type == block_type:
            return current
        return self.replace_step(
            step_id, lambda step: reset_step_for_type(block_type, self.unit, step),
        )

    def set_repeat_count(self, step_id: str, repeat_count: int) -> Step:
        """Set the cycle count of a ``repeats`` step (never below 2)."""
        step = self.get(step_id)
        if step.block_type != BlockType.REPEATS:
            logger.debug("Ignoring repeat count for %s step %s", step.block_type.value, step_id)
            return step
        return self.replace_step(
            step_id,
            lambda s: dataclasses.replace(
                s, repeat_count=max(MIN_REPEAT_COUNT, int(repeat_count)),
            ),
        )

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    def add_repeat_item(self, step_id: str) -> str | None:
        """Append a catalog item to a ``repeats`` step; returns the new item id.

        Other pattern types have a fixed number of items and are left alone.
        """
        step = self.get(step_id)
        if not isinstance(step, PatternStep) or step.block_type != BlockType.REPEATS:
            logger.debug("Step %s does not accept extra items", step_id)
            return None
        item_id = self._new_item_id(step)
        item = create_item(
            step.block_type, self.unit, item_id, len(step.items),
            label=f"Step {len(step.items) + 1}",
        )
        self._steps[step_id] = dataclasses.replace(step, items=step.items + (item,))
        return item_id

    def remove_repeat_item(self, step_id: str, item_id: str) -> bool:
        """Remove an item from a ``repeats`` step, never going below two items."""
        step = self.get(step_id)
        if not isinstance(step, PatternStep) or step.block_type != BlockType.REPEATS:
            return False
        if len(step.items) <= MIN_REPEAT_ITEMS:
            return False
        remaining = tuple(item for item in step.items if item.id != item_id)
        if len(remaining) == len(step.items):
            return False
        self._steps[step_id] = dataclasses.replace(step, items=remaining)
        return True

    def update_item(self, step_id: str, item_id: str, **changes) -> Item:
        """Change fields of one item (label, duration, target, range)."""
        step = self.get(step_id)
        if not isinstance(step, PatternStep):
            raise StructureError(f"Step {step_id!r} has no items")
        if "id" in changes:
            raise StructureError("Item ids are stable")
        if "duration_minutes" in changes:
            changes["duration_minutes"] = max(1, round_half_up(changes["duration_minutes"]))
        items = list(step.items)
        for index, item in enumerate(items):
            if item.id == item_id:
                try:
                    items[index] = dataclasses.replace(item, **changes)
                except TypeError as exc:
                    raise StructureError(str(exc)) from exc
                self._steps[step_id] = dataclasses.replace(step, items=tuple(items))
                return items[index]
        raise StructureError(f"Step {step_id!r} has no item {item_id!r}")

    # ------------------------------------------------------------------
    # Structure-wide settings
    # ------------------------------------------------------------------

    def set_mode(self, mode: IntensityMode) -> None:
        if mode != self.mode:
            logger.info("Switching structure mode %s -> %s", self.mode.value, mode.value)
        self.mode = mode

    def set_unit(self, unit: IntensityUnit) -> None:
        """Switch unit and re-derive every step's intensities from the catalog."""
        if unit == self.unit:
            return
        logger.info("Switching structure unit %s -> %s", self.unit.value, unit.value)
        self.unit = unit
        for step_id in self._order:
            self._steps[step_id] = convert_step_unit(self._steps[step_id], unit)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _new_step_id(self) -> str:
        while True:
            step_id = f"step-{self._id_counter}"
            self._id_counter += 1
            if step_id not in self._steps:
                return step_id

    @staticmethod
    def _new_item_id(step: PatternStep) -> str:
        existing = {item.id for item in step.items}
        index = len(step.items)
        while f"{step.id}-item-{index}" in existing:
            index += 1
        return f"{step.id}-item-{index}"

    @staticmethod
    def _clamp_position(position: int, length: int) -> int:
        return max(0, min(position, length))
