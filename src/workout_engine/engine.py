"""WorkoutEngine: the public surface of the structured-workout engine.

Module-level functions are the stable interface consumed by the
application; ``WorkoutEngine`` bundles them into the two calls a session
screen makes: a live preview while editing and a snapshot when saving.
"""

from __future__ import annotations

from dataclasses import dataclass

from workout_engine.actual_metrics import resolve_actual_duration, resolve_actual_tss
from workout_engine.math.segments import expand_segments, preview_groups
from workout_engine.math.training_load import (
    axis_ticks,
    estimate_tss,
    insertion_offsets,
    preview_scale_max,
    total_duration_minutes,
)
from workout_engine.models.enums import UNIT_DISPLAY_LABELS
from workout_engine.models.structure import PreviewGroup, Segment, Step, Structure
from workout_engine.models.training_targets import TrainingTargets
from workout_engine.reconciliation import (
    is_adjusted,
    is_completed,
    is_ready_to_complete,
    reconcile,
)
from workout_engine.serialization.json_codec import (
    PlanSnapshot,
    build_plan_snapshot,
    structure_from_dict,
)
from workout_engine.workout_builder.target_resolver import (
    format_axis_tick_label,
    format_resolved_target,
    resolve_display_target,
)

__all__ = [
    "StructurePreview",
    "WorkoutEngine",
    "estimate_tss",
    "expand_segments",
    "is_adjusted",
    "is_completed",
    "is_ready_to_complete",
    "reconcile",
    "resolve_actual_duration",
    "resolve_actual_tss",
    "resolve_display_target",
    "total_duration",
]


def total_duration(structure: Structure | None) -> int:
    """Total planned minutes of a structure (0 without one)."""
    return total_duration_minutes(structure)


@dataclass(frozen=True)
class StructurePreview:
    """Everything needed to draw a structure preview for one athlete."""

    segments: tuple[Segment, ...]
    groups: tuple[PreviewGroup, ...]
    total_duration_minutes: int
    estimated_tss: int | None
    scale_max: int
    axis_ticks: tuple[int, ...]
    axis_labels: tuple[str, ...]
    insertion_offsets: tuple[float, ...]
    step_labels: dict[str, str]
    unit_label: str


class WorkoutEngine:
    """Stateless facade over expansion, aggregation and target display.

    Usage::

        engine = WorkoutEngine()
        preview = engine.preview(structure, targets)
        snapshot = engine.snapshot(structure)
    """

    def load(self, planned_structure: dict | None) -> Structure | None:
        """Load a persisted ``planned_structure`` value (never raises)."""
        return structure_from_dict(planned_structure)

    def preview(
        self,
        structure: Structure | None,
        targets: TrainingTargets | None = None,
    ) -> StructurePreview:
        """Build the live preview shown while a structure is edited.

        Args:
            structure: The structure being edited or displayed. ``None``
                (a cleared or absent structure) gives an empty preview.
            targets: Athlete training targets for absolute values.

        Returns:
            A StructurePreview with segments grouped per step, totals, the
            axis scale and a resolved target label per step id.
        """
        if structure is None:
            return StructurePreview(
                segments=(),
                groups=(),
                total_duration_minutes=0,
                estimated_tss=None,
                scale_max=preview_scale_max(None),
                axis_ticks=(),
                axis_labels=(),
                insertion_offsets=tuple(insertion_offsets(None)),
                step_labels={},
                unit_label="",
            )
        ticks = axis_ticks(structure)
        return StructurePreview(
            segments=tuple(expand_segments(structure)),
            groups=tuple(preview_groups(structure)),
            total_duration_minutes=total_duration_minutes(structure),
            estimated_tss=estimate_tss(structure),
            scale_max=preview_scale_max(structure),
            axis_ticks=tuple(ticks),
            axis_labels=tuple(
                format_axis_tick_label(tick, structure.unit, targets) for tick in ticks
            ),
            insertion_offsets=tuple(insertion_offsets(structure)),
            step_labels={
                step.id: _step_label(structure, step, targets)
                for step in structure.steps
            },
            unit_label=f"{UNIT_DISPLAY_LABELS[structure.unit]} • {structure.mode.value}",
        )

    def snapshot(self, structure: Structure | None) -> PlanSnapshot:
        """Duration/TSS snapshot persisted next to the structure on save."""
        return build_plan_snapshot(structure)


def _step_label(
    structure: Structure, step: Step, targets: TrainingTargets | None,
) -> str:
    """Resolved target of a step; pattern steps list one value per item."""
    sources = step.items or (step,)
    return " / ".join(
        format_resolved_target(structure.unit, source, structure.mode, targets)
        for source in sources
    )
