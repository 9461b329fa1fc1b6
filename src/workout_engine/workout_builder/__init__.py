"""Workout builder: templates, authoring edits, validation and target display."""

from workout_engine.workout_builder.editor import StructureEditor
from workout_engine.workout_builder.target_resolver import (
    format_resolved_target,
    resolve_display_target,
)
from workout_engine.workout_builder.templates import (
    create_default_structure,
    create_step,
)
from workout_engine.workout_builder.validation import (
    normalize_structure,
    validate_structure,
)

__all__ = [
    "StructureEditor",
    "create_default_structure",
    "create_step",
    "format_resolved_target",
    "normalize_structure",
    "resolve_display_target",
    "validate_structure",
]
