"""Data models for the workout engine."""

from workout_engine.models.enums import (
    BlockType,
    CompletionSource,
    IntensityMode,
    IntensityUnit,
    SessionStatus,
)
from workout_engine.models.session import SessionMetrics
from workout_engine.models.structure import (
    Item,
    PatternStep,
    PreviewGroup,
    Segment,
    SingleStep,
    Step,
    Structure,
)
from workout_engine.models.training_targets import TrainingTargets, TrainingZone

__all__ = [
    "BlockType",
    "CompletionSource",
    "IntensityMode",
    "IntensityUnit",
    "Item",
    "PatternStep",
    "PreviewGroup",
    "Segment",
    "SessionMetrics",
    "SessionStatus",
    "SingleStep",
    "Step",
    "Structure",
    "TrainingTargets",
    "TrainingZone",
]
