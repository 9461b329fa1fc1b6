"""Serialization module: persisted structure JSON and plan snapshots."""

from workout_engine.serialization.json_codec import (
    PlanSnapshot,
    build_plan_snapshot,
    plan_fields,
    structure_from_dict,
    structure_from_json,
    structure_to_dict,
    to_json_string,
)

__all__ = [
    "PlanSnapshot",
    "build_plan_snapshot",
    "plan_fields",
    "structure_from_dict",
    "structure_from_json",
    "structure_to_dict",
    "to_json_string",
]
