"""Exception hierarchy for the workout engine.

Computation never raises on loaded data; these are reserved for programmer
errors and for the authoring boundary where a structure is first accepted.
"""

from __future__ import annotations


class WorkoutEngineError(Exception):
    """Base exception for all workout_engine errors."""


class StructureError(WorkoutEngineError):
    """A step or structure was built with an impossible shape."""


class UnknownStepError(StructureError):
    """An editor operation referenced a step id that is not in the arena."""

    def __init__(self, step_id: str) -> None:
        super().__init__(f"Unknown step id: {step_id!r}")
        self.step_id = step_id


class StructureValidationError(StructureError):
    """Authoring validation failed.

    ``errors`` maps a dotted field path (``steps.2.items.1.range_max``) to
    the first message reported for it.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        first = next(iter(errors.values()), "Invalid workout structure.")
        super().__init__(first)
        self.errors = dict(errors)
