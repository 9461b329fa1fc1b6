"""Session metrics: the planned-vs-actual view the reconciler classifies."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionMetrics:
    """Planned and recorded metrics of one training session.

    ``status`` is the canonical status string owned by the application
    (``planned``, ``completed``, ``skipped``, ``partial``).
    """

    planned_duration_minutes: int | None = None
    actual_duration_minutes: int | None = None
    planned_tss: int | None = None
    actual_tss: int | None = None
    status: str = "planned"
    linked_activity_id: int | str | None = None
    is_completed_flag: bool = False
    completion_source: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> SessionMetrics:
        """Build from the session resource payload (snake_case keys)."""
        return cls(
            planned_duration_minutes=data.get(
                "planned_duration_minutes", data.get("duration_minutes"),
            ),
            actual_duration_minutes=data.get("actual_duration_minutes"),
            planned_tss=data.get("planned_tss"),
            actual_tss=data.get("actual_tss"),
            status=str(data.get("status") or "planned"),
            linked_activity_id=data.get("linked_activity_id"),
            is_completed_flag=bool(data.get("is_completed", False)),
            completion_source=data.get("completion_source"),
        )
