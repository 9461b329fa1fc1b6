"""Completion reconciliation: classify a session against its plan.

Pure predicates over SessionMetrics. The session's canonical status is owned
by the application; nothing here stores state.

A completed session is *adjusted* when its actual duration differs from the
plan by at least 10 %, or its actual TSS by at least 15 %. A variance check
is skipped when either side is missing or nothing was planned.
``reconcile`` fills missing actuals from the linked activity before comparing.
"""

from __future__ import annotations

from dataclasses import dataclass

from workout_engine import config
from workout_engine.actual_metrics import with_resolved_actuals
from workout_engine.models.activity import ActivitySummary
from workout_engine.models.enums import CompletionSource, SessionStatus
from workout_engine.models.session import SessionMetrics
from workout_engine.models.training_targets import TrainingTargets


@dataclass(frozen=True)
class Reconciliation:
    """Full classification of one session, as shown on a calendar card.

    ``label`` is the single badge to display: ``planned``, ``ready``,
    ``completed``, ``auto_completed``, ``adjusted``, ``skipped`` or
    ``partial``.
    """

    completed: bool
    ready_to_complete: bool
    adjusted: bool
    duration_variance: float | None
    tss_variance: float | None
    label: str
    display_duration_minutes: int | None
    display_tss: int | None


def is_completed(session: SessionMetrics) -> bool:
    return session.is_completed_flag or session.status == SessionStatus.COMPLETED.value


def is_ready_to_complete(session: SessionMetrics) -> bool:
    """A linked activity exists and the session is not completed yet."""
    return session.linked_activity_id is not None and not is_completed(session)


def variance(planned: float | None, actual: float | None) -> float | None:
    """Relative actual-vs-planned difference, or None when it cannot be compared."""
    if planned is None or actual is None or planned <= 0:
        return None
    return abs(actual - planned) / planned


def exceeds_variance_threshold(
    planned: float | None, actual: float | None, threshold: float,
) -> bool:
    relative = variance(planned, actual)
    return relative is not None and relative >= threshold


def is_adjusted(
    session: SessionMetrics,
    duration_threshold: float | None = None,
    tss_threshold: float | None = None,
) -> bool:
    """True when a completed session strayed from its plan on either metric.

    Args:
        session: The session to classify.
        duration_threshold: Override for the duration variance threshold.
        tss_threshold: Override for the TSS variance threshold.
    """
    if not is_completed(session):
        return False
    if duration_threshold is None:
        duration_threshold = config.DURATION_VARIANCE
    if tss_threshold is None:
        tss_threshold = config.TSS_VARIANCE

    has_duration_variance = exceeds_variance_threshold(
        session.planned_duration_minutes,
        session.actual_duration_minutes,
        duration_threshold,
    )
    has_tss_variance = exceeds_variance_threshold(
        session.planned_tss, session.actual_tss, tss_threshold,
    )
    return has_duration_variance or has_tss_variance


def reconcile(
    session: SessionMetrics,
    activity: ActivitySummary | None = None,
    targets: TrainingTargets | None = None,
) -> Reconciliation:
    """Classify a session and pick the values and badge to display.

    Actual duration and TSS missing on the session are resolved from the
    linked *activity* (see ``actual_metrics``) before anything is compared.

    Args:
        session: The session to classify.
        activity: Summary of the linked activity, when one is loaded.
        targets: Athlete targets used to estimate TSS from power or heart rate.
    """
    session = with_resolved_actuals(session, activity, targets)
    completed = is_completed(session)
    ready = is_ready_to_complete(session)
    adjusted = is_adjusted(session)

    if session.status == SessionStatus.SKIPPED.value:
        label = "skipped"
    elif session.status == SessionStatus.PARTIAL.value:
        label = "partial"
    elif adjusted:
        label = "adjusted"
    elif completed and session.completion_source == CompletionSource.PROVIDER_AUTO.value:
        label = "auto_completed"
    elif completed:
        label = "completed"
    elif ready:
        label = "ready"
    else:
        label = "planned"

    if completed and session.actual_duration_minutes is not None:
        display_duration = session.actual_duration_minutes
    else:
        display_duration = session.planned_duration_minutes

    return Reconciliation(
        completed=completed,
        ready_to_complete=ready,
        adjusted=adjusted,
        duration_variance=variance(
            session.planned_duration_minutes, session.actual_duration_minutes,
        ),
        tss_variance=variance(session.planned_tss, session.actual_tss),
        label=label,
        display_duration_minutes=display_duration,
        display_tss=session.actual_tss if completed else session.planned_tss,
    )
