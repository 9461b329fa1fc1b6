"""Actual session metrics: what was really done, taken from the session or its activity.

A value recorded on the session wins. Otherwise the linked activity is
consulted: its duration for minutes, and for TSS the provider's own load
score, then a power estimate, then a heart-rate estimate.
"""

from __future__ import annotations

import dataclasses
import logging

from workout_engine.math.rounding import round_half_up
from workout_engine.math.segments import as_number
from workout_engine.models.activity import ActivitySummary
from workout_engine.models.enums import MAX_ESTIMATED_TSS, THRESHOLD_HR_FROM_MAX_HR
from workout_engine.models.session import SessionMetrics
from workout_engine.models.training_targets import TrainingTargets

logger = logging.getLogger(__name__)


def normalize_estimate(value: float) -> int | None:
    """Round an estimated TSS half up and cap it; negative estimates are dropped."""
    if value < 0:
        return None
    return min(round_half_up(value), MAX_ESTIMATED_TSS)


def resolve_activity_duration_minutes(activity: ActivitySummary | None) -> int | None:
    """Whole minutes of an activity (at least one), or None without a duration."""
    if activity is None:
        return None
    seconds = as_number(activity.duration_seconds)
    if seconds is None or seconds <= 0:
        return None
    return max(1, round_half_up(seconds / 60))


def threshold_heart_rate(targets: TrainingTargets | None) -> int | None:
    """Stored threshold HR, else 90 % of max HR."""
    if targets is None:
        return None
    if targets.threshold_heart_rate_bpm and targets.threshold_heart_rate_bpm > 0:
        return targets.threshold_heart_rate_bpm
    if targets.max_heart_rate_bpm and targets.max_heart_rate_bpm > 0:
        return round_half_up(targets.max_heart_rate_bpm * THRESHOLD_HR_FROM_MAX_HR)
    return None


def estimate_power_tss(
    activity: ActivitySummary, targets: TrainingTargets | None,
) -> int | None:
    """TSS from normalized power: ``seconds * NP * IF / (FTP * 3600) * 100``."""
    seconds = as_number(activity.duration_seconds)
    power = activity.power_watts
    if seconds is None or seconds <= 0 or power is None or power <= 0:
        return None
    ftp = targets.ftp_watts if targets is not None else None
    if not ftp or ftp <= 0:
        return None
    intensity_factor = power / ftp
    return normalize_estimate(seconds * power * intensity_factor / (ftp * 3600) * 100)


def estimate_heart_rate_tss(
    activity: ActivitySummary, targets: TrainingTargets | None,
) -> int | None:
    """TSS from average heart rate: ``hours * (avgHR / thresholdHR)^2 * 100``."""
    seconds = as_number(activity.duration_seconds)
    if seconds is None or seconds <= 0:
        return None
    threshold = threshold_heart_rate(targets)
    if threshold is None:
        return None
    heart_rate = activity.average_heart_rate_bpm
    if heart_rate is None or heart_rate <= 0:
        return None
    return normalize_estimate(seconds / 3600 * (heart_rate / threshold) ** 2 * 100)


def resolve_activity_tss(
    activity: ActivitySummary, targets: TrainingTargets | None = None,
) -> int | None:
    """Provider load score, else a power estimate, else a heart-rate estimate."""
    if activity.provider_tss is not None:
        return activity.provider_tss

    power_tss = estimate_power_tss(activity, targets)
    if power_tss is not None:
        logger.debug("Estimated TSS %d from power for activity %s", power_tss, activity.id)
        return power_tss

    heart_rate_tss = estimate_heart_rate_tss(activity, targets)
    if heart_rate_tss is not None:
        logger.debug(
            "Estimated TSS %d from heart rate for activity %s", heart_rate_tss, activity.id,
        )
    return heart_rate_tss


def resolve_actual_duration(
    session: SessionMetrics, activity: ActivitySummary | None = None,
) -> int | None:
    if session.actual_duration_minutes is not None and session.actual_duration_minutes > 0:
        return session.actual_duration_minutes
    return resolve_activity_duration_minutes(activity)


def resolve_actual_tss(
    session: SessionMetrics,
    activity: ActivitySummary | None = None,
    targets: TrainingTargets | None = None,
) -> int | None:
    if session.actual_tss is not None and session.actual_tss >= 0:
        return session.actual_tss
    if activity is None:
        return None
    return resolve_activity_tss(activity, targets)


def with_resolved_actuals(
    session: SessionMetrics,
    activity: ActivitySummary | None = None,
    targets: TrainingTargets | None = None,
) -> SessionMetrics:
    """Copy of *session* whose actual duration and TSS are filled from *activity*."""
    return dataclasses.replace(
        session,
        actual_duration_minutes=resolve_actual_duration(session, activity),
        actual_tss=resolve_actual_tss(session, activity, targets),
    )
