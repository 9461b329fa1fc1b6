"""Activity summary: the recorded metrics a session's linked activity offers.

Provider payloads name the same metric differently. The key lists below are
tried in order and the first usable value wins.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from workout_engine.math.rounding import round_half_up
from workout_engine.math.segments import as_number

# Provider load scores accepted as the activity's TSS, in order of preference.
PROVIDER_TSS_KEYS = ("tss", "suffer_score", "relative_effort", "training_load")
POWER_KEYS = ("weighted_average_watts", "normalized_watts", "average_watts")
HEART_RATE_KEYS = ("average_heartrate", "average_heart_rate", "average_hr")


@dataclass(frozen=True)
class ActivitySummary:
    """Recorded metrics of one completed activity.

    ``power_watts`` is the normalized (weighted) power when the provider
    reports it, else the average power.
    """

    duration_seconds: float | None = None
    provider_tss: int | None = None
    power_watts: float | None = None
    average_heart_rate_bpm: float | None = None
    id: int | str | None = None

    @classmethod
    def from_payload(
        cls,
        duration_seconds: Any,
        raw_payload: Any,
        activity_id: int | str | None = None,
    ) -> ActivitySummary:
        """Build from a stored activity row and its raw provider payload."""
        payload = raw_payload if isinstance(raw_payload, dict) else {}
        return cls(
            duration_seconds=as_number(duration_seconds),
            provider_tss=_provider_tss(payload),
            power_watts=_first_number(payload, POWER_KEYS),
            average_heart_rate_bpm=_first_number(payload, HEART_RATE_KEYS),
            id=activity_id,
        )

    @classmethod
    def from_dict(cls, data: dict) -> ActivitySummary:
        return cls.from_payload(
            data.get("duration_seconds"), data.get("raw_payload"), data.get("id"),
        )


def _provider_tss(payload: dict) -> int | None:
    for key in PROVIDER_TSS_KEYS:
        number = as_number(payload.get(key))
        if number is None:
            continue
        # Half away from zero, so -0.5 counts as negative.
        rounded = round_half_up(abs(number))
        if number < 0 and rounded > 0:
            continue
        return rounded
    return None


def _first_number(payload: dict, keys: tuple[str, ...]) -> float | None:
    for key in keys:
        number = as_number(payload.get(key))
        if number is not None:
            return number
    return None
