"""Athlete training targets: read-only physiological anchors from the profile."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TrainingZone:
    """A labelled zone expressed as a percent band of its anchor.

    Power zones are percent of FTP, heart-rate zones percent of the
    heart-rate anchor.
    """

    label: str
    min: float
    max: float


@dataclass(frozen=True)
class TrainingTargets:
    """Immutable snapshot of an athlete's stored training targets.

    Every field is independently optional; an athlete who has not entered
    a value simply gets raw relative numbers in the display.
    """

    ftp_watts: int | None = None
    max_heart_rate_bpm: int | None = None
    threshold_heart_rate_bpm: int | None = None
    threshold_pace_seconds_per_km: int | None = None
    power_zones: tuple[TrainingZone, ...] = field(default_factory=tuple)
    heart_rate_zones: tuple[TrainingZone, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: dict | None) -> TrainingTargets | None:
        """Build from the profile's snake_case record; ``None`` passes through."""
        if data is None:
            return None
        return cls(
            ftp_watts=_positive_int(data.get("ftp_watts")),
            max_heart_rate_bpm=_positive_int(data.get("max_heart_rate_bpm")),
            threshold_heart_rate_bpm=_positive_int(data.get("threshold_heart_rate_bpm")),
            threshold_pace_seconds_per_km=_positive_int(
                data.get("threshold_pace_seconds_per_km"),
            ),
            power_zones=_zones(data.get("power_zones")),
            heart_rate_zones=_zones(data.get("heart_rate_zones")),
        )


def _positive_int(value) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = int(round(float(value)))
    except (TypeError, ValueError):
        return None
    return number if number > 0 else None


def _zones(raw) -> tuple[TrainingZone, ...]:
    if not isinstance(raw, (list, tuple)):
        return ()
    zones: list[TrainingZone] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        try:
            zones.append(TrainingZone(
                label=str(entry.get("label", "")),
                min=float(entry["min"]),
                max=float(entry["max"]),
            ))
        except (KeyError, TypeError, ValueError):
            continue
    return tuple(zones)
