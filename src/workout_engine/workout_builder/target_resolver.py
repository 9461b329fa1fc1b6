"""Target resolver: converts relative intensities into athlete-specific values.

Percent-of-threshold values become watts, bpm or pace using the athlete's
stored training targets. Pace is inversely proportional to speed: 110 % of
threshold speed is a *faster* (lower s/km) pace, so the threshold pace is
divided by the fraction, never multiplied.

Nothing here raises. When a conversion is impossible (no targets, missing
anchor, zero percent for pace) the resolver returns None and the display
helpers fall back to the raw relative number.
"""

from __future__ import annotations

from workout_engine.math.rounding import format_number, round_half_up, round_to_tenth
from workout_engine.math.segments import IntensitySource, resolve_intensity_bounds
from workout_engine.models.enums import IntensityMode, IntensityUnit
from workout_engine.models.training_targets import TrainingTargets, TrainingZone


def resolve_display_target(
    unit: IntensityUnit,
    value: float,
    targets: TrainingTargets | None,
) -> str | None:
    """Convert one intensity bound into a display value.

    Args:
        unit: Unit the value is expressed in.
        value: RPE (0-10) or percent of the unit's anchor.
        targets: The athlete's training targets, if any.

    Returns:
        ``"7.5"`` for RPE, ``"150W"``, ``"162 bpm"`` or ``"4:00/km"`` for
        percent units, or None when the value cannot be resolved.
    """
    if unit == IntensityUnit.RPE:
        return format_number(round_to_tenth(value))

    if targets is None:
        return None

    percent = max(0.0, value)

    if unit == IntensityUnit.FTP_PERCENT:
        watts = _scaled(percent, targets.ftp_watts)
        return None if watts is None else f"{watts}W"

    if unit == IntensityUnit.MAX_HR_PERCENT:
        bpm = _scaled(percent, targets.max_heart_rate_bpm)
        return None if bpm is None else f"{bpm} bpm"

    if unit == IntensityUnit.THRESHOLD_HR_PERCENT:
        bpm = _scaled(percent, targets.threshold_heart_rate_bpm)
        return None if bpm is None else f"{bpm} bpm"

    if unit == IntensityUnit.THRESHOLD_SPEED_PERCENT:
        pace = pace_for_speed_percent(percent, targets.threshold_pace_seconds_per_km)
        return None if pace is None else f"{format_pace(pace)}/km"

    return None


def pace_for_speed_percent(
    percent: float, threshold_pace_s_per_km: float | None,
) -> int | None:
    """Pace (whole s/km) for a percent of threshold speed.

    100 % of a 240 s/km threshold is 240 s/km; 50 % is 480 s/km.
    """
    if threshold_pace_s_per_km is None or threshold_pace_s_per_km <= 0:
        return None
    if percent <= 0:
        return None
    return round_half_up(threshold_pace_s_per_km * (100 / percent))


def format_pace(total_seconds: float) -> str:
    """Seconds to ``M:SS``. e.g. 305 -> '5:05'."""
    safe = max(0, int(total_seconds))
    return f"{safe // 60}:{safe % 60:02d}"


def format_duration_minutes(minutes: float) -> str:
    """Minutes to a compact label. e.g. 65 -> '1h 5m', 60 -> '1h', 8 -> '8m'."""
    safe = max(0, round_half_up(minutes))
    hours, mins = divmod(safe, 60)
    if hours > 0 and mins > 0:
        return f"{hours}h {mins}m"
    if hours > 0:
        return f"{hours}h"
    return f"{mins}m"


def format_raw_intensity(value: float, unit: IntensityUnit) -> str:
    """Fallback display of an unresolved value (``72%`` or ``7``)."""
    if unit == IntensityUnit.RPE:
        return format_number(value)
    return f"{format_number(value)}%"


def format_resolved_target(
    unit: IntensityUnit,
    source: IntensitySource,
    mode: IntensityMode,
    targets: TrainingTargets | None,
) -> str:
    """Display label for a step or item under the structure's mode.

    Range mode shows ``"low - high"`` when both bounds resolve, otherwise the
    raw band (``"60-70%"``). Target mode shows the single resolved value or
    the raw number.
    """
    low, high = resolve_intensity_bounds(source, mode)

    if mode == IntensityMode.TARGET:
        converted = resolve_display_target(unit, high, targets)
        return converted if converted is not None else format_raw_intensity(high, unit)

    low_converted = resolve_display_target(unit, low, targets)
    high_converted = resolve_display_target(unit, high, targets)
    if low_converted is None or high_converted is None:
        band = f"{format_number(low)}-{format_number(high)}"
        return band if unit == IntensityUnit.RPE else f"{band}%"
    return f"{low_converted} - {high_converted}"


def format_axis_tick_label(
    value: float, unit: IntensityUnit, targets: TrainingTargets | None,
) -> str:
    """Label for a preview axis tick: ``RPE 4``, ``75%`` or ``75% · 150W``."""
    if unit == IntensityUnit.RPE:
        return f"RPE {format_number(value)}"
    converted = resolve_display_target(unit, value, targets)
    if converted is None:
        return f"{format_number(value)}%"
    return f"{format_number(value)}% · {converted}"


def zone_label_for(
    unit: IntensityUnit, percent: float, targets: TrainingTargets | None,
) -> str | None:
    """Label of the athlete zone containing *percent*, if the unit has zones.

    FTP percentages look up power zones; heart-rate percentages look up
    heart-rate zones. Other units have no zone model.
    """
    if targets is None:
        return None
    if unit == IntensityUnit.FTP_PERCENT:
        zones = targets.power_zones
    elif unit in (IntensityUnit.MAX_HR_PERCENT, IntensityUnit.THRESHOLD_HR_PERCENT):
        zones = targets.heart_rate_zones
    else:
        return None
    zone = _find_zone(zones, percent)
    return None if zone is None else zone.label


def _scaled(percent: float, anchor: int | None) -> int | None:
    if anchor is None or anchor <= 0:
        return None
    return round_half_up(percent / 100 * anchor)


def _find_zone(
    zones: tuple[TrainingZone, ...], percent: float,
) -> TrainingZone | None:
    """First zone whose [min, max] band contains the percent.

    Zone bands are authored as whole numbers (55-75, 76-90), so a value in
    the gap between two bands belongs to the lower one.
    """
    for index, zone in enumerate(zones):
        upper = zone.max
        if index + 1 < len(zones):
            upper = max(upper, zones[index + 1].min)
        if zone.min <= percent < upper or percent == zone.max:
            return zone
    return None
