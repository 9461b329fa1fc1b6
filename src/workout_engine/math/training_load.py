"""Structure aggregates: planned duration, estimated TSS and preview scale.

TSS heuristic (kept identical to every historically stored estimate):

    IF      = midpoint / 10   (RPE)   or   midpoint / 100   (percent units)
    TSS_seg = (max(1, duration_min) / 60) x IF^2 x 100
    TSS     = max(0, round_half_up(sum of TSS_seg))

Per-step subtotals are summed first and then added in step order so the
floating-point result matches stored values exactly.
"""

from __future__ import annotations

import math

import numpy as np
import pandas as pd

from workout_engine.math.rounding import round_half_up
from workout_engine.math.segments import expand_segments, expand_step, preview_groups
from workout_engine.models.enums import (
    PERCENT_PREVIEW_SCALE_MIN,
    PERCENT_PREVIEW_TICKS,
    RPE_MAX,
    RPE_PREVIEW_TICKS,
    IntensityUnit,
)
from workout_engine.models.structure import Segment, Structure

_FRAME_COLUMNS = [
    "step_id",
    "block_type",
    "cycle_index",
    "item_index",
    "duration_minutes",
    "start_minute",
    "end_minute",
    "intensity_min",
    "intensity_max",
    "midpoint",
    "tss",
]


def intensity_factor(midpoint: float, unit: IntensityUnit) -> float:
    """Normalise an intensity midpoint to a ~0-1 relative scale."""
    if unit == IntensityUnit.RPE:
        return midpoint / RPE_MAX
    return midpoint / 100


def segment_tss(segment: Segment, unit: IntensityUnit) -> float:
    """Unrounded TSS contribution of one segment."""
    factor = intensity_factor(segment.midpoint, unit)
    duration_hours = max(1, segment.duration_minutes) / 60
    return duration_hours * factor * factor * 100


def total_duration_minutes(structure: Structure | None) -> int:
    """Sum of every expanded segment's duration ("plan minutes").

    Independent of the session's separately entered planned duration; the
    engine never overwrites that field.
    """
    if structure is None:
        return 0
    return sum(max(1, s.duration_minutes) for s in expand_segments(structure))


def estimate_tss(structure: Structure | None) -> int | None:
    """Estimated training stress of a structure, or None without a structure.

    Deterministic: the same structure always yields the same integer.
    """
    if structure is None:
        return None
    total = 0.0
    for step in structure.steps:
        step_total = 0.0
        for segment in expand_step(step, structure.mode, structure.unit):
            step_total += segment_tss(segment, structure.unit)
        total += step_total
    return max(0, round_half_up(total))


def preview_scale_max(structure: Structure | None) -> int:
    """Upper bound of the preview's intensity axis."""
    if structure is None:
        return PERCENT_PREVIEW_SCALE_MIN
    max_intensity = max(
        (s.intensity_max for s in expand_segments(structure)), default=0.0,
    )
    if structure.unit == IntensityUnit.RPE:
        return max(int(RPE_MAX), math.ceil(max_intensity))
    return max(PERCENT_PREVIEW_SCALE_MIN, math.ceil((max_intensity + 5) / 5) * 5)


def axis_ticks(structure: Structure | None) -> list[int]:
    """Sorted, de-duplicated axis ticks that fit under the preview scale."""
    if structure is None:
        return []
    scale = preview_scale_max(structure)
    if structure.unit == IntensityUnit.RPE:
        defaults = RPE_PREVIEW_TICKS
    else:
        defaults = PERCENT_PREVIEW_TICKS + (scale,)
    return sorted(tick for tick in set(defaults) if tick <= scale)


def insertion_offsets(structure: Structure | None) -> list[float]:
    """Step boundaries as percentages of the total duration, starting at 0."""
    groups = preview_groups(structure)
    durations = np.array([g.total_duration_minutes for g in groups], dtype=np.float64)
    total = float(durations.sum()) if groups else 0.0
    if not groups or total <= 0:
        return [0.0]
    offsets = np.cumsum(durations) / total * 100
    return [0.0] + [float(v) for v in offsets]


def segments_frame(structure: Structure | None) -> pd.DataFrame:
    """Expanded segments as a DataFrame, one row per segment.

    Adds the start/end minute of each segment on the workout timeline and
    its unrounded TSS contribution. Empty structures give an empty frame
    with the same columns.
    """
    segments = expand_segments(structure)
    if not segments:
        return pd.DataFrame(columns=_FRAME_COLUMNS)

    unit = structure.unit
    frame = pd.DataFrame({
        "step_id": [s.step_id for s in segments],
        "block_type": [s.block_type.value for s in segments],
        "cycle_index": [s.cycle_index for s in segments],
        "item_index": [s.item_index for s in segments],
        "duration_minutes": [s.duration_minutes for s in segments],
        "intensity_min": [s.intensity_min for s in segments],
        "intensity_max": [s.intensity_max for s in segments],
        "midpoint": [s.midpoint for s in segments],
        "tss": [segment_tss(s, unit) for s in segments],
    })
    frame["end_minute"] = frame["duration_minutes"].cumsum()
    frame["start_minute"] = frame["end_minute"] - frame["duration_minutes"]
    return frame[_FRAME_COLUMNS]
