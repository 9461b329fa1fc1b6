"""Utility helpers bridging the Streamlit UI and the workout engine.

Pure functions for formatting preview rows, choosing block colours and
persisting athlete target profiles.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from workout_engine.engine import StructurePreview
from workout_engine.models.enums import BlockType, IntensityUnit
from workout_engine.models.structure import Structure
from workout_engine.models.training_targets import TrainingTargets
from workout_engine.workout_builder.catalog import block_label
from workout_engine.workout_builder.target_resolver import (
    format_duration_minutes,
    zone_label_for,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Color maps
# ---------------------------------------------------------------------------

BLOCK_COLORS: dict[BlockType, str] = {
    BlockType.WARMUP: "#FF8C00",              # orange
    BlockType.ACTIVE: "#2ECC71",              # green
    BlockType.RECOVERY: "#AED6F1",            # pastel blue
    BlockType.COOLDOWN: "#4A90D9",            # blue
    BlockType.TWO_STEP_REPEATS: "#D7BDE2",    # lavender
    BlockType.THREE_STEP_REPEATS: "#BB8FCE",
    BlockType.REPEATS: "#8E44AD",
    BlockType.RAMP_UP: "#F5B041",
    BlockType.RAMP_DOWN: "#F9E79F",
}

SPORTS = ("bike", "run", "swim", "strength", "other")


# ---------------------------------------------------------------------------
# Preview rows
# ---------------------------------------------------------------------------


def step_rows(
    structure: Structure,
    preview: StructurePreview,
    targets: TrainingTargets | None,
) -> list[dict]:
    """One display row per authored step, in order."""
    rows = []
    for group in preview.groups:
        step = structure.steps[group.step_index]
        peak = max((s.intensity_max for s in group.segments), default=0.0)
        rows.append({
            "block": block_label(step.block_type),
            "pattern": group.pattern_label or "",
            "duration": format_duration_minutes(group.total_duration_minutes),
            "target": preview.step_labels[step.id],
            "zone": zone_label_for(structure.unit, peak, targets) or "",
            "color": BLOCK_COLORS.get(step.block_type, "#CCCCCC"),
        })
    return rows


def bar_height_percent(intensity: float, scale_max: int) -> float:
    """Bar height of a segment relative to the preview scale."""
    if scale_max <= 0:
        return 0.0
    return max(0.0, min(100.0, intensity / scale_max * 100))


def unit_options() -> list[str]:
    return [unit.value for unit in IntensityUnit]


# ---------------------------------------------------------------------------
# Profile persistence
# ---------------------------------------------------------------------------


def load_targets(path: Path) -> TrainingTargets | None:
    """Load an athlete's training targets from a JSON profile file."""
    if not path.exists():
        logger.info("No target profile at %s", path)
        return None
    with open(path) as f:
        data = json.load(f)
    return TrainingTargets.from_dict(data)


def save_targets(path: Path, data: dict) -> Path:
    """Save a training-target profile dict as JSON. Returns the file path."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
    return path
