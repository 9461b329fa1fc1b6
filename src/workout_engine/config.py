"""Environment-variable-based configuration for the workout engine."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from workout_engine.models.enums import (
    DURATION_VARIANCE_THRESHOLD,
    TSS_VARIANCE_THRESHOLD,
)

logger = logging.getLogger(__name__)


def _fraction_env(name: str, default: float) -> float:
    """Read a 0-1 fraction from the environment, falling back on bad values."""
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number", name, raw)
        return default
    if not 0 < value < 1:
        logger.warning("Ignoring %s=%r: must be between 0 and 1", name, raw)
        return default
    return value


DURATION_VARIANCE: float = _fraction_env(
    "WORKOUT_ENGINE_DURATION_VARIANCE", DURATION_VARIANCE_THRESHOLD,
)
TSS_VARIANCE: float = _fraction_env(
    "WORKOUT_ENGINE_TSS_VARIANCE", TSS_VARIANCE_THRESHOLD,
)
PREVIEW_PROFILE_PATH: Path = Path(
    os.environ.get("WORKOUT_ENGINE_PREVIEW_PROFILE", "streamlit_app/profiles/targets.json")
)
