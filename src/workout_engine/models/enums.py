"""Enumerations and constants for structured workouts.

Enum values are the wire strings stored in a session's planned structure,
so members compare and serialize as plain strings.
"""

from enum import Enum


class IntensityUnit(str, Enum):
    """How a numeric intensity value is interpreted and displayed."""

    FTP_PERCENT = "ftp_percent"
    MAX_HR_PERCENT = "max_hr_percent"
    THRESHOLD_HR_PERCENT = "threshold_hr_percent"
    THRESHOLD_SPEED_PERCENT = "threshold_speed_percent"
    RPE = "rpe"


class IntensityMode(str, Enum):
    """Whether every item in a structure carries a band or a single point."""

    RANGE = "range"
    TARGET = "target"


class BlockType(str, Enum):
    """Authored block types.

    The first four carry their own duration/intensity. The rest carry an
    ordered list of items (see ``PATTERN_BLOCK_TYPES``).
    """

    WARMUP = "warmup"
    ACTIVE = "active"
    RECOVERY = "recovery"
    COOLDOWN = "cooldown"
    TWO_STEP_REPEATS = "two_step_repeats"
    THREE_STEP_REPEATS = "three_step_repeats"
    REPEATS = "repeats"
    RAMP_UP = "ramp_up"
    RAMP_DOWN = "ramp_down"


class SessionStatus(str, Enum):
    """Canonical session status values owned by the surrounding application."""

    PLANNED = "planned"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    PARTIAL = "partial"


class CompletionSource(str, Enum):
    """Who or what marked a session as completed."""

    MANUAL = "manual"
    PROVIDER_AUTO = "provider_auto"


SINGLE_BLOCK_TYPES = frozenset({
    BlockType.WARMUP,
    BlockType.ACTIVE,
    BlockType.RECOVERY,
    BlockType.COOLDOWN,
})

PATTERN_BLOCK_TYPES = frozenset({
    BlockType.TWO_STEP_REPEATS,
    BlockType.THREE_STEP_REPEATS,
    BlockType.REPEATS,
    BlockType.RAMP_UP,
    BlockType.RAMP_DOWN,
})

# Fixed item cardinality per pattern type. REPEATS is variable (>= minimum).
PATTERN_ITEM_COUNTS: dict[BlockType, int] = {
    BlockType.TWO_STEP_REPEATS: 2,
    BlockType.THREE_STEP_REPEATS: 3,
    BlockType.RAMP_UP: 4,
    BlockType.RAMP_DOWN: 4,
}
MIN_REPEAT_ITEMS = 2

PERCENT_UNITS = frozenset({
    IntensityUnit.FTP_PERCENT,
    IntensityUnit.MAX_HR_PERCENT,
    IntensityUnit.THRESHOLD_HR_PERCENT,
    IntensityUnit.THRESHOLD_SPEED_PERCENT,
})

# ---------------------------------------------------------------------------
# Repeat cycles
# ---------------------------------------------------------------------------
MIN_REPEAT_COUNT = 2
DEFAULT_REPEAT_COUNT = 3
MAX_REPEAT_COUNT = 20  # authoring limit
LOADED_REPEAT_COUNT_CEILING = 100  # loaded rows are clamped here, not rejected

# ---------------------------------------------------------------------------
# Intensity bounds
# ---------------------------------------------------------------------------
RPE_MAX = 10.0
PERCENT_MAX = 200.0          # clamp ceiling for previews and TSS
AUTHORING_INTENSITY_MAX = 300.0

# ---------------------------------------------------------------------------
# Durations (minutes)
# ---------------------------------------------------------------------------
MIN_DURATION_MIN = 1
MAX_DURATION_MIN = 600       # authoring limit only
DEFAULT_SINGLE_SPORT_DURATION_MIN = 45

# ---------------------------------------------------------------------------
# Completion reconciliation: actual-vs-planned variance thresholds.
# Policy values; overridable through workout_engine.config.
# ---------------------------------------------------------------------------
DURATION_VARIANCE_THRESHOLD = 0.10
TSS_VARIANCE_THRESHOLD = 0.15

# ---------------------------------------------------------------------------
# Actual metrics estimated from a linked activity
# ---------------------------------------------------------------------------
MAX_ESTIMATED_TSS = 2000
THRESHOLD_HR_FROM_MAX_HR = 0.9  # fallback when no threshold HR is stored

# ---------------------------------------------------------------------------
# Preview axis
# ---------------------------------------------------------------------------
PERCENT_PREVIEW_SCALE_MIN = 120
RPE_PREVIEW_TICKS = (0, 2, 4, 6, 8, 10)
PERCENT_PREVIEW_TICKS = (0, 50, 75, 100)

UNIT_LABELS: dict[IntensityUnit, str] = {
    IntensityUnit.FTP_PERCENT: "% Functional Threshold Power",
    IntensityUnit.MAX_HR_PERCENT: "% Maximum Heart Rate",
    IntensityUnit.THRESHOLD_HR_PERCENT: "% Threshold Heart Rate",
    IntensityUnit.THRESHOLD_SPEED_PERCENT: "% Threshold Speed",
    IntensityUnit.RPE: "RPE",
}

UNIT_DISPLAY_LABELS: dict[IntensityUnit, str] = {
    IntensityUnit.FTP_PERCENT: "FTP%",
    IntensityUnit.MAX_HR_PERCENT: "Max HR%",
    IntensityUnit.THRESHOLD_HR_PERCENT: "THR%",
    IntensityUnit.THRESHOLD_SPEED_PERCENT: "Threshold Speed%",
    IntensityUnit.RPE: "RPE",
}
