"""Shared test fixtures: default structures, athlete targets, session metrics."""

from __future__ import annotations

import pytest

from workout_engine.models.enums import BlockType, IntensityMode, IntensityUnit
from workout_engine.models.session import SessionMetrics
from workout_engine.models.structure import Item, PatternStep, SingleStep, Structure
from workout_engine.models.training_targets import TrainingTargets, TrainingZone
from workout_engine.workout_builder.templates import create_default_structure


@pytest.fixture
def cycling_structure() -> Structure:
    """Bike template: warmup, active, recovery, 2-step, ramp down, cooldown (50 min)."""
    return create_default_structure("bike")


@pytest.fixture
def rpe_structure() -> Structure:
    """Swim template: one 45-minute RPE 7 active block."""
    return create_default_structure("swim")


@pytest.fixture
def repeats_structure() -> Structure:
    """3 x (2 min @ RPE 8, 1 min @ RPE 3) between an easy warmup and cooldown."""
    return Structure(
        unit=IntensityUnit.RPE,
        mode=IntensityMode.TARGET,
        steps=(
            SingleStep(id="wu", block_type=BlockType.WARMUP, duration_minutes=10, target=3),
            PatternStep(
                id="main",
                block_type=BlockType.REPEATS,
                repeat_count=3,
                items=(
                    Item(id="hard", label="Hard", duration_minutes=2, target=8),
                    Item(id="easy", label="Easy", duration_minutes=1, target=3),
                ),
            ),
            SingleStep(id="cd", block_type=BlockType.COOLDOWN, duration_minutes=5, target=2),
        ),
    )


@pytest.fixture
def athlete_targets() -> TrainingTargets:
    """FTP 200 W, max HR 190, LTHR 170, threshold pace 4:00/km."""
    return TrainingTargets(
        ftp_watts=200,
        max_heart_rate_bpm=190,
        threshold_heart_rate_bpm=170,
        threshold_pace_seconds_per_km=240,
        power_zones=(
            TrainingZone("Z1", 55, 75),
            TrainingZone("Z2", 76, 90),
            TrainingZone("Z3", 91, 105),
            TrainingZone("Z4", 106, 120),
            TrainingZone("Z5", 121, 150),
        ),
        heart_rate_zones=(
            TrainingZone("Z1", 60, 72),
            TrainingZone("Z2", 73, 82),
            TrainingZone("Z3", 83, 89),
            TrainingZone("Z4", 90, 95),
            TrainingZone("Z5", 96, 100),
        ),
    )


@pytest.fixture
def completed_session() -> SessionMetrics:
    """Completed session that hit its plan closely (60/61 min, 100/105 TSS)."""
    return SessionMetrics(
        planned_duration_minutes=60,
        actual_duration_minutes=61,
        planned_tss=100,
        actual_tss=105,
        status="completed",
        linked_activity_id=42,
        completion_source="manual",
    )
