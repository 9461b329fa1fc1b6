"""Tests for the dashboard helpers that sit between Streamlit and the engine."""

from __future__ import annotations

import json
from pathlib import Path

from helpers import bar_height_percent, load_targets, save_targets, step_rows

from workout_engine.engine import WorkoutEngine
from workout_engine.models.structure import Structure
from workout_engine.models.training_targets import TrainingTargets


class TestStepRows:
    def test_one_row_per_step(
        self, cycling_structure: Structure, athlete_targets: TrainingTargets,
    ) -> None:
        preview = WorkoutEngine().preview(cycling_structure, athlete_targets)
        rows = step_rows(cycling_structure, preview, athlete_targets)
        assert [r["block"] for r in rows] == [
            "Warmup", "Active", "Recovery", "Two Step Repeats", "Ramp Down", "Cool Down",
        ]
        assert rows[0]["duration"] == "12m"
        assert rows[0]["zone"] == "Z1"
        assert rows[3]["pattern"] == "2-step"


class TestBarHeight:
    def test_clamped_to_scale(self) -> None:
        assert bar_height_percent(60, 120) == 50
        assert bar_height_percent(300, 120) == 100
        assert bar_height_percent(10, 0) == 0


class TestTargetProfiles:
    def test_save_and_load(self, tmp_path: Path) -> None:
        path = save_targets(tmp_path / "profiles" / "me.json", {"ftp_watts": 250})
        assert json.loads(path.read_text()) == {"ftp_watts": 250}
        assert load_targets(path).ftp_watts == 250

    def test_missing_profile(self, tmp_path: Path) -> None:
        assert load_targets(tmp_path / "missing.json") is None
