"""Tests for the target resolver: watts, bpm, pace and fallbacks."""

from __future__ import annotations

import pytest

from workout_engine.models.enums import IntensityMode, IntensityUnit
from workout_engine.models.structure import Item
from workout_engine.models.training_targets import TrainingTargets
from workout_engine.workout_builder.target_resolver import (
    format_axis_tick_label,
    format_duration_minutes,
    format_pace,
    format_resolved_target,
    pace_for_speed_percent,
    resolve_display_target,
    zone_label_for,
)


class TestResolveDisplayTarget:
    def test_speed_percent_is_inverse_to_pace(
        self, athlete_targets: TrainingTargets,
    ) -> None:
        unit = IntensityUnit.THRESHOLD_SPEED_PERCENT
        assert resolve_display_target(unit, 100, athlete_targets) == "4:00/km"
        assert resolve_display_target(unit, 50, athlete_targets) == "8:00/km"
        assert resolve_display_target(unit, 110, athlete_targets) == "3:38/km"

    def test_ftp_percent_to_watts(self) -> None:
        targets = TrainingTargets(ftp_watts=200)
        assert resolve_display_target(IntensityUnit.FTP_PERCENT, 75, targets) == "150W"

    def test_heart_rate_units(self, athlete_targets: TrainingTargets) -> None:
        assert resolve_display_target(
            IntensityUnit.MAX_HR_PERCENT, 90, athlete_targets,
        ) == "171 bpm"
        assert resolve_display_target(
            IntensityUnit.THRESHOLD_HR_PERCENT, 100, athlete_targets,
        ) == "170 bpm"

    def test_rpe_rounds_to_tenth(self) -> None:
        assert resolve_display_target(IntensityUnit.RPE, 7.25, None) == "7.3"
        assert resolve_display_target(IntensityUnit.RPE, 7, None) == "7"

    def test_missing_targets_is_none(self) -> None:
        assert resolve_display_target(IntensityUnit.FTP_PERCENT, 75, None) is None

    def test_missing_anchor_is_none(self) -> None:
        targets = TrainingTargets(max_heart_rate_bpm=190)
        assert resolve_display_target(IntensityUnit.FTP_PERCENT, 75, targets) is None
        assert resolve_display_target(
            IntensityUnit.THRESHOLD_SPEED_PERCENT, 100, targets,
        ) is None

    def test_zero_speed_percent_has_no_pace(self, athlete_targets: TrainingTargets) -> None:
        assert resolve_display_target(
            IntensityUnit.THRESHOLD_SPEED_PERCENT, 0, athlete_targets,
        ) is None
        assert pace_for_speed_percent(0, 240) is None


class TestFormatResolvedTarget:
    def test_range_with_targets(self, athlete_targets: TrainingTargets) -> None:
        item = Item(id="i", range_min=75, range_max=90)
        label = format_resolved_target(
            IntensityUnit.FTP_PERCENT, item, IntensityMode.RANGE, athlete_targets,
        )
        assert label == "150W - 180W"

    def test_range_without_targets_shows_raw_band(self) -> None:
        item = Item(id="i", range_min=60, range_max=70)
        label = format_resolved_target(
            IntensityUnit.FTP_PERCENT, item, IntensityMode.RANGE, None,
        )
        assert label == "60-70%"

    def test_target_without_targets_shows_raw_percent(self) -> None:
        item = Item(id="i", target=72)
        label = format_resolved_target(
            IntensityUnit.MAX_HR_PERCENT, item, IntensityMode.TARGET, None,
        )
        assert label == "72%"

    def test_rpe_range(self) -> None:
        item = Item(id="i", range_min=2, range_max=4)
        label = format_resolved_target(IntensityUnit.RPE, item, IntensityMode.RANGE, None)
        assert label == "2 - 4"


class TestAxisAndZones:
    def test_axis_labels(self, athlete_targets: TrainingTargets) -> None:
        assert format_axis_tick_label(4, IntensityUnit.RPE, None) == "RPE 4"
        assert format_axis_tick_label(75, IntensityUnit.FTP_PERCENT, None) == "75%"
        assert format_axis_tick_label(
            75, IntensityUnit.FTP_PERCENT, athlete_targets,
        ) == "75% · 150W"

    @pytest.mark.parametrize("percent, label", [
        (55, "Z1"),
        (75.5, "Z1"),
        (80, "Z2"),
        (150, "Z5"),
        (160, None),
        (40, None),
    ])
    def test_power_zone_lookup(
        self, athlete_targets: TrainingTargets, percent: float, label: str | None,
    ) -> None:
        assert zone_label_for(IntensityUnit.FTP_PERCENT, percent, athlete_targets) == label

    def test_heart_rate_zone_lookup(self, athlete_targets: TrainingTargets) -> None:
        assert zone_label_for(
            IntensityUnit.THRESHOLD_HR_PERCENT, 85, athlete_targets,
        ) == "Z3"

    def test_units_without_zones(self, athlete_targets: TrainingTargets) -> None:
        assert zone_label_for(IntensityUnit.RPE, 5, athlete_targets) is None
        assert zone_label_for(IntensityUnit.FTP_PERCENT, 80, None) is None


class TestFormatting:
    def test_format_pace(self) -> None:
        assert format_pace(305) == "5:05"
        assert format_pace(-10) == "0:00"

    def test_format_duration(self) -> None:
        assert format_duration_minutes(65) == "1h 5m"
        assert format_duration_minutes(60) == "1h"
        assert format_duration_minutes(8) == "8m"
