"""Tests for segment expansion: ordering, counts and defensive normalisation."""

from __future__ import annotations

from workout_engine.math.segments import (
    as_number,
    clamp_intensity,
    expand_segments,
    preview_groups,
    resolve_intensity_bounds,
)
from workout_engine.models.enums import BlockType, IntensityMode, IntensityUnit
from workout_engine.models.structure import Item, PatternStep, SingleStep, Structure


def _structure(*steps, unit=IntensityUnit.RPE, mode=IntensityMode.TARGET) -> Structure:
    return Structure(unit=unit, mode=mode, steps=steps)


class TestExpandSegments:
    def test_none_yields_empty_list(self) -> None:
        assert expand_segments(None) == []

    def test_repeats_expand_cycle_then_item(self, repeats_structure: Structure) -> None:
        main = [s for s in expand_segments(repeats_structure) if s.step_id == "main"]
        assert len(main) == 6
        assert [(s.cycle_index, s.item_index) for s in main] == [
            (0, 0), (0, 1), (1, 0), (1, 1), (2, 0), (2, 1),
        ]
        assert [s.duration_minutes for s in main] == [2, 1, 2, 1, 2, 1]
        assert [s.intensity_max for s in main] == [8, 3, 8, 3, 8, 3]

    def test_steps_stay_in_order(self, repeats_structure: Structure) -> None:
        segments = expand_segments(repeats_structure)
        assert segments[0].step_id == "wu"
        assert segments[-1].step_id == "cd"
        assert len(segments) == 8

    def test_segment_count_formula(self, cycling_structure: Structure) -> None:
        expected = sum(
            step.cycles * (len(step.items) if step.items else 1)
            for step in cycling_structure.steps
        )
        assert len(expand_segments(cycling_structure)) == expected == 10

    def test_single_step_yields_one_segment(self, rpe_structure: Structure) -> None:
        segments = expand_segments(rpe_structure)
        assert len(segments) == 1
        assert segments[0].duration_minutes == 45
        assert segments[0].intensity_min == segments[0].intensity_max == 7

    def test_repeat_count_below_two_plays_twice(self) -> None:
        step = PatternStep(
            id="r", block_type=BlockType.REPEATS, repeat_count=0,
            items=(Item(id="a", target=5), Item(id="b", target=2)),
        )
        assert len(expand_segments(_structure(step))) == 4

    def test_ramp_plays_items_once(self) -> None:
        step = PatternStep(
            id="r", block_type=BlockType.RAMP_UP, repeat_count=7,
            items=tuple(Item(id=f"i{n}", target=4 + n) for n in range(4)),
        )
        assert len(expand_segments(_structure(step))) == 4

    def test_single_step_with_legacy_items_plays_items(self) -> None:
        step = SingleStep(
            id="wu", block_type=BlockType.WARMUP, duration_minutes=20, target=3,
            legacy_items=(
                Item(id="a", duration_minutes=5, target=3),
                Item(id="b", duration_minutes=7, target=5),
            ),
        )
        structure = _structure(step)
        segments = expand_segments(structure)
        assert [s.duration_minutes for s in segments] == [5, 7]
        assert [s.intensity_max for s in segments] == [3, 5]
        assert all(s.step_id == "wu" for s in segments)


class TestMalformedInput:
    def test_durations_below_one_become_one(self) -> None:
        step = PatternStep(
            id="r", block_type=BlockType.TWO_STEP_REPEATS,
            items=(
                Item(id="a", duration_minutes=0, target=5),
                Item(id="b", duration_minutes=-3, target=5),
            ),
        )
        segments = expand_segments(_structure(step))
        assert all(s.duration_minutes >= 1 for s in segments)

    def test_non_numeric_values_degrade_to_zero(self) -> None:
        step = SingleStep(
            id="s", block_type=BlockType.ACTIVE,
            duration_minutes="ten", target="hard",  # type: ignore[arg-type]
        )
        (segment,) = expand_segments(_structure(step))
        assert segment.duration_minutes == 1
        assert segment.intensity_min == segment.intensity_max == 0

    def test_fractional_duration_rounds_half_up(self) -> None:
        steps = (
            SingleStep(id="a", block_type=BlockType.ACTIVE, duration_minutes=2.5, target=5),  # type: ignore[arg-type]
            SingleStep(id="b", block_type=BlockType.ACTIVE, duration_minutes=2.4, target=5),  # type: ignore[arg-type]
            SingleStep(id="c", block_type=BlockType.ACTIVE, duration_minutes=2.6, target=5),  # type: ignore[arg-type]
        )
        assert [s.duration_minutes for s in expand_segments(_structure(*steps))] == [3, 2, 3]

    def test_inverted_string_range_is_ordered(self) -> None:
        step = SingleStep(
            id="s", block_type=BlockType.ACTIVE, duration_minutes=5,
            range_min="90", range_max="70",  # type: ignore[arg-type]
        )
        (segment,) = expand_segments(
            _structure(step, unit=IntensityUnit.FTP_PERCENT, mode=IntensityMode.RANGE),
        )
        assert segment.intensity_min == 70
        assert segment.intensity_max == 90

    def test_every_segment_is_well_formed(self) -> None:
        steps = (
            SingleStep(id="a", block_type=BlockType.WARMUP, duration_minutes=0),
            SingleStep(id="b", block_type=BlockType.ACTIVE, range_min=300, range_max=-4),
            PatternStep(
                id="c", block_type=BlockType.REPEATS, repeat_count=-1,
                items=(Item(id="x", target=float("nan")), Item(id="y", range_max=50)),
            ),
        )
        structure = _structure(
            *steps, unit=IntensityUnit.FTP_PERCENT, mode=IntensityMode.RANGE,
        )
        for segment in expand_segments(structure):
            assert segment.duration_minutes >= 1
            assert 0 <= segment.intensity_min <= segment.intensity_max <= 200


class TestResolveIntensityBounds:
    def test_target_mode_ignores_range(self) -> None:
        item = Item(id="i", target=5, range_min=1, range_max=9)
        assert resolve_intensity_bounds(item, IntensityMode.TARGET) == (5, 5)

    def test_range_mode_falls_back_to_target(self) -> None:
        item = Item(id="i", target=80, range_max=90)
        assert resolve_intensity_bounds(item, IntensityMode.RANGE) == (80, 90)

    def test_missing_max_reuses_min(self) -> None:
        item = Item(id="i", range_min=70)
        assert resolve_intensity_bounds(item, IntensityMode.RANGE) == (70, 70)

    def test_nothing_set_is_zero(self) -> None:
        item = Item(id="i")
        assert resolve_intensity_bounds(item, IntensityMode.RANGE) == (0, 0)
        assert resolve_intensity_bounds(item, IntensityMode.TARGET) == (0, 0)


class TestHelpers:
    def test_clamp_rpe(self) -> None:
        assert clamp_intensity(15, IntensityUnit.RPE) == 10
        assert clamp_intensity(-1, IntensityUnit.RPE) == 0

    def test_clamp_percent(self) -> None:
        assert clamp_intensity(250, IntensityUnit.FTP_PERCENT) == 200
        assert clamp_intensity(115, IntensityUnit.MAX_HR_PERCENT) == 115

    def test_as_number(self) -> None:
        assert as_number("7.5") == 7.5
        assert as_number(True) is None
        assert as_number(float("inf")) is None
        assert as_number([1]) is None


class TestPreviewGroups:
    def test_groups_follow_steps(self, repeats_structure: Structure) -> None:
        groups = preview_groups(repeats_structure)
        assert [g.step_id for g in groups] == ["wu", "main", "cd"]
        main = groups[1]
        assert main.step_index == 1
        assert main.total_duration_minutes == 9
        assert main.pattern_label == "x3"
        assert len(main.segments) == 6
        assert groups[0].pattern_label is None

    def test_none_yields_no_groups(self) -> None:
        assert preview_groups(None) == []
