"""Tests for completion reconciliation: completed, ready and adjusted sessions."""

from __future__ import annotations

import dataclasses

import pytest

from workout_engine import config
from workout_engine.models.session import SessionMetrics
from workout_engine.reconciliation import (
    is_adjusted,
    is_completed,
    is_ready_to_complete,
    reconcile,
    variance,
)


class TestIsCompleted:
    def test_status_or_flag(self) -> None:
        assert is_completed(SessionMetrics(status="completed"))
        assert is_completed(SessionMetrics(status="planned", is_completed_flag=True))
        assert not is_completed(SessionMetrics(status="skipped"))

    def test_ready_to_complete(self) -> None:
        assert is_ready_to_complete(SessionMetrics(linked_activity_id=7))
        assert not is_ready_to_complete(SessionMetrics())
        assert not is_ready_to_complete(
            SessionMetrics(linked_activity_id=7, status="completed"),
        )


class TestIsAdjusted:
    def test_tss_variance_alone_adjusts(self) -> None:
        session = SessionMetrics(
            status="completed",
            planned_tss=100, actual_tss=120,
            planned_duration_minutes=60, actual_duration_minutes=61,
        )
        assert is_adjusted(session) is True

    def test_missing_planned_tss_skips_check(self) -> None:
        session = SessionMetrics(
            status="completed",
            planned_tss=None, actual_tss=120,
            planned_duration_minutes=60, actual_duration_minutes=61,
        )
        assert is_adjusted(session) is False

    def test_thresholds_are_inclusive(self) -> None:
        duration = SessionMetrics(
            status="completed", planned_duration_minutes=60, actual_duration_minutes=66,
        )
        tss = SessionMetrics(status="completed", planned_tss=100, actual_tss=115)
        assert is_adjusted(duration) is True
        assert is_adjusted(tss) is True

    def test_just_below_thresholds(self) -> None:
        session = SessionMetrics(
            status="completed",
            planned_duration_minutes=100, actual_duration_minutes=109,
            planned_tss=100, actual_tss=86,
        )
        assert is_adjusted(session) is False

    def test_zero_plan_is_skipped(self) -> None:
        session = SessionMetrics(
            status="completed", planned_duration_minutes=0, actual_duration_minutes=90,
        )
        assert is_adjusted(session) is False

    def test_not_completed_is_never_adjusted(self) -> None:
        session = SessionMetrics(planned_tss=100, actual_tss=200)
        assert is_adjusted(session) is False

    def test_threshold_overrides(self, completed_session: SessionMetrics) -> None:
        assert is_adjusted(completed_session) is False
        assert is_adjusted(completed_session, tss_threshold=0.05) is True

    def test_config_thresholds(
        self, completed_session: SessionMetrics, monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr(config, "DURATION_VARIANCE", 0.01)
        assert is_adjusted(completed_session) is True

    def test_variance(self) -> None:
        assert variance(100, 80) == pytest.approx(0.2)
        assert variance(None, 80) is None
        assert variance(0, 80) is None


class TestReconcile:
    def test_on_plan(self, completed_session: SessionMetrics) -> None:
        result = reconcile(completed_session)
        assert result.completed
        assert not result.adjusted
        assert result.label == "completed"
        assert result.display_duration_minutes == 61
        assert result.display_tss == 105
        assert result.tss_variance == pytest.approx(0.05)

    def test_adjusted_label(self, completed_session: SessionMetrics) -> None:
        result = reconcile(dataclasses.replace(completed_session, actual_tss=130))
        assert result.label == "adjusted"

    def test_auto_completed_label(self, completed_session: SessionMetrics) -> None:
        session = dataclasses.replace(completed_session, completion_source="provider_auto")
        assert reconcile(session).label == "auto_completed"

    def test_ready_and_planned(self) -> None:
        ready = reconcile(SessionMetrics(planned_duration_minutes=45, linked_activity_id=3))
        assert ready.label == "ready"
        assert ready.display_duration_minutes == 45

        planned = reconcile(SessionMetrics(planned_tss=50))
        assert planned.label == "planned"
        assert planned.display_tss == 50
        assert planned.duration_variance is None

    @pytest.mark.parametrize("status", ["skipped", "partial"])
    def test_status_labels_win(self, status: str) -> None:
        session = SessionMetrics(status=status, linked_activity_id=1)
        assert reconcile(session).label == status
