"""Tests for environment-variable configuration parsing."""

from __future__ import annotations

import importlib

import pytest

from workout_engine import config
from workout_engine.config import _fraction_env


class TestFractionEnv:
    def test_unset_uses_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("WORKOUT_ENGINE_TEST_FRACTION", raising=False)
        assert _fraction_env("WORKOUT_ENGINE_TEST_FRACTION", 0.1) == 0.1

    def test_valid_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WORKOUT_ENGINE_TEST_FRACTION", "0.2")
        assert _fraction_env("WORKOUT_ENGINE_TEST_FRACTION", 0.1) == 0.2

    @pytest.mark.parametrize("raw", ["abc", "2", "0", "-0.5", "  "])
    def test_invalid_values_fall_back(
        self, monkeypatch: pytest.MonkeyPatch, raw: str,
    ) -> None:
        monkeypatch.setenv("WORKOUT_ENGINE_TEST_FRACTION", raw)
        assert _fraction_env("WORKOUT_ENGINE_TEST_FRACTION", 0.15) == 0.15


class TestModuleConstants:
    def test_environment_is_read_at_import(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WORKOUT_ENGINE_TSS_VARIANCE", "0.3")
        assert config.TSS_VARIANCE == pytest.approx(0.15)
        try:
            importlib.reload(config)
            assert config.TSS_VARIANCE == pytest.approx(0.3)
        finally:
            monkeypatch.delenv("WORKOUT_ENGINE_TSS_VARIANCE")
            importlib.reload(config)
        assert config.TSS_VARIANCE == pytest.approx(0.15)
