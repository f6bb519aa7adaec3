"""Tests for RunnerConfig."""

import pytest

from spekt import RunnerConfig
from spekt.config import parse_bool_env


class TestParseBoolEnv:
    """Tests for boolean environment parsing."""

    def test_unset_uses_default(self, monkeypatch) -> None:
        """An unset variable yields the default."""
        monkeypatch.delenv("SPEKT_TEST_FLAG", raising=False)
        assert parse_bool_env("SPEKT_TEST_FLAG", True) is True
        assert parse_bool_env("SPEKT_TEST_FLAG", False) is False

    def test_empty_uses_default(self, monkeypatch) -> None:
        """An empty variable yields the default."""
        monkeypatch.setenv("SPEKT_TEST_FLAG", "  ")
        assert parse_bool_env("SPEKT_TEST_FLAG", True) is True

    @pytest.mark.parametrize("raw", ["1", "true", "TRUE", "yes", "On"])
    def test_true_values(self, monkeypatch, raw: str) -> None:
        """Truthy spellings parse as True."""
        monkeypatch.setenv("SPEKT_TEST_FLAG", raw)
        assert parse_bool_env("SPEKT_TEST_FLAG", False) is True

    @pytest.mark.parametrize("raw", ["0", "false", "No", "OFF"])
    def test_false_values(self, monkeypatch, raw: str) -> None:
        """Falsy spellings parse as False."""
        monkeypatch.setenv("SPEKT_TEST_FLAG", raw)
        assert parse_bool_env("SPEKT_TEST_FLAG", True) is False

    def test_invalid_value_raises(self, monkeypatch) -> None:
        """Unrecognized values name the variable."""
        monkeypatch.setenv("SPEKT_TEST_FLAG", "sometimes")
        with pytest.raises(ValueError, match="SPEKT_TEST_FLAG must be a boolean"):
            parse_bool_env("SPEKT_TEST_FLAG", True)


class TestRunnerConfig:
    """Tests for RunnerConfig."""

    def test_defaults(self) -> None:
        """Defaults keep masked errors at DEBUG and skip timings."""
        config = RunnerConfig()
        assert config.warn_masked_after_errors is False
        assert config.log_phase_timings is False

    def test_from_env_defaults(self) -> None:
        """from_env without variables matches the defaults."""
        assert RunnerConfig.from_env() == RunnerConfig()

    def test_from_env(self, monkeypatch) -> None:
        """from_env reads SPEKT_* variables."""
        monkeypatch.setenv("SPEKT_WARN_MASKED_AFTER", "yes")
        monkeypatch.setenv("SPEKT_LOG_PHASE_TIMINGS", "1")

        config = RunnerConfig.from_env()

        assert config.warn_masked_after_errors is True
        assert config.log_phase_timings is True
