"""Pytest fixtures for spekt tests."""

import pytest

from spekt import RecordingReporter, Runner, RunnerConfig
from spekt.config import LOG_PHASE_TIMINGS_ENV_VAR, WARN_MASKED_AFTER_ENV_VAR

from tests.fixtures.lifecycles import Probe

pytest_plugins = ["pytester"]


@pytest.fixture(autouse=True)
def clean_spekt_env(monkeypatch):
    """Keep SPEKT_* variables from the outer environment out of tests."""
    monkeypatch.delenv(WARN_MASKED_AFTER_ENV_VAR, raising=False)
    monkeypatch.delenv(LOG_PHASE_TIMINGS_ENV_VAR, raising=False)


@pytest.fixture
def probe():
    """Fresh phase recorder."""
    return Probe()


@pytest.fixture
def recorder():
    """Reporter that collects failures."""
    return RecordingReporter()


@pytest.fixture
def runner(recorder):
    """Runner reporting into ``recorder`` with default config."""
    return Runner(config=RunnerConfig(), reporter=recorder)
