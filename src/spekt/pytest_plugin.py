"""pytest integration for spekt.

Registered through the ``pytest11`` entry point, so installing spekt makes
these fixtures available in every test session:

- ``spekt_config``: RunnerConfig read from the environment
- ``lifecycle_runner``: Runner that reports failures with ``pytest.fail``

Example:
    async def test_counter(lifecycle_runner):
        async def body(ctx):
            ctx.state.counter = 1

        await Counter.test(body, runner=lifecycle_runner)
"""

from typing import TYPE_CHECKING

import pytest

from .config import RunnerConfig
from .runner import Runner

if TYPE_CHECKING:
    from .models import Outcome


class PytestReporter:
    """Reporter that marks the current pytest test as failed."""

    def fail(self, message: str, outcome: "Outcome") -> None:
        pytest.fail(message, pytrace=False)


@pytest.fixture
def spekt_config() -> RunnerConfig:
    """Runner configuration read from SPEKT_* environment variables."""
    return RunnerConfig.from_env()


@pytest.fixture
def lifecycle_runner(spekt_config: RunnerConfig) -> Runner:
    """Runner reporting failed invocations through pytest.fail."""
    return Runner(config=spekt_config, reporter=PytestReporter())
