"""
spekt: lifecycle management for stateful, asynchronous tests.

Instead of building a resource in a test, asserting, and relying on a
destructor to clean up, a test's state type implements two hooks:

- ``before()``: build the state (may fail; nothing else runs if it does)
- ``after()``: tear it down (always runs once ``before`` succeeded)

and the test body runs between them with shared, read-only access to the
state. Every phase's failure is captured and turned into a single test
failure; when both the body and ``after`` fail, the body's error is the one
reported.

Example:
    from spekt import Lifecycle, SharedState

    class Counter(Lifecycle):
        def __init__(self) -> None:
            self.counter = 0

        @classmethod
        async def before(cls) -> "Counter":
            return cls()

        async def after(self) -> None:
            if self.counter != 1:
                raise ValueError("counter mismatch")

    async def test_counter():
        async def body(ctx: SharedState[Counter]) -> None:
            ctx.state.counter = 1

        await Counter.test(body)
"""

from .config import RunnerConfig
from .exceptions import (
    AfterError,
    BeforeError,
    ContractError,
    LifecycleError,
    LifecycleFailure,
    PhaseError,
    SpektError,
    StateReleasedError,
    TestBodyError,
)
from .lifecycle import Lifecycle
from .models import Outcome, Phase, PhaseOutcome, Verdict, render_error
from .reporting import FailureReporter, RaisingReporter, RecordingReporter
from .runner import Runner, SyncRunner, TestBody, resolve_verdict
from .shared import SharedState

try:
    from ._version import __version__  # type: ignore[import-not-found]
except ImportError:
    __version__ = "0.0.0+unknown"

__all__ = [
    # Version
    "__version__",
    # Main classes
    "Lifecycle",
    "SharedState",
    "Runner",
    "SyncRunner",
    "RunnerConfig",
    "TestBody",
    "resolve_verdict",
    # Reporting
    "FailureReporter",
    "RaisingReporter",
    "RecordingReporter",
    # Models
    "Outcome",
    "Phase",
    "PhaseOutcome",
    "Verdict",
    "render_error",
    # Exceptions - Base
    "SpektError",
    # Exceptions - Categories
    "LifecycleError",
    # Exceptions - Phase
    "PhaseError",
    "BeforeError",
    "TestBodyError",
    "AfterError",
    # Exceptions - Reporting
    "LifecycleFailure",
    # Exceptions - Usage
    "StateReleasedError",
    "ContractError",
]
