"""Runner: sequences before -> test body -> after and resolves the verdict."""

import asyncio
import inspect
import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Optional

from .config import RunnerConfig
from .models import Outcome, Phase, PhaseOutcome, Verdict, render_error
from .reporting import FailureReporter, RaisingReporter
from .shared import SharedState

if TYPE_CHECKING:
    from .lifecycle import Lifecycle

logger = logging.getLogger(__name__)

TestBody = Callable[[SharedState[Any]], Awaitable[None]]


def resolve_verdict(
    before: PhaseOutcome,
    test: PhaseOutcome | None = None,
    after: PhaseOutcome | None = None,
    *,
    name: str = "",
) -> Outcome:
    """
    Reduce the phase outcomes of one invocation to its verdict.

    Precedence:
    - ``before`` failed: FAIL_BEFORE (no other phase ran)
    - test body failed: FAIL_TEST; the ``after`` error is not examined for
      the verdict and is kept only as ``masked_error``
    - ``after`` failed: FAIL_AFTER
    - otherwise PASS

    Args:
        before: Outcome of ``before``
        test: Outcome of the test body (required once ``before`` succeeded)
        after: Outcome of ``after`` (required once ``before`` succeeded)
        name: Lifecycle class name, for logging

    Returns:
        The resolved Outcome

    Raises:
        ValueError: If ``before`` succeeded but a later outcome is missing
    """
    if not before.ok:
        return Outcome(verdict=Verdict.FAIL_BEFORE, before=before, error=before.error, name=name)

    if test is None or after is None:
        raise ValueError("test and after outcomes are required once before succeeded")

    if not test.ok:
        return Outcome(
            verdict=Verdict.FAIL_TEST,
            before=before,
            test=test,
            after=after,
            error=test.error,
            masked_error=after.error,
            name=name,
        )

    if not after.ok:
        return Outcome(
            verdict=Verdict.FAIL_AFTER,
            before=before,
            test=test,
            after=after,
            error=after.error,
            name=name,
        )

    return Outcome(verdict=Verdict.PASS, before=before, test=test, after=after, name=name)


def log_masked_after_error(name: str, error: BaseException, config: RunnerConfig) -> None:
    """Log an ``after`` error discarded in favour of the test body's error.

    DEBUG unless ``config.warn_masked_after_errors`` is set.
    """
    level = logging.WARNING if config.warn_masked_after_errors else logging.DEBUG
    logger.log(
        level,
        "%s: after() failure discarded because the test body also failed: %s",
        name,
        render_error(error),
    )


class Runner:
    """
    Async lifecycle runner.

    Runs the three phases of one invocation strictly one after another on
    the caller's event loop and reports at most one failure per invocation
    to its reporter.

    Exceptions raised by a phase are captured as that phase's outcome.
    BaseException subclasses that are not Exceptions (task cancellation,
    KeyboardInterrupt) propagate immediately: the running phase is abandoned
    and no later phase runs, so ``after`` is not guaranteed under
    cancellation.
    """

    def __init__(
        self,
        config: RunnerConfig | None = None,
        reporter: FailureReporter | None = None,
    ) -> None:
        self.config = config if config is not None else RunnerConfig.from_env()
        self.reporter: FailureReporter = reporter if reporter is not None else RaisingReporter()

    async def run(self, lifecycle_cls: "type[Lifecycle]", body: TestBody) -> None:
        """
        Run one invocation and report its failure, if any.

        Args:
            lifecycle_cls: Lifecycle subclass providing ``before``/``after``
            body: Test body; called with a SharedState handle and must
                return an awaitable
        """
        outcome = await self.execute(lifecycle_cls, body)
        self.report(outcome)

    async def execute(self, lifecycle_cls: "type[Lifecycle]", body: TestBody) -> Outcome:
        """
        Run one invocation and return its outcome without reporting it.

        Args:
            lifecycle_cls: Lifecycle subclass providing ``before``/``after``
            body: Test body; called with a SharedState handle and must
                return an awaitable

        Returns:
            The resolved Outcome
        """
        name = lifecycle_cls.__name__

        async def _before() -> Any:
            state = await lifecycle_cls.before()
            if not isinstance(state, lifecycle_cls):
                raise TypeError(
                    f"{name}.before() must return an instance of {name}, "
                    f"got {type(state).__name__}"
                )
            return state

        before, state = await self._run_phase(name, Phase.BEFORE, _before)
        if not before.ok:
            return resolve_verdict(before, name=name)

        handle: SharedState[Any] = SharedState(state)
        try:
            body_handle = handle.clone()
            try:
                test, _ = await self._run_phase(name, Phase.TEST, lambda: body(body_handle))
            finally:
                body_handle.release()

            # Runs regardless of the test body's outcome
            after, _ = await self._run_phase(name, Phase.AFTER, handle.state.after)
        finally:
            handle.release()

        return resolve_verdict(before, test, after, name=name)

    def report(self, outcome: Outcome) -> None:
        """
        Report a resolved outcome.

        Calls ``reporter.fail`` exactly once for a failed outcome and never
        for a passing one. A masked ``after`` error is logged, never
        reported.
        """
        if outcome.masked_error is not None:
            log_masked_after_error(outcome.name, outcome.masked_error, self.config)

        if outcome.passed:
            logger.debug("%s: passed", outcome.name)
            return

        message = outcome.message or ""
        logger.debug("%s: %s: %s", outcome.name, outcome.verdict.value, message)
        self.reporter.fail(message, outcome)

    async def _run_phase(
        self, name: str, phase: Phase, call: Callable[[], Any]
    ) -> tuple[PhaseOutcome, Any]:
        """Await one phase, capturing its exception as the phase outcome."""
        logger.debug("%s: running %s", name, phase.value)
        start = time.perf_counter()
        try:
            awaitable = call()
            if not inspect.isawaitable(awaitable):
                raise TypeError(
                    f"{phase.value} must return an awaitable, got {type(awaitable).__name__}"
                )
            value = await awaitable
        except Exception as e:
            outcome = PhaseOutcome.failed(phase, e, time.perf_counter() - start)
            logger.debug("%s: %s failed: %s", name, phase.value, render_error(e))
            value = None
        else:
            outcome = PhaseOutcome.succeeded(phase, time.perf_counter() - start)

        if self.config.log_phase_timings:
            logger.debug(
                "%s: %s finished in %.3fs", name, phase.value, outcome.duration_seconds
            )
        return outcome, value


class SyncRunner:
    """
    Synchronous lifecycle runner.

    Wraps Runner, running invocations to completion on an event loop it
    owns. Use it from plain (non-async) test functions; inside a running
    event loop, await Runner.run() instead.
    """

    def __init__(
        self,
        config: RunnerConfig | None = None,
        reporter: FailureReporter | None = None,
        *,
        runner: Optional[Runner] = None,
    ) -> None:
        self._runner = runner if runner is not None else Runner(config=config, reporter=reporter)
        self._loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def runner(self) -> Runner:
        """The wrapped async runner."""
        return self._runner

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        """Get or create the owned event loop."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            pass
        else:
            raise RuntimeError(
                "SyncRunner cannot run inside a running event loop; await Runner.run() instead"
            )
        if self._loop is None or self._loop.is_closed():
            self._loop = asyncio.new_event_loop()
        return self._loop

    def _run(self, coro_factory: Callable[[], Awaitable[Any]]) -> Any:
        """Run a coroutine in the owned event loop."""
        loop = self._get_loop()
        return loop.run_until_complete(coro_factory())

    def run(self, lifecycle_cls: "type[Lifecycle]", body: TestBody) -> None:
        """Run one invocation and report its failure, if any."""
        self._run(lambda: self._runner.run(lifecycle_cls, body))

    def execute(self, lifecycle_cls: "type[Lifecycle]", body: TestBody) -> Outcome:
        """Run one invocation and return its outcome without reporting it."""
        result: Outcome = self._run(lambda: self._runner.execute(lifecycle_cls, body))
        return result

    def close(self) -> None:
        """Close the owned event loop."""
        if self._loop is not None and not self._loop.is_closed():
            self._loop.run_until_complete(self._loop.shutdown_asyncgens())
            self._loop.close()
        self._loop = None

    def __enter__(self) -> "SyncRunner":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
