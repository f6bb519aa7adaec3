"""Core models for spekt."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


def render_error(error: BaseException) -> str:
    """
    Render an error to the human-readable text used in failure reports.

    Falls back to the exception class name when ``str(error)`` is empty
    (e.g. a bare ``assert`` or ``raise RuntimeError()``), so a failed
    invocation never reports a blank message.
    """
    return str(error) or type(error).__name__


class Phase(Enum):
    """One of the three steps of an invocation."""

    BEFORE = "before"
    TEST = "test"
    AFTER = "after"


class Verdict(Enum):
    """Terminal pass/fail result of one invocation."""

    PASS = "pass"
    FAIL_BEFORE = "fail_before"
    FAIL_TEST = "fail_test"  # after's outcome discarded
    FAIL_AFTER = "fail_after"

    @property
    def failed(self) -> bool:
        return self is not Verdict.PASS


@dataclass(frozen=True)
class PhaseOutcome:
    """
    Result of running a single phase.

    A phase either succeeded (``error is None``) or failed with the
    exception it raised.

    Attributes:
        phase: Which phase this outcome belongs to
        error: Exception raised by the phase, or None on success
        duration_seconds: Wall-clock time spent awaiting the phase
    """

    phase: Phase
    error: BaseException | None = None
    duration_seconds: float = 0.0

    @classmethod
    def succeeded(cls, phase: Phase, duration_seconds: float = 0.0) -> "PhaseOutcome":
        """Create a successful outcome."""
        return cls(phase=phase, error=None, duration_seconds=duration_seconds)

    @classmethod
    def failed(
        cls, phase: Phase, error: BaseException, duration_seconds: float = 0.0
    ) -> "PhaseOutcome":
        """Create a failed outcome."""
        return cls(phase=phase, error=error, duration_seconds=duration_seconds)

    @property
    def ok(self) -> bool:
        """True if the phase succeeded."""
        return self.error is None

    @property
    def message(self) -> str | None:
        """Rendered error text, or None on success."""
        return None if self.error is None else render_error(self.error)


@dataclass(frozen=True)
class Outcome:
    """
    Resolved outcome of one before -> test -> after invocation.

    ``test`` and ``after`` are None when ``before`` failed, since neither
    phase ran. When both the test body and ``after`` failed, the verdict is
    FAIL_TEST and the ``after`` error is only available as ``masked_error``.

    Attributes:
        verdict: Terminal verdict of the invocation
        before: Outcome of ``before``
        test: Outcome of the test body (None if it never ran)
        after: Outcome of ``after`` (None if it never ran)
        error: The exception chosen for reporting (None on PASS)
        masked_error: ``after`` exception discarded in favor of a test failure
        name: Name of the Lifecycle class that ran
    """

    verdict: Verdict
    before: PhaseOutcome
    test: PhaseOutcome | None = None
    after: PhaseOutcome | None = None
    error: BaseException | None = None
    masked_error: BaseException | None = None
    name: str = ""

    @property
    def passed(self) -> bool:
        """True if the invocation passed."""
        return self.verdict is Verdict.PASS

    @property
    def message(self) -> str | None:
        """Rendered text of the chosen error, or None on PASS."""
        return None if self.error is None else render_error(self.error)

    @property
    def phases(self) -> list[PhaseOutcome]:
        """Outcomes of the phases that actually ran, in order."""
        return [p for p in (self.before, self.test, self.after) if p is not None]

    def raise_for_verdict(self) -> None:
        """
        Raise the phase exception matching a failed verdict.

        Raises BeforeError, TestBodyError or AfterError (chained from the
        original error) for FAIL_BEFORE, FAIL_TEST and FAIL_AFTER; does
        nothing on PASS.
        """
        from .exceptions import AfterError, BeforeError, TestBodyError

        if self.error is None:
            return
        if self.verdict is Verdict.FAIL_BEFORE:
            raise BeforeError(self.error) from self.error
        if self.verdict is Verdict.FAIL_TEST:
            raise TestBodyError(self.error) from self.error
        raise AfterError(self.error) from self.error

    def as_dict(self) -> dict[str, Any]:
        """
        Serialize for logging or structured test reports.

        The masked ``after`` error is deliberately absent from ``message``;
        it only appears under ``masked_error``.
        """
        return {
            "name": self.name,
            "verdict": self.verdict.value,
            "message": self.message,
            "masked_error": (
                render_error(self.masked_error) if self.masked_error is not None else None
            ),
            "phases": [
                {
                    "phase": p.phase.value,
                    "ok": p.ok,
                    "message": p.message,
                    "duration_seconds": p.duration_seconds,
                }
                for p in self.phases
            ],
        }
