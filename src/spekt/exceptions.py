"""Exceptions for spekt."""

from typing import TYPE_CHECKING

from .models import Phase, render_error

if TYPE_CHECKING:
    from .models import Outcome


# ---------------------------------------------------------------------------
# Base Exception
# ---------------------------------------------------------------------------


class SpektError(Exception):
    """
    Base exception for all spekt errors.

    All exceptions raised by this library inherit from this class,
    allowing callers to catch all library-specific errors with a single
    except clause.
    """

    pass


# ---------------------------------------------------------------------------
# Category Exceptions
# ---------------------------------------------------------------------------


class LifecycleError(SpektError):
    """
    Base exception for errors raised by a lifecycle phase.

    This includes failures of ``before``, the test body and ``after``.
    """

    pass


# ---------------------------------------------------------------------------
# Phase Exceptions
# ---------------------------------------------------------------------------


class PhaseError(LifecycleError):
    """
    Raised when a phase failure has to cross an API boundary as an exception.

    The message is the rendered cause, so the text matches what the runner
    reports for the same failure.

    Attributes:
        phase: The phase that failed
        cause: The exception raised by the phase
    """

    def __init__(self, phase: Phase, cause: BaseException) -> None:
        self.phase = phase
        self.cause = cause
        super().__init__(render_error(cause))


class BeforeError(PhaseError):
    """Raised when ``before`` fails; no other phase ran."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(Phase.BEFORE, cause)


class TestBodyError(PhaseError):
    """Raised when the test body fails."""

    __test__ = False  # not a pytest test class

    def __init__(self, cause: BaseException) -> None:
        super().__init__(Phase.TEST, cause)


class AfterError(PhaseError):
    """Raised when ``after`` fails after a passing test body."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(Phase.AFTER, cause)


# ---------------------------------------------------------------------------
# Reporting Exceptions
# ---------------------------------------------------------------------------


class LifecycleFailure(SpektError, AssertionError):  # noqa: N818
    """
    Raised by the default reporter when an invocation fails.

    Subclasses ``AssertionError`` so test frameworks record a failed test
    rather than an errored one.

    Attributes:
        outcome: The resolved outcome of the invocation
    """

    def __init__(self, message: str, outcome: "Outcome | None" = None) -> None:
        self.outcome = outcome
        super().__init__(message)


# ---------------------------------------------------------------------------
# Usage Exceptions
# ---------------------------------------------------------------------------


class StateReleasedError(SpektError):
    """Raised when reading state through a handle that was already released."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"Shared state {type_name} was already released")


class ContractError(SpektError, TypeError):
    """Raised when a Lifecycle subclass overrides a sealed member."""

    def __init__(self, class_name: str, member: str) -> None:
        self.class_name = class_name
        self.member = member
        super().__init__(
            f"{class_name} cannot override '{member}'; "
            "only 'before' and 'after' are customization points"
        )
