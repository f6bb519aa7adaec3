"""Failure reporters.

A reporter turns the rendered message of a failed invocation into whatever
the enclosing test framework records as a failed test. The runner calls
``fail`` at most once per invocation and never for a passing one.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .exceptions import LifecycleFailure

if TYPE_CHECKING:
    from .models import Outcome


@runtime_checkable
class FailureReporter(Protocol):
    """
    Protocol for recording a failed invocation.

    Example:
        class UnittestReporter:
            def __init__(self, case: unittest.TestCase) -> None:
                self.case = case

            def fail(self, message: str, outcome: Outcome) -> None:
                self.case.fail(message)

        assert isinstance(UnittestReporter(case), FailureReporter)
    """

    def fail(self, message: str, outcome: "Outcome") -> None:
        """Record ``message`` as the failure of the invocation."""
        ...


class RaisingReporter:
    """Default reporter: raises LifecycleFailure with the message."""

    def fail(self, message: str, outcome: "Outcome") -> None:
        raise LifecycleFailure(message, outcome) from outcome.error


@dataclass
class RecordingReporter:
    """Reporter that collects failures instead of raising."""

    failures: list[tuple[str, "Outcome"]] = field(default_factory=list)

    def fail(self, message: str, outcome: "Outcome") -> None:
        self.failures.append((message, outcome))

    @property
    def messages(self) -> list[str]:
        """Reported messages, in order."""
        return [message for message, _ in self.failures]

    def clear(self) -> None:
        """Forget recorded failures."""
        self.failures.clear()
