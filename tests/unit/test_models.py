"""Tests for models."""

import pytest

from spekt import (
    AfterError,
    BeforeError,
    Outcome,
    Phase,
    PhaseOutcome,
    TestBodyError,
    Verdict,
    render_error,
    resolve_verdict,
)


class TestRenderError:
    """Tests for render_error."""

    def test_uses_str(self) -> None:
        """The rendered text is str(error)."""
        assert render_error(RuntimeError("connection refused")) == "connection refused"

    def test_empty_message_falls_back_to_class_name(self) -> None:
        """Errors without text render as their class name."""
        assert render_error(AssertionError()) == "AssertionError"

    def test_custom_str(self) -> None:
        """Custom __str__ implementations are honored."""

        class QueryError(Exception):
            def __str__(self) -> str:
                return "relation my_test_table does not exist"

        assert render_error(QueryError()) == "relation my_test_table does not exist"


class TestVerdict:
    """Tests for Verdict."""

    def test_failed(self) -> None:
        """Only PASS is not a failure."""
        assert not Verdict.PASS.failed
        assert Verdict.FAIL_BEFORE.failed
        assert Verdict.FAIL_TEST.failed
        assert Verdict.FAIL_AFTER.failed


class TestPhaseOutcome:
    """Tests for PhaseOutcome."""

    def test_succeeded(self) -> None:
        """A succeeded outcome has no error or message."""
        outcome = PhaseOutcome.succeeded(Phase.TEST, 0.25)
        assert outcome.ok
        assert outcome.message is None
        assert outcome.duration_seconds == 0.25

    def test_failed(self) -> None:
        """A failed outcome exposes the rendered error."""
        error = ValueError("bad row")
        outcome = PhaseOutcome.failed(Phase.AFTER, error)
        assert not outcome.ok
        assert outcome.error is error
        assert outcome.message == "bad row"

    def test_frozen(self) -> None:
        """PhaseOutcome is immutable."""
        outcome = PhaseOutcome.succeeded(Phase.BEFORE)
        with pytest.raises(AttributeError):
            outcome.error = RuntimeError("x")  # type: ignore[misc]


class TestOutcome:
    """Tests for Outcome."""

    def _masked(self) -> Outcome:
        return resolve_verdict(
            PhaseOutcome.succeeded(Phase.BEFORE),
            PhaseOutcome.failed(Phase.TEST, AssertionError("body broke")),
            PhaseOutcome.failed(Phase.AFTER, RuntimeError("teardown broke")),
            name="Tracked",
        )

    def test_phases_skip_missing(self) -> None:
        """phases lists only the phases that ran."""
        outcome = resolve_verdict(PhaseOutcome.failed(Phase.BEFORE, RuntimeError("x")))
        assert [p.phase for p in outcome.phases] == [Phase.BEFORE]

    def test_as_dict(self) -> None:
        """as_dict keeps the masked error out of the message."""
        data = self._masked().as_dict()

        assert data["name"] == "Tracked"
        assert data["verdict"] == "fail_test"
        assert data["message"] == "body broke"
        assert data["masked_error"] == "teardown broke"
        assert [p["phase"] for p in data["phases"]] == ["before", "test", "after"]
        assert [p["ok"] for p in data["phases"]] == [True, False, False]

    def test_raise_for_verdict_pass(self) -> None:
        """A passing outcome raises nothing."""
        outcome = resolve_verdict(
            PhaseOutcome.succeeded(Phase.BEFORE),
            PhaseOutcome.succeeded(Phase.TEST),
            PhaseOutcome.succeeded(Phase.AFTER),
        )
        outcome.raise_for_verdict()

    def test_raise_for_verdict_before(self) -> None:
        """FAIL_BEFORE raises BeforeError chained from the cause."""
        cause = ConnectionRefusedError("connection refused")
        outcome = resolve_verdict(PhaseOutcome.failed(Phase.BEFORE, cause))

        with pytest.raises(BeforeError, match="^connection refused$") as exc_info:
            outcome.raise_for_verdict()

        assert exc_info.value.__cause__ is cause
        assert exc_info.value.phase is Phase.BEFORE

    def test_raise_for_verdict_test(self) -> None:
        """FAIL_TEST raises TestBodyError with the body's message only."""
        with pytest.raises(TestBodyError, match="^body broke$"):
            self._masked().raise_for_verdict()

    def test_raise_for_verdict_after(self) -> None:
        """FAIL_AFTER raises AfterError."""
        outcome = resolve_verdict(
            PhaseOutcome.succeeded(Phase.BEFORE),
            PhaseOutcome.succeeded(Phase.TEST),
            PhaseOutcome.failed(Phase.AFTER, RuntimeError("leak")),
        )
        with pytest.raises(AfterError, match="^leak$"):
            outcome.raise_for_verdict()
