"""Tests for operation outcomes."""

import pytest

from storage_gateway.core.outcomes import Outcome, OutcomeKind, RejectionCause


class TestOutcome:
    def test_frozen_dataclass(self):
        outcome = Outcome.accepted()
        with pytest.raises(AttributeError):
            outcome.kind = OutcomeKind.ERROR

    @pytest.mark.parametrize(
        ("outcome", "ok"),
        [
            (Outcome.accepted(), True),
            (Outcome.found(b"x"), True),
            (Outcome.removed(), True),
            (Outcome.listed([]), True),
            (Outcome.not_found(), False),
            (Outcome.rejected("bad"), False),
            (Outcome.error("boom"), False),
        ],
    )
    def test_ok(self, outcome, ok):
        assert outcome.ok is ok

    def test_rejected_defaults_to_engine_cause(self):
        outcome = Outcome.rejected("disk full")
        assert outcome.kind == OutcomeKind.REJECTED
        assert outcome.reason == "disk full"
        assert outcome.cause == RejectionCause.ENGINE

    def test_rejected_with_cause(self):
        assert Outcome.rejected("late", RejectionCause.TIMEOUT).cause == RejectionCause.TIMEOUT

    def test_listed_carries_entries(self):
        assert Outcome.listed(["a", "b/"]).value == ["a", "b/"]

    def test_error_carries_reason(self):
        outcome = Outcome.error("boom")
        assert outcome.kind == OutcomeKind.ERROR
        assert outcome.reason == "boom"
