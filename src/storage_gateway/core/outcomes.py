"""Terminal outcomes of gateway operations.

Every gateway operation is one-shot and ends in exactly one outcome:
- write: ACCEPTED | REJECTED(reason)
- read: FOUND(stream) | NOT_FOUND | ERROR(reason)
- delete: REMOVED | ERROR(reason)
- list: LISTED(entries) | NOT_FOUND | ERROR(reason)
- info: FOUND(metadata) | NOT_FOUND
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class RejectionCause(Enum):
    """Why a write was rejected."""

    BAD_INPUT = "bad_input"
    TIMEOUT = "timeout"
    ENGINE = "engine"


class OutcomeKind(Enum):
    """Kind of an operation outcome."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    FOUND = "found"
    NOT_FOUND = "not_found"
    REMOVED = "removed"
    LISTED = "listed"
    ERROR = "error"


@dataclass(frozen=True)
class Outcome:
    """The result of one gateway operation.

    Attributes:
        kind: Which terminal state the operation reached.
        value: Payload for FOUND and LISTED outcomes.
        reason: Human readable cause for REJECTED and ERROR outcomes.
        cause: Why a REJECTED write was refused.
    """

    kind: OutcomeKind
    value: Any = None
    reason: str | None = None
    cause: RejectionCause | None = None

    @property
    def ok(self) -> bool:
        return self.kind in (
            OutcomeKind.ACCEPTED,
            OutcomeKind.FOUND,
            OutcomeKind.REMOVED,
            OutcomeKind.LISTED,
        )

    @classmethod
    def accepted(cls) -> "Outcome":
        return cls(OutcomeKind.ACCEPTED)

    @classmethod
    def rejected(
        cls, reason: str, cause: RejectionCause = RejectionCause.ENGINE
    ) -> "Outcome":
        return cls(OutcomeKind.REJECTED, reason=reason, cause=cause)

    @classmethod
    def found(cls, value: Any) -> "Outcome":
        return cls(OutcomeKind.FOUND, value=value)

    @classmethod
    def not_found(cls) -> "Outcome":
        return cls(OutcomeKind.NOT_FOUND)

    @classmethod
    def removed(cls) -> "Outcome":
        return cls(OutcomeKind.REMOVED)

    @classmethod
    def listed(cls, entries: Any) -> "Outcome":
        return cls(OutcomeKind.LISTED, value=entries)

    @classmethod
    def error(cls, reason: str) -> "Outcome":
        return cls(OutcomeKind.ERROR, reason=reason)
