"""Error taxonomy shared by the engine and its collaborators.

Every failure the engine reports is one of the classes below.  None of them is
retried inside the engine; callers decide whether reissuing a request is safe.
"""

from __future__ import annotations


class BattleEngineError(Exception):
    """Base class for all battle engine failures."""


class ValidationError(BattleEngineError, ValueError):
    """Malformed or ineligible input (empty roster, foreign card, ...)."""


class CardDataError(ValidationError):
    """A single catalog record could not be normalized."""

    def __init__(self, record_id: object, field: str, detail: str) -> None:
        self.record_id = record_id
        self.field = field
        self.detail = detail
        super().__init__(f"card {record_id!r}: {field} {detail}")


class InvalidTransitionError(BattleEngineError):
    """Operation is not legal in the battle's current state."""


class StaleSubmissionError(InvalidTransitionError):
    """Submission targets a round that has already been resolved."""


class ConflictError(BattleEngineError):
    """A concurrent write won the race; the caller may retry."""


class NotFoundError(BattleEngineError, LookupError):
    """A battle, card or battle card reference does not resolve."""
