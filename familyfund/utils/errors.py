"""Error types raised by the fraud scoring engine."""

from typing import Optional


class FraudEngineError(Exception):
    """Base class for fraud engine failures."""


class InvalidEvidenceError(FraudEngineError, ValueError):
    """Claim evidence is malformed (missing fields, out-of-range values)."""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []


class HistoryLookupError(FraudEngineError):
    """
    The submission-history capability failed.

    The original exception is kept both as `__cause__` and as `.original`
    so callers can decide whether to retry.
    """

    def __init__(self, actor_id: str, family_id: str, original: BaseException):
        super().__init__(
            f"Submission history lookup failed for actor={actor_id} family={family_id}: {original}"
        )
        self.actor_id = actor_id
        self.family_id = family_id
        self.original = original


class DuplicateSubmissionError(FraudEngineError):
    """The claim reuses a transaction reference or a message that is already on file."""

    def __init__(self, message: str, field: str, existing_id: Optional[int] = None):
        super().__init__(message)
        self.field = field
        self.existing_id = existing_id
