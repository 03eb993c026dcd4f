"""
Error types raised by the heart transplant matching engine.
"""

from typing import Optional, Sequence


class HeartMatchError(Exception):
    """Base class for matching engine errors."""


class InvalidInput(HeartMatchError, ValueError):
    """A biometric value is non-positive, non-numeric, or gender is unrecognized."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class ValidationError(HeartMatchError, ValueError):
    """Input that makes the whole matching run impossible (e.g. incomplete donor)."""

    def __init__(self, message: str, fields: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.fields = list(fields or [])


class RecordSkipped(HeartMatchError):
    """A single recipient could not be matched; the run continues without it."""

    def __init__(self, skipped):
        super().__init__(f"Recipient {skipped.recipient_id} skipped: {skipped.reason}")
        self.skipped = skipped
