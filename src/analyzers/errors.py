"""
Timeline Errors.

Errors raised by the timeline builder. The builder never logs or retries;
callers decide whether an error aborts a repository or is recovered from.
"""

from typing import Any


class TimelineError(Exception):
    """Base class for timeline construction errors."""


class EmptyInputError(TimelineError):
    """Raised when there are no records to anchor the timeline on."""

    def __init__(self, message: str = "cannot build a timeline from zero records"):
        super().__init__(message)


class InvalidRecordError(TimelineError):
    """Raised when a record cannot describe a valid open interval.

    Attributes:
        record: The offending record.
    """

    def __init__(self, message: str, record: Any = None):
        super().__init__(message)
        self.record = record


class ClockSkewWarning(UserWarning):
    """A record instant lies after ``now``; its day is clamped to today."""
