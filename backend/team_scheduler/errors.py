"""
Error taxonomy for the scheduling engine.

The engine raises these and never maps them to HTTP; the route layer does
the translation.
"""

from typing import Any, Optional


class SchedulingError(Exception):
    """Base exception for scheduling engine errors"""

    code = "SCHEDULING_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class NotFound(SchedulingError):
    """Pattern, series, team or game does not exist (or is inactive)"""

    code = "NOT_FOUND"


class InvalidRecurrenceRule(SchedulingError, ValueError):
    """Recurrence rule or pattern shape is unusable"""

    code = "INVALID_RECURRENCE_RULE"


class ConstraintViolation(SchedulingError):
    """Insert lost a race against the (pattern_id, date) uniqueness constraint"""

    code = "CONSTRAINT_VIOLATION"


class StorageError(SchedulingError):
    """Opaque failure reported by the storage collaborator"""

    code = "STORAGE_ERROR"
