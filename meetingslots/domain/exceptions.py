"""
Domain-specific exception hierarchy for the meeting slots application.
"""

from typing import Sequence


class SchedulingError(Exception):
    """Base class for all application-level errors."""


class ConfigurationError(SchedulingError):
    """Raised at startup when the configuration is unusable."""


class AuthorizationMissing(SchedulingError):
    """Raised when no calendar credentials have been stored yet."""


class ValidationError(SchedulingError, ValueError):
    """Raised when busy-window data or a booking request is malformed."""

    def __init__(self, message: str, fields: Sequence[str] = ()):
        super().__init__(message)
        self.message = message
        self.fields = list(fields)


class SlotUnavailable(SchedulingError):
    """Raised when a requested booking collides with a busy window."""


class UpstreamError(SchedulingError):
    """Raised when the calendar provider fails or returns malformed data."""
