"""
Domain-specific exception hierarchy for the SmartWash booking core.
"""

from typing import Sequence


class SmartWashError(Exception):
    """Base class for all application-level errors."""


class BookingValidationError(SmartWashError):
    """Raised when a booking submission is incomplete or refers to unknown data."""

    def __init__(self, message: str, missing_fields: Sequence[str] = ()):
        super().__init__(message)
        self.missing_fields = list(missing_fields)


class SlotUnavailableError(BookingValidationError):
    """Raised when the chosen time slot is blocked or already booked."""


class StorageError(SmartWashError):
    """Raised when persisted data cannot be read, decoded or written."""
