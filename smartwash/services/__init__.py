"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .booking_repository import BookingRepository, KeyValueStoreProtocol
from .booking_service import BookingDraft, BookingService, can_transition, summarize_bookings

__all__ = [
    "BookingDraft",
    "BookingRepository",
    "BookingService",
    "KeyValueStoreProtocol",
    "can_transition",
    "summarize_bookings",
]
