"""
Domain layer - Pure business logic without external dependencies.
"""

from .exceptions import BookingValidationError, SlotUnavailableError, SmartWashError, StorageError
from .models import Booking, BookingStatus, Location, TimeSlot, WashService
from .pricing import FUEL_RATE, Quote, fuel_charge, quote, total_price
from .slot_generator import ServiceHours, SlotGenerator

__all__ = [
    "Booking",
    "BookingStatus",
    "BookingValidationError",
    "FUEL_RATE",
    "Location",
    "Quote",
    "ServiceHours",
    "SlotGenerator",
    "SlotUnavailableError",
    "SmartWashError",
    "StorageError",
    "TimeSlot",
    "WashService",
    "fuel_charge",
    "quote",
    "total_price",
]
