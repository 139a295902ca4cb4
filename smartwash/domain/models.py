"""
Domain models for the catalog, time slots and bookings.

All models serialize with the camelCase keys used by the mobile app's
storage (``distanceFromOffice``, ``timeSlot``, ``isAvailable`` ...), while
Python code works with snake_case attributes.
"""

import datetime
import math
from enum import Enum
from typing import Optional

import pendulum
from pendulum.parsing.exceptions import ParserError
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class _Record(BaseModel):
    """Immutable model persisted with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Location(_Record):
    """
    A serviceable location.

    ``distance_from_office`` is the one-way distance from the depot in km.
    """
    id: str
    name: str
    pincode: str
    distance_from_office: float = Field(ge=0)


class WashService(_Record):
    """A wash-service tier with its base price and duration in minutes."""
    id: str
    name: str
    description: str
    base_price: float = Field(ge=0)
    duration: int = Field(gt=0)


class TimeSlot(_Record):
    """
    One bookable hour on one calendar day.

    ``is_available`` and ``is_booked`` are independent: a slot can be blocked
    administratively without being booked.
    """
    id: str
    date: datetime.date
    time: str
    is_available: bool = True
    is_booked: bool = False

    @property
    def is_selectable(self) -> bool:
        """A customer may pick the slot only if it is available and not booked."""
        return self.is_available and not self.is_booked

    def with_status(self, is_available: bool, is_booked: bool) -> "TimeSlot":
        """Return a copy carrying the given flags."""
        return self.model_copy(
            update={"is_available": is_available, "is_booked": is_booked}
        )

    def format_display(self) -> str:
        """Format: Mon, 06 Jan 2025 | 09:00"""
        return f"{self.date.strftime('%a, %d %b %Y')} | {self.time}"


class BookingStatus(str, Enum):
    """Lifecycle of a booking."""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (BookingStatus.COMPLETED, BookingStatus.CANCELLED)


class Booking(_Record):
    """
    A confirmed customer booking.

    Location, slot and service are snapshots taken at booking time. Prices
    are computed once on creation and never recomputed from the catalog.

    Invariant: total_price == wash_service.base_price + fuel_charge.
    """
    id: str
    customer_name: str
    customer_phone: str
    location: Location
    time_slot: TimeSlot
    wash_service: WashService
    total_price: float = Field(ge=0)
    fuel_charge: float = Field(ge=0)
    status: BookingStatus = BookingStatus.PENDING
    created_at: str
    notes: Optional[str] = None

    @field_validator("created_at")
    @classmethod
    def validate_created_at(cls, value: str) -> str:
        """Require an ISO 8601 timestamp."""
        try:
            parsed = pendulum.parse(value)
        except (ParserError, ValueError) as exc:
            raise ValueError(f"created_at must be an ISO 8601 timestamp, got {value!r}") from exc
        if not isinstance(parsed, datetime.datetime):
            raise ValueError(f"created_at must be an ISO 8601 timestamp, got {value!r}")
        return value

    @model_validator(mode="after")
    def validate_price_breakdown(self) -> "Booking":
        """Ensure the total matches base price plus fuel charge."""
        expected = self.wash_service.base_price + self.fuel_charge
        if not math.isclose(self.total_price, expected):
            raise ValueError(
                f"total_price {self.total_price} does not equal base price "
                f"{self.wash_service.base_price} plus fuel charge {self.fuel_charge}"
            )
        return self

    def with_status(self, status: BookingStatus) -> "Booking":
        """Return a copy with a new status; every other field is kept."""
        return self.model_copy(update={"status": status})
