"""
Application service for quoting and submitting bookings.

The service resolves the customer's partial selection against the catalog
and the stored time slots, validates it, prices it and hands the finished
booking to the repository.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import pendulum
from pydantic import BaseModel

from ..domain import catalog
from ..domain.exceptions import BookingValidationError, SlotUnavailableError
from ..domain.models import Booking, BookingStatus, TimeSlot
from ..domain.pricing import FUEL_RATE, Quote, quote
from .booking_repository import BookingRepository

logger = logging.getLogger(__name__)

# Forward moves of the booking lifecycle; cancellation is handled separately.
_NEXT_STATUS: Dict[BookingStatus, BookingStatus] = {
    BookingStatus.PENDING: BookingStatus.CONFIRMED,
    BookingStatus.CONFIRMED: BookingStatus.IN_PROGRESS,
    BookingStatus.IN_PROGRESS: BookingStatus.COMPLETED,
}


class BookingDraft(BaseModel):
    """Transient form state collected step by step before submission."""
    location_id: Optional[str] = None
    slot_id: Optional[str] = None
    service_id: Optional[str] = None
    customer_name: Optional[str] = None
    customer_phone: Optional[str] = None
    notes: Optional[str] = None

    def missing_fields(self) -> List[str]:
        """Names of required selections that are absent or blank."""
        return [
            field_name
            for field_name, value in [
                ("location", self.location_id),
                ("slot", self.slot_id),
                ("service", self.service_id),
                ("name", self.customer_name),
                ("phone", self.customer_phone),
            ]
            if not value or not value.strip()
        ]


@dataclass(frozen=True)
class BookingSummary:
    """Counters shown above the booking history."""
    total: int
    pending: int
    confirmed: int
    completed: int


class BookingService:
    """
    Orchestrates pricing, validation and persistence of bookings.

    The repository is injected, so tests can run the whole flow against an
    in-memory store.
    """

    def __init__(self, repository: BookingRepository, fuel_rate: float = FUEL_RATE) -> None:
        self._repository = repository
        self._fuel_rate = fuel_rate

    @property
    def repository(self) -> BookingRepository:
        return self._repository

    def quote(self, location_id: str, service_id: str) -> Quote | None:
        """Price a service at a location, or None if either id is unknown."""
        location = catalog.get_location(location_id)
        service = catalog.get_service(service_id)
        if location is None or service is None:
            return None
        return quote(service, location, self._fuel_rate)

    async def available_slots(self) -> List[TimeSlot]:
        """Slots a customer may currently pick."""
        slots = await self._repository.list_time_slots()
        return [slot for slot in slots if slot.is_selectable]

    async def submit(self, draft: BookingDraft) -> Booking:
        """
        Validate a draft and persist it as a pending booking.

        Args:
            draft: The customer's selection and contact details

        Returns:
            The stored booking

        Raises:
            BookingValidationError: If a required selection is missing or unknown
            SlotUnavailableError: If the chosen slot is blocked or already booked
            StorageError: If the booking could not be stored
        """
        missing = draft.missing_fields()
        if missing:
            raise BookingValidationError(
                f"Cannot create booking - missing required fields: {', '.join(missing)}.",
                missing_fields=missing,
            )

        location = catalog.get_location(draft.location_id)
        if location is None:
            raise BookingValidationError(f"Unknown location: {draft.location_id}")

        service = catalog.get_service(draft.service_id)
        if service is None:
            raise BookingValidationError(f"Unknown wash service: {draft.service_id}")

        slots = await self._repository.list_time_slots()
        time_slot = next((slot for slot in slots if slot.id == draft.slot_id), None)
        if time_slot is None:
            raise BookingValidationError(f"Unknown time slot: {draft.slot_id}")
        if not time_slot.is_selectable:
            raise SlotUnavailableError(
                f"Time slot {time_slot.id} is no longer available."
            )

        price = quote(service, location, self._fuel_rate)
        booking = Booking(
            id=uuid.uuid4().hex,
            customer_name=draft.customer_name.strip(),
            customer_phone=draft.customer_phone.strip(),
            location=location,
            time_slot=time_slot.with_status(is_available=False, is_booked=True),
            wash_service=service,
            total_price=price.total_price,
            fuel_charge=price.fuel_charge,
            status=BookingStatus.PENDING,
            created_at=pendulum.now("UTC").to_iso8601_string(),
            notes=draft.notes.strip() if draft.notes and draft.notes.strip() else None,
        )

        await self._repository.save_booking(booking)
        logger.info(
            "Booking %s created for %s at %s on %s",
            booking.id,
            booking.customer_name,
            location.name,
            time_slot.id,
        )
        return booking

    async def booking_history(self) -> List[Booking]:
        """All bookings, newest first."""
        bookings = await self._repository.list_bookings()
        return sorted(
            bookings,
            key=lambda booking: pendulum.parse(booking.created_at),
            reverse=True,
        )


def summarize_bookings(bookings: Sequence[Booking]) -> BookingSummary:
    """Count bookings per headline status."""
    return BookingSummary(
        total=len(bookings),
        pending=sum(1 for b in bookings if b.status is BookingStatus.PENDING),
        confirmed=sum(1 for b in bookings if b.status is BookingStatus.CONFIRMED),
        completed=sum(1 for b in bookings if b.status is BookingStatus.COMPLETED),
    )


def can_transition(current: BookingStatus, new: BookingStatus) -> bool:
    """
    Advisory lifecycle policy: one step forward, or cancel a live booking.

    The repository does not call this; callers decide whether to enforce it.
    """
    if new is BookingStatus.CANCELLED:
        return not current.is_terminal
    return _NEXT_STATUS.get(current) is new
