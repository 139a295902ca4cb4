"""Shared test fixtures and helpers."""

from datetime import date
from typing import Optional

import pytest

from smartwash.adapters.memory_store import InMemoryStore
from smartwash.domain import catalog
from smartwash.domain.models import Booking, BookingStatus
from smartwash.domain.pricing import quote
from smartwash.domain.slot_generator import generate_time_slots
from smartwash.services.booking_repository import BookingRepository
from smartwash.services.booking_service import BookingDraft, BookingService

TODAY = date(2025, 1, 6)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def repository(store):
    return BookingRepository(store=store, today_provider=lambda: TODAY)


@pytest.fixture
def booking_service(repository):
    return BookingService(repository=repository)


def make_booking(
    booking_id: str = "b1",
    location_id: str = "2",
    service_id: str = "normal",
    slot_id: str = "2025-01-06_9",
    status: BookingStatus = BookingStatus.PENDING,
    created_at: str = "2025-01-05T10:00:00+00:00",
    notes: Optional[str] = None,
) -> Booking:
    """Helper to create a priced Booking for the test window."""
    location = catalog.get_location(location_id)
    service = catalog.get_service(service_id)
    slot = next(s for s in generate_time_slots(TODAY) if s.id == slot_id)
    price = quote(service, location)
    return Booking(
        id=booking_id,
        customer_name="Pema Sherpa",
        customer_phone="9800000001",
        location=location,
        time_slot=slot,
        wash_service=service,
        total_price=price.total_price,
        fuel_charge=price.fuel_charge,
        status=status,
        created_at=created_at,
        notes=notes,
    )


def make_draft(**overrides) -> BookingDraft:
    """Helper to create a complete draft, with selected fields overridden."""
    fields = {
        "location_id": "2",
        "slot_id": "2025-01-06_10",
        "service_id": "normal",
        "customer_name": "Pema Sherpa",
        "customer_phone": "9800000001",
    }
    fields.update(overrides)
    return BookingDraft(**fields)
