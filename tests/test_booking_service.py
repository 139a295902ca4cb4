"""
Tests for the BookingService submission flow.
"""

import asyncio

import pendulum
import pytest

from smartwash.domain.exceptions import BookingValidationError, SlotUnavailableError, StorageError
from smartwash.domain.models import BookingStatus
from smartwash.services.booking_repository import BOOKINGS_KEY, TIMESLOTS_KEY
from smartwash.services.booking_service import (
    BookingDraft,
    can_transition,
    summarize_bookings,
)

from conftest import make_booking, make_draft


class TestQuote:
    """Tests for BookingService.quote."""

    def test_quote_by_ids(self, booking_service):
        price = booking_service.quote("3", "premium")

        assert price.fuel_charge == 1840
        assert price.total_price == 2140

    def test_unknown_ids_return_none(self, booking_service):
        assert booking_service.quote("99", "normal") is None
        assert booking_service.quote("1", "deluxe") is None


class TestSubmit:
    """Tests for BookingService.submit."""

    def test_submit_creates_pending_booking(self, booking_service, repository):
        """A complete draft becomes a priced, pending, persisted booking."""
        booking = asyncio.run(booking_service.submit(make_draft(notes="  Red hatchback ")))

        assert booking.status is BookingStatus.PENDING
        assert booking.location.name == "Namchi"
        assert booking.wash_service.id == "normal"
        assert booking.fuel_charge == 1248
        assert booking.total_price == 1398
        assert booking.notes == "Red hatchback"
        assert pendulum.parse(booking.created_at) <= pendulum.now("UTC")

        stored = asyncio.run(repository.list_bookings())
        assert [b.id for b in stored] == [booking.id]

    def test_submit_marks_slot_booked(self, booking_service):
        asyncio.run(booking_service.submit(make_draft(slot_id="2025-01-08_15")))

        available = {slot.id for slot in asyncio.run(booking_service.available_slots())}

        assert "2025-01-08_15" not in available
        assert len(available) == 69

    def test_booking_ids_are_unique(self, booking_service):
        first = asyncio.run(booking_service.submit(make_draft(slot_id="2025-01-06_9")))
        second = asyncio.run(booking_service.submit(make_draft(slot_id="2025-01-06_10")))

        assert first.id != second.id

    @pytest.mark.parametrize(
        "field_name, missing",
        [
            ("location_id", "location"),
            ("slot_id", "slot"),
            ("service_id", "service"),
            ("customer_name", "name"),
            ("customer_phone", "phone"),
        ],
    )
    def test_missing_field_rejected_before_persistence(self, booking_service, store, field_name, missing):
        """Incomplete drafts never reach storage."""
        with pytest.raises(BookingValidationError) as exc_info:
            asyncio.run(booking_service.submit(make_draft(**{field_name: None})))

        assert exc_info.value.missing_fields == [missing]
        assert store.items == {}

    def test_blank_name_counts_as_missing(self, booking_service):
        with pytest.raises(BookingValidationError, match="name"):
            asyncio.run(booking_service.submit(make_draft(customer_name="   ")))

    def test_empty_draft_lists_every_field(self, booking_service):
        with pytest.raises(BookingValidationError) as exc_info:
            asyncio.run(booking_service.submit(BookingDraft()))

        assert exc_info.value.missing_fields == ["location", "slot", "service", "name", "phone"]

    def test_unknown_location_rejected(self, booking_service):
        with pytest.raises(BookingValidationError, match="Unknown location"):
            asyncio.run(booking_service.submit(make_draft(location_id="99")))

    def test_unknown_slot_rejected(self, booking_service):
        with pytest.raises(BookingValidationError, match="Unknown time slot"):
            asyncio.run(booking_service.submit(make_draft(slot_id="2030-01-01_9")))

    def test_booked_slot_rejected(self, booking_service):
        asyncio.run(booking_service.submit(make_draft(slot_id="2025-01-06_9")))

        with pytest.raises(SlotUnavailableError):
            asyncio.run(booking_service.submit(make_draft(slot_id="2025-01-06_9")))

    def test_blocked_slot_rejected(self, booking_service, repository):
        asyncio.run(repository.set_slot_status("2025-01-06_11", is_available=False, is_booked=False))

        with pytest.raises(SlotUnavailableError):
            asyncio.run(booking_service.submit(make_draft(slot_id="2025-01-06_11")))

    def test_storage_failure_surfaces(self, booking_service, store):
        store.failing_writes.add(BOOKINGS_KEY)

        with pytest.raises(StorageError):
            asyncio.run(booking_service.submit(make_draft()))

    def test_slot_failure_leaves_no_booking(self, booking_service, repository, store):
        asyncio.run(repository.list_time_slots())
        store.failing_writes.add(TIMESLOTS_KEY)

        with pytest.raises(StorageError):
            asyncio.run(booking_service.submit(make_draft()))

        assert asyncio.run(repository.list_bookings()) == []


class TestHistory:
    """Tests for history and summaries."""

    def test_history_newest_first(self, booking_service, repository):
        asyncio.run(repository.save_booking(
            make_booking(booking_id="old", slot_id="2025-01-06_9", created_at="2025-01-01T08:00:00+00:00")
        ))
        asyncio.run(repository.save_booking(
            make_booking(booking_id="new", slot_id="2025-01-06_10", created_at="2025-01-03T08:00:00+00:00")
        ))

        history = asyncio.run(booking_service.booking_history())

        assert [b.id for b in history] == ["new", "old"]

    def test_summary_counts(self):
        bookings = [
            make_booking(booking_id="a", status=BookingStatus.PENDING),
            make_booking(booking_id="b", status=BookingStatus.PENDING),
            make_booking(booking_id="c", status=BookingStatus.CONFIRMED),
            make_booking(booking_id="d", status=BookingStatus.COMPLETED),
            make_booking(booking_id="e", status=BookingStatus.CANCELLED),
        ]

        summary = summarize_bookings(bookings)

        assert (summary.total, summary.pending, summary.confirmed, summary.completed) == (5, 2, 1, 1)


class TestTransitions:
    """Tests for the advisory status policy."""

    @pytest.mark.parametrize(
        "current, new",
        [
            (BookingStatus.PENDING, BookingStatus.CONFIRMED),
            (BookingStatus.CONFIRMED, BookingStatus.IN_PROGRESS),
            (BookingStatus.IN_PROGRESS, BookingStatus.COMPLETED),
            (BookingStatus.PENDING, BookingStatus.CANCELLED),
            (BookingStatus.IN_PROGRESS, BookingStatus.CANCELLED),
        ],
    )
    def test_allowed(self, current, new):
        assert can_transition(current, new)

    @pytest.mark.parametrize(
        "current, new",
        [
            (BookingStatus.COMPLETED, BookingStatus.PENDING),
            (BookingStatus.PENDING, BookingStatus.COMPLETED),
            (BookingStatus.CANCELLED, BookingStatus.CANCELLED),
            (BookingStatus.COMPLETED, BookingStatus.CANCELLED),
        ],
    )
    def test_rejected(self, current, new):
        assert not can_transition(current, new)
