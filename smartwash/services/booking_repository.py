"""
Durable storage of bookings and time slots.

The repository keeps two independently keyed records in a key/value store:
the full booking list and the full time-slot list, both serialized as JSON.
Every mutation is a read-modify-write of the whole record.

Read paths never fail: a storage error is logged and a safe fallback is
returned, so the presentation layer always has something to render. Write
paths raise ``StorageError`` so the caller can tell the user and retry.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Callable, List, Protocol, Sequence, TypeVar

from pydantic import TypeAdapter, ValidationError

from ..domain.exceptions import StorageError
from ..domain.models import Booking, BookingStatus, TimeSlot
from ..domain.slot_generator import SlotGenerator

logger = logging.getLogger(__name__)

BOOKINGS_KEY = "smartwash_bookings"
TIMESLOTS_KEY = "smartwash_timeslots"

_BOOKING_LIST = TypeAdapter(List[Booking])
_SLOT_LIST = TypeAdapter(List[TimeSlot])

T = TypeVar("T")


class KeyValueStoreProtocol(Protocol):
    """Protocol describing the durable storage needed by the repository."""

    async def get_item(self, key: str) -> str | None:
        """Return the stored value, or None if the key was never written."""

    async def set_item(self, key: str, value: str) -> None:
        """Store a value, replacing any previous one."""

    async def remove_item(self, key: str) -> None:
        """Delete a key; missing keys are ignored."""


class BookingRepository:
    """
    Stores bookings and time slots behind a key/value store.

    The store is injected so the JSON file adapter can be swapped for an
    in-memory fake in tests. Slot generation takes its "today" from
    ``today_provider`` when one is given.
    """

    def __init__(
        self,
        store: KeyValueStoreProtocol,
        slot_generator: SlotGenerator | None = None,
        today_provider: Callable[[], date] | None = None,
    ) -> None:
        self._store = store
        self._slot_generator = slot_generator or SlotGenerator()
        self._today_provider = today_provider

    async def list_bookings(self) -> List[Booking]:
        """Return all stored bookings in stored order, or [] if storage fails."""
        try:
            return await self._read_bookings()
        except StorageError as exc:
            logger.warning("Could not load bookings, showing none: %s", exc)
            return []

    async def save_booking(self, booking: Booking) -> None:
        """
        Append a booking and mark its time slot as booked.

        The two writes form one unit: if the slot update fails, the booking
        record is restored to its previous state before the error is raised.

        Raises:
            StorageError: If either write fails
        """
        previous_raw = await self._store.get_item(BOOKINGS_KEY)
        bookings = self._decode(_BOOKING_LIST, previous_raw, BOOKINGS_KEY) if previous_raw else []
        bookings.append(booking)

        await self._store.set_item(BOOKINGS_KEY, self._encode(_BOOKING_LIST, bookings))

        try:
            await self.set_slot_status(booking.time_slot.id, is_available=False, is_booked=True)
        except StorageError:
            logger.error(
                "Marking slot %s as booked failed, rolling back booking %s",
                booking.time_slot.id,
                booking.id,
            )
            await self._restore_bookings(previous_raw)
            raise

        logger.info("Booking %s saved for slot %s", booking.id, booking.time_slot.id)

    async def list_time_slots(self) -> List[TimeSlot]:
        """
        Return the persisted slots, seeding storage on first use.

        If storage holds no slots yet, the canonical window is generated,
        persisted and returned. If storage cannot be read, a freshly
        generated set is returned without persisting it.
        """
        try:
            slots = await self._read_slots()
        except StorageError as exc:
            logger.warning("Could not load time slots, using a fresh set: %s", exc)
            return self._generate_slots()

        if slots:
            return slots

        generated = self._generate_slots()
        try:
            await self._write_slots(generated)
        except StorageError as exc:
            logger.warning("Could not persist generated time slots: %s", exc)
        return generated

    async def set_slot_status(self, slot_id: str, is_available: bool, is_booked: bool) -> None:
        """
        Update the flags of exactly one slot. Unknown ids are ignored.

        Raises:
            StorageError: If storage cannot be read or written
        """
        slots = await self._read_slots() or self._generate_slots()

        if not any(slot.id == slot_id for slot in slots):
            logger.info("No time slot %s, nothing to update", slot_id)
            return

        updated = [
            slot.with_status(is_available, is_booked) if slot.id == slot_id else slot
            for slot in slots
        ]
        await self._write_slots(updated)

    async def update_booking_status(self, booking_id: str, status: BookingStatus | str) -> None:
        """
        Overwrite the status of one booking. Unknown ids are ignored.

        No transition rules are enforced here; that policy belongs to the
        caller.

        Raises:
            StorageError: If storage cannot be read or written
            ValueError: If ``status`` is not a known booking status
        """
        new_status = BookingStatus(status)
        bookings = await self._read_bookings()

        if not any(booking.id == booking_id for booking in bookings):
            logger.info("No booking %s, status left unchanged", booking_id)
            return

        updated = [
            booking.with_status(new_status) if booking.id == booking_id else booking
            for booking in bookings
        ]
        await self._store.set_item(BOOKINGS_KEY, self._encode(_BOOKING_LIST, updated))

    def _generate_slots(self) -> List[TimeSlot]:
        today = self._today_provider() if self._today_provider else None
        return self._slot_generator.generate(today)

    async def _read_bookings(self) -> List[Booking]:
        raw = await self._store.get_item(BOOKINGS_KEY)
        if not raw:
            return []
        return self._decode(_BOOKING_LIST, raw, BOOKINGS_KEY)

    async def _read_slots(self) -> List[TimeSlot] | None:
        raw = await self._store.get_item(TIMESLOTS_KEY)
        if not raw:
            return None
        return self._decode(_SLOT_LIST, raw, TIMESLOTS_KEY)

    async def _write_slots(self, slots: Sequence[TimeSlot]) -> None:
        await self._store.set_item(TIMESLOTS_KEY, self._encode(_SLOT_LIST, list(slots)))

    async def _restore_bookings(self, previous_raw: str | None) -> None:
        try:
            if previous_raw is None:
                await self._store.remove_item(BOOKINGS_KEY)
            else:
                await self._store.set_item(BOOKINGS_KEY, previous_raw)
        except StorageError as exc:
            logger.error(
                "Rollback of bookings failed, bookings and slots may disagree: %s", exc
            )

    @staticmethod
    def _decode(adapter: TypeAdapter[List[T]], raw: str, key: str) -> List[T]:
        try:
            return adapter.validate_json(raw)
        except ValidationError as exc:
            raise StorageError(f"Stored data under '{key}' is corrupt: {exc}") from exc

    @staticmethod
    def _encode(adapter: TypeAdapter[List[T]], items: List[T]) -> str:
        return adapter.dump_json(items, by_alias=True).decode("utf-8")
