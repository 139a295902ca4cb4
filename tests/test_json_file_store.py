"""
Tests for the JSON file storage adapter.
"""

import asyncio

import pytest

from smartwash.adapters.json_file_store import JsonFileStore
from smartwash.domain.exceptions import StorageError
from smartwash.services.booking_repository import BookingRepository

from conftest import TODAY, make_booking


class TestJsonFileStore:
    """Tests for JsonFileStore."""

    def test_missing_key_returns_none(self, tmp_path):
        store = JsonFileStore(tmp_path / "data")

        assert asyncio.run(store.get_item("smartwash_bookings")) is None

    def test_write_then_read(self, tmp_path):
        store = JsonFileStore(tmp_path / "data")

        asyncio.run(store.set_item("smartwash_bookings", "[]"))

        assert asyncio.run(store.get_item("smartwash_bookings")) == "[]"
        assert (tmp_path / "data" / "smartwash_bookings.json").read_text(encoding="utf-8") == "[]"

    def test_overwrite_leaves_no_temp_files(self, tmp_path):
        store = JsonFileStore(tmp_path)

        asyncio.run(store.set_item("key", "first"))
        asyncio.run(store.set_item("key", "second"))

        assert asyncio.run(store.get_item("key")) == "second"
        assert [p.name for p in tmp_path.iterdir()] == ["key.json"]

    def test_remove_item(self, tmp_path):
        store = JsonFileStore(tmp_path)
        asyncio.run(store.set_item("key", "value"))

        asyncio.run(store.remove_item("key"))
        asyncio.run(store.remove_item("key"))

        assert asyncio.run(store.get_item("key")) is None

    def test_invalid_key_rejected(self, tmp_path):
        store = JsonFileStore(tmp_path)

        with pytest.raises(ValueError):
            store.path_for("../escape")

    def test_unwritable_directory_raises_storage_error(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("file in the way", encoding="utf-8")
        store = JsonFileStore(blocker)

        with pytest.raises(StorageError):
            asyncio.run(store.set_item("key", "value"))

    def test_repository_persists_across_instances(self, tmp_path):
        """A new repository on the same folder sees earlier bookings and slots."""
        first = BookingRepository(JsonFileStore(tmp_path), today_provider=lambda: TODAY)
        asyncio.run(first.save_booking(make_booking(slot_id="2025-01-07_9")))

        second = BookingRepository(JsonFileStore(tmp_path), today_provider=lambda: TODAY)
        bookings = asyncio.run(second.list_bookings())
        slot = next(s for s in asyncio.run(second.list_time_slots()) if s.id == "2025-01-07_9")

        assert [b.id for b in bookings] == ["b1"]
        assert slot.is_booked and not slot.is_available

    def test_undecodable_file_raises_storage_error(self, tmp_path):
        store = JsonFileStore(tmp_path)
        (tmp_path / "key.json").write_bytes(b"[\xff\xfe]")

        with pytest.raises(StorageError):
            asyncio.run(store.get_item("key"))

    def test_undecodable_bookings_file_lists_no_bookings(self, tmp_path):
        """Bytes that are not UTF-8 fall back to an empty history."""
        (tmp_path / "smartwash_bookings.json").write_bytes(b"[\xff\xfe]")
        repository = BookingRepository(JsonFileStore(tmp_path), today_provider=lambda: TODAY)

        assert asyncio.run(repository.list_bookings()) == []

    def test_undecodable_slots_file_gives_fresh_slots(self, tmp_path):
        """Bytes that are not UTF-8 fall back to a freshly generated window."""
        (tmp_path / "smartwash_timeslots.json").write_bytes(b"[\xff\xfe]")
        repository = BookingRepository(JsonFileStore(tmp_path), today_provider=lambda: TODAY)

        slots = asyncio.run(repository.list_time_slots())

        assert len(slots) == 70
        assert all(slot.is_selectable for slot in slots)
