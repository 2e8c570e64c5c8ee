import json
import logging
from typing import Optional

import pytest
from seat_booking.domain import booking_store
from seat_booking.domain import grid as seat_grid
from seat_booking.domain.booking_store import BookingStore
from seat_booking.domain.errors import CorruptDataError
from seat_booking.infrastructure.repositories import InMemoryKeyValueStore
from seat_booking.models import SeatStatus

KEY = booking_store.DEFAULT_STORAGE_KEY


class FailingKeyValueStore:
    async def get(self, key: str) -> Optional[str]:
        raise OSError("disk unavailable")

    async def set(self, key: str, value: str) -> None:
        raise OSError("disk full")

    async def delete(self, key: str) -> None:
        raise OSError("disk unavailable")


def test_serialize_writes_row_major_json_array() -> None:
    grid = seat_grid.initialize()
    grid = seat_grid.apply_status(grid, 3, 1, SeatStatus.BOOKED)
    grid = seat_grid.apply_status(grid, 0, 0, SeatStatus.BOOKED)
    grid = seat_grid.apply_status(grid, 0, 1, SeatStatus.SELECTED)
    assert json.loads(booking_store.serialize(grid)) == ["0-0", "3-1"]


def test_serialize_empty_grid() -> None:
    assert booking_store.serialize(seat_grid.initialize()) == "[]"


def test_deserialize_returns_id_set() -> None:
    assert booking_store.deserialize('["0-0", "0-1", "0-0"]') == {"0-0", "0-1"}


@pytest.mark.parametrize("raw", ["not json", "{}", '"0-0"', "[1, 2]", '["0-0", null]', "null"])
def test_deserialize_rejects_malformed_payloads(raw: str) -> None:
    with pytest.raises(CorruptDataError):
        booking_store.deserialize(raw)


def test_persisted_ids_merge_back_into_fresh_grid() -> None:
    grid = seat_grid.initialize()
    grid = seat_grid.apply_status(grid, 0, 0, SeatStatus.BOOKED)
    grid = seat_grid.apply_status(grid, 0, 1, SeatStatus.BOOKED)

    restored = seat_grid.merge_booked_ids(seat_grid.initialize(), booking_store.deserialize(booking_store.serialize(grid)))

    assert restored == grid
    assert seat_grid.count_by_status(restored, SeatStatus.AVAILABLE) == 78


@pytest.mark.asyncio
async def test_load_without_stored_key_is_empty() -> None:
    store = BookingStore(InMemoryKeyValueStore())
    assert await store.load() == set()


@pytest.mark.asyncio
async def test_load_with_corrupt_value_logs_and_returns_empty(caplog: pytest.LogCaptureFixture) -> None:
    store = BookingStore(InMemoryKeyValueStore({KEY: "{oops"}))
    with caplog.at_level(logging.WARNING, logger="seat_booking.domain.booking_store"):
        assert await store.load() == set()
    assert "corrupt booking data" in caplog.text


def test_deserialize_treats_deeply_nested_payload_as_corrupt() -> None:
    with pytest.raises(CorruptDataError):
        booking_store.deserialize("[" * 200000)


@pytest.mark.asyncio
async def test_load_with_deeply_nested_value_returns_empty() -> None:
    store = BookingStore(InMemoryKeyValueStore({KEY: "[" * 200000}))
    assert await store.load() == set()


@pytest.mark.asyncio
async def test_save_then_load_round_trips() -> None:
    kv = InMemoryKeyValueStore()
    store = BookingStore(kv, key="custom-key")
    grid = seat_grid.apply_status(seat_grid.initialize(), 7, 9, SeatStatus.BOOKED)

    assert await store.save(grid) is True
    assert await kv.get("custom-key") == '["7-9"]'
    assert await store.load() == {"7-9"}


@pytest.mark.asyncio
async def test_clear_removes_stored_key() -> None:
    kv = InMemoryKeyValueStore({KEY: '["0-0"]'})
    store = BookingStore(kv)
    assert await store.clear() is True
    assert await kv.get(KEY) is None
    assert await store.load() == set()


@pytest.mark.asyncio
async def test_storage_failures_are_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    store = BookingStore(FailingKeyValueStore())
    grid = seat_grid.initialize()
    with caplog.at_level(logging.ERROR, logger="seat_booking.domain.booking_store"):
        assert await store.save(grid) is False
        assert await store.clear() is False
        assert await store.load() == set()
    assert "failed to persist bookings" in caplog.text
