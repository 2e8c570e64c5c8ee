from __future__ import annotations

import json
import logging

from . import grid as seat_grid
from .errors import CorruptDataError
from .grid import Grid
from .repositories import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "greenstitch-seat-bookings-v1"


def serialize(grid: Grid) -> str:
    return json.dumps(seat_grid.to_booked_id_list(grid))


def deserialize(raw: str) -> set[str]:
    try:
        data = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as exc:
        raise CorruptDataError("booked seats payload is not valid JSON") from exc
    if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
        raise CorruptDataError("booked seats payload must be a JSON array of strings")
    return set(data)


class BookingStore:
    """
    Persists the booked-seat id set under a single key.
    The in-memory grid stays the source of truth: read problems degrade to an
    empty set and write failures are logged, never raised.
    """

    def __init__(self, kv: KeyValueStore, *, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.kv = kv
        self.key = key

    async def load(self) -> set[str]:
        try:
            raw = await self.kv.get(self.key)
        except Exception:
            logger.exception("failed to read persisted bookings under %s", self.key)
            return set()
        if raw is None:
            return set()
        try:
            return deserialize(raw)
        except CorruptDataError:
            logger.warning("ignoring corrupt booking data under %s", self.key, exc_info=True)
            return set()

    async def save(self, grid: Grid) -> bool:
        # Serialize before the first await so the persisted payload matches this snapshot.
        payload = serialize(grid)
        try:
            await self.kv.set(self.key, payload)
        except Exception:
            logger.exception("failed to persist bookings under %s", self.key)
            return False
        return True

    async def clear(self) -> bool:
        try:
            await self.kv.delete(self.key)
        except Exception:
            logger.exception("failed to clear persisted bookings under %s", self.key)
            return False
        return True
