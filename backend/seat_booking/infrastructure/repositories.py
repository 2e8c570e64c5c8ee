from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..domain.repositories import KeyValueStore
from ..models import KeyValueEntry


class SqlAlchemyKeyValueStore(KeyValueStore):
    """Each call runs in its own short transaction."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    async def get(self, key: str) -> Optional[str]:
        async with self.session_factory() as session:
            entry = await session.get(KeyValueEntry, key)
            return entry.value if entry is not None else None

    async def set(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        async with self.session_factory() as session:
            async with session.begin():
                entry = await session.get(KeyValueEntry, key, with_for_update=True)
                if entry is None:
                    session.add(KeyValueEntry(key=key, value=value, updated_at=now))
                else:
                    entry.value = value
                    entry.updated_at = now

    async def delete(self, key: str) -> None:
        async with self.session_factory() as session:
            async with session.begin():
                await session.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))


class InMemoryKeyValueStore(KeyValueStore):
    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._store: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._store.get(key)

    async def set(self, key: str, value: str) -> None:
        self._store[key] = value

    async def delete(self, key: str) -> None:
        self._store.pop(key, None)
