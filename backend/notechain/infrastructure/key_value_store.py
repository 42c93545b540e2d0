"""Key-Value Stores — byte persistence behind the KeyValueStore protocol.

Invariants:
    - get() of a never-set or removed key returns None
    - set() replaces any existing value for the key
    - remove() of a missing key is a no-op

Design Decisions:
    - InMemoryKeyValueStore for tests and ephemeral runs
    - SqlKeyValueStore stores one row per key via DatabaseSessionManager, so
      driver failures surface as StorageError
"""

import logging

from sqlalchemy import delete, select

from notechain.infrastructure.database import DatabaseSessionManager
from notechain.models.kv_entry import KeyValueEntry

logger = logging.getLogger(__name__)


class InMemoryKeyValueStore:
    def __init__(self):
        self._data: dict[str, bytes] = {}

    async def get(self, key: str) -> bytes | None:
        return self._data.get(key)

    async def set(self, key: str, value: bytes) -> None:
        self._data[key] = bytes(value)

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)


class SqlKeyValueStore:
    """KeyValueStore backed by the kv_entries table."""

    def __init__(self, manager: DatabaseSessionManager):
        self._manager = manager

    async def get(self, key: str) -> bytes | None:
        async with self._manager.session() as db:
            result = await db.execute(
                select(KeyValueEntry.value).where(KeyValueEntry.key == key),
            )
            return result.scalar_one_or_none()

    async def set(self, key: str, value: bytes) -> None:
        async with self._manager.session() as db:
            entry = await db.get(KeyValueEntry, key)
            if entry is None:
                db.add(KeyValueEntry(key=key, value=value))
            else:
                entry.value = value
            await db.commit()
        logger.debug("Stored %d bytes under %s", len(value), key)

    async def remove(self, key: str) -> None:
        async with self._manager.session() as db:
            await db.execute(delete(KeyValueEntry).where(KeyValueEntry.key == key))
            await db.commit()
