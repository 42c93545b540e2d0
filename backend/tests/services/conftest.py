"""Service test fixtures — async SQLite store, note stores and ledgers.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Ledgers use a random-key codec and a deterministic clock

Design Decisions:
    - SQLite in-memory via aiosqlite: fast, no external dependency
"""

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from notechain.core.chain import Chain
from notechain.infrastructure.database import DatabaseSessionManager
from notechain.infrastructure.key_value_store import InMemoryKeyValueStore, SqlKeyValueStore
from notechain.services.note_ledger import NoteLedger
from notechain.services.note_store import NoteStore


@pytest.fixture
async def db_manager():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", poolclass=StaticPool, echo=False,
    )
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:", engine=engine)
    await manager.create_tables()
    yield manager
    await manager.dispose()


@pytest.fixture
def memory_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def sql_store(db_manager):
    return SqlKeyValueStore(db_manager)


@pytest.fixture
def note_store(memory_store, codec):
    return NoteStore(memory_store, codec)


@pytest.fixture
def ledger(codec, clock):
    return NoteLedger(codec, Chain(digest=codec.digest, clock=clock))
