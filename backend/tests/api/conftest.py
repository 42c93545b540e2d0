"""API test fixtures — isolated FastAPI app with in-memory ledger and store.

Invariants:
    - Each test builds its own app via create_app(); app.state seeded directly
    - No lifespan runs, so no database file is ever created

Design Decisions:
    - httpx AsyncClient + ASGITransport: exercises routing, validation and error handlers
"""

import pytest
from httpx import ASGITransport, AsyncClient

from notechain.core.chain import Chain
from notechain.infrastructure.key_value_store import InMemoryKeyValueStore
from notechain.main import create_app
from notechain.services.note_ledger import NoteLedger
from notechain.services.note_store import NoteStore


@pytest.fixture
def app(codec, clock):
    application = create_app()
    application.state.ledger = NoteLedger(codec, Chain(digest=codec.digest, clock=clock))
    application.state.note_store = NoteStore(InMemoryKeyValueStore(), codec)
    return application


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
def create_payload():
    return {"title": "Groceries", "content": "milk, eggs", "tags": ["home"]}
