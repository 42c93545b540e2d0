"""Root conftest — shared test configuration and pure-core fixtures."""

import itertools
import os
from datetime import datetime, timezone

import pytest

# Ensure tests never pick up a real deployment secret or database
os.environ.setdefault("NOTECHAIN_CIPHER_SECRET", "test-secret")
os.environ.setdefault("NOTECHAIN_DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from notechain.core.chain import Chain  # noqa: E402
from notechain.core.cipher_codec import CipherCodec  # noqa: E402
from notechain.core.domain_types import Note  # noqa: E402


@pytest.fixture
def codec() -> CipherCodec:
    return CipherCodec.generate()


@pytest.fixture
def clock():
    """Deterministic ms clock: 1_700_000_000_000, +1, +2, ..."""
    counter = itertools.count(1_700_000_000_000)
    return lambda: next(counter)


@pytest.fixture
def chain(clock) -> Chain:
    return Chain(clock=clock)


@pytest.fixture
def make_note():
    """Factory for notes with fixed, millisecond-exact timestamps."""
    stamp = datetime(2024, 4, 1, 9, 30, tzinfo=timezone.utc)

    def _make(note_id: str = "n1", title: str = "Groceries",
              content: str = "milk, eggs", tags=("home",)) -> Note:
        return Note(
            id=note_id, title=title, content=content, tags=tags,
            created_at=stamp, updated_at=stamp,
        )
    return _make
