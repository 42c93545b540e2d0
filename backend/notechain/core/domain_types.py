"""Domain Types — immutable note, payload and block records shared by codec and chain.

Invariants:
    - Note, EncryptedPayload and Block are frozen — a sealed block is never edited in place
    - EncryptedPayload.id always mirrors the source Note.id
    - Note and payload timestamps are normalized to UTC milliseconds at construction
    - GENESIS_PREVIOUS_HASH is a sentinel, not a real digest

Design Decisions:
    - Frozen dataclasses over ORM/pydantic in core: no IO, hashable field access,
      dataclasses.replace() yields the "updated copy" semantics for free
    - str Enum for sort keys: serializes to JSON without custom encoders
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from notechain.core.timestamps import normalize_timestamp


# ─── Constants ───────────────────────────────────────────────────

DEFAULT_DIFFICULTY = 2
GENESIS_ID = "genesis"
GENESIS_PREVIOUS_HASH = "0"
GENESIS_DATA = "Genesis Block"


# ─── Enums ───────────────────────────────────────────────────────

class NoteSortKey(str, Enum):
    """Fields notes can be ordered by."""
    TITLE = "title"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


# ─── Records ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class Note:
    """Plaintext note. Owned by the caller; update via core.notes.update_note."""
    id: str
    title: str
    content: str
    created_at: datetime
    updated_at: datetime
    tags: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "tags", tuple(self.tags))
        object.__setattr__(self, "created_at", normalize_timestamp(self.created_at))
        object.__setattr__(self, "updated_at", normalize_timestamp(self.updated_at))


@dataclass(frozen=True)
class EncryptedPayload:
    """Ciphertext of a note's title/content/tags plus its plaintext timestamps."""
    id: str
    encrypted_data: str
    created_at: datetime
    updated_at: datetime

    def __post_init__(self):
        object.__setattr__(self, "created_at", normalize_timestamp(self.created_at))
        object.__setattr__(self, "updated_at", normalize_timestamp(self.updated_at))


@dataclass(frozen=True)
class Block:
    """One sealed chain record."""
    id: str
    hash: str
    previous_hash: str
    timestamp: int  # ms since epoch
    payload: EncryptedPayload
    nonce: int = 0


@dataclass(frozen=True)
class ChainStats:
    count: int
    is_valid: bool
    tip: Block | None
