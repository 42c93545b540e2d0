"""Note Store — encrypted note persistence over a KeyValueStore.

Invariants:
    - Notes are only ever written encrypted (one CipherCodec.encrypt per note per save)
    - The whole collection lives under STORAGE_KEY as a JSON array of payload records
    - save_note() replaces by id, otherwise appends (insertion order preserved)
    - The chain is never touched here: edits and deletes leave blocks as they were
    - save_note()/delete_note() hold one asyncio.Lock across their read/modify/write

Design Decisions:
    - Whole-collection read/modify/write mirrors the device store semantics;
      fine for personal note volumes, not for large datasets
    - Corrupt stored JSON is a StorageError; a bad token is a CipherError
"""

import asyncio
import json
import logging

from notechain.core.chain_snapshot import (
    SnapshotFormatError, payload_from_record, payload_to_record,
)
from notechain.core.cipher_codec import CipherCodec
from notechain.core.domain_types import Note
from notechain.core.errors import StorageError
from notechain.core.repository_protocols import KeyValueStore

logger = logging.getLogger(__name__)

STORAGE_KEY = "notechain:encrypted_notes"


class NoteStore:
    """Loads and saves the note collection, encrypting at rest."""

    def __init__(self, store: KeyValueStore, codec: CipherCodec):
        self.store = store
        self.codec = codec
        self._write_lock = asyncio.Lock()

    async def load_notes(self) -> list[Note]:
        raw = await self.store.get(STORAGE_KEY)
        if not raw:
            return []
        try:
            records = json.loads(raw.decode("utf-8"))
            if not isinstance(records, list):
                raise SnapshotFormatError("stored notes are not an array")
            payloads = [payload_from_record(r) for r in records]
        except (
            UnicodeDecodeError, RecursionError, json.JSONDecodeError, SnapshotFormatError,
        ) as e:
            logger.error("Stored notes are corrupt: %s", e)
            raise StorageError("stored notes are corrupt", "load") from e
        return [self.codec.decrypt(p) for p in payloads]

    async def save_notes(self, notes: list[Note]) -> None:
        records = [payload_to_record(self.codec.encrypt(n)) for n in notes]
        await self.store.set(
            STORAGE_KEY, json.dumps(records, ensure_ascii=False).encode("utf-8"),
        )
        logger.debug("Saved %d notes", len(records))

    async def save_note(self, note: Note) -> None:
        async with self._write_lock:
            notes = await self.load_notes()
            for i, existing in enumerate(notes):
                if existing.id == note.id:
                    notes[i] = note
                    break
            else:
                notes.append(note)
            await self.save_notes(notes)

    async def delete_note(self, note_id: str) -> bool:
        """Remove a note; returns False when it did not exist."""
        async with self._write_lock:
            notes = await self.load_notes()
            remaining = [n for n in notes if n.id != note_id]
            if len(remaining) == len(notes):
                return False
            await self.save_notes(remaining)
        logger.info("Note deleted", extra={"note_id": note_id})
        return True

    async def get_note(self, note_id: str) -> Note | None:
        notes = await self.load_notes()
        return next((n for n in notes if n.id == note_id), None)

    async def clear(self) -> None:
        await self.store.remove(STORAGE_KEY)
