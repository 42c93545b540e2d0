"""API Dependencies — resolve the per-app ledger and note store.

Invariants:
    - Both objects are created once in the lifespan and stored on app.state
    - Routes never construct codecs, chains or stores themselves

Design Decisions:
    - app.state over module globals: tests build isolated apps/overrides per case
"""

from fastapi import Request

from notechain.services.note_ledger import NoteLedger
from notechain.services.note_store import NoteStore


def get_ledger(request: Request) -> NoteLedger:
    return request.app.state.ledger


def get_note_store(request: Request) -> NoteStore:
    return request.app.state.note_store
