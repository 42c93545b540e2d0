"""Note Routes — CRUD over the encrypted note store, with chain attestation on create.

Invariants:
    - POST records the new note on the chain (encrypt -> append) and persists it
    - PUT/DELETE change only the store; existing blocks are never edited or removed
    - GET /{id}/verify compares the current note against its attested snapshot
    - User input is validated by Pydantic before reaching the handler

Design Decisions:
    - Mining runs in the threadpool: append() is a blocking nonce search
    - Note is persisted before it is chained: a failed store write leaves no block,
      and a mining timeout removes the stored note again
"""

import logging

from fastapi import APIRouter, Depends, Response, status
from starlette.concurrency import run_in_threadpool

from notechain.api.dependencies import get_ledger, get_note_store
from notechain.core.errors import MiningTimeoutError, ResourceNotFoundError
from notechain.core.notes import (
    all_tags, create_note, filter_by_tag, search_notes, sort_notes, update_note,
)
from notechain.schemas.chain import BlockResponse
from notechain.schemas.note import (
    NoteCreate, NoteListQuery, NoteResponse, NoteUpdate, NoteVerification,
)
from notechain.services.note_ledger import NoteLedger
from notechain.services.note_store import NoteStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/notes", tags=["notes"])


async def _get_note_or_404(note_id: str, store: NoteStore):
    note = await store.get_note(note_id)
    if note is None:
        raise ResourceNotFoundError("Note", note_id)
    return note


@router.post("", status_code=status.HTTP_201_CREATED)
async def create(
    body: NoteCreate,
    store: NoteStore = Depends(get_note_store),
    ledger: NoteLedger = Depends(get_ledger),
):
    """Create a note, persist it encrypted and seal it into the chain."""
    note = create_note(body.title, body.content, body.tags)
    await store.save_note(note)
    try:
        block = await run_in_threadpool(ledger.record, note)
    except MiningTimeoutError:
        await store.delete_note(note.id)
        logger.warning("Note unsealed, removed from store", extra={"note_id": note.id})
        raise
    return {
        "note": NoteResponse.from_domain(note).model_dump(mode="json"),
        "block": BlockResponse.from_domain(block).model_dump(
            mode="json", by_alias=True,
        ),
    }


@router.get("", response_model=list[NoteResponse])
async def list_notes(
    query: NoteListQuery = Depends(),
    store: NoteStore = Depends(get_note_store),
):
    """List notes with optional search, tag filter and ordering."""
    notes = await store.load_notes()
    notes = search_notes(notes, query.q)
    if query.tag:
        notes = filter_by_tag(notes, query.tag)
    notes = sort_notes(notes, query.sort, query.ascending)
    return [NoteResponse.from_domain(n) for n in notes]


@router.get("/tags", response_model=list[str])
async def list_tags(store: NoteStore = Depends(get_note_store)):
    return all_tags(await store.load_notes())


@router.get("/{note_id}", response_model=NoteResponse)
async def get(note_id: str, store: NoteStore = Depends(get_note_store)):
    return NoteResponse.from_domain(await _get_note_or_404(note_id, store))


@router.put("/{note_id}", response_model=NoteResponse)
async def update(
    note_id: str,
    body: NoteUpdate,
    store: NoteStore = Depends(get_note_store),
):
    """Replace title/content/tags. The chained snapshot is left as it was."""
    existing = await _get_note_or_404(note_id, store)
    updated = update_note(existing, body.title, body.content, body.tags)
    await store.save_note(updated)
    logger.info("Note updated", extra={"note_id": note_id})
    return NoteResponse.from_domain(updated)


@router.delete("/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete(note_id: str, store: NoteStore = Depends(get_note_store)):
    if not await store.delete_note(note_id):
        raise ResourceNotFoundError("Note", note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{note_id}/verify", response_model=NoteVerification)
async def verify(
    note_id: str,
    store: NoteStore = Depends(get_note_store),
    ledger: NoteLedger = Depends(get_ledger),
):
    """Does the current note still match the snapshot sealed in the chain?"""
    note = await _get_note_or_404(note_id, store)
    chained = ledger.chain.lookup_by_payload_id(note_id) is not None
    return NoteVerification(
        note_id=note_id,
        chained=chained,
        matches=chained and ledger.verify_note(note),
    )
