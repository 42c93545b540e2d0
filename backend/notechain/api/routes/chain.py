"""Chain Routes — stats, lookup, export and atomic import of the note chain.

Invariants:
    - Only POST /notes appends blocks; these routes never mutate blocks
    - POST /import either swaps the whole chain or leaves it untouched (409)
    - Payloads are returned encrypted

Design Decisions:
    - Rejected imports map to ChainImportRejectedError at the HTTP edge only;
      Chain.import_chain itself reports a boolean
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from starlette.concurrency import run_in_threadpool

from notechain.api.dependencies import get_ledger
from notechain.core.errors import ChainImportRejectedError, ResourceNotFoundError
from notechain.schemas.chain import (
    BlockResponse, ChainImportRequest, ChainImportResponse, ChainStatsResponse,
)
from notechain.services.note_ledger import NoteLedger

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/chain", tags=["chain"])


@router.get("/stats", response_model=ChainStatsResponse)
async def stats(ledger: NoteLedger = Depends(get_ledger)):
    chain = ledger.chain
    return ChainStatsResponse.from_domain(chain.stats(), chain.difficulty)


@router.get("/blocks", response_model=list[BlockResponse])
async def list_blocks(ledger: NoteLedger = Depends(get_ledger)):
    return [BlockResponse.from_domain(b) for b in ledger.chain.blocks()]


@router.get("/blocks/{note_id}", response_model=BlockResponse)
async def get_block(note_id: str, ledger: NoteLedger = Depends(get_ledger)):
    block = ledger.chain.lookup_by_payload_id(note_id)
    if block is None:
        raise ResourceNotFoundError("Block", note_id)
    return BlockResponse.from_domain(block)


@router.get("/export", response_class=PlainTextResponse)
async def export(ledger: NoteLedger = Depends(get_ledger)):
    return PlainTextResponse(ledger.chain.export(), media_type="application/json")


@router.post("/import", response_model=ChainImportResponse)
async def import_chain(
    body: ChainImportRequest, ledger: NoteLedger = Depends(get_ledger),
):
    """Replace the chain with a previously exported one, if it validates."""
    if not await run_in_threadpool(ledger.chain.import_chain, body.chain):
        raise ChainImportRejectedError()
    return ChainImportResponse(imported=True, count=len(ledger.chain))
