"""Chain Schemas — block, stats and import contracts for the chain endpoints.

Invariants:
    - BlockResponse serializes with the export record's camelCase keys
    - encryptedData is returned as-is; the API never decrypts chain payloads

Design Decisions:
    - Field aliases (previousHash, encryptedData) keep API and export format identical
"""

from pydantic import BaseModel, ConfigDict, Field

from notechain.core.chain_snapshot import block_to_record
from notechain.core.domain_types import Block, ChainStats


class PayloadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    encrypted_data: str = Field(alias="encryptedData")
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")


class BlockResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    hash: str
    previous_hash: str = Field(alias="previousHash")
    timestamp: int
    payload: PayloadResponse
    nonce: int

    @classmethod
    def from_domain(cls, block: Block) -> "BlockResponse":
        return cls.model_validate(block_to_record(block))


class ChainStatsResponse(BaseModel):
    count: int
    is_valid: bool
    difficulty: int
    tip: BlockResponse | None = None

    @classmethod
    def from_domain(cls, stats: ChainStats, difficulty: int) -> "ChainStatsResponse":
        return cls(
            count=stats.count,
            is_valid=stats.is_valid,
            difficulty=difficulty,
            tip=BlockResponse.from_domain(stats.tip) if stats.tip else None,
        )


class ChainImportRequest(BaseModel):
    """Serialized chain as produced by GET /chain/export."""
    chain: str = Field(min_length=2)


class ChainImportResponse(BaseModel):
    imported: bool
    count: int
