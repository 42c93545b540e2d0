"""Chain Snapshot — block <-> JSON-safe record conversion and the canonical payload text.

Invariants:
    - serialize_payload() is the exact text hashed into every block seal
    - block_to_record() keys: id, hash, previousHash, timestamp, payload, nonce
    - block_from_record(block_to_record(b)) == b
    - Malformed records raise SnapshotFormatError (a ValueError), never KeyError/TypeError

Design Decisions:
    - camelCase record keys: exported files stay compatible with existing backups
    - Explicit type checks over pydantic here: core/ stays free of boundary schemas
"""

import json

from notechain.core.domain_types import Block, EncryptedPayload
from notechain.core.timestamps import format_timestamp, parse_timestamp


class SnapshotFormatError(ValueError):
    """A chain record does not have the expected shape."""


def payload_to_record(payload: EncryptedPayload) -> dict:
    return {
        "id": payload.id,
        "encryptedData": payload.encrypted_data,
        "createdAt": format_timestamp(payload.created_at),
        "updatedAt": format_timestamp(payload.updated_at),
    }


def serialize_payload(payload: EncryptedPayload) -> str:
    """Compact JSON of the payload record, key order fixed."""
    return json.dumps(
        payload_to_record(payload), ensure_ascii=False, separators=(",", ":"),
    )


def block_to_record(block: Block) -> dict:
    return {
        "id": block.id,
        "hash": block.hash,
        "previousHash": block.previous_hash,
        "timestamp": block.timestamp,
        "payload": payload_to_record(block.payload),
        "nonce": block.nonce,
    }


def _require(record: dict, key: str, kind: type | tuple[type, ...]):
    if key not in record:
        raise SnapshotFormatError(f"missing field '{key}'")
    value = record[key]
    # bool is an int subclass; reject it for integer fields
    if isinstance(value, bool) or not isinstance(value, kind):
        raise SnapshotFormatError(f"field '{key}' has wrong type")
    return value


def payload_from_record(record: object) -> EncryptedPayload:
    if not isinstance(record, dict):
        raise SnapshotFormatError("payload is not an object")
    try:
        created_at = parse_timestamp(_require(record, "createdAt", str))
        updated_at = parse_timestamp(_require(record, "updatedAt", str))
    except (ValueError, OverflowError) as e:
        raise SnapshotFormatError(f"bad payload timestamp: {e}") from e
    return EncryptedPayload(
        id=_require(record, "id", str),
        encrypted_data=_require(record, "encryptedData", str),
        created_at=created_at,
        updated_at=updated_at,
    )


def block_from_record(record: object) -> Block:
    if not isinstance(record, dict):
        raise SnapshotFormatError("block is not an object")
    return Block(
        id=_require(record, "id", str),
        hash=_require(record, "hash", str),
        previous_hash=_require(record, "previousHash", str),
        timestamp=_require(record, "timestamp", int),
        payload=payload_from_record(_require(record, "payload", dict)),
        nonce=_require(record, "nonce", int),
    )


def dump_chain(blocks: list[Block]) -> str:
    return json.dumps(
        [block_to_record(b) for b in blocks], ensure_ascii=False, indent=2,
    )


def load_chain(serialized: str) -> list[Block]:
    """Parse an exported chain. Raises SnapshotFormatError on any malformation."""
    try:
        records = json.loads(serialized)
    except (TypeError, RecursionError, json.JSONDecodeError) as e:
        raise SnapshotFormatError(f"not valid JSON: {e}") from e
    if not isinstance(records, list):
        raise SnapshotFormatError("chain is not an array")
    return [block_from_record(r) for r in records]
