"""Chain Snapshot — tests for record conversion and the canonical payload text."""

from datetime import datetime, timedelta, timezone

import pytest

from notechain.core.chain_snapshot import (
    SnapshotFormatError, block_from_record, block_to_record, load_chain,
    payload_from_record, serialize_payload,
)
from notechain.core.domain_types import Block, EncryptedPayload


def _payload() -> EncryptedPayload:
    stamp = datetime(2024, 4, 1, 9, 30, 0, 250000, tzinfo=timezone.utc)
    return EncryptedPayload(
        id="n1", encrypted_data="gAAAA-token", created_at=stamp, updated_at=stamp,
    )


def test_serialize_payload_is_compact_and_ordered():
    assert serialize_payload(_payload()) == (
        '{"id":"n1","encryptedData":"gAAAA-token",'
        '"createdAt":"2024-04-01T09:30:00.250Z",'
        '"updatedAt":"2024-04-01T09:30:00.250Z"}'
    )


def test_serialize_payload_converts_offsets_to_utc():
    tz = timezone(timedelta(hours=2))
    local = datetime(2024, 4, 1, 11, 30, tzinfo=tz)
    payload = EncryptedPayload(id="n1", encrypted_data="t", created_at=local, updated_at=local)
    assert '"createdAt":"2024-04-01T09:30:00.000Z"' in serialize_payload(payload)


def test_block_record_roundtrip():
    block = Block(
        id="n1", hash="00ab", previous_hash="00cd", timestamp=1_700_000_000_123,
        payload=_payload(), nonce=42,
    )
    assert block_from_record(block_to_record(block)) == block


def test_payload_from_record_rejects_bad_timestamp():
    record = {
        "id": "n1", "encryptedData": "t",
        "createdAt": "yesterday", "updatedAt": "2024-04-01T09:30:00.000Z",
    }
    with pytest.raises(SnapshotFormatError):
        payload_from_record(record)


def test_block_from_record_rejects_bool_nonce():
    record = block_to_record(Block(
        id="n1", hash="00", previous_hash="0", timestamp=1, payload=_payload(), nonce=1,
    ))
    record["nonce"] = True
    with pytest.raises(SnapshotFormatError):
        block_from_record(record)


def test_load_chain_requires_array():
    with pytest.raises(SnapshotFormatError):
        load_chain('{"blocks": []}')
