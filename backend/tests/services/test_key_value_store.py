"""Key-Value Stores — in-memory and SQL implementations share one contract.

Invariants:
    - get() of a missing key is None
    - set() replaces; remove() of a missing key is a no-op
"""

import pytest


@pytest.fixture(params=["memory", "sql"])
def kv(request, memory_store, sql_store):
    return {"memory": memory_store, "sql": sql_store}[request.param]


async def test_get_missing_key_returns_none(kv):
    assert await kv.get("absent") is None


async def test_set_then_get(kv):
    await kv.set("k", b"\x00\x01bytes")
    assert await kv.get("k") == b"\x00\x01bytes"


async def test_set_replaces_existing_value(kv):
    await kv.set("k", b"first")
    await kv.set("k", b"second")
    assert await kv.get("k") == b"second"


async def test_remove(kv):
    await kv.set("k", b"v")
    await kv.remove("k")
    await kv.remove("never-set")
    assert await kv.get("k") is None
