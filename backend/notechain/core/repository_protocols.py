"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Persistence accessed only through KeyValueStore
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO; the chain and codec stay synchronous
"""

from typing import Protocol


class KeyValueStore(Protocol):
    """Byte store keyed by string — implemented by infrastructure/key_value_store.py."""
    async def get(self, key: str) -> bytes | None: ...
    async def set(self, key: str, value: bytes) -> None: ...
    async def remove(self, key: str) -> None: ...
