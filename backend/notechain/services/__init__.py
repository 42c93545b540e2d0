"""Services Layer — orchestration of codec, chain and note persistence.

Invariants:
    - Services compose core objects; they hold no hidden module-level state
    - Async only where IO happens (NoteStore); the ledger itself is synchronous

Design Decisions:
    - One service per concern for locality: ledger (chain), store (persistence)
"""
