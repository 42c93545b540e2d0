"""Core Layer — pure domain logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - CipherCodec and Chain are synchronous and run to completion on the caller's thread

Design Decisions:
    - Functional core separated from imperative shell
"""
