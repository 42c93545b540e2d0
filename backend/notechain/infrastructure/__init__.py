"""Infrastructure Layer — persistence and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from core/ domain logic beyond errors and protocols
    - All driver exceptions mapped to StorageError

Design Decisions:
    - Thin wrappers over SQLAlchemy; key-value semantics match the original device store
"""
