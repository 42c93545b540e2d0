"""NoteChain Application Package — encrypted notes with a tamper-evident hash chain.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
