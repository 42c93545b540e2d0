"""Note Helpers — pure factories and collection queries over plaintext notes.

Invariants:
    - create_note() sets created_at == updated_at and a fresh uuid4 id
    - update_note() returns a new Note; id and created_at are preserved
    - Queries never mutate their input sequence

Design Decisions:
    - Editing a note never touches the chain: blocks are point-in-time attestations
"""

import dataclasses
import uuid
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime

from notechain.core.domain_types import Note, NoteSortKey
from notechain.core.timestamps import utc_now


def create_note(
    title: str,
    content: str,
    tags: Iterable[str] | None = None,
    now: Callable[[], datetime] = utc_now,
) -> Note:
    created = now()
    return Note(
        id=str(uuid.uuid4()),
        title=title.strip(),
        content=content.strip(),
        tags=tuple(tags or ()),
        created_at=created,
        updated_at=created,
    )


def update_note(
    note: Note,
    title: str,
    content: str,
    tags: Iterable[str] | None = None,
    now: Callable[[], datetime] = utc_now,
) -> Note:
    """New value with refreshed updated_at; tags kept when not given."""
    return dataclasses.replace(
        note,
        title=title.strip(),
        content=content.strip(),
        tags=tuple(tags) if tags is not None else note.tags,
        updated_at=now(),
    )


def search_notes(notes: Sequence[Note], term: str) -> list[Note]:
    """Case-insensitive match on title, content or any tag."""
    if not term.strip():
        return list(notes)
    needle = term.lower()
    return [
        n for n in notes
        if needle in n.title.lower()
        or needle in n.content.lower()
        or any(needle in t.lower() for t in n.tags)
    ]


def sort_notes(
    notes: Sequence[Note], by: NoteSortKey, ascending: bool = False,
) -> list[Note]:
    if by == NoteSortKey.TITLE:
        key = lambda n: n.title.lower()  # noqa: E731
    elif by == NoteSortKey.CREATED_AT:
        key = lambda n: n.created_at  # noqa: E731
    else:
        key = lambda n: n.updated_at  # noqa: E731
    return sorted(notes, key=key, reverse=not ascending)


def all_tags(notes: Iterable[Note]) -> list[str]:
    return sorted({t for n in notes for t in n.tags})


def filter_by_tag(notes: Iterable[Note], tag: str) -> list[Note]:
    return [n for n in notes if tag in n.tags]


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."
