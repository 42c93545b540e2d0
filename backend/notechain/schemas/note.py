"""Note Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - NoteCreate.title: 1-100 chars after strip; content: 1-10000 chars after strip
    - Tags are stripped, empty tags dropped, duplicates removed (first wins)
    - NoteResponse mirrors core Note; timestamps as ISO-8601 UTC

Design Decisions:
    - field_validator for side-effect-free transforms (strip) — keeps models pure
    - from_domain() classmethods keep route handlers free of field mapping
"""

from datetime import datetime

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from notechain.core.domain_types import Note, NoteSortKey


def _clean_tags(tags: list[str]) -> list[str]:
    seen: list[str] = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen


_TEXT_LIMITS = {"title": 100, "content": 10_000}


class NoteCreate(BaseModel):
    """Note creation — validates title/content length after whitespace is stripped."""
    title: str
    content: str
    tags: list[str] = Field(default_factory=list, max_length=50)

    @field_validator("title", "content")
    @classmethod
    def strip_text(cls, v: str, info: ValidationInfo) -> str:
        v = v.strip()
        if not v:
            raise ValueError("cannot be empty or whitespace")
        limit = _TEXT_LIMITS[info.field_name]
        if len(v) > limit:
            raise ValueError(f"must be at most {limit} characters")
        return v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        return _clean_tags(v)


class NoteUpdate(NoteCreate):
    """Note update — tags omitted (None) keeps the existing tags."""
    tags: list[str] | None = Field(None, max_length=50)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str] | None) -> list[str] | None:
        return None if v is None else _clean_tags(v)


class NoteResponse(BaseModel):
    id: str
    title: str
    content: str
    tags: list[str]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, note: Note) -> "NoteResponse":
        return cls(
            id=note.id,
            title=note.title,
            content=note.content,
            tags=list(note.tags),
            created_at=note.created_at,
            updated_at=note.updated_at,
        )


class NoteListQuery(BaseModel):
    q: str = ""
    tag: str | None = None
    sort: NoteSortKey = NoteSortKey.UPDATED_AT
    ascending: bool = False


class NoteVerification(BaseModel):
    note_id: str
    chained: bool
    matches: bool
