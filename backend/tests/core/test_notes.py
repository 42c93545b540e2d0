"""Note Helpers — tests for factories, search, sort and tag queries."""

from datetime import datetime, timedelta, timezone

from notechain.core.domain_types import NoteSortKey
from notechain.core.notes import (
    all_tags, create_note, filter_by_tag, search_notes, sort_notes,
    truncate_text, update_note,
)

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_create_note_trims_and_stamps():
    note = create_note("  Title ", " body  ", ["a"], now=lambda: T0)
    assert note.title == "Title"
    assert note.content == "body"
    assert note.tags == ("a",)
    assert note.created_at == note.updated_at == T0
    assert len(note.id) == 36


def test_create_note_ids_are_unique():
    assert create_note("a", "b").id != create_note("a", "b").id


def test_update_note_returns_new_value_with_fresh_updated_at():
    original = create_note("t", "c", ["x"], now=lambda: T0)
    later = T0 + timedelta(hours=1)
    updated = update_note(original, "t2", "c2", now=lambda: later)

    assert updated is not original
    assert updated.id == original.id
    assert updated.created_at == T0
    assert updated.updated_at == later
    assert updated.tags == ("x",)
    assert original.title == "t"


def test_update_note_replaces_tags_when_given():
    original = create_note("t", "c", ["x"])
    assert update_note(original, "t", "c", []).tags == ()


def test_search_matches_title_content_and_tags_case_insensitively():
    notes = [
        create_note("Groceries", "milk", ["home"]),
        create_note("Taxes", "file by April", ["finance"]),
    ]
    assert [n.title for n in search_notes(notes, "MILK")] == ["Groceries"]
    assert [n.title for n in search_notes(notes, "fin")] == ["Taxes"]
    assert [n.title for n in search_notes(notes, "taxes")] == ["Taxes"]
    assert search_notes(notes, "   ") == notes


def test_sort_notes_by_title_and_dates():
    a = create_note("b-note", "c", now=lambda: T0)
    b = create_note("A-note", "c", now=lambda: T0 + timedelta(days=1))

    assert sort_notes([a, b], NoteSortKey.TITLE, ascending=True) == [b, a]
    assert sort_notes([a, b], NoteSortKey.CREATED_AT) == [b, a]
    assert sort_notes([a, b], NoteSortKey.UPDATED_AT, ascending=True) == [a, b]


def test_tags_helpers():
    notes = [create_note("a", "c", ["work", "home"]), create_note("b", "c", ["home"])]
    assert all_tags(notes) == ["home", "work"]
    assert [n.title for n in filter_by_tag(notes, "work")] == ["a"]


def test_truncate_text():
    assert truncate_text("short", 10) == "short"
    assert truncate_text("abcdefghij", 4) == "abcd..."
