"""Timestamps — canonical formatting used inside block digests."""

from datetime import datetime, timezone

from notechain.core.timestamps import format_timestamp, normalize_timestamp, parse_timestamp


def test_format_uses_milliseconds_and_z_suffix():
    stamp = datetime(2024, 4, 1, 9, 30, 5, 7000, tzinfo=timezone.utc)
    assert format_timestamp(stamp) == "2024-04-01T09:30:05.007Z"


def test_parse_inverts_format():
    text = "2024-04-01T09:30:05.007Z"
    assert format_timestamp(parse_timestamp(text)) == text


def test_naive_datetimes_are_treated_as_utc():
    naive = datetime(2024, 4, 1, 9, 30)
    assert normalize_timestamp(naive).tzinfo == timezone.utc
    assert format_timestamp(naive) == "2024-04-01T09:30:00.000Z"
