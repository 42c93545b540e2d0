"""Timestamps — canonical UTC formatting shared by payload serialization and the chain clock.

Invariants:
    - All domain datetimes are timezone-aware UTC, truncated to milliseconds
    - format_timestamp(parse_timestamp(s)) == s for every string format_timestamp produces
    - Naive datetimes are interpreted as UTC

Design Decisions:
    - Millisecond precision with a trailing "Z": the block digest is computed over
      this text, so an exported chain re-imports with identical hashes
"""

import time
from datetime import datetime, timezone


def normalize_timestamp(value: datetime) -> datetime:
    """Return value as aware UTC, truncated to whole milliseconds."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.replace(microsecond=(value.microsecond // 1000) * 1000)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with milliseconds, e.g. 2024-04-01T09:30:00.000Z."""
    normalized = normalize_timestamp(value)
    return normalized.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_timestamp(text: str) -> datetime:
    """Inverse of format_timestamp; also accepts explicit offsets."""
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return normalize_timestamp(datetime.fromisoformat(text))


def utc_now() -> datetime:
    return normalize_timestamp(datetime.now(timezone.utc))


def now_ms() -> int:
    """Wall clock in milliseconds since the Unix epoch."""
    return time.time_ns() // 1_000_000
