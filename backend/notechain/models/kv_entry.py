"""KeyValueEntry ORM — one row per key of the device-style note store.

Invariants:
    - key is the primary key (no duplicates; set() replaces)
    - value is opaque bytes (the store never interprets them)

Design Decisions:
    - LargeBinary over JSON column: the store holds already-encrypted blobs
"""

from datetime import datetime, timezone

from sqlalchemy import String, LargeBinary, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from notechain.db.base import Base


class KeyValueEntry(Base):
    __tablename__ = "kv_entries"

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
