"""SQLAlchemy ORM table definitions for the SQLite storage backend.

One table, ``storage_items``, mirrors a string-keyed local store: each
row holds a key and its JSON-encoded value.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from fitboost.database import Base


class StorageItem(Base):
    """A single key/value entry."""

    __tablename__ = "storage_items"

    key: Mapped[str] = mapped_column(String(512), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
