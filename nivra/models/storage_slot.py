"""
StorageSlot - one row per key of the string-valued key/value storage.

Five logical slots are used by the journal (see nivra/services/storage.py):
entries, labels, moods, streak, lastSavedDay. Values are opaque strings;
decoding and validation happen in the services that own each slot.
"""
from datetime import datetime
from sqlalchemy import String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from nivra.db.base import Base


class StorageSlot(Base):
    __tablename__ = "storage_slots"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False, default="")
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
