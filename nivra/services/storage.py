"""
Key/value slot storage.

Public API
----------
SlotKeys.from_prefix(prefix)          -> SlotKeys
SlotStorage.get(key)                  -> str | None
SlotStorage.set(key, value)           -> bool   (False when the write failed)

Every `set` is synchronous: the value is durable (or the failure logged)
before the call returns. There is no batching and no multi-key transaction.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from nivra.models.storage_slot import StorageSlot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotKeys:
    entries: str
    labels: str
    moods: str
    streak: str
    last_saved_day: str

    @classmethod
    def from_prefix(cls, prefix: str) -> "SlotKeys":
        return cls(
            entries=f"{prefix}entries",
            labels=f"{prefix}labels",
            moods=f"{prefix}moods",
            streak=f"{prefix}streak",
            last_saved_day=f"{prefix}lastSavedDay",
        )

    def all(self) -> list[str]:
        return [self.entries, self.labels, self.moods, self.streak, self.last_saved_day]


class SlotStorage(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> bool: ...

    def ping(self) -> bool: ...


class MemorySlotStorage:
    """Dict-backed storage for tests and embedding."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> bool:
        self.data[key] = value
        return True

    def ping(self) -> bool:
        return True


class SqlSlotStorage:
    """
    Slots stored in the `storage_slots` table.
    Opens a short-lived session per call and commits each write immediately.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def ping(self) -> bool:
        db = self._session_factory()
        try:
            db.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False
        finally:
            db.close()

    def get(self, key: str) -> Optional[str]:
        db = self._session_factory()
        try:
            row = db.get(StorageSlot, key)
            return row.value if row is not None else None
        except SQLAlchemyError:
            logger.exception("Reading slot %s failed; treating it as missing", key)
            return None
        finally:
            db.close()

    def set(self, key: str, value: str) -> bool:
        db = self._session_factory()
        try:
            row = db.get(StorageSlot, key)
            if row is None:
                db.add(StorageSlot(key=key, value=value))
            else:
                row.value = value
            db.commit()
            return True
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Writing slot %s failed; in-memory state kept", key)
            return False
        finally:
            db.close()
