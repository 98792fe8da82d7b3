"""
Entry store: the persisted journal history.

Owns three parallel sequences:
  entries  - full MoodEntry records
  labels   - short day labels for the trend chart
  moods    - ordinal values for the trend chart

labels and moods always have the same length and move in lockstep with
entries (same append order). Each sequence is trimmed keep-last-N after
every append; the entry log and the label/value pair have independent
limits. The chart's own display window is applied by the chart projector
at refresh time and never trims the store.

Public API
----------
EntryStore.load_or_default(storage, keys, ...)  -> EntryStore
EntryStore.append(entry)                        -> None
EntryStore.persist()                            -> bool
EntryStore.snapshot()                           -> dict
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Sequence, TypeVar

from nivra.core.errors import CorruptPersistedStateError
from nivra.services.storage import SlotKeys, SlotStorage
from nivra.services.vocabulary import MoodKey, normalize_mood, value_of

logger = logging.getLogger(__name__)

DEFAULT_ENTRY_LIMIT = 240
DEFAULT_SERIES_LIMIT = 240

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Entry record
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MoodEntry:
    timestamp: str   # ISO-8601 UTC instant, e.g. "2026-10-19T08:30:00.000Z"
    mood: MoodKey
    value: int
    note: str = ""

    def to_record(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "mood": self.mood.value,
            "value": self.value,
            "note": self.note,
        }

    def moment(self) -> datetime:
        return datetime.fromisoformat(self.timestamp.replace("Z", "+00:00"))

    @classmethod
    def from_record(cls, record: Any) -> "MoodEntry":
        """Rebuild an entry from its stored dict. Accepts the legacy `date` key."""
        if not isinstance(record, dict):
            raise ValueError("entry record must be an object")
        timestamp = record.get("timestamp") or record.get("date")
        if not isinstance(timestamp, str) or not timestamp:
            raise ValueError("entry record has no timestamp")
        mood = normalize_mood(record.get("mood"))
        if mood is None:
            raise ValueError(f"unknown mood {record.get('mood')!r}")
        note = record.get("note") or ""
        if not isinstance(note, str):
            raise ValueError("entry note must be text")
        return cls(timestamp=timestamp, mood=mood, value=value_of(mood), note=note)


def iso_instant(moment: datetime) -> str:
    """UTC ISO-8601 with millisecond precision and a Z suffix."""
    utc = moment.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def short_date_label(moment: datetime) -> str:
    """Chart label such as "19 Oct"."""
    return f"{moment.day:02d} {moment.strftime('%b')}"


def trim_to_max(items: list[T], max_len: int) -> list[T]:
    """Keep the last `max_len` items, oldest dropped first."""
    if max_len <= 0:
        return []
    if len(items) <= max_len:
        return items
    return items[len(items) - max_len:]


# ---------------------------------------------------------------------------
# Slot decoders - raise CorruptPersistedStateError, caught in load_or_default
# ---------------------------------------------------------------------------

def _decode_list(slot: str, raw: Optional[str]) -> list:
    if raw is None or raw == "":
        return []
    try:
        value = json.loads(raw)
    except (ValueError, TypeError) as exc:
        raise CorruptPersistedStateError(slot, raw) from exc
    if not isinstance(value, list):
        raise CorruptPersistedStateError(slot, raw)
    return value


def _decode_labels(slot: str, raw: Optional[str]) -> list[str]:
    items = _decode_list(slot, raw)
    if not all(isinstance(i, str) for i in items):
        raise CorruptPersistedStateError(slot, raw)
    return items


def _decode_moods(slot: str, raw: Optional[str]) -> list[int]:
    items = _decode_list(slot, raw)
    for i in items:
        if isinstance(i, bool) or not isinstance(i, int) or not 1 <= i <= 5:
            raise CorruptPersistedStateError(slot, raw)
    return items


def _decode_entries(slot: str, raw: Optional[str]) -> list[MoodEntry]:
    entries = []
    for position, record in enumerate(_decode_list(slot, raw)):
        try:
            entries.append(MoodEntry.from_record(record))
        except ValueError as exc:
            logger.warning("Skipping malformed entry #%d in %s: %s", position, slot, exc)
    return entries


def _load_slot(decoder, slot: str, raw: Optional[str]) -> list:
    try:
        return decoder(slot, raw)
    except CorruptPersistedStateError as exc:
        logger.warning("%s Defaulting to an empty list.", exc.message)
        return []


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------

class EntryStore:

    def __init__(
        self,
        storage: SlotStorage,
        keys: SlotKeys,
        entry_limit: int = DEFAULT_ENTRY_LIMIT,
        series_limit: int = DEFAULT_SERIES_LIMIT,
        entries: Optional[Sequence[MoodEntry]] = None,
        labels: Optional[Sequence[str]] = None,
        moods: Optional[Sequence[int]] = None,
    ):
        self._storage = storage
        self._keys = keys
        self.entry_limit = entry_limit
        self.series_limit = series_limit
        self._entries: list[MoodEntry] = list(entries or [])
        self._labels: list[str] = list(labels or [])
        self._moods: list[int] = list(moods or [])
        if len(self._labels) != len(self._moods):
            raise ValueError("labels and moods must have the same length")

    @classmethod
    def load_or_default(
        cls,
        storage: SlotStorage,
        keys: SlotKeys,
        entry_limit: int = DEFAULT_ENTRY_LIMIT,
        series_limit: int = DEFAULT_SERIES_LIMIT,
    ) -> "EntryStore":
        """
        Read all three slots. A missing or corrupt slot defaults to an empty
        list without affecting the others. Labels and moods of different
        lengths are cut to their common most-recent suffix.
        """
        entries = _load_slot(_decode_entries, keys.entries, storage.get(keys.entries))
        labels = _load_slot(_decode_labels, keys.labels, storage.get(keys.labels))
        moods = _load_slot(_decode_moods, keys.moods, storage.get(keys.moods))

        if len(labels) != len(moods):
            common = min(len(labels), len(moods))
            logger.warning(
                "Chart series out of step (labels=%d, moods=%d); keeping last %d",
                len(labels), len(moods), common,
            )
            labels = trim_to_max(labels, common)
            moods = trim_to_max(moods, common)

        return cls(
            storage,
            keys,
            entry_limit=entry_limit,
            series_limit=series_limit,
            entries=entries,
            labels=labels,
            moods=moods,
        )

    # --- read access (copies, so callers cannot break lockstep) ---

    @property
    def entries(self) -> list[MoodEntry]:
        return list(self._entries)

    @property
    def labels(self) -> list[str]:
        return list(self._labels)

    @property
    def moods(self) -> list[int]:
        return list(self._moods)

    def __len__(self) -> int:
        return len(self._entries)

    # --- mutation ---

    def append(self, entry: MoodEntry, label: Optional[str] = None) -> None:
        """
        Push to all three sequences, then trim each to its limit.
        Without an explicit label one is derived from the entry timestamp
        in local time.
        """
        if label is None:
            label = short_date_label(entry.moment().astimezone())
        self._entries.append(entry)
        self._labels.append(label)
        self._moods.append(entry.value)

        self._entries = trim_to_max(self._entries, self.entry_limit)
        self._labels = trim_to_max(self._labels, self.series_limit)
        self._moods = trim_to_max(self._moods, self.series_limit)

    def persist(self) -> bool:
        """Write each sequence to its own slot. Returns False if any write failed."""
        results = [
            self._storage.set(self._keys.labels, json.dumps(self._labels, ensure_ascii=False)),
            self._storage.set(self._keys.moods, json.dumps(self._moods)),
            self._storage.set(
                self._keys.entries,
                json.dumps([e.to_record() for e in self._entries], ensure_ascii=False),
            ),
        ]
        return all(results)

    def snapshot(self) -> dict[str, Any]:
        return {
            "entries": [e.to_record() for e in self._entries],
            "labels": self.labels,
            "moods": self.moods,
            "storage": {
                "entries": self._storage.get(self._keys.entries),
                "labels": self._storage.get(self._keys.labels),
                "moods": self._storage.get(self._keys.moods),
            },
        }
