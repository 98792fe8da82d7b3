"""
Save pipeline: one user save action, start to finish.

Public API
----------
SavePipeline.save(note_text, pending_mood)   -> SaveResult   (raises NoMoodSelectedError)
MoodWidget.on_mood_pick(raw)                 -> MoodPick
MoodWidget.on_save(note_text, mood=None)     -> SaveResult
build_widget(storage, ...)                   -> MoodWidget   (loads state once)

Order of effects on success
---------------------------
  1. build the entry (now, stripped note, canonical mood, ordinal)
  2. append to the entry store (with its trimming)
  3. persist the entry store
  4. streak transition + persist
  5. clear the pending selection
  6. return entry + increased flag

Steps 3 and 4 are separate synchronous writes with no transaction around
them. A process killed between them leaves the entries saved and the
streak one transition behind until the next save.

The pipeline does not touch the chart. MoodWidget refreshes it after a
successful save.
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from nivra.core.errors import NoMoodSelectedError
from nivra.services.chart import ChartProjector, DEFAULT_CHART_WINDOW
from nivra.services.entry_store import (
    DEFAULT_ENTRY_LIMIT,
    DEFAULT_SERIES_LIMIT,
    EntryStore,
    MoodEntry,
    iso_instant,
    short_date_label,
)
from nivra.services.storage import SlotKeys, SlotStorage
from nivra.services.streak import StreakTracker
from nivra.services.vocabulary import (
    LinePicker,
    MoodKey,
    RandomLinePicker,
    glyph_of,
    line_for,
    normalize_mood,
    value_of,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def local_now() -> datetime:
    return datetime.now().astimezone()


def pretty_full_date(moment: datetime) -> str:
    """Date stamp like 19 October 2026."""
    return f"{moment.day} {moment.strftime('%B')} {moment.year}"


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class SaveResult:
    entry: MoodEntry
    increased_streak: bool
    streak: int


@dataclass
class MoodPick:
    mood: MoodKey
    value: int
    glyph: str
    line: str


class PendingSelection:
    """The most recent mood choice. Never persisted."""

    def __init__(self) -> None:
        self._mood: Optional[MoodKey] = None

    @property
    def mood(self) -> Optional[MoodKey]:
        return self._mood

    def pick(self, mood: MoodKey) -> None:
        self._mood = mood

    def clear(self) -> None:
        self._mood = None


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

class SavePipeline:

    def __init__(
        self,
        store: EntryStore,
        tracker: StreakTracker,
        pending: PendingSelection,
        clock: Clock = local_now,
    ):
        self.store = store
        self.tracker = tracker
        self.pending = pending
        self.clock = clock

    def save(self, note_text: Optional[str], pending_mood) -> SaveResult:
        mood = normalize_mood(pending_mood)
        if mood is None or value_of(mood) == 0:
            raise NoMoodSelectedError(
                received=pending_mood if isinstance(pending_mood, str) else None
            )

        now = self.clock()
        entry = MoodEntry(
            timestamp=iso_instant(now),
            mood=mood,
            value=value_of(mood),
            note=(note_text or "").strip(),
        )

        self.store.append(entry, label=short_date_label(now))
        self.store.persist()

        increased = self.tracker.record_save(now.date())

        self.pending.clear()
        logger.info(
            "Saved %s entry (%d stored); streak=%d%s",
            mood.value, len(self.store), self.tracker.count,
            " (increased)" if increased else "",
        )
        return SaveResult(entry=entry, increased_streak=increased, streak=self.tracker.count)


# ---------------------------------------------------------------------------
# UI-facing facade
# ---------------------------------------------------------------------------

class MoodWidget:
    """
    Callback surface for the UI layer: mood picks, saves, chart and streak reads.

    One widget is shared by every request thread. Mutations and chart
    refreshes run under a single lock so there is exactly one writer at a time.
    """

    def __init__(
        self,
        pipeline: SavePipeline,
        chart: ChartProjector,
        picker: Optional[LinePicker] = None,
    ):
        self.pipeline = pipeline
        self.chart = chart
        self.picker = picker or RandomLinePicker()
        self._lock = threading.RLock()

    @property
    def store(self) -> EntryStore:
        return self.pipeline.store

    @property
    def tracker(self) -> StreakTracker:
        return self.pipeline.tracker

    @property
    def pending(self) -> PendingSelection:
        return self.pipeline.pending

    def on_mood_pick(self, raw) -> Optional[MoodPick]:
        """Normalize and remember the choice. Unknown input leaves the selection as it was."""
        mood = normalize_mood(raw)
        if mood is None:
            return None
        with self._lock:
            self.pending.pick(mood)
        value = value_of(mood)
        return MoodPick(mood=mood, value=value, glyph=glyph_of(value), line=line_for(mood, self.picker))

    def on_save(self, note_text: Optional[str], mood=None) -> SaveResult:
        with self._lock:
            result = self.pipeline.save(note_text, mood if mood is not None else self.pending.mood)
            self.chart.refresh(self.store)
            return result

    def refresh_chart(self):
        with self._lock:
            return self.chart.refresh(self.store)

    def date_stamp(self) -> str:
        return f"Today, {pretty_full_date(self.pipeline.clock())}"

    def debug_snapshot(self) -> dict:
        with self._lock:
            return {
                "pending_mood": self.pending.mood.value if self.pending.mood else None,
                "store": self.store.snapshot(),
                "streak": self.tracker.snapshot(),
            }


def build_widget(
    storage: SlotStorage,
    slot_prefix: str = "nivra_",
    entry_limit: int = DEFAULT_ENTRY_LIMIT,
    series_limit: int = DEFAULT_SERIES_LIMIT,
    chart_window: int = DEFAULT_CHART_WINDOW,
    clock: Clock = local_now,
    picker: Optional[LinePicker] = None,
) -> MoodWidget:
    """Load store and streak from storage once and wire a ready widget."""
    keys = SlotKeys.from_prefix(slot_prefix)
    store = EntryStore.load_or_default(
        storage, keys, entry_limit=entry_limit, series_limit=series_limit
    )
    tracker = StreakTracker.load_or_default(storage, keys)
    pipeline = SavePipeline(store, tracker, PendingSelection(), clock=clock)
    widget = MoodWidget(pipeline, ChartProjector(window=chart_window), picker=picker)
    widget.refresh_chart()
    logger.info(
        "Journal loaded: %d entries, streak=%d", len(store), tracker.count
    )
    return widget
