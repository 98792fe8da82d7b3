"""
Streak tracker: consecutive calendar days with at least one save.

Transitions (evaluated on every successful save)
------------------------------------------------
  no prior save          -> count = 1,      last_saved_day = today
  same day   (diff == 0) -> count unchanged
  next day   (diff == 1) -> count += 1,     last_saved_day = today
  otherwise  (diff > 1, negative, or unparseable stored day)
                         -> count = 1,      last_saved_day = today

Day difference zeroes the time of day on both sides (local calendar
semantics), so 23:59 -> 00:01 is one day, not two minutes.

The "increased" signal is derived by comparing the count before and after
the transition, never from which transition ran.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from nivra.core.errors import CorruptPersistedStateError, DateComputationError
from nivra.services.storage import SlotKeys, SlotStorage

logger = logging.getLogger(__name__)

# Same shape as JavaScript's Date.toDateString(): "Mon Oct 19 2026"
DAY_FORMAT = "%a %b %d %Y"


# ---------------------------------------------------------------------------
# Day helpers
# ---------------------------------------------------------------------------

def format_day(day: date) -> str:
    return day.strftime(DAY_FORMAT)


def parse_day(raw: str) -> date:
    """Parse a stored calendar-day identifier. Accepts DAY_FORMAT or ISO dates."""
    text = (raw or "").strip()
    for parse in (
        lambda t: datetime.strptime(t, DAY_FORMAT).date(),
        date.fromisoformat,
    ):
        try:
            return parse(text)
        except ValueError:
            continue
    raise DateComputationError(raw)


def day_diff(stored: str, today: date) -> Optional[int]:
    """Whole calendar days from `stored` to `today`; None if `stored` is unparseable."""
    try:
        return (today - parse_day(stored)).days
    except DateComputationError as exc:
        logger.warning("%s Treating it as a missed day.", exc.message)
        return None


def _decode_count(slot: str, raw: Optional[str]) -> int:
    if raw is None or raw.strip() == "":
        return 0
    try:
        count = int(raw.strip())
    except ValueError as exc:
        raise CorruptPersistedStateError(slot, raw) from exc
    if count < 0:
        raise CorruptPersistedStateError(slot, raw)
    return count


# ---------------------------------------------------------------------------
# State & tracker
# ---------------------------------------------------------------------------

@dataclass
class StreakState:
    count: int = 0
    last_saved_day: Optional[str] = None


class StreakTracker:

    def __init__(self, storage: SlotStorage, keys: SlotKeys, state: Optional[StreakState] = None):
        self._storage = storage
        self._keys = keys
        self.state = state or StreakState()

    @classmethod
    def load_or_default(cls, storage: SlotStorage, keys: SlotKeys) -> "StreakTracker":
        try:
            count = _decode_count(keys.streak, storage.get(keys.streak))
        except CorruptPersistedStateError as exc:
            logger.warning("%s Defaulting streak to 0.", exc.message)
            count = 0
        last_saved_day = storage.get(keys.last_saved_day) or None
        return cls(storage, keys, StreakState(count=count, last_saved_day=last_saved_day))

    @property
    def count(self) -> int:
        return self.state.count

    @property
    def last_saved_day(self) -> Optional[str]:
        return self.state.last_saved_day

    def _transition(self, today: date) -> None:
        state = self.state
        if state.last_saved_day is None:
            state.count = 1
            state.last_saved_day = format_day(today)
            return

        diff = day_diff(state.last_saved_day, today)
        if diff == 0:
            # A zeroed count here means the stored number was lost.
            state.count = max(state.count, 1)
            return
        if diff == 1:
            state.count += 1
        else:
            state.count = 1
        state.last_saved_day = format_day(today)

    def record_save(self, today: date) -> bool:
        """Apply the transition for a save on `today`, persist, and report an increase."""
        before = self.state.count
        self._transition(today)
        self.persist()
        increased = self.state.count > before
        logger.debug(
            "Streak %d -> %d (last saved %s)", before, self.state.count, self.state.last_saved_day
        )
        return increased

    def persist(self) -> bool:
        results = [self._storage.set(self._keys.streak, str(self.state.count))]
        if self.state.last_saved_day is not None:
            results.append(self._storage.set(self._keys.last_saved_day, self.state.last_saved_day))
        return all(results)

    def snapshot(self) -> dict:
        return {
            "count": self.state.count,
            "last_saved_day": self.state.last_saved_day,
            "storage": {
                "streak": self._storage.get(self._keys.streak),
                "last_saved_day": self._storage.get(self._keys.last_saved_day),
            },
        }
