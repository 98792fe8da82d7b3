"""
Tests for the entry store: append order, trimming, persistence and
tolerant loading of corrupt slots.
"""
import json
from datetime import datetime

import pytest

from nivra.services.entry_store import (
    EntryStore,
    MoodEntry,
    iso_instant,
    short_date_label,
    trim_to_max,
)
from nivra.services.vocabulary import MoodKey


def _entry(i: int, mood: MoodKey = MoodKey.happy) -> MoodEntry:
    return MoodEntry(
        timestamp=f"2026-10-{i:02d}T08:00:00.000Z",
        mood=mood,
        value={"sad": 1, "neutral": 2, "happy": 3, "excited": 4, "love": 5}[mood.value],
        note=f"note {i}",
    )


class TestHelpers:
    def test_trim_keeps_last_items(self):
        assert trim_to_max([1, 2, 3, 4], 3) == [2, 3, 4]

    def test_trim_short_list_untouched(self):
        assert trim_to_max([1, 2], 3) == [1, 2]

    def test_trim_zero(self):
        assert trim_to_max([1, 2], 0) == []

    def test_short_date_label(self):
        assert short_date_label(datetime(2026, 10, 9, 22, 5)) == "09 Oct"

    def test_iso_instant_is_utc_with_z(self):
        stamp = iso_instant(datetime(2026, 10, 19, 9, 30).astimezone())
        assert stamp.endswith("Z")
        assert "." in stamp


class TestAppend:
    def test_append_then_read_keeps_order(self, storage, keys):
        store = EntryStore(storage, keys)
        for i in range(1, 4):
            store.append(_entry(i), label=f"{i:02d} Oct")
        assert [e.note for e in store.entries] == ["note 1", "note 2", "note 3"]
        assert store.labels == ["01 Oct", "02 Oct", "03 Oct"]
        assert store.moods == [3, 3, 3]
        assert store.entries[-1].note == "note 3"

    def test_trim_drops_oldest(self, storage, keys):
        store = EntryStore(storage, keys, entry_limit=3, series_limit=3)
        appended = [_entry(i) for i in range(1, 5)]
        for i, e in enumerate(appended, start=1):
            store.append(e, label=str(i))
        assert len(store) == 3
        assert store.entries == appended[1:]
        assert store.labels == ["2", "3", "4"]

    def test_entry_and_series_limits_are_independent(self, storage, keys):
        store = EntryStore(storage, keys, entry_limit=5, series_limit=2)
        for i in range(1, 5):
            store.append(_entry(i), label=str(i))
        assert len(store.entries) == 4
        assert store.labels == ["3", "4"]
        assert len(store.labels) == len(store.moods)

    def test_label_derived_from_timestamp_when_omitted(self, storage, keys):
        store = EntryStore(storage, keys)
        store.append(_entry(15))
        assert store.labels[0].endswith("Oct")

    def test_returned_lists_are_copies(self, storage, keys):
        store = EntryStore(storage, keys)
        store.append(_entry(1), label="a")
        store.labels.append("x")
        assert store.labels == ["a"]

    def test_mismatched_series_rejected(self, storage, keys):
        with pytest.raises(ValueError):
            EntryStore(storage, keys, labels=["a"], moods=[])


class TestPersistAndLoad:
    def test_round_trip(self, storage, keys):
        store = EntryStore(storage, keys)
        store.append(_entry(1, MoodKey.sad), label="01 Oct")
        store.append(_entry(2, MoodKey.love), label="02 Oct")
        assert store.persist() is True

        loaded = EntryStore.load_or_default(storage, keys)
        assert loaded.entries == store.entries
        assert loaded.labels == store.labels
        assert loaded.moods == store.moods

    def test_each_sequence_in_its_own_slot(self, storage, keys):
        store = EntryStore(storage, keys)
        store.append(_entry(1), label="01 Oct")
        store.persist()
        assert json.loads(storage.get(keys.labels)) == ["01 Oct"]
        assert json.loads(storage.get(keys.moods)) == [3]
        assert json.loads(storage.get(keys.entries))[0]["note"] == "note 1"

    def test_empty_storage_defaults(self, storage, keys):
        loaded = EntryStore.load_or_default(storage, keys)
        assert loaded.entries == []
        assert loaded.labels == []
        assert loaded.moods == []

    def test_corrupt_entries_slot_does_not_spoil_others(self, storage, keys):
        storage.set(keys.entries, "{not json")
        storage.set(keys.labels, json.dumps(["01 Oct"]))
        storage.set(keys.moods, json.dumps([4]))
        loaded = EntryStore.load_or_default(storage, keys)
        assert loaded.entries == []
        assert loaded.labels == ["01 Oct"]
        assert loaded.moods == [4]

    def test_non_list_payload_defaults_to_empty(self, storage, keys):
        storage.set(keys.labels, json.dumps({"a": 1}))
        storage.set(keys.moods, json.dumps([]))
        assert EntryStore.load_or_default(storage, keys).labels == []

    def test_out_of_range_mood_values_reset_series(self, storage, keys):
        storage.set(keys.labels, json.dumps(["01 Oct", "02 Oct"]))
        storage.set(keys.moods, json.dumps([3, 9]))
        loaded = EntryStore.load_or_default(storage, keys)
        assert loaded.moods == []
        assert loaded.labels == []

    def test_unequal_series_cut_to_common_suffix(self, storage, keys):
        storage.set(keys.labels, json.dumps(["a", "b", "c"]))
        storage.set(keys.moods, json.dumps([2, 5]))
        loaded = EntryStore.load_or_default(storage, keys)
        assert loaded.labels == ["b", "c"]
        assert loaded.moods == [2, 5]

    def test_malformed_records_skipped(self, storage, keys):
        records = [
            {"timestamp": "2026-10-01T08:00:00.000Z", "mood": "happy", "value": 3, "note": "ok"},
            {"mood": "happy"},
            "garbage",
            {"date": "2026-10-02T08:00:00.000Z", "mood": "😢", "value": 1, "note": ""},
        ]
        storage.set(keys.entries, json.dumps(records))
        loaded = EntryStore.load_or_default(storage, keys)
        assert [e.mood for e in loaded.entries] == [MoodKey.happy, MoodKey.sad]
        assert loaded.entries[1].timestamp == "2026-10-02T08:00:00.000Z"

    def test_snapshot_includes_raw_slots(self, storage, keys):
        store = EntryStore(storage, keys)
        store.append(_entry(1), label="01 Oct")
        store.persist()
        snap = store.snapshot()
        assert snap["labels"] == ["01 Oct"]
        assert snap["storage"]["moods"] == "[3]"

    def test_null_timestamp_falls_back_to_legacy_date(self):
        entry = MoodEntry.from_record(
            {"timestamp": None, "date": "2026-10-03T08:00:00.000Z", "mood": "love", "note": "hi"}
        )
        assert entry.timestamp == "2026-10-03T08:00:00.000Z"
        assert entry.value == 5
