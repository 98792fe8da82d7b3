"""
Journal request / response schemas.

Mood pick:   POST /journal/mood      → MoodPickRequest  → MoodPickResponse
Save:        POST /journal/entries   → SaveEntryRequest → SaveEntryResponse
Reads:       GET  /journal/entries | /streak | /chart | /today | /debug
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from nivra.services.vocabulary import normalize_mood

NOTE_MAX_LENGTH = 10_000


# ---------------------------------------------------------------------------
# Mood pick
# ---------------------------------------------------------------------------

class MoodPickRequest(BaseModel):
    mood: str = Field(
        description="Mood identifier or its glyph.",
        examples=["happy", "😊"],
    )

    @field_validator("mood")
    @classmethod
    def must_be_known_mood(cls, v: str) -> str:
        mood = normalize_mood(v)
        if mood is None:
            raise ValueError("mood must be one of sad, neutral, happy, excited, love")
        return mood.value


class MoodPickResponse(BaseModel):
    mood: str
    value: int = Field(description="Ordinal 1..5.")
    glyph: str
    line: str = Field(description="Prompt sentence shown under the mood picker.")


# ---------------------------------------------------------------------------
# Save
# ---------------------------------------------------------------------------

class SaveEntryRequest(BaseModel):
    note: str = Field(
        default="",
        max_length=NOTE_MAX_LENGTH,
        description="Free text. Stripped of leading/trailing whitespace; may be empty.",
        examples=["felt good"],
    )
    mood: Optional[str] = Field(
        default=None,
        description="Mood to save. Omit to use the pending selection from POST /journal/mood.",
        examples=["happy"],
    )


class EntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    timestamp: str = Field(description="UTC instant, ISO-8601.")
    mood: str
    value: int
    note: str


class SaveEntryResponse(BaseModel):
    entry: EntryOut
    increased_streak: bool = Field(description="True when this save grew the streak.")
    streak: int


class EntryListResponse(BaseModel):
    total: int
    items: list[EntryOut]


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

class StreakResponse(BaseModel):
    count: int
    last_saved_day: Optional[str] = None


class ChartResponse(BaseModel):
    labels: list[str]
    values: list[int]
    revision: int = Field(description="Advances only when the plotted data changes.")
    config: dict[str, Any]


class DateStampResponse(BaseModel):
    text: str = Field(examples=["Today, 19 October 2026"])


class DebugSnapshotResponse(BaseModel):
    pending_mood: Optional[str] = None
    store: dict[str, Any]
    streak: dict[str, Any]
