"""
Journal router - the UI layer's view of the mood widget.

POST /journal/mood       pick a mood (pending selection + prompt line)
POST /journal/entries    save an entry
GET  /journal/entries    stored entries, oldest first
GET  /journal/streak     current streak
GET  /journal/chart      current trend chart document
GET  /journal/today      date stamp
GET  /journal/debug      in-memory state next to the raw storage slots
"""
from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status

from nivra.schemas.common import ErrorResponse
from nivra.schemas.journal import (
    ChartResponse,
    DateStampResponse,
    DebugSnapshotResponse,
    EntryListResponse,
    EntryOut,
    MoodPickRequest,
    MoodPickResponse,
    SaveEntryRequest,
    SaveEntryResponse,
    StreakResponse,
)
from nivra.services.entry_store import MoodEntry
from nivra.services.save_pipeline import MoodWidget

router = APIRouter(prefix="/journal", tags=["journal"])


def get_widget(request: Request) -> MoodWidget:
    """The single widget built at startup."""
    return request.app.state.widget


def _entry_out(entry: MoodEntry) -> EntryOut:
    return EntryOut(**entry.to_record())


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

@router.post(
    "/mood",
    response_model=MoodPickResponse,
    summary="Pick a mood",
    responses={422: {"model": ErrorResponse, "description": "Unknown mood (`VALIDATION_ERROR`)."}},
)
def pick_mood(payload: MoodPickRequest, widget: MoodWidget = Depends(get_widget)):
    """Store the pending selection used by the next save and return a prompt line."""
    pick = widget.on_mood_pick(payload.mood)
    return MoodPickResponse(
        mood=pick.mood.value, value=pick.value, glyph=pick.glyph, line=pick.line
    )


@router.post(
    "/entries",
    response_model=SaveEntryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a journal entry",
    responses={
        201: {"description": "Entry saved; chart and streak updated."},
        422: {
            "model": ErrorResponse,
            "description": "No mood selected (`NO_MOOD_SELECTED`) or invalid payload.",
        },
    },
)
def save_entry(payload: SaveEntryRequest, widget: MoodWidget = Depends(get_widget)):
    """
    Save one entry:
    - Uses `mood` from the body, or the pending selection when omitted.
    - Appends to the journal, updates the streak, refreshes the chart.

    `increased_streak` is true when this save grew the streak, so the UI can
    play its one-shot celebration.
    """
    result = widget.on_save(payload.note, mood=payload.mood)
    return SaveEntryResponse(
        entry=_entry_out(result.entry),
        increased_streak=result.increased_streak,
        streak=result.streak,
    )


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------

@router.get("/entries", response_model=EntryListResponse, summary="Stored entries")
def list_entries(widget: MoodWidget = Depends(get_widget)):
    entries = widget.store.entries
    return EntryListResponse(total=len(entries), items=[_entry_out(e) for e in entries])


@router.get("/streak", response_model=StreakResponse, summary="Current streak")
def get_streak(widget: MoodWidget = Depends(get_widget)):
    return StreakResponse(count=widget.tracker.count, last_saved_day=widget.tracker.last_saved_day)


@router.get("/chart", response_model=ChartResponse, summary="Trend chart document")
def get_chart(widget: MoodWidget = Depends(get_widget)):
    rendering = widget.refresh_chart()
    return ChartResponse(
        labels=list(rendering.series.labels),
        values=list(rendering.series.values),
        revision=rendering.revision,
        config=rendering.config,
    )


@router.get("/today", response_model=DateStampResponse, summary="Date stamp for the header")
def get_today(widget: MoodWidget = Depends(get_widget)):
    return DateStampResponse(text=widget.date_stamp())


@router.get("/debug", response_model=DebugSnapshotResponse, summary="State and raw storage slots")
def get_debug(widget: MoodWidget = Depends(get_widget)):
    return DebugSnapshotResponse(**widget.debug_snapshot())
