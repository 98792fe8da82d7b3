"""
Mood vocabulary: the closed set of moods, their ordinal values and glyphs.

Pure lookups. The only impurity is `line_for`, which draws from an
injected `LinePicker` so callers and tests control the randomness.
"""
from __future__ import annotations

import enum
import random
from typing import Optional, Protocol, Sequence


class MoodKey(str, enum.Enum):
    sad = "sad"
    neutral = "neutral"
    happy = "happy"
    excited = "excited"
    love = "love"


MOOD_VALUES: dict[MoodKey, int] = {
    MoodKey.sad: 1,
    MoodKey.neutral: 2,
    MoodKey.happy: 3,
    MoodKey.excited: 4,
    MoodKey.love: 5,
}

# Index == ordinal value; index 0 is the "no mood" sentinel.
_GLYPHS = ["", "😢", "😐", "😊", "😁", "🤩"]
_DISPLAY_NAMES = ["", "Sad", "Neutral", "Happy", "Excited", "Love"]

_GLYPH_TO_KEY: dict[str, MoodKey] = {
    _GLYPHS[value]: key for key, value in MOOD_VALUES.items()
}

FALLBACK_LINE = "How are you feeling today?"

MOOD_LINES: dict[MoodKey, tuple[str, ...]] = {
    MoodKey.sad: (
        "It's okay to feel down. Let's write one small thing you noticed today.",
        "If it's heavy, try untangling one thought. You're allowed to go slow.",
        "Bad days matter. Let's capture a single detail that felt heavy.",
    ),
    MoodKey.neutral: (
        "Quiet days are fine. What small thing made today steady?",
        "Neutral is a useful baseline. Note one small observation.",
        "A calm day: what did you do that felt ordinary and good?",
    ),
    MoodKey.happy: (
        "Nice! What made you smile today? Capture that small joy.",
        "Good days are worth saving. One sentence will do.",
        "Remembering this feeling later will help. Write it down.",
    ),
    MoodKey.excited: (
        "You're buzzing! What's the spark? Write one sentence to remember.",
        "Energy is awesome. Save the highlight of today!",
        "Capture the 'why' of this excitement in a line.",
    ),
    MoodKey.love: (
        "Warm feelings are precious. Jot down the moment that caused it.",
        "That glow matters. Save who or what made you feel this way.",
        "A short note will keep this feeling easy to revisit.",
    ),
}


class LinePicker(Protocol):
    def pick(self, options: Sequence[str]) -> str: ...


class RandomLinePicker:
    """Unseeded uniform choice; each call is independent."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def pick(self, options: Sequence[str]) -> str:
        return self._rng.choice(list(options))


def normalize_mood(raw) -> Optional[MoodKey]:
    """Map an identifier or glyph to its canonical MoodKey, else None."""
    if isinstance(raw, MoodKey):
        return raw
    if not isinstance(raw, str):
        return None
    text = raw.strip()
    if text in _GLYPH_TO_KEY:
        return _GLYPH_TO_KEY[text]
    try:
        return MoodKey(text.lower())
    except ValueError:
        return None


def value_of(key) -> int:
    """Ordinal 1..5 for a recognised mood, 0 otherwise."""
    mood = normalize_mood(key)
    return MOOD_VALUES[mood] if mood is not None else 0


def glyph_of(value: int) -> str:
    if isinstance(value, int) and 0 < value < len(_GLYPHS):
        return _GLYPHS[value]
    return ""


def display_name(value: int) -> str:
    if isinstance(value, int) and 0 < value < len(_DISPLAY_NAMES):
        return _DISPLAY_NAMES[value]
    return ""


def line_for(key, picker: LinePicker) -> str:
    mood = normalize_mood(key)
    options = MOOD_LINES.get(mood, (FALLBACK_LINE,)) if mood is not None else (FALLBACK_LINE,)
    return picker.pick(options)
