"""Keyword-based tone classifier shared by every generator."""

from __future__ import annotations

from reply_suggest.models.reminder import Tone

# Checked in order; the first rule with a hit wins.
TONE_KEYWORDS: tuple[tuple[Tone, tuple[str, ...]], ...] = (
    (Tone.APOLOGETIC, ("sorry", "apologize", "apologies")),
    (Tone.ENTHUSIASTIC, ("excited", "great", "awesome")),
    (Tone.PROFESSIONAL, ("dear", "sincerely", "regards")),
    (Tone.CASUAL, ("hey", "thanks", "sure")),
)


def match_tone(text: str) -> Tone | None:
    """Return the tone signalled by a keyword in ``text``, or None."""
    lower = text.lower()
    for tone, keywords in TONE_KEYWORDS:
        if any(keyword in lower for keyword in keywords):
            return tone
    return None


def infer_tone(text: str) -> Tone:
    return match_tone(text) or Tone.FRIENDLY
