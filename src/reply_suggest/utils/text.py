"""Pure string transforms applied to generated reply text."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import TypeVar

from reply_suggest.models.suggestion import MAX_TEXT_LENGTH

T = TypeVar("T")

MIN_LINE_LENGTH = 10

_LIST_MARKER_RE = re.compile(r"^\s*(?:\d+\s*[.)]\s*|[-•*]+\s*)")
_SPEAKER_RE = re.compile(r"^\s*(?:user|human|assistant|ai|bot)\s*:\s*", re.IGNORECASE)
_QUOTES = "\"'“”‘’`"

PLATFORM_FLOURISH = {
    "whatsapp": "\U0001f60a",
    "instagram": "✨",
}

# Any of these already in the text means no flourish is added
FLOURISH_MARKERS = (
    "\U0001f44d",
    "\U0001f4f1",
    "\U0001f60a",
    "✨",
    "\U0001f680",
    "\U0001f64f",
    "\U0001f4ab",
)


def clip(text: str, limit: int = MAX_TEXT_LENGTH) -> str:
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[:limit].rstrip()


def strip_list_marker(line: str) -> str:
    """Remove numbering, bullets, speaker prefixes and wrapping quotes."""
    cleaned = _SPEAKER_RE.sub("", line)
    cleaned = _LIST_MARKER_RE.sub("", cleaned)
    cleaned = _SPEAKER_RE.sub("", cleaned)
    return cleaned.strip().strip(_QUOTES).strip()


def split_reply_lines(text: str) -> list[str]:
    """Split free text into candidate replies.

    Code fences and lead-in lines ending in ":" are skipped. When any line
    is numbered or bulleted only those lines are kept, so surrounding
    prose does not turn into a reply. Lines shorter than ten characters
    after cleaning are discarded.
    """
    candidates: list[tuple[bool, str]] = []
    for line in text.splitlines():
        if not line.strip() or "```" in line:
            continue
        cleaned = strip_list_marker(line)
        if cleaned.endswith(":"):
            continue
        marked = bool(_LIST_MARKER_RE.match(_SPEAKER_RE.sub("", line)))
        candidates.append((marked, cleaned))

    if any(marked for marked, _ in candidates):
        candidates = [c for c in candidates if c[0]]
    return [clip(cleaned) for _, cleaned in candidates if len(cleaned) >= MIN_LINE_LENGTH]


def first_line(text: str) -> str:
    """Clean a raw completion down to its first usable line."""
    cleaned = strip_list_marker(text.strip())
    line = cleaned.split("\n")[0] if cleaned else ""
    return clip(line)


def add_flourish(text: str, platform: str) -> str:
    """Append the casual-platform emoji unless the text already carries one."""
    emoji = PLATFORM_FLOURISH.get(platform.lower())
    if not emoji or any(marker in text for marker in FLOURISH_MARKERS):
        return text
    return f"{text} {emoji}"


def unique_by_text(items: Iterable[T], key=lambda item: item.text) -> list[T]:
    """Drop items whose text repeats an earlier one, ignoring case."""
    seen: set[str] = set()
    result = []
    for item in items:
        norm = key(item).strip().lower()
        if norm in seen:
            continue
        seen.add(norm)
        result.append(item)
    return result
