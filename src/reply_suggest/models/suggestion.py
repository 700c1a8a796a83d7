"""Pydantic models for generated reply suggestions."""

from __future__ import annotations

from pydantic import BaseModel, Field

from reply_suggest.models.reminder import Tone

MAX_SUGGESTIONS = 4
MAX_TEXT_LENGTH = 200


class Suggestion(BaseModel):
    id: str
    text: str = Field(min_length=1, max_length=MAX_TEXT_LENGTH)
    tone: Tone
    platform: str

    def to_payload(self) -> dict:
        return {
            "id": self.id,
            "text": self.text,
            "tone": self.tone.value,
            "platform": self.platform,
        }


class AttemptRecord(BaseModel):
    """One provider attempt made while answering a request."""

    provider: str
    outcome: str  # "ok" | "empty" | "failed"
    reason: str | None = None
    count: int = 0


class SuggestionResult(BaseModel):
    suggestions: list[Suggestion]
    provider_tag: str
    attempts: list[AttemptRecord] = []

    def to_payload(self) -> dict:
        return {
            "suggestions": [s.to_payload() for s in self.suggestions],
            "providerTag": self.provider_tag,
        }
