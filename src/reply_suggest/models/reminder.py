"""Pydantic models for incoming suggestion requests."""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


class Tone(str, Enum):
    PROFESSIONAL = "professional"
    CASUAL = "casual"
    FRIENDLY = "friendly"
    APOLOGETIC = "apologetic"
    ENTHUSIASTIC = "enthusiastic"

    @classmethod
    def parse(cls, value: object) -> Tone | None:
        """Return the matching tone, or None for blanks and unknown labels."""
        if isinstance(value, Tone):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class ReminderRef(BaseModel):
    """The caller's stored reminder, reduced to what reply generation reads."""

    model_config = ConfigDict(frozen=True)

    title: str
    platform: str
    note: str | None = None
    id: str | None = None

    @field_validator("platform")
    @classmethod
    def _normalize_platform(cls, value: str) -> str:
        return value.strip().lower()


class SuggestionRequest(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    reminder: ReminderRef
    context: str | None = None
    preferred_tone: Tone | None = Field(default=None, alias="preferredTone")

    @field_validator("context")
    @classmethod
    def _blank_context_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()

    @field_validator("preferred_tone", mode="before")
    @classmethod
    def _lenient_tone(cls, value: object) -> Tone | None:
        if value is None or value == "":
            return None
        tone = Tone.parse(value)
        if tone is None:
            # Unknown labels only bias output, so they are dropped rather than rejected
            logger.warning("Ignoring unknown preferred tone: %r", value)
        return tone

    @classmethod
    def from_payload(cls, payload: dict) -> SuggestionRequest:
        """Build a request from the camelCase JSON shape the web client sends."""
        return cls.model_validate(payload)
