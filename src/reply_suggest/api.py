"""Request handler turning a JSON-shaped payload into a response body."""

from __future__ import annotations

import logging

from pydantic import ValidationError

from reply_suggest.errors import EngineError
from reply_suggest.models.reminder import SuggestionRequest
from reply_suggest.pipeline.coordinator import SuggestionEngine

logger = logging.getLogger(__name__)


def validate_payload(payload: object) -> tuple[SuggestionRequest | None, str | None]:
    """Return (request, None) or (None, error message)."""
    reminder = payload.get("reminder") if isinstance(payload, dict) else None
    # An empty reminder object is present but incomplete
    if reminder is None or reminder == "":
        return None, "Reminder data is required"
    if not isinstance(reminder, dict) or not reminder.get("title") or not reminder.get("platform"):
        return None, "Reminder must have title and platform"
    try:
        return SuggestionRequest.from_payload(payload), None
    except ValidationError as exc:
        return None, f"Invalid request: {exc.errors()[0]['msg']}"


async def handle_suggestion_request(payload: object, engine: SuggestionEngine) -> tuple[int, dict]:
    """Answer one suggestion request.

    Returns an HTTP-style status code and JSON body. Provider failures
    never show up here; only a broken final stage yields a 500.
    """
    request, error = validate_payload(payload)
    if request is None:
        return 400, {"error": error}

    try:
        result = await engine.generate(request)
    except EngineError as exc:
        logger.error("Suggestion engine failed: %s", exc)
        return 500, {"error": "Failed to generate AI suggestions", "details": str(exc)}

    reminder = request.reminder
    return 200, {
        "success": True,
        **result.to_payload(),
        "reminder": {"id": reminder.id, "title": reminder.title, "platform": reminder.platform},
    }
