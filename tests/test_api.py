"""Tests for the request handler."""

from __future__ import annotations

import pytest

from reply_suggest.api import handle_suggestion_request, validate_payload
from reply_suggest.errors import TransportError
from reply_suggest.models.reminder import Tone
from reply_suggest.models.suggestion import Suggestion
from reply_suggest.pipeline.coordinator import SuggestionEngine
from reply_suggest.pipeline.heuristic import HeuristicGenerator
from reply_suggest.pipeline.template_library import TemplateLibrary
from reply_suggest.providers.base import SuggestionSource


class _Failing(SuggestionSource):
    def __init__(self, name, error):
        self.name = name
        self.error = error

    async def attempt(self, request):
        raise self.error


class _Canned(SuggestionSource):
    name = "gemini"

    async def attempt(self, request):
        return [Suggestion(id="g", text="On it!", tone=Tone.CASUAL, platform=request.reminder.platform)]


@pytest.fixture
def engine():
    return SuggestionEngine([HeuristicGenerator(), TemplateLibrary()])


class TestValidatePayload:
    @pytest.mark.parametrize("payload", [None, [], {}, {"reminder": None}, {"reminder": ""}, {"context": "x"}])
    def test_missing_reminder(self, payload):
        request, error = validate_payload(payload)
        assert request is None
        assert error == "Reminder data is required"

    @pytest.mark.parametrize(
        "reminder",
        [{}, [], {"title": "Reply"}, {"platform": "email"}, {"title": "", "platform": "email"}, "just a string"],
    )
    def test_missing_title_or_platform(self, reminder):
        request, error = validate_payload({"reminder": reminder})
        assert request is None
        assert error == "Reminder must have title and platform"

    def test_camel_case_tone(self):
        request, error = validate_payload(
            {"reminder": {"title": "Hi", "platform": "WhatsApp"}, "preferredTone": "Apologetic"}
        )
        assert error is None
        assert request.preferred_tone == Tone.APOLOGETIC
        assert request.reminder.platform == "whatsapp"

    def test_bad_field_type(self):
        request, error = validate_payload({"reminder": {"title": "Hi", "platform": "email", "note": 42}})
        assert request is None
        assert error.startswith("Invalid request:")


class TestHandleSuggestionRequest:
    async def test_success_body(self, engine):
        payload = {
            "reminder": {"id": "r-17", "title": "Reply to John about project", "platform": "whatsapp"},
            "context": "project deadline",
        }
        status, body = await handle_suggestion_request(payload, engine)

        assert status == 200
        assert body["success"] is True
        assert body["providerTag"] == "heuristic"
        assert 1 <= len(body["suggestions"]) <= 4
        assert set(body["suggestions"][0]) == {"id", "text", "tone", "platform"}
        assert body["reminder"] == {
            "id": "r-17",
            "title": "Reply to John about project",
            "platform": "whatsapp",
        }

    async def test_provider_tag_names_winner(self):
        engine = SuggestionEngine([_Canned(), TemplateLibrary()])
        status, body = await handle_suggestion_request({"reminder": {"title": "Hi", "platform": "slack"}}, engine)
        assert status == 200
        assert body["providerTag"] == "gemini"
        assert body["suggestions"][0]["text"] == "On it!"

    async def test_provider_failures_stay_hidden(self):
        engine = SuggestionEngine([_Failing("gemini", TransportError("down", "gemini")), TemplateLibrary()])
        status, body = await handle_suggestion_request({"reminder": {"title": "Hi", "platform": "email"}}, engine)
        assert status == 200
        assert body["providerTag"] == "templates"
        assert "error" not in body

    async def test_bad_request(self, engine):
        status, body = await handle_suggestion_request({"reminder": {"title": "Hi"}}, engine)
        assert status == 400
        assert body == {"error": "Reminder must have title and platform"}

    async def test_empty_reminder_object(self, engine):
        status, body = await handle_suggestion_request({"reminder": {}}, engine)
        assert status == 400
        assert body == {"error": "Reminder must have title and platform"}

    async def test_engine_failure_is_500(self):
        engine = SuggestionEngine([_Failing("templates", RuntimeError("template table missing"))])
        status, body = await handle_suggestion_request({"reminder": {"title": "Hi", "platform": "email"}}, engine)
        assert status == 500
        assert body["error"] == "Failed to generate AI suggestions"
        assert "template table missing" in body["details"]
