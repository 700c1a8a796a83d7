"""Tests for request and suggestion models."""

import pytest
from pydantic import ValidationError

from reply_suggest.models import ReminderRef, Suggestion, SuggestionRequest, SuggestionResult, Tone


class TestTone:
    def test_parse_known(self):
        assert Tone.parse("Professional") is Tone.PROFESSIONAL
        assert Tone.parse(" casual ") is Tone.CASUAL

    def test_parse_unknown(self):
        assert Tone.parse("sarcastic") is None
        assert Tone.parse(None) is None
        assert Tone.parse(3) is None


class TestSuggestionRequest:
    def test_platform_is_lowercased(self):
        reminder = ReminderRef(title="Hi", platform=" WhatsApp ")
        assert reminder.platform == "whatsapp"

    def test_reminder_is_immutable(self):
        reminder = ReminderRef(title="Hi", platform="email")
        with pytest.raises(ValidationError):
            reminder.title = "changed"

    def test_blank_context_becomes_none(self):
        request = SuggestionRequest(reminder=ReminderRef(title="Hi", platform="email"), context="   ")
        assert request.context is None

    def test_unknown_tone_is_ignored(self):
        request = SuggestionRequest(
            reminder=ReminderRef(title="Hi", platform="email"), preferred_tone="grumpy"
        )
        assert request.preferred_tone is None

    def test_from_payload_camel_case(self):
        request = SuggestionRequest.from_payload(
            {
                "reminder": {"id": "r1", "title": "Call mom", "platform": "whatsapp", "note": "birthday"},
                "context": "weekend plans",
                "preferredTone": "enthusiastic",
            }
        )
        assert request.reminder.id == "r1"
        assert request.reminder.note == "birthday"
        assert request.context == "weekend plans"
        assert request.preferred_tone is Tone.ENTHUSIASTIC

    def test_tone_accepted_by_alias_or_field_name(self):
        reminder = {"title": "Call mom", "platform": "whatsapp"}
        by_alias = SuggestionRequest(reminder=reminder, preferredTone="casual")
        by_name = SuggestionRequest.from_payload({"reminder": reminder, "preferred_tone": "casual"})
        assert by_alias.preferred_tone is Tone.CASUAL
        assert by_name.preferred_tone is Tone.CASUAL


class TestSuggestion:
    def test_rejects_empty_text(self):
        with pytest.raises(ValidationError):
            Suggestion(id="x", text="", tone=Tone.CASUAL, platform="email")

    def test_rejects_overlong_text(self):
        with pytest.raises(ValidationError):
            Suggestion(id="x", text="a" * 201, tone=Tone.CASUAL, platform="email")

    def test_result_payload_shape(self):
        result = SuggestionResult(
            suggestions=[Suggestion(id="t-1", text="Thanks!", tone=Tone.CASUAL, platform="email")],
            provider_tag="templates",
        )
        assert result.to_payload() == {
            "suggestions": [{"id": "t-1", "text": "Thanks!", "tone": "casual", "platform": "email"}],
            "providerTag": "templates",
        }
