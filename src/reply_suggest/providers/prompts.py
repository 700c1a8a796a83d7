"""Prompt builders for the remote text-generation providers."""

from __future__ import annotations

from reply_suggest.models.reminder import SuggestionRequest, Tone

SYSTEM_PROMPT = (
    "You are a helpful assistant that generates appropriate reply suggestions "
    "for different messaging platforms. Always provide practical, contextual, "
    "and platform-appropriate responses."
)

PLATFORM_STYLE = {
    "whatsapp": "WhatsApp is casual and personal. Use emojis sparingly, keep messages conversational.",
    "email": "Email should be more formal with proper greetings and closings. Include subject context.",
    "instagram": "Instagram is visual and casual. Keep responses brief and engaging.",
    "twitter": "Twitter has character limits. Be concise and engaging.",
    "linkedin": "LinkedIn is professional. Maintain business-appropriate tone.",
    "telegram": "Telegram is like WhatsApp but can be more technical/detailed.",
    "discord": "Discord is casual and community-focused. Can be playful.",
    "slack": "Slack is workplace communication. Be professional but friendly.",
    "other": "General messaging platform. Keep responses versatile and appropriate.",
}

_TONE_LABELS = "|".join(t.value for t in Tone)


def platform_style(platform: str) -> str:
    return PLATFORM_STYLE.get(platform.lower(), PLATFORM_STYLE["other"])


def _tone_name(request: SuggestionRequest, default: str = "friendly") -> str:
    return request.preferred_tone.value if request.preferred_tone else default


def build_structured_prompt(request: SuggestionRequest, count: int = 4) -> str:
    """Prompt asking for ``count`` tone-labelled replies as a JSON array.

    Used by providers that follow instructions well enough to return
    machine-parseable output (Gemini, OpenAI, Claude).
    """
    reminder = request.reminder
    tone = _tone_name(request)
    last_tone = request.preferred_tone.value if request.preferred_tone else "enthusiastic"
    context = request.context or "General message"

    return f"""Generate {count} different reply suggestions for a {reminder.platform} message titled "{reminder.title}".

Context: {context}
Notes: {reminder.note or "None"}
Preferred tone: {tone}
Platform: {reminder.platform}

{platform_style(reminder.platform)}

Please generate {count} unique, contextually appropriate reply suggestions that:
1. Acknowledge the specific context ({request.context or "the message"})
2. Use a {tone} tone, while varying the tone across suggestions
3. Are appropriate for {reminder.platform}
4. Are natural, conversational and ready to send (complete messages under 200 characters)

Respond with a JSON array only, where "tone" is one of {_TONE_LABELS}:
[
  {{"text": "suggestion 1", "tone": "casual"}},
  {{"text": "suggestion 2", "tone": "friendly"}},
  {{"text": "suggestion 3", "tone": "professional"}},
  {{"text": "suggestion 4", "tone": "{last_tone}"}}
]"""


def build_prompt_variants(request: SuggestionRequest) -> list[str]:
    """Four short phrasings of the same request for plain completion models."""
    reminder = request.reminder
    tone = _tone_name(request)
    title = reminder.title
    platform = reminder.platform
    context = request.context

    about = f" about {context}" if context else ""
    regarding = f"Regarding {context}, " if context else ""

    return [
        f'{regarding}reply to "{title}" on {platform}. Be {tone}{about}.',
        f'Write a {tone} {platform} response to "{title}"{about}. Make it relevant to the context.',
        f'Someone messaged "{title}" on {platform}{about}. Reply in a {tone} way that acknowledges the context.',
        f'Respond to "{title}" on {platform}. Context: {context or "general message"}. Tone: {tone}.',
    ]
