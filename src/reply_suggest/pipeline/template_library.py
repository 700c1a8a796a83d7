"""Template Library: the deterministic last resort of the provider chain.

Pure, network-free and always able to answer. Sources are consulted in
priority order (context-specific, keyword-contextual, tone, platform)
and the first four unique replies win.
"""

from __future__ import annotations

import logging
from typing import NamedTuple

from reply_suggest.models.reminder import ReminderRef, SuggestionRequest, Tone
from reply_suggest.models.suggestion import MAX_SUGGESTIONS, Suggestion
from reply_suggest.providers.base import SuggestionSource, batch_ids
from reply_suggest.utils.text import clip, unique_by_text

logger = logging.getLogger(__name__)

SENSITIVE_KEYWORDS = ("funeral", "condolence", "sympathy", "bereavement", "passed away", "memorial")


class Template(NamedTuple):
    text: str
    tone: Tone


P, C, F, A, E = Tone.PROFESSIONAL, Tone.CASUAL, Tone.FRIENDLY, Tone.APOLOGETIC, Tone.ENTHUSIASTIC

PLATFORM_TEMPLATES: dict[str, tuple[Template, ...]] = {
    "whatsapp": (
        Template("Hey! Just saw your message. Let me get back to you on this \U0001f44d", C),
        Template("Thanks for reaching out! I'll check and reply soon.", F),
        Template("Sorry for the delay! Looking into this now.", A),
        Template("Awesome! Let me review this and get back to you \U0001f680", E),
    ),
    "email": (
        Template("Thank you for your email. I'll review this and respond within 24 hours.", P),
        Template("Hi! Thanks for reaching out. I'll get back to you shortly with more details.", F),
        Template("I apologize for the delayed response. I'll address this immediately.", A),
        Template("Great to hear from you! I'm excited to discuss this further.", E),
    ),
    "instagram": (
        Template("Thanks for the DM! I'll get back to you soon ✨", C),
        Template("Hey! Saw your message, will reply shortly!", F),
        Template("Sorry for the late reply! Checking this now \U0001f64f", A),
        Template("Love this! Let me get back to you with details \U0001f4ab", E),
    ),
    "linkedin": (
        Template("Thank you for connecting. I'll review your message and respond professionally.", P),
        Template("Thanks for reaching out! I'll get back to you with more information.", F),
        Template("I apologize for the delayed response. I'll address this promptly.", A),
        Template("Excited about this opportunity! I'll respond with details soon.", E),
    ),
}
DEFAULT_PLATFORM = "email"

# (keywords, templates); every category whose keywords appear contributes
CONTEXTUAL_TEMPLATES: tuple[tuple[tuple[str, ...], tuple[Template, ...]], ...] = (
    (
        ("meeting", "call", "zoom"),
        (
            Template("Thanks for scheduling this! I'll confirm the meeting details shortly.", P),
            Template("Looking forward to our meeting! I'll send the agenda soon.", E),
        ),
    ),
    (
        ("project", "deadline", "task"),
        (
            Template("Thanks for the project update! I'll review and respond with feedback.", P),
            Template("Got it! I'll check the project status and get back to you.", F),
        ),
    ),
    (
        ("question", "help", "support"),
        (
            Template("Thanks for your question! I'll research this and provide a detailed answer.", F),
            Template("Happy to help! Let me look into this and get back to you.", E),
        ),
    ),
)

TONE_TEMPLATES: dict[Tone, tuple[Template, ...]] = {
    P: (
        Template("Thank you for your message. I will review this matter and respond accordingly.", P),
        Template("I acknowledge receipt of your communication and will address this promptly.", P),
    ),
    C: (
        Template("Hey! Got your message, will get back to you soon!", C),
        Template("Thanks for reaching out! I'll check this out and reply.", C),
    ),
    F: (
        Template("Thanks so much for your message! I'll get back to you soon.", F),
        Template("Great to hear from you! I'll review this and respond shortly.", F),
    ),
    A: (
        Template("I sincerely apologize for the delayed response. I'll address this immediately.", A),
        Template("Sorry for not getting back to you sooner! I'll respond right away.", A),
    ),
    E: (
        Template("Exciting! I can't wait to dive into this and get back to you!", E),
        Template("This looks amazing! I'll review everything and respond with enthusiasm!", E),
    ),
}


def is_sensitive(text: str) -> bool:
    lower = text.lower()
    return any(keyword in lower for keyword in SENSITIVE_KEYWORDS)


def sensitive_templates(context: str) -> list[Template]:
    topic = context.lower()
    return [
        Template(f"Thank you for your message about the {topic}. I'll respond thoughtfully.", P),
        Template(f"I received your message regarding the {topic}. I'll get back to you soon.", F),
        Template(f"Got your message about the {topic}. I'll respond with care shortly.", A),
    ]


def context_templates(context: str, tone: Tone | None = None) -> list[Template]:
    """Replies that quote the user's context verbatim (lowercased)."""
    topic = context.lower()
    templates = [
        Template(f"Hey! Got your message about the {topic}. I'll get back to you with details!", C),
        Template(f"Thanks for reaching out about the {topic}! Let me check and reply soon.", F),
        Template(f"Got your message regarding the {topic}. I'll respond shortly with more information.", P),
    ]
    if tone is A:
        templates.append(
            Template(f"Sorry for the delay! I got your message about the {topic} and I'll respond right away.", A)
        )
    elif tone is E:
        templates.append(
            Template(f"Exciting! I got your message about the {topic}. Can't wait to discuss this further!", E)
        )
    else:
        templates.append(
            Template(f"I saw your message about the {topic}. I'll look into this and get back to you.", tone or F)
        )
    return templates


def contextual_templates(reminder: ReminderRef, context: str | None = None) -> list[Template]:
    all_text = " ".join(filter(None, (reminder.title, reminder.note, context))).lower()
    templates = []
    for keywords, entries in CONTEXTUAL_TEMPLATES:
        if any(keyword in all_text for keyword in keywords):
            templates.extend(entries)
    return templates


def tone_templates(tone: Tone | None) -> list[Template]:
    return list(TONE_TEMPLATES.get(tone, ())) if tone else []


def platform_templates(platform: str) -> list[Template]:
    return list(PLATFORM_TEMPLATES.get(platform.lower(), PLATFORM_TEMPLATES[DEFAULT_PLATFORM]))


def select_templates(
    reminder: ReminderRef,
    context: str | None = None,
    tone: Tone | None = None,
) -> list[Template]:
    if context and is_sensitive(context):
        return sensitive_templates(context)

    candidates = [
        *(context_templates(context, tone) if context else []),
        *contextual_templates(reminder, context),
        *tone_templates(tone),
        *platform_templates(reminder.platform),
    ]
    return unique_by_text(candidates)[:MAX_SUGGESTIONS]


class TemplateLibrary(SuggestionSource):
    name = "templates"

    def generate(
        self,
        reminder: ReminderRef,
        context: str | None = None,
        tone: Tone | None = None,
    ) -> list[Suggestion]:
        templates = select_templates(reminder, context, tone)
        logger.debug("Template library picked %d replies", len(templates))
        ids = batch_ids("template")
        return [
            Suggestion(id=next(ids), text=clip(t.text), tone=t.tone, platform=reminder.platform)
            for t in templates
        ]

    async def attempt(self, request: SuggestionRequest) -> list[Suggestion]:
        return self.generate(request.reminder, request.context, request.preferred_tone)
