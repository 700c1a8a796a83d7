"""Heuristic Generator: local, network-free reply composition.

The message title and context are classified into intent flags,
sentiment and keywords; templates are picked from that analysis and
lightly personalised.
"""

from __future__ import annotations

import asyncio
import logging
import re
import string
from dataclasses import dataclass, field

from reply_suggest.errors import EmptyResultError
from reply_suggest.models.reminder import ReminderRef, SuggestionRequest, Tone
from reply_suggest.models.suggestion import MAX_SUGGESTIONS, Suggestion
from reply_suggest.providers.base import SuggestionSource, batch_ids
from reply_suggest.utils.text import add_flourish, clip
from reply_suggest.utils.tone import match_tone

logger = logging.getLogger(__name__)

QUESTION_WORDS = ("when", "what", "how", "where")
URGENT_WORDS = ("urgent", "asap", "immediately", "emergency")
EVENT_WORDS = ("meeting", "party", "event", "conference", "wedding", "funeral")
WORK_WORDS = ("project", "work", "deadline", "task", "business")
PERSONAL_WORDS = ("family", "friend", "personal", "birthday")
FORMAL_PLATFORMS = ("email", "linkedin")

POSITIVE_WORDS = ("great", "awesome", "excellent", "wonderful", "amazing", "fantastic", "good", "happy", "excited")
NEGATIVE_WORDS = ("problem", "issue", "urgent", "sorry", "apologize", "mistake", "error", "bad", "terrible")

STOPWORDS = frozenset(
    "the and or but in on at to for of with by is are was were be been have has had do does "
    "did will would could should may might can about this that these those a an".split()
)

QUESTION_TEMPLATES = (
    "I got your question and I'll research this thoroughly before responding.",
    "Thanks for asking! Let me look into this and get back to you with a detailed answer.",
)
URGENT_TEMPLATES = (
    "I understand this is urgent. I'll prioritize this and respond as quickly as possible.",
    "Got it - marking this as high priority and will address it immediately.",
)
EVENT_TEMPLATES = (
    "Thanks for the event details! I'll check my calendar and confirm my availability.",
    "I received your message about the event. I'll review the details and get back to you.",
)
WORK_TEMPLATES = (
    "I'll review the project details and provide my feedback shortly.",
    "Thanks for the work update. I'll analyze this and respond with my thoughts.",
)
POSITIVE_TEMPLATES = (
    "That sounds fantastic! I'm excited to discuss this further.",
    "Great news! I'll get back to you with my enthusiastic response.",
)
NEGATIVE_TEMPLATES = (
    "I understand your concern. I'll address this carefully and thoughtfully.",
    "Thanks for bringing this to my attention. I'll handle this with care.",
)
PLATFORM_TEMPLATES = {
    "whatsapp": (
        "Hey! Just saw your message. I'll get back to you soon! \U0001f44d",
        "Got it! Let me check this out and reply back \U0001f4f1",
    ),
    "email": (
        "Thank you for your email. I'll review this matter and respond accordingly.",
        "I acknowledge receipt of your message and will provide a comprehensive response.",
    ),
    "linkedin": (
        "Thank you for your professional message. I'll respond with detailed insights.",
        "I appreciate you reaching out. I'll provide a thoughtful professional response.",
    ),
}
GENERIC_TEMPLATES = (
    "I received your message and I'll craft a thoughtful response shortly.",
    "Thanks for reaching out! I'll give this proper attention and respond soon.",
    "I'll take some time to consider this properly and get back to you.",
    "Your message is important to me. I'll respond with care and attention.",
)

# Order used to hand out tones to replies with no tone keyword
TONE_ROTATION = (Tone.FRIENDLY, Tone.CASUAL, Tone.ENTHUSIASTIC, Tone.APOLOGETIC, Tone.PROFESSIONAL)

_PLACEHOLDER_RE = re.compile(r"\bthis(?: matter)?\b")


@dataclass
class MessageAnalysis:
    is_question: bool = False
    is_urgent: bool = False
    is_event: bool = False
    is_work: bool = False
    is_personal: bool = False
    is_formal: bool = False
    sentiment: str = "neutral"  # "positive" | "negative" | "neutral"
    keywords: list[str] = field(default_factory=list)
    platform: str = ""


def _mentions(text: str, words: tuple[str, ...]) -> bool:
    """True when any of ``words`` appears as a whole word."""
    return any(re.search(rf"\b{re.escape(word)}\b", text) for word in words)


def analyze_sentiment(text: str) -> str:
    text = text.lower()
    positive = sum(1 for word in POSITIVE_WORDS if word in text)
    negative = sum(1 for word in NEGATIVE_WORDS if word in text)
    if positive > negative:
        return "positive"
    if negative > positive:
        return "negative"
    return "neutral"


def extract_keywords(text: str, limit: int = 5) -> list[str]:
    """Content words longer than three letters, in order of appearance."""
    words = (w.strip(string.punctuation) for w in text.lower().split())
    return [w for w in words if len(w) > 3 and w not in STOPWORDS][:limit]


def analyze_message(title: str, context: str | None, platform: str) -> MessageAnalysis:
    text = f"{title} {context or ''}".lower()
    platform = platform.lower()
    return MessageAnalysis(
        is_question="?" in text or _mentions(text, QUESTION_WORDS),
        is_urgent=_mentions(text, URGENT_WORDS),
        is_event=_mentions(text, EVENT_WORDS),
        is_work=_mentions(text, WORK_WORDS),
        is_personal=_mentions(text, PERSONAL_WORDS),
        is_formal=platform in FORMAL_PLATFORMS or "professional" in text,
        sentiment=analyze_sentiment(text),
        keywords=extract_keywords(text),
        platform=platform,
    )


def select_templates(analysis: MessageAnalysis) -> list[str]:
    templates: list[str] = []
    if analysis.is_question:
        templates.extend(QUESTION_TEMPLATES)
    if analysis.is_urgent:
        templates.extend(URGENT_TEMPLATES)
    if analysis.is_event:
        templates.extend(EVENT_TEMPLATES)
    if analysis.is_work:
        templates.extend(WORK_TEMPLATES)

    if analysis.sentiment == "positive":
        templates.extend(POSITIVE_TEMPLATES)
    elif analysis.sentiment == "negative":
        templates.extend(NEGATIVE_TEMPLATES)

    templates.extend(PLATFORM_TEMPLATES.get(analysis.platform, ()))

    for generic in GENERIC_TEMPLATES:
        if len(templates) >= MAX_SUGGESTIONS:
            break
        templates.append(generic)
    return templates


def personalize(template: str, analysis: MessageAnalysis, context: str | None) -> str:
    """Point the first "this" at the main keyword when the user gave context."""
    if context and analysis.keywords:
        return _PLACEHOLDER_RE.sub(f"this {analysis.keywords[0]} matter", template, count=1)
    return template


def assign_tones(texts: list[str], preferred: Tone | None = None) -> list[Tone]:
    """Classify each reply; replies with no tone keyword share out the rotation.

    The rotation starts at the preferred tone when one is given.
    """
    start = TONE_ROTATION.index(preferred) if preferred else 0
    untagged = 0
    tones = []
    for text in texts:
        tone = match_tone(text)
        if tone is None:
            tone = TONE_ROTATION[(start + untagged) % len(TONE_ROTATION)]
            untagged += 1
        tones.append(tone)
    return tones


class HeuristicGenerator(SuggestionSource):
    name = "heuristic"

    def __init__(self, delay: float = 0.0):
        self.delay = delay

    def generate(
        self,
        reminder: ReminderRef,
        context: str | None = None,
        tone: Tone | None = None,
    ) -> list[Suggestion]:
        analysis = analyze_message(reminder.title, context, reminder.platform)
        logger.debug("Message analysis: %s", analysis)
        templates = select_templates(analysis)[:MAX_SUGGESTIONS]
        if not templates:
            raise EmptyResultError("No heuristic suggestions generated", self.name)

        texts = [
            clip(add_flourish(personalize(t, analysis, context), reminder.platform))
            for t in templates
        ]
        ids = batch_ids(self.name)
        return [
            Suggestion(id=next(ids), text=text, tone=text_tone, platform=reminder.platform)
            for text, text_tone in zip(texts, assign_tones(texts, tone))
        ]

    async def attempt(self, request: SuggestionRequest) -> list[Suggestion]:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.generate(request.reminder, request.context, request.preferred_tone)
