"""Base classes shared by every suggestion source in the provider chain."""

from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod

import httpx

from reply_suggest.config import is_placeholder
from reply_suggest.errors import ConfigurationError, EmptyResultError, ParseError, TransportError
from reply_suggest.models.reminder import ReminderRef, SuggestionRequest, Tone
from reply_suggest.models.suggestion import MAX_SUGGESTIONS, Suggestion
from reply_suggest.utils.json_parser import extract_json_items
from reply_suggest.utils.text import clip, split_reply_lines, unique_by_text
from reply_suggest.utils.tone import infer_tone

logger = logging.getLogger(__name__)


def batch_ids(prefix: str):
    """Yield ids that are unique within one response batch."""
    batch = uuid.uuid4().hex[:8]
    index = 0
    while True:
        yield f"{prefix}-{batch}-{index}"
        index += 1


class SuggestionSource(ABC):
    """One member of the provider chain.

    ``attempt`` either returns suggestions (possibly an empty list) or
    raises. The coordinator treats an empty list and an exception alike.
    """

    name: str = "base"

    @abstractmethod
    async def attempt(self, request: SuggestionRequest) -> list[Suggestion]:
        ...


class RemoteProvider(SuggestionSource):
    """A text-generation backend reached over the network.

    Subclasses implement ``_generate``; the base class checks the
    credential, then de-duplicates and caps what comes back.
    """

    def __init__(
        self,
        api_key: str | None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        self.api_key = api_key
        self._client = client
        self.timeout = timeout

    async def attempt(self, request: SuggestionRequest) -> list[Suggestion]:
        return await self.try_generate(
            request.reminder, request.context, request.preferred_tone
        )

    async def try_generate(
        self,
        reminder: ReminderRef,
        context: str | None = None,
        tone: Tone | None = None,
    ) -> list[Suggestion]:
        """Ask the provider for replies, or raise a ProviderError."""
        key = self._require_key()
        request = SuggestionRequest(reminder=reminder, context=context, preferred_tone=tone)
        suggestions = unique_by_text(await self._generate(request, key))
        if not suggestions:
            raise EmptyResultError(f"No suggestions generated from {self.name}", self.name)
        return suggestions[:MAX_SUGGESTIONS]

    @abstractmethod
    async def _generate(self, request: SuggestionRequest, api_key: str) -> list[Suggestion]:
        ...

    def _require_key(self) -> str:
        if is_placeholder(self.api_key):
            raise ConfigurationError(f"No valid {self.name} API key", self.name)
        return self.api_key.strip()

    async def _post(self, url: str, payload: dict, headers: dict) -> httpx.Response:
        """POST JSON, converting transport failures to TransportError."""
        logger.debug("%s request: POST %s", self.name, url)
        try:
            if self._client is not None:
                return await self._client.post(
                    url, json=payload, headers=headers, timeout=self.timeout
                )
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise TransportError(f"{self.name} request failed: {exc}", self.name) from exc

    def _raise_for_status(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        body = response.text[:500]
        logger.warning("%s API error: %d %s", self.name, response.status_code, body)
        raise TransportError(
            f"{self.name} API error: {response.status_code}",
            self.name,
            status_code=response.status_code,
            body=body,
        )

    def parse_text(self, text: str, platform: str) -> list[Suggestion]:
        """Turn generated text into suggestions.

        A JSON array of ``{"text", "tone"}`` objects is tried first; if
        that yields nothing, each sufficiently long line becomes a reply.
        Unlabelled or unknown tones are inferred from the reply text.
        """
        ids = batch_ids(self.name)
        suggestions = []
        try:
            items = extract_json_items(text)
        except ValueError:
            items = []
        for item in items:
            if isinstance(item, str):
                reply, label = item, None
            elif isinstance(item, dict) and isinstance(item.get("text"), str):
                reply, label = item["text"], item.get("tone")
            else:
                continue
            reply = clip(reply)
            if not reply:
                continue
            tone = Tone.parse(label) or infer_tone(reply)
            suggestions.append(Suggestion(id=next(ids), text=reply, tone=tone, platform=platform))

        if not suggestions:
            logger.debug("%s: no structured output, falling back to line parsing", self.name)
            suggestions = [
                Suggestion(id=next(ids), text=line, tone=infer_tone(line), platform=platform)
                for line in split_reply_lines(text)
            ]

        if not suggestions:
            raise ParseError(f"Could not parse {self.name} response: {text[:200]!r}", self.name)
        return suggestions
