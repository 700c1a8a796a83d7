"""Anthropic Claude adapter built on LLMClient."""

from __future__ import annotations

import logging

import anthropic

from reply_suggest.clients.llm_client import LLMClient
from reply_suggest.config import ClaudeConfig
from reply_suggest.errors import TransportError
from reply_suggest.models.reminder import SuggestionRequest
from reply_suggest.models.suggestion import Suggestion
from reply_suggest.providers.base import RemoteProvider
from reply_suggest.providers.prompts import SYSTEM_PROMPT, build_structured_prompt

logger = logging.getLogger(__name__)


class ClaudeProvider(RemoteProvider):
    name = "claude"

    def __init__(
        self,
        api_key: str | None,
        config: ClaudeConfig | None = None,
        llm: LLMClient | None = None,
    ):
        super().__init__(api_key)
        self.config = config or ClaudeConfig()
        self._llm = llm
        self._owns_llm = False

    def _get_llm(self, api_key: str) -> LLMClient:
        if self._llm is None:
            self._llm = LLMClient(api_key=api_key, timeout=self.config.timeout)
            self._owns_llm = True
        return self._llm

    async def aclose(self) -> None:
        """Close the LLM client if this provider created it."""
        if self._owns_llm and self._llm is not None:
            await self._llm.aclose()
            self._llm = None
            self._owns_llm = False

    async def _generate(self, request: SuggestionRequest, api_key: str) -> list[Suggestion]:
        llm = self._get_llm(api_key)
        try:
            response = await llm.generate(
                prompt=build_structured_prompt(request),
                system=SYSTEM_PROMPT,
                model=self.config.model,
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except anthropic.APIStatusError as exc:
            raise TransportError(
                f"Claude API error: {exc.status_code}",
                self.name,
                status_code=exc.status_code,
                body=str(exc)[:500],
            ) from exc
        except anthropic.APIError as exc:
            raise TransportError(f"Claude request failed: {exc}", self.name) from exc
        logger.debug("Claude returned %d characters", len(response.text))
        return self.parse_text(response.text, request.reminder.platform)
