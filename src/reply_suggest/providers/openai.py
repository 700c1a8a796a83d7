"""OpenAI chat-completions adapter."""

from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel, ValidationError

from reply_suggest.config import OpenAIConfig
from reply_suggest.errors import ParseError
from reply_suggest.models.reminder import SuggestionRequest
from reply_suggest.models.suggestion import Suggestion
from reply_suggest.providers.base import RemoteProvider
from reply_suggest.providers.prompts import SYSTEM_PROMPT, build_structured_prompt

logger = logging.getLogger(__name__)


class _Message(BaseModel):
    content: str | None = None


class _Choice(BaseModel):
    message: _Message


class ChatCompletionResponse(BaseModel):
    choices: list[_Choice] = []


class OpenAIProvider(RemoteProvider):
    name = "openai"

    def __init__(
        self,
        api_key: str | None,
        config: OpenAIConfig | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        super().__init__(api_key, client=client, timeout=timeout)
        self.config = config or OpenAIConfig()

    def build_payload(self, request: SuggestionRequest) -> dict:
        return {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_structured_prompt(request)},
            ],
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
            "n": 1,
        }

    async def _generate(self, request: SuggestionRequest, api_key: str) -> list[Suggestion]:
        response = await self._post(
            f"{self.config.base_url.rstrip('/')}/chat/completions",
            self.build_payload(request),
            headers={"Authorization": f"Bearer {api_key}"},
        )
        self._raise_for_status(response)
        try:
            parsed = ChatCompletionResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ParseError(f"Malformed OpenAI payload: {exc}", self.name) from exc
        if not parsed.choices or not parsed.choices[0].message.content:
            raise ParseError("No response from OpenAI", self.name)
        logger.debug("OpenAI finish: %d choice(s)", len(parsed.choices))
        return self.parse_text(parsed.choices[0].message.content, request.reminder.platform)
