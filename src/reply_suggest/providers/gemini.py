"""Google Gemini adapter (generateContent endpoint)."""

from __future__ import annotations

import logging

import httpx
from pydantic import BaseModel, ValidationError

from reply_suggest.config import GeminiConfig
from reply_suggest.errors import ParseError
from reply_suggest.models.reminder import SuggestionRequest
from reply_suggest.models.suggestion import Suggestion
from reply_suggest.providers.base import RemoteProvider
from reply_suggest.providers.prompts import build_structured_prompt

logger = logging.getLogger(__name__)


class _Part(BaseModel):
    text: str | None = None


class _Content(BaseModel):
    parts: list[_Part] = []


class _Candidate(BaseModel):
    content: _Content | None = None


class GeminiResponse(BaseModel):
    candidates: list[_Candidate] = []

    def first_text(self) -> str | None:
        for candidate in self.candidates:
            if candidate.content is None:
                continue
            for part in candidate.content.parts:
                if part.text:
                    return part.text
        return None


class GeminiProvider(RemoteProvider):
    name = "gemini"

    def __init__(
        self,
        api_key: str | None,
        config: GeminiConfig | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        super().__init__(api_key, client=client, timeout=timeout)
        self.config = config or GeminiConfig()

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/models/{self.config.model}:generateContent"

    def build_payload(self, request: SuggestionRequest) -> dict:
        return {
            "contents": [{"parts": [{"text": build_structured_prompt(request)}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "maxOutputTokens": self.config.max_output_tokens,
                "responseMimeType": "application/json",
            },
        }

    async def _generate(self, request: SuggestionRequest, api_key: str) -> list[Suggestion]:
        response = await self._post(
            self.endpoint,
            self.build_payload(request),
            headers={"Authorization": f"Bearer {api_key}"},
        )
        self._raise_for_status(response)
        text = self.extract_text(response)
        logger.debug("Gemini returned %d characters", len(text))
        return self.parse_text(text, request.reminder.platform)

    def extract_text(self, response: httpx.Response) -> str:
        try:
            parsed = GeminiResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ParseError(f"Malformed Gemini payload: {exc}", self.name) from exc
        text = parsed.first_text()
        if not text:
            raise ParseError("No text generated by Gemini", self.name)
        return text
