"""Hugging Face Inference API adapter.

Plain completion models do not follow formatting instructions, so this
adapter sends several short prompt variants one after another and keeps
the first generated reply of each.
"""

from __future__ import annotations

import asyncio
import logging

import httpx
from pydantic import BaseModel, ValidationError
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from reply_suggest.config import HuggingFaceConfig
from reply_suggest.errors import EmptyResultError, ParseError, ProviderError, TransportError
from reply_suggest.models.reminder import SuggestionRequest
from reply_suggest.models.suggestion import Suggestion
from reply_suggest.providers.base import RemoteProvider, batch_ids
from reply_suggest.providers.prompts import build_prompt_variants
from reply_suggest.utils.text import MIN_LINE_LENGTH, first_line
from reply_suggest.utils.tone import infer_tone

logger = logging.getLogger(__name__)


class ModelLoadingError(TransportError):
    """The hosted model is cold and still loading."""


class GeneratedText(BaseModel):
    generated_text: str | None = None
    text: str | None = None

    @property
    def value(self) -> str:
        return self.generated_text or self.text or ""


class ErrorPayload(BaseModel):
    error: str


def parse_generation(data: object) -> GeneratedText | None:
    """Read ``[{generated_text}, ...]`` or a bare ``{generated_text}``.

    Only the first generated item is used. Returns None when the payload
    carries no text at all.
    """
    try:
        if isinstance(data, list):
            if not data:
                return None
            item = GeneratedText.model_validate(data[0])
        else:
            item = GeneratedText.model_validate(data)
    except ValidationError as exc:
        raise ParseError(f"Malformed Hugging Face payload: {exc}", "huggingface") from exc
    return item if item.value else None


class HuggingFaceProvider(RemoteProvider):
    name = "huggingface"

    def __init__(
        self,
        api_key: str | None,
        config: HuggingFaceConfig | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        super().__init__(api_key, client=client, timeout=timeout)
        self.config = config or HuggingFaceConfig()

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url.rstrip('/')}/{self.config.model}"

    def build_payload(self, prompt: str, variant: int) -> dict:
        temperature = self.config.temperature + variant * self.config.temperature_step
        return {
            "inputs": prompt,
            "parameters": {
                "max_length": self.config.max_length,
                "temperature": round(temperature, 2),
                "do_sample": True,
            },
            "options": {"wait_for_model": True, "use_cache": False},
        }

    async def _generate(self, request: SuggestionRequest, api_key: str) -> list[Suggestion]:
        prompts = build_prompt_variants(request)
        platform = request.reminder.platform
        ids = batch_ids(self.name)
        suggestions: list[Suggestion] = []
        last_error: ProviderError | None = None

        for i, prompt in enumerate(prompts):
            try:
                text = await self._complete_with_loading_retry(prompt, i, api_key)
            except ProviderError as exc:
                logger.warning("Hugging Face prompt %d failed: %s", i, exc)
                last_error = exc
                continue

            if text and len(text) >= MIN_LINE_LENGTH:
                suggestions.append(
                    Suggestion(id=next(ids), text=text, tone=infer_tone(text), platform=platform)
                )

            # Space requests out to stay under the free-tier rate limit
            if i < len(prompts) - 1 and self.config.request_delay:
                await asyncio.sleep(self.config.request_delay)

        if not suggestions:
            reason = f": {last_error}" if last_error else ""
            raise EmptyResultError(f"No suggestions generated from Hugging Face{reason}", self.name)
        return suggestions

    async def _complete_with_loading_retry(self, prompt: str, variant: int, api_key: str) -> str:
        """Run one prompt, waiting once for a cold model before giving up on it."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(2),
            wait=wait_fixed(self.config.loading_wait),
            retry=retry_if_exception_type(ModelLoadingError),
            reraise=True,
        ):
            with attempt:
                text = await self._complete(prompt, variant, api_key)
        return text

    async def _complete(self, prompt: str, variant: int, api_key: str) -> str:
        response = await self._post(
            self.endpoint,
            self.build_payload(prompt, variant),
            headers={"Authorization": f"Bearer {api_key}"},
        )
        try:
            data = response.json()
        except ValueError:
            data = None

        # A cold model may answer 503 or 200, but always with an "error" field
        message = _error_message(data) or ("" if response.is_success else response.text[:500])
        if "loading" in message.lower():
            logger.info("Hugging Face model is loading, waiting %.1fs", self.config.loading_wait)
            raise ModelLoadingError(
                f"Model loading: {message}",
                self.name,
                status_code=response.status_code,
                body=message,
            )
        self._raise_for_status(response)

        if data is None:
            raise ParseError("Hugging Face returned a non-JSON body", self.name)
        generated = parse_generation(data)
        return first_line(generated.value) if generated else ""


def _error_message(data: object) -> str | None:
    try:
        return ErrorPayload.model_validate(data).error
    except ValidationError:
        return None
