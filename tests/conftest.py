"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from unittest.mock import AsyncMock

import httpx
import pytest

from reply_suggest.clients.llm_client import LLMClient, LLMResponse
from reply_suggest.config import AppConfig, Credentials, EngineConfig, HuggingFaceConfig
from reply_suggest.models.reminder import ReminderRef, SuggestionRequest


@pytest.fixture
def whatsapp_reminder() -> ReminderRef:
    return ReminderRef(title="Reply to John about project", platform="whatsapp")


@pytest.fixture
def email_reminder() -> ReminderRef:
    return ReminderRef(title="Answer Sarah's email", platform="email", note="She asked about Q3 numbers")


@pytest.fixture
def whatsapp_request(whatsapp_reminder) -> SuggestionRequest:
    return SuggestionRequest(reminder=whatsapp_reminder)


@pytest.fixture
def fast_config() -> AppConfig:
    """Defaults with every artificial delay removed."""
    return AppConfig(
        engine=EngineConfig(heuristic_delay=0.0),
        huggingface=HuggingFaceConfig(request_delay=0.0, loading_wait=0.0),
    )


@pytest.fixture
def no_credentials() -> Credentials:
    return Credentials()


@pytest.fixture
def fake_credentials() -> Credentials:
    return Credentials(
        gemini_api_key="gm-test-key",
        huggingface_api_key="hf-test-key",
        openai_api_key="sk-test-key",
        anthropic_api_key="sk-ant-test-key",
    )


@pytest.fixture
def mock_http() -> Callable[..., httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by ``handler``."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="[]", input_tokens=100, output_tokens=50)
    )
    return client
