"""Tests for the Claude adapter."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import anthropic
import httpx
import pytest

from reply_suggest.clients.llm_client import LLMResponse
from reply_suggest.errors import ConfigurationError, TransportError
from reply_suggest.models.reminder import Tone
from reply_suggest.providers.claude import ClaudeProvider
from reply_suggest.providers.prompts import SYSTEM_PROMPT


class TestClaudeProvider:
    async def test_generate_parses_llm_text(self, mock_llm_client, whatsapp_reminder):
        mock_llm_client.generate.return_value = LLMResponse(
            text='[{"text": "Hey! On it, will send notes tonight", "tone": "casual"},'
            ' {"text": "Thanks for your patience with the project"}]',
            input_tokens=120,
            output_tokens=40,
        )
        provider = ClaudeProvider("sk-ant-key", llm=mock_llm_client)
        suggestions = await provider.try_generate(whatsapp_reminder, "notes", Tone.CASUAL)

        kwargs = mock_llm_client.generate.call_args.kwargs
        assert kwargs["system"] == SYSTEM_PROMPT
        assert kwargs["model"] == "claude-haiku-4-5-20251001"
        assert "Reply to John about project" in kwargs["prompt"]
        assert [s.tone for s in suggestions] == [Tone.CASUAL, Tone.CASUAL]

    async def test_placeholder_key_skips_llm(self, mock_llm_client, whatsapp_reminder):
        provider = ClaudeProvider("your_anthropic_api_key_here", llm=mock_llm_client)
        with pytest.raises(ConfigurationError):
            await provider.try_generate(whatsapp_reminder)
        mock_llm_client.generate.assert_not_called()

    async def test_api_status_error_is_transport_error(self, mock_llm_client, whatsapp_reminder):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        response = httpx.Response(529, request=request)
        mock_llm_client.generate.side_effect = anthropic.APIStatusError(
            "Overloaded", response=response, body=None
        )
        provider = ClaudeProvider("sk-ant-key", llm=mock_llm_client)
        with pytest.raises(TransportError) as excinfo:
            await provider.try_generate(whatsapp_reminder)
        assert excinfo.value.status_code == 529

    async def test_connection_error_is_transport_error(self, mock_llm_client, whatsapp_reminder):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        mock_llm_client.generate.side_effect = anthropic.APIConnectionError(request=request)
        provider = ClaudeProvider("sk-ant-key", llm=mock_llm_client)
        with pytest.raises(TransportError):
            await provider.try_generate(whatsapp_reminder)

    def test_llm_client_built_lazily_with_key(self, monkeypatch):
        created = MagicMock()
        monkeypatch.setattr("reply_suggest.providers.claude.LLMClient", created)
        provider = ClaudeProvider("sk-ant-key")
        provider._get_llm("sk-ant-key")
        created.assert_called_once_with(api_key="sk-ant-key", timeout=60)


class TestClaudeProviderClose:
    async def test_closes_llm_client_it_created(self, monkeypatch, whatsapp_reminder):
        created = MagicMock()
        llm = created.return_value
        llm.generate = AsyncMock(
            return_value=LLMResponse(text='["Sure, I will reply tonight"]', input_tokens=10, output_tokens=5)
        )
        llm.aclose = AsyncMock()
        monkeypatch.setattr("reply_suggest.providers.claude.LLMClient", created)

        provider = ClaudeProvider("sk-ant-key")
        await provider.try_generate(whatsapp_reminder)
        await provider.try_generate(whatsapp_reminder)
        await provider.aclose()

        created.assert_called_once()
        llm.aclose.assert_awaited_once()

    async def test_leaves_injected_llm_client_open(self, mock_llm_client):
        mock_llm_client.aclose = AsyncMock()
        provider = ClaudeProvider("sk-ant-key", llm=mock_llm_client)
        await provider.aclose()
        mock_llm_client.aclose.assert_not_awaited()

    async def test_close_without_calls_is_a_no_op(self):
        await ClaudeProvider("sk-ant-key").aclose()
