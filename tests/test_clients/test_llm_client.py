"""Tests for LLMClient (Claude API wrapper)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

from reply_suggest.clients.llm_client import LLMClient, LLMResponse


def _make_api_message(text: str, input_tokens: int = 100, output_tokens: int = 50) -> MagicMock:
    """Build a mock anthropic Message-like object."""
    message = MagicMock()
    message.usage.input_tokens = input_tokens
    message.usage.output_tokens = output_tokens
    message.content = [MagicMock(type="text", text=text)]
    return message


def _mock_anthropic(mock_cls: MagicMock, message: MagicMock) -> MagicMock:
    mock_client = MagicMock()
    mock_client.messages.create = AsyncMock(return_value=message)
    mock_cls.return_value = mock_client
    return mock_client


class TestLLMClientInit:
    def test_init_default_creates_client_with_no_kwargs(self):
        with patch("reply_suggest.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient()
            mock_cls.assert_called_once_with()

    def test_init_with_both_params_passes_both(self):
        with patch("reply_suggest.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            LLMClient(api_key="test-key", timeout=60)
            mock_cls.assert_called_once_with(api_key="test-key", timeout=60)


class TestLLMClientGenerate:
    async def test_generate_returns_llm_response(self):
        with patch("reply_suggest.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            _mock_anthropic(mock_cls, _make_api_message('[{"text": "hi"}]', 100, 50))
            llm = LLMClient()
            result = await llm.generate("suggest replies")

        assert isinstance(result, LLMResponse)
        assert result.text == '[{"text": "hi"}]'
        assert result.input_tokens == 100
        assert result.output_tokens == 50

    async def test_generate_passes_system_and_sampling(self):
        with patch("reply_suggest.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = _mock_anthropic(mock_cls, _make_api_message("ok"))
            llm = LLMClient()
            await llm.generate("prompt", system="be brief", temperature=0.2, max_tokens=300)

        kwargs = mock_client.messages.create.call_args.kwargs
        assert kwargs["system"] == "be brief"
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 300
        assert kwargs["messages"] == [{"role": "user", "content": "prompt"}]

    async def test_generate_omits_empty_system(self):
        with patch("reply_suggest.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = _mock_anthropic(mock_cls, _make_api_message("ok"))
            llm = LLMClient()
            await llm.generate("prompt")

        assert "system" not in mock_client.messages.create.call_args.kwargs

    async def test_generate_joins_text_blocks_only(self):
        message = _make_api_message("first ")
        message.content.append(MagicMock(type="tool_use"))
        message.content.append(MagicMock(type="text", text="second"))
        with patch("reply_suggest.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            _mock_anthropic(mock_cls, message)
            llm = LLMClient()
            result = await llm.generate("prompt")

        assert result.text == "first second"

    async def test_generate_reports_usage_per_call(self):
        with patch("reply_suggest.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            _mock_anthropic(mock_cls, _make_api_message("resp", input_tokens=20, output_tokens=8))
            llm = LLMClient()
            first = await llm.generate("prompt one")
            second = await llm.generate("prompt two")

        assert (first.input_tokens, first.output_tokens) == (20, 8)
        assert (second.input_tokens, second.output_tokens) == (20, 8)


class TestLLMClientClose:
    async def test_aclose_closes_sdk_client(self):
        with patch("reply_suggest.clients.llm_client.anthropic.AsyncAnthropic") as mock_cls:
            mock_client = _mock_anthropic(mock_cls, _make_api_message("ok"))
            mock_client.close = AsyncMock()
            llm = LLMClient()
            await llm.aclose()

        mock_client.close.assert_awaited_once()
