from reply_suggest.providers.base import RemoteProvider, SuggestionSource
from reply_suggest.providers.claude import ClaudeProvider
from reply_suggest.providers.gemini import GeminiProvider
from reply_suggest.providers.huggingface import HuggingFaceProvider
from reply_suggest.providers.openai import OpenAIProvider

__all__ = [
    "ClaudeProvider",
    "GeminiProvider",
    "HuggingFaceProvider",
    "OpenAIProvider",
    "RemoteProvider",
    "SuggestionSource",
]
