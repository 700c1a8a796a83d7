"""Provider chain coordinator - tries each suggestion source in order."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

import httpx

from reply_suggest.config import AppConfig, Credentials
from reply_suggest.errors import EngineError, ProviderError
from reply_suggest.models.reminder import SuggestionRequest
from reply_suggest.models.suggestion import (
    MAX_SUGGESTIONS,
    AttemptRecord,
    Suggestion,
    SuggestionResult,
)
from reply_suggest.pipeline.heuristic import HeuristicGenerator
from reply_suggest.pipeline.template_library import TemplateLibrary
from reply_suggest.providers.base import SuggestionSource, batch_ids
from reply_suggest.providers.claude import ClaudeProvider
from reply_suggest.providers.gemini import GeminiProvider
from reply_suggest.providers.huggingface import HuggingFaceProvider
from reply_suggest.providers.openai import OpenAIProvider
from reply_suggest.utils.text import unique_by_text

logger = logging.getLogger(__name__)


def finalize(suggestions: list[Suggestion], provider: str) -> list[Suggestion]:
    """De-duplicate, cap at four and give the batch fresh ids."""
    kept = unique_by_text(s for s in suggestions if s.text.strip())[:MAX_SUGGESTIONS]
    ids = batch_ids(provider)
    return [s.model_copy(update={"id": next(ids)}) for s in kept]


class SuggestionEngine:
    """Runs the provider chain until one source yields suggestions.

    Sources are tried strictly in order, never in parallel. Failures of
    every source except the last are logged and skipped; the last source
    must be deterministic (the template library) so a request always
    ends with at least one suggestion.
    """

    def __init__(
        self,
        sources: Sequence[SuggestionSource],
        *,
        http_client: httpx.AsyncClient | None = None,
    ):
        if not sources:
            raise ValueError("SuggestionEngine needs at least one source")
        self.sources = list(sources)
        self._http_client = http_client

    @property
    def provider_names(self) -> list[str]:
        return [source.name for source in self.sources]

    async def generate(
        self,
        request: SuggestionRequest,
        *,
        on_attempt: Callable[[str, str], None] | None = None,
    ) -> SuggestionResult:
        """Return 1-4 suggestions and the name of the source that produced them.

        Args:
            request: Reminder plus optional context and tone.
            on_attempt: Optional callback(provider_name, outcome) for progress.

        Raises:
            EngineError: Only if the final source fails, which indicates a bug.
        """

        def _notify(provider: str, outcome: str) -> None:
            if on_attempt:
                on_attempt(provider, outcome)

        attempts: list[AttemptRecord] = []
        *fallible, final = self.sources

        for source in fallible:
            logger.info("Trying %s", source.name)
            _notify(source.name, "started")
            try:
                suggestions = await source.attempt(request)
            except ProviderError as exc:
                logger.warning("%s failed: %s", source.name, exc)
                attempts.append(AttemptRecord(provider=source.name, outcome="failed", reason=str(exc)))
                _notify(source.name, "failed")
                continue
            except Exception as exc:
                logger.exception("%s raised an unexpected error", source.name)
                attempts.append(
                    AttemptRecord(
                        provider=source.name,
                        outcome="failed",
                        reason=f"{type(exc).__name__}: {exc}",
                    )
                )
                _notify(source.name, "failed")
                continue

            result = finalize(suggestions, source.name)
            if not result:
                logger.warning("%s returned no suggestions", source.name)
                attempts.append(AttemptRecord(provider=source.name, outcome="empty"))
                _notify(source.name, "empty")
                continue

            logger.info("%s generated %d suggestions", source.name, len(result))
            attempts.append(AttemptRecord(provider=source.name, outcome="ok", count=len(result)))
            _notify(source.name, "ok")
            return SuggestionResult(suggestions=result, provider_tag=source.name, attempts=attempts)

        logger.info("Falling back to %s", final.name)
        _notify(final.name, "started")
        try:
            result = finalize(await final.attempt(request), final.name)
        except Exception as exc:
            raise EngineError(f"Final source {final.name} failed: {exc}") from exc
        if not result:
            raise EngineError(f"Final source {final.name} returned no suggestions")

        attempts.append(AttemptRecord(provider=final.name, outcome="ok", count=len(result)))
        _notify(final.name, "ok")
        return SuggestionResult(suggestions=result, provider_tag=final.name, attempts=attempts)

    async def aclose(self) -> None:
        """Close clients held by the sources, then the shared HTTP client if owned."""
        for source in self.sources:
            close = getattr(source, "aclose", None)
            if close is not None:
                await close()
        if self._http_client is not None:
            await self._http_client.aclose()

    async def __aenter__(self) -> SuggestionEngine:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def build_source(
    name: str,
    config: AppConfig,
    credentials: Credentials,
    http_client: httpx.AsyncClient | None,
) -> SuggestionSource:
    timeout = config.engine.http_timeout
    if name == "gemini":
        return GeminiProvider(credentials.gemini_api_key, config.gemini, client=http_client, timeout=timeout)
    if name == "huggingface":
        return HuggingFaceProvider(
            credentials.huggingface_api_key, config.huggingface, client=http_client, timeout=timeout
        )
    if name == "openai":
        return OpenAIProvider(credentials.openai_api_key, config.openai, client=http_client, timeout=timeout)
    if name == "claude":
        return ClaudeProvider(credentials.anthropic_api_key, config.claude)
    if name == "heuristic":
        return HeuristicGenerator(delay=config.engine.heuristic_delay)
    raise ValueError(f"Unknown provider: {name}")


def build_engine(
    config: AppConfig | None = None,
    credentials: Credentials | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> SuggestionEngine:
    """Wire the chain from configuration; the template library always comes last.

    When no ``http_client`` is given the engine creates one and closes it
    in ``aclose``. A caller-supplied client is left open.
    """
    config = config or AppConfig()
    credentials = credentials if credentials is not None else Credentials.from_env()
    owned = http_client is None
    if owned:
        http_client = httpx.AsyncClient(timeout=config.engine.http_timeout)

    sources = [build_source(name, config, credentials, http_client) for name in config.engine.providers]
    sources.append(TemplateLibrary())
    return SuggestionEngine(sources, http_client=http_client if owned else None)
