"""Errors raised by suggestion providers and the engine."""

from __future__ import annotations


class ProviderError(Exception):
    """A provider could not produce suggestions. Never reaches the end caller."""

    def __init__(self, message: str, provider: str = "unknown"):
        super().__init__(message)
        self.provider = provider


class ConfigurationError(ProviderError):
    """Credential is missing or still set to a placeholder value."""


class TransportError(ProviderError):
    """The remote call failed or returned a non-success status."""

    def __init__(
        self,
        message: str,
        provider: str = "unknown",
        status_code: int | None = None,
        body: str | None = None,
    ):
        super().__init__(message, provider)
        self.status_code = status_code
        self.body = body


class ParseError(ProviderError):
    """The provider payload could not be turned into usable suggestions."""


class EmptyResultError(ProviderError):
    """A stage ran to completion but produced zero suggestions."""


class EngineError(Exception):
    """The final, deterministic stage failed. This is a programming error."""
