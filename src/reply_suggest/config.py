"""Application configuration loaded from config.yaml and the environment."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

REMOTE_PROVIDERS = ("gemini", "huggingface", "openai", "claude")
CHAIN_MEMBERS = REMOTE_PROVIDERS + ("heuristic",)

_PLACEHOLDER_RE = re.compile(r"^your_[a-z0-9_]*_here$", re.IGNORECASE)


def _check_range(name: str, value: float, low: float, high: float | None = None) -> None:
    if value < low or (high is not None and value > high):
        bound = f">= {low}" if high is None else f"between {low} and {high}"
        raise ValueError(f"{name} must be {bound}, got {value}")


@dataclass(frozen=True)
class EngineConfig:
    providers: tuple[str, ...] = ("gemini", "huggingface", "openai", "claude", "heuristic")
    http_timeout: float = 30.0
    heuristic_delay: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "providers", tuple(self.providers))
        unknown = [p for p in self.providers if p not in CHAIN_MEMBERS]
        if unknown:
            raise ValueError(
                f"providers contains unknown entries {unknown}; "
                f"choose from {', '.join(CHAIN_MEMBERS)}"
            )
        if len(set(self.providers)) != len(self.providers):
            raise ValueError("providers must not repeat an entry")
        _check_range("http_timeout", self.http_timeout, 1)
        _check_range("heuristic_delay", self.heuristic_delay, 0)


@dataclass(frozen=True)
class GeminiConfig:
    model: str = "gemini-1.5-flash-latest"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    temperature: float = 0.7
    max_output_tokens: int = 500

    def __post_init__(self) -> None:
        _check_range("temperature", self.temperature, 0, 2)
        _check_range("max_output_tokens", self.max_output_tokens, 1)


@dataclass(frozen=True)
class HuggingFaceConfig:
    model: str = "microsoft/DialoGPT-small"
    base_url: str = "https://api-inference.huggingface.co/models"
    max_length: int = 50
    temperature: float = 0.8
    temperature_step: float = 0.1
    request_delay: float = 0.5
    loading_wait: float = 5.0

    def __post_init__(self) -> None:
        _check_range("max_length", self.max_length, 1)
        _check_range("temperature", self.temperature, 0, 2)
        _check_range("temperature_step", self.temperature_step, 0, 0.5)
        _check_range("request_delay", self.request_delay, 0)
        _check_range("loading_wait", self.loading_wait, 0)


@dataclass(frozen=True)
class OpenAIConfig:
    model: str = "gpt-3.5-turbo"
    base_url: str = "https://api.openai.com/v1"
    temperature: float = 0.7
    max_tokens: int = 500

    def __post_init__(self) -> None:
        _check_range("temperature", self.temperature, 0, 2)
        _check_range("max_tokens", self.max_tokens, 1)


@dataclass(frozen=True)
class ClaudeConfig:
    model: str = "claude-haiku-4-5-20251001"
    temperature: float = 0.7
    max_tokens: int = 1024
    timeout: int = 60

    def __post_init__(self) -> None:
        _check_range("temperature", self.temperature, 0, 1)
        _check_range("max_tokens", self.max_tokens, 1)
        _check_range("timeout", self.timeout, 1)


@dataclass(frozen=True)
class AppConfig:
    engine: EngineConfig = field(default_factory=EngineConfig)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    huggingface: HuggingFaceConfig = field(default_factory=HuggingFaceConfig)
    openai: OpenAIConfig = field(default_factory=OpenAIConfig)
    claude: ClaudeConfig = field(default_factory=ClaudeConfig)


def is_placeholder(value: str | None) -> bool:
    """True for blank credentials and template values like 'your_gemini_api_key_here'."""
    if value is None or not value.strip():
        return True
    return bool(_PLACEHOLDER_RE.match(value.strip()))


@dataclass(frozen=True)
class Credentials:
    """API keys for the remote providers. Read once, never mutated."""

    gemini_api_key: str | None = None
    huggingface_api_key: str | None = None
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Credentials:
        env = os.environ if environ is None else environ
        return cls(
            gemini_api_key=env.get("GEMINI_API_KEY"),
            huggingface_api_key=env.get("HUGGINGFACE_API_KEY"),
            openai_api_key=env.get("OPENAI_API_KEY"),
            anthropic_api_key=env.get("ANTHROPIC_API_KEY"),
        )

    def for_provider(self, provider: str) -> str | None:
        return {
            "gemini": self.gemini_api_key,
            "huggingface": self.huggingface_api_key,
            "openai": self.openai_api_key,
            "claude": self.anthropic_api_key,
        }.get(provider)

    def status(self, provider: str) -> str:
        """Return 'configured', 'placeholder' or 'missing'."""
        value = self.for_provider(provider)
        if value is None or not value.strip():
            return "missing"
        if is_placeholder(value):
            return "placeholder"
        return "configured"


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from YAML file, falling back to defaults."""
    if path is None:
        # Look for config.yaml relative to the project root
        candidates = [
            Path.cwd() / "config.yaml",
            Path(__file__).resolve().parent.parent.parent / "config.yaml",
        ]
        for c in candidates:
            if c.exists():
                path = c
                break

    raw: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            raw = yaml.safe_load(p.read_text()) or {}

    return AppConfig(
        engine=EngineConfig(**raw.get("engine", {})),
        gemini=GeminiConfig(**raw.get("gemini", {})),
        huggingface=HuggingFaceConfig(**raw.get("huggingface", {})),
        openai=OpenAIConfig(**raw.get("openai", {})),
        claude=ClaudeConfig(**raw.get("claude", {})),
    )
