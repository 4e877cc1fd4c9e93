"""Configuration for the reviewer.

Two layers:
- ``ReviewConfig``: review behavior (filters, limits, focus areas), read from
  a YAML file and merged over defaults.
- ``ReviewerSettings``: runtime settings (model, provider credentials, mode),
  read from environment variables.

Provider selection is a closed set of variants, each carrying the credential
it needs.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Literal

import structlog
import yaml

from .errors import ConfigError
from .review.models import RunMode

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_PATH = ".github/ai-review-config.yml"
DEFAULT_MODEL = "gpt-5.1"

DEFAULT_IGNORE = (
    "*.min.js",
    "*.min.css",
    "*.lock",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "**/node_modules/**",
    "**/dist/**",
    "**/build/**",
    "**/vendor/**",
    "**/generated/**",
)


@dataclass
class FocusAreas:
    """Areas the reviewer should pay special attention to."""

    security: bool = True
    performance: bool = True
    best_practices: bool = True
    code_style: bool = True
    documentation: bool = False
    testing: bool = True

    def enabled(self) -> list[str]:
        """Human-readable names of the enabled areas."""
        return [f.name.replace("_", " ") for f in fields(self) if getattr(self, f.name)]


@dataclass
class SeverityFilter:
    """Which severities the reviewer should report."""

    critical: bool = True
    warning: bool = True
    suggestion: bool = True
    nitpick: bool = False


@dataclass
class ReviewConfig:
    """Review behavior, usually loaded from ``.github/ai-review-config.yml``."""

    # AI settings
    temperature: float = 0.3
    max_tokens: int = 4000

    # Review behavior
    language: str = "en"
    review_mode: Literal["quick", "detailed", "comprehensive"] = "detailed"
    focus: FocusAreas = field(default_factory=FocusAreas)
    severity: SeverityFilter = field(default_factory=SeverityFilter)

    # File filters
    ignore: list[str] = field(default_factory=lambda: list(DEFAULT_IGNORE))
    include_only: list[str] | None = None

    # Limits
    max_files: int = 20
    max_diff_size: int = 5000  # changed lines per chunk
    max_file_size: int = 1000

    custom_prompt: str | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ReviewConfig":
        """Merge a parsed config mapping over the defaults.

        ``focus`` and ``severity`` are merged key by key; unknown keys are
        ignored.
        """
        config = cls()
        known = {f.name for f in fields(cls)}
        updates: dict[str, Any] = {}

        for key, value in data.items():
            if key not in known:
                logger.debug("Ignoring unknown config key", key=key)
                continue
            if value is None and key not in ("include_only", "custom_prompt"):
                continue
            updates[key] = value

        try:
            if "focus" in updates:
                updates["focus"] = replace(config.focus, **_known_flags(FocusAreas, updates["focus"]))
            if "severity" in updates:
                updates["severity"] = replace(
                    config.severity, **_known_flags(SeverityFilter, updates["severity"])
                )
            for key in ("max_tokens", "max_files", "max_diff_size", "max_file_size"):
                if key in updates:
                    updates[key] = int(updates[key])
            if "temperature" in updates:
                updates["temperature"] = float(updates["temperature"])
            for key in ("ignore", "include_only"):
                if updates.get(key) is not None:
                    updates[key] = [str(p) for p in _as_list(key, updates[key])]
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid review config: {e}") from e

        return replace(config, **updates)


def _known_flags(cls: type, value: Any) -> dict[str, bool]:
    if not isinstance(value, Mapping):
        raise ConfigError(f"Expected a mapping for {cls.__name__}, got {type(value).__name__}")
    names = {f.name for f in fields(cls)}
    return {k: bool(v) for k, v in value.items() if k in names}


def _as_list(key: str, value: Any) -> list[Any]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise ConfigError(f"Expected a list of patterns for '{key}'")
    return value


def load_review_config(config_path: str | Path) -> ReviewConfig:
    """Load review config from YAML, falling back to defaults.

    A missing or unparseable file is not an error: the defaults are used
    and the problem is logged.
    """
    path = Path(config_path)

    if not path.is_file():
        logger.info("Config file not found, using defaults", path=str(path))
        return ReviewConfig()

    try:
        parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to parse config file", path=str(path), error=str(e))
        return ReviewConfig()

    if parsed is None:
        return ReviewConfig()
    if not isinstance(parsed, Mapping):
        logger.warning("Config file is not a mapping, using defaults", path=str(path))
        return ReviewConfig()

    return ReviewConfig.from_mapping(parsed)


# =============================================================================
# Provider selection
# =============================================================================


@dataclass(frozen=True)
class OpenAIProvider:
    api_key: str
    kind: Literal["openai"] = "openai"


@dataclass(frozen=True)
class AnthropicProvider:
    api_key: str
    kind: Literal["anthropic"] = "anthropic"


@dataclass(frozen=True)
class GrokProvider:
    api_key: str
    kind: Literal["grok"] = "grok"


@dataclass(frozen=True)
class GeminiProvider:
    api_key: str
    kind: Literal["gemini"] = "gemini"


@dataclass(frozen=True)
class OllamaProvider:
    url: str
    kind: Literal["ollama"] = "ollama"


ProviderConfig = OpenAIProvider | AnthropicProvider | GrokProvider | GeminiProvider | OllamaProvider


def determine_provider(
    model: str,
    openai_key: str | None = None,
    anthropic_key: str | None = None,
    grok_key: str | None = None,
    gemini_key: str | None = None,
    ollama_url: str | None = None,
) -> ProviderConfig:
    """Pick the provider for a model.

    The model name decides when it has a known prefix; otherwise the first
    configured provider wins (OpenAI, Anthropic, Grok, Gemini, Ollama).
    """
    if model.startswith(("gpt-", "o1", "codex")):
        if not openai_key:
            raise ConfigError("OpenAI API key required for GPT/Codex models")
        return OpenAIProvider(openai_key)
    if model.startswith("claude-"):
        if not anthropic_key:
            raise ConfigError("Anthropic API key required for Claude models")
        return AnthropicProvider(anthropic_key)
    if model.startswith("grok-"):
        if not grok_key:
            raise ConfigError("Grok API key required for Grok models")
        return GrokProvider(grok_key)
    if model.startswith("gemini-"):
        if not gemini_key:
            raise ConfigError("Gemini API key required for Gemini models")
        return GeminiProvider(gemini_key)
    if model.startswith("ollama/") or ":" in model:
        if not ollama_url:
            raise ConfigError("Ollama URL required for local models")
        return OllamaProvider(ollama_url)

    if openai_key:
        return OpenAIProvider(openai_key)
    if anthropic_key:
        return AnthropicProvider(anthropic_key)
    if grok_key:
        return GrokProvider(grok_key)
    if gemini_key:
        return GeminiProvider(gemini_key)
    if ollama_url:
        return OllamaProvider(ollama_url)

    raise ConfigError("No AI provider configured. Please provide at least one API key.")


@dataclass
class ReviewerSettings:
    """Runtime settings for a review run."""

    model: str = DEFAULT_MODEL

    # Provider credentials
    openai_api_key: str | None = None
    anthropic_api_key: str | None = None
    grok_api_key: str | None = None
    gemini_api_key: str | None = None
    ollama_url: str | None = None

    # Behavior
    config_path: str = DEFAULT_CONFIG_PATH
    language: str = "en"
    fail_on_critical: bool = False
    mode: RunMode = RunMode.PR
    paths: list[str] = field(default_factory=lambda: ["src/"])

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ReviewerSettings":
        """Create settings from environment variables."""
        env = os.environ if environ is None else environ

        mode = RunMode.FULL if env.get("AI_REVIEW_MODE") == "full" else RunMode.PR
        paths = [p.strip() for p in env.get("AI_REVIEW_PATHS", "src/").split(",") if p.strip()]

        return cls(
            model=env.get("AI_REVIEW_MODEL") or DEFAULT_MODEL,
            openai_api_key=env.get("OPENAI_API_KEY") or None,
            anthropic_api_key=env.get("ANTHROPIC_API_KEY") or None,
            grok_api_key=env.get("GROK_API_KEY") or None,
            gemini_api_key=env.get("GEMINI_API_KEY") or None,
            ollama_url=env.get("OLLAMA_URL") or None,
            config_path=env.get("AI_REVIEW_CONFIG") or DEFAULT_CONFIG_PATH,
            language=env.get("AI_REVIEW_LANGUAGE") or "en",
            fail_on_critical=env.get("AI_REVIEW_FAIL_ON_CRITICAL", "").lower() == "true",
            mode=mode,
            paths=paths,
        )

    def provider(self) -> ProviderConfig:
        """Resolve the provider for the configured model."""
        return determine_provider(
            self.model,
            openai_key=self.openai_api_key,
            anthropic_key=self.anthropic_api_key,
            grok_key=self.grok_api_key,
            gemini_key=self.gemini_api_key,
            ollama_url=self.ollama_url,
        )

    def review_config(self) -> ReviewConfig:
        """Load the review config file, applying the language override."""
        config = load_review_config(self.config_path)
        if self.language != "en":
            config = replace(config, language=self.language)
        return config
