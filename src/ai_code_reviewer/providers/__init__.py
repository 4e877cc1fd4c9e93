"""
Language-model providers.

Each client turns diff text into a ReviewResult. ``create_review_client``
picks the implementation for a resolved provider variant.
"""

from ..config import (
    AnthropicProvider,
    GeminiProvider,
    GrokProvider,
    OllamaProvider,
    OpenAIProvider,
    ProviderConfig,
    ReviewConfig,
)
from ..errors import ConfigError
from .anthropic import AnthropicClient
from .base import ReviewClient, build_prompt, get_base_prompt, parse_review_response
from .gemini import GeminiClient
from .ollama import OllamaClient
from .openai import GrokClient, OpenAIClient


def create_review_client(
    provider: ProviderConfig, model: str, config: ReviewConfig, **kwargs
) -> ReviewClient:
    """Create the client for a provider variant."""
    if isinstance(provider, OpenAIProvider):
        return OpenAIClient(provider.api_key, model, config, **kwargs)
    if isinstance(provider, AnthropicProvider):
        return AnthropicClient(provider.api_key, model, config, **kwargs)
    if isinstance(provider, GrokProvider):
        return GrokClient(provider.api_key, model, config, **kwargs)
    if isinstance(provider, GeminiProvider):
        return GeminiClient(provider.api_key, model, config, **kwargs)
    if isinstance(provider, OllamaProvider):
        return OllamaClient(provider.url, model, config, **kwargs)
    raise ConfigError(f"Unknown AI provider: {provider!r}")


__all__ = [
    "ReviewClient",
    "OpenAIClient",
    "AnthropicClient",
    "GrokClient",
    "GeminiClient",
    "OllamaClient",
    "create_review_client",
    "build_prompt",
    "get_base_prompt",
    "parse_review_response",
]
