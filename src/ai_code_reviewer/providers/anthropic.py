"""Anthropic messages API client."""

from ..config import ReviewConfig
from .base import JSON_ONLY_SUFFIX, ReviewClient

ANTHROPIC_URL = "https://api.anthropic.com/v1/messages"
ANTHROPIC_VERSION = "2023-06-01"


class AnthropicClient(ReviewClient):
    """Claude models via the messages API."""

    name = "Anthropic"

    def __init__(self, api_key: str, model: str, config: ReviewConfig, **kwargs):
        super().__init__(model, config, **kwargs)
        self.api_key = api_key

    async def _complete(self, prompt: str) -> str:
        data = await self._post(
            ANTHROPIC_URL,
            {
                "model": self.model,
                "max_tokens": self.config.max_tokens,
                "messages": [{"role": "user", "content": prompt + JSON_ONLY_SUFFIX}],
            },
            headers={"x-api-key": self.api_key, "anthropic-version": ANTHROPIC_VERSION},
        )
        for block in data.get("content") or []:
            if block.get("type") == "text":
                return block.get("text", "")
        return ""
