"""OpenAI and OpenAI-compatible (Grok) chat completion clients."""

import re

import structlog

from ..config import ReviewConfig
from .base import JSON_ONLY_SUFFIX, ReviewClient

logger = structlog.get_logger(__name__)

OPENAI_BASE_URL = "https://api.openai.com/v1"
GROK_BASE_URL = "https://api.x.ai/v1"

# Reasoning models take max_completion_tokens and spend part of it thinking
REASONING_MODEL = re.compile(r"^(gpt-[45]\.\d|o[13])")
MIN_REASONING_TOKENS = 16000


class OpenAIClient(ReviewClient):
    """OpenAI chat completions client."""

    name = "OpenAI"
    base_url = OPENAI_BASE_URL

    def __init__(self, api_key: str, model: str, config: ReviewConfig, **kwargs):
        super().__init__(model, config, **kwargs)
        self.api_key = api_key

    def _payload(self, prompt: str) -> dict:
        reasoning = bool(REASONING_MODEL.match(self.model))
        max_tokens = self.config.max_tokens
        if reasoning:
            max_tokens = max(max_tokens, MIN_REASONING_TOKENS)
        logger.debug("Token budget", max_tokens=max_tokens, reasoning_model=reasoning)

        payload: dict = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.config.temperature,
        }
        if reasoning:
            payload["max_completion_tokens"] = max_tokens
        else:
            payload["max_tokens"] = max_tokens

        if not self.model.startswith(("o1", "o3")):
            payload["response_format"] = {"type": "json_object"}
        return payload

    async def _complete(self, prompt: str) -> str:
        data = await self._post(
            f"{self.base_url}/chat/completions",
            self._payload(prompt),
            headers={"Authorization": f"Bearer {self.api_key}"},
        )
        choices = data.get("choices") or [{}]
        content = (choices[0].get("message") or {}).get("content")
        if not content:
            logger.warning("Empty content", finish_reason=choices[0].get("finish_reason"))
        return content or ""


class GrokClient(OpenAIClient):
    """xAI Grok over its OpenAI-compatible API."""

    name = "Grok"
    base_url = GROK_BASE_URL

    def __init__(self, api_key: str, model: str, config: ReviewConfig, **kwargs):
        name = model.replace("grok-", "", 1)
        if not name.startswith("grok"):
            name = f"grok-{name}"
        super().__init__(api_key, name, config, **kwargs)

    def _payload(self, prompt: str) -> dict:
        return {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt + JSON_ONLY_SUFFIX}],
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }
