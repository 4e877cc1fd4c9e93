"""Ollama client for local models."""

from ..config import ReviewConfig
from .base import JSON_ONLY_SUFFIX, ReviewClient


class OllamaClient(ReviewClient):
    """Local models served by Ollama's chat endpoint."""

    name = "Ollama"

    def __init__(self, base_url: str, model: str, config: ReviewConfig, **kwargs):
        # Accepts "ollama/llama3", "llama3" and "llama3:latest"
        super().__init__(model.replace("ollama/", ""), config, **kwargs)
        self.base_url = base_url.rstrip("/")

    async def _complete(self, prompt: str) -> str:
        data = await self._post(
            f"{self.base_url}/api/chat",
            {
                "model": self.model,
                "messages": [{"role": "user", "content": prompt + JSON_ONLY_SUFFIX}],
                "stream": False,
                "options": {
                    "temperature": self.config.temperature,
                    "num_predict": self.config.max_tokens,
                },
            },
        )
        return (data.get("message") or {}).get("content") or ""
