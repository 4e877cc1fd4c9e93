"""Google Gemini generateContent client."""

from ..config import ReviewConfig
from .base import ReviewClient

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


class GeminiClient(ReviewClient):
    """Gemini models via the REST generateContent endpoint."""

    name = "Gemini"

    def __init__(self, api_key: str, model: str, config: ReviewConfig, **kwargs):
        super().__init__(model, config, **kwargs)
        self.api_key = api_key

    async def _complete(self, prompt: str) -> str:
        data = await self._post(
            f"{GEMINI_BASE_URL}/{self.model}:generateContent",
            {
                "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                "generationConfig": {
                    "temperature": self.config.temperature,
                    "maxOutputTokens": self.config.max_tokens,
                    "responseMimeType": "application/json",
                },
            },
            headers={"x-goog-api-key": self.api_key},
        )
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts)
