"""
Provider base: prompt building, response parsing and the client contract.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import replace
from enum import Enum
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from ..config import ReviewConfig
from ..errors import ProviderError
from ..review.models import (
    Assessment,
    IssueCategory,
    IssueSeverity,
    ReviewIssue,
    ReviewResult,
)

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 120.0

JSON_ONLY_SUFFIX = "\n\nRespond with valid JSON only."

LANGUAGE_NAMES = {
    "ru": "Russian",
    "es": "Spanish",
    "de": "German",
    "zh": "Chinese",
    "ja": "Japanese",
    "fr": "French",
    "pt": "Portuguese",
}

BASE_PROMPT = """\
You are an expert code reviewer with deep knowledge of software engineering best practices.

Analyze the following code changes from a pull request and provide a structured review.

## Your Review Should Include:

1. **Summary**: A brief overview of the changes (2-3 sentences)

2. **Issues**: Problems found in the code, categorized by:
   - **Severity**: critical (must fix), warning (should fix), suggestion (nice to have)
   - **Category**: security, performance, logic, style, best-practice, documentation

3. **Positives**: Good things about the code (if any)

4. **Overall Assessment**: Whether to approve, request changes, or just comment

## Guidelines:

- Focus on important issues, not minor style nitpicks
- Be constructive and explain WHY something is a problem
- Provide specific suggestions for fixes when possible
- Reference specific file paths and line numbers
- Consider the context of the entire change

## Response Format:

Respond ONLY with valid JSON in this exact format:
{
  "summary": "Brief summary of the changes",
  "issues": [
    {
      "severity": "critical|warning|suggestion",
      "category": "security|performance|logic|style|best-practice|documentation",
      "file": "path/to/file.ts",
      "line": 42,
      "title": "Brief issue title",
      "description": "Detailed explanation of the problem",
      "suggestion": "How to fix this (optional)"
    }
  ],
  "positives": ["Good thing 1", "Good thing 2"],
  "overall_assessment": "approve|request_changes|comment"
}"""


def get_base_prompt() -> str:
    """Reviewer instructions and the JSON response schema."""
    return BASE_PROMPT


def build_prompt(diff: str, config: ReviewConfig) -> str:
    """Build the full prompt with user customizations."""
    prompt = get_base_prompt()

    if config.language and config.language != "en":
        language = LANGUAGE_NAMES.get(config.language, config.language)
        prompt += f"\n\n**IMPORTANT**: Respond in {language} language."

    focus_areas = config.focus.enabled()
    if focus_areas:
        prompt += f"\n\n**Focus Areas**: Pay special attention to: {', '.join(focus_areas)}."

    if config.custom_prompt:
        prompt += f"\n\n**Additional Instructions**:\n{config.custom_prompt}"

    prompt += f"\n\n## Code Changes to Review:\n\n```diff\n{diff}\n```"
    return prompt


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def _enum_or(enum_cls: type[Enum], value: Any, default: Enum) -> Enum:
    try:
        return enum_cls(value)
    except ValueError:
        return default


def _parse_issue(raw: Any) -> ReviewIssue | None:
    """Validate one issue, normalizing values models commonly get wrong.

    Unknown severities become warnings, unknown categories become
    best-practice, and null text fields become empty strings. An issue that
    still does not validate is dropped on its own.
    """
    if not isinstance(raw, dict):
        logger.warning("Dropping malformed issue", issue=repr(raw)[:200])
        return None

    issue = dict(raw)
    issue["severity"] = _enum_or(IssueSeverity, issue.get("severity"), IssueSeverity.WARNING)
    issue["category"] = _enum_or(
        IssueCategory, issue.get("category"), IssueCategory.BEST_PRACTICE
    )
    for key in ("file", "title", "description"):
        if issue.get(key) is None:
            issue[key] = ""

    try:
        return ReviewIssue.model_validate(issue)
    except ValidationError as e:
        logger.warning("Dropping invalid issue", title=issue.get("title"), error=str(e))
        return None


def parse_review_response(response: str) -> ReviewResult:
    """Parse a provider's JSON answer into a ReviewResult.

    Missing fields get defaults and issues are validated one at a time, so
    one out-of-schema issue never discards the rest of the review. A
    response that is not a JSON object becomes a result carrying a single
    parse-error warning instead of raising.
    """
    try:
        parsed = json.loads(_strip_code_fence(response))
        if not isinstance(parsed, dict):
            raise ValueError("response is not a JSON object")

        raw_issues = parsed.get("issues")
        issues = [
            issue
            for issue in map(_parse_issue, raw_issues if isinstance(raw_issues, list) else [])
            if issue is not None
        ]

        raw_positives = parsed.get("positives")
        positives = [
            str(p) for p in (raw_positives if isinstance(raw_positives, list) else []) if p
        ]

        return ReviewResult(
            summary=str(parsed.get("summary") or "No summary provided"),
            issues=issues,
            positives=positives,
            overall_assessment=_enum_or(
                Assessment, parsed.get("overall_assessment"), Assessment.COMMENT
            ),
        )
    except (ValueError, ValidationError) as e:
        logger.warning("Could not parse provider response", error=str(e))
        return ReviewResult(
            summary="Failed to parse AI response",
            issues=[
                ReviewIssue(
                    severity=IssueSeverity.WARNING,
                    category=IssueCategory.DOCUMENTATION,
                    title="AI Response Parse Error",
                    description=(
                        "The AI response could not be parsed as JSON. "
                        f"Raw response: {response[:500]}..."
                    ),
                )
            ],
            overall_assessment=Assessment.COMMENT,
        )


class ReviewClient(ABC):
    """A language-model backend that reviews diff text."""

    name = "provider"

    def __init__(
        self,
        model: str,
        config: ReviewConfig,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the client.

        Args:
            model: Model name sent to the provider
            config: Review config (temperature, token limit, prompt options)
            http_client: Shared HTTP client; one is created per call if omitted
            timeout: Request timeout in seconds
        """
        self.model = model
        self.config = config
        self._http = http_client
        self.timeout = timeout

    async def review(self, diff: str, custom_prompt: str | None = None) -> ReviewResult:
        """Review diff text. Raises ProviderError when the call fails."""
        config = replace(self.config, custom_prompt=custom_prompt or self.config.custom_prompt)
        prompt = build_prompt(diff, config)

        logger.info("Sending review request", provider=self.name, model=self.model)
        content = await self._complete(prompt)
        if not content:
            raise ProviderError(f"Empty response from {self.name}")

        logger.info("Received review response", provider=self.name, chars=len(content))
        return parse_review_response(content)

    @abstractmethod
    async def _complete(self, prompt: str) -> str:
        """Send the prompt and return the model's text answer."""

    async def _post(self, url: str, payload: dict, headers: dict[str, str] | None = None) -> dict:
        """POST JSON and return the decoded body, mapping failures to ProviderError."""
        try:
            if self._http is not None:
                response = await self._http.post(
                    url, json=payload, headers=headers, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise ProviderError(f"{self.name} request failed: {e}") from e

        if response.is_error:
            raise ProviderError(
                f"{self.name} request failed: {response.status_code} {response.text}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(f"{self.name} returned invalid JSON: {e}") from e
