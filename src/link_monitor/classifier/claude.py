"""Classifier that asks Claude directly through the Anthropic SDK."""

from __future__ import annotations

import logging
import os

from link_monitor.classifier.base import SYSTEM_PROMPT, USER_PROMPT_PREFIX, SafetyClassifier
from link_monitor.config import DEFAULT_CLAUDE_MODEL
from link_monitor.exceptions import ClassifierError, ConfigurationError

logger = logging.getLogger(__name__)


class ClaudeClassifier(SafetyClassifier):
    """Asynchronous Claude-backed classifier. SDK retries are disabled."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_CLAUDE_MODEL,
        max_tokens: int = 300,
    ):
        if not api_key and not os.environ.get("ANTHROPIC_API_KEY"):
            raise ConfigurationError(
                "Anthropic API key is required. "
                "Pass it directly or set ANTHROPIC_API_KEY in your environment."
            )
        try:
            from anthropic import AsyncAnthropic
        except ImportError:
            raise ImportError(
                "anthropic is required for ClaudeClassifier. "
                "Install with: pip install link-monitor[claude]"
            )
        self._client = AsyncAnthropic(api_key=api_key or None, max_retries=0)
        self.model = model
        self.max_tokens = max_tokens

    @property
    def client(self):
        """Access the underlying AsyncAnthropic SDK client."""
        return self._client

    async def complete(self, url: str) -> str:
        from anthropic import APIError

        try:
            response = await self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=SYSTEM_PROMPT,
                messages=[{"role": "user", "content": USER_PROMPT_PREFIX + url}],
            )
        except APIError as e:
            raise ClassifierError(f"Claude API error: {e}") from e

        text = "".join(block.text for block in response.content if block.type == "text")
        if not text:
            raise ClassifierError("Claude returned an empty verdict")
        return text
