"""Abstract base class for URL safety classifiers."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a cybersecurity assistant that checks links for phishing, malware "
    "and scams. Classify the URL the user gives you. Start your answer with "
    "'⚠️ UNSAFE' or '✅ SAFE', then give a one-sentence reason."
)
USER_PROMPT_PREFIX = "Analyze this URL for safety: "
ERROR_VERDICT = "❌ Error analyzing link"
UNSAFE_MARKER = "UNSAFE"


def is_unsafe(verdict: str) -> bool:
    """Whether a verdict marks its URL as unsafe."""
    return UNSAFE_MARKER in verdict


def build_messages(url: str) -> list[dict]:
    """Chat messages for one classification request."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": USER_PROMPT_PREFIX + url},
    ]


class SafetyClassifier(ABC):
    """Abstract interface for URL safety classification.

    Backends implement ``complete``, which may raise. ``classify`` is the
    boundary the rest of the package calls: it always returns a display string.
    """

    @abstractmethod
    async def complete(self, url: str) -> str:
        """Return the raw verdict text for ``url`` or raise ``ClassifierError``."""
        ...

    async def classify(self, url: str) -> str:
        try:
            verdict = await self.complete(url)
        except Exception as e:
            logger.error(f"Classification failed for {url}: {e}")
            return ERROR_VERDICT
        logger.debug(f"Verdict for {url}: {verdict[:80]}")
        return verdict

    def classify_sync(self, url: str) -> str:
        """Blocking ``classify`` for callers outside an event loop."""
        return asyncio.run(self.classify(url))
