"""Classifier backed by a plain chat-completion HTTP endpoint."""

from __future__ import annotations

import logging

import httpx

from link_monitor.classifier.base import SafetyClassifier, build_messages
from link_monitor.config import DEFAULT_ENDPOINT
from link_monitor.exceptions import ClassifierError, ConfigurationError

logger = logging.getLogger(__name__)


class CompletionEndpointClassifier(SafetyClassifier):
    """POSTs ``{"messages": [...]}`` and reads ``{"completion": "..."}`` back.

    Args:
        endpoint: Completion endpoint URL.
        transport: Optional httpx transport, mainly for tests.
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not endpoint:
            raise ConfigurationError("Classifier endpoint must not be empty")
        self.endpoint = endpoint
        self._transport = transport

    async def complete(self, url: str) -> str:
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    self.endpoint,
                    json={"messages": build_messages(url)},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise ClassifierError(f"Classifier request failed: {e}") from e
        except ValueError as e:
            raise ClassifierError(f"Classifier returned invalid JSON: {e}") from e

        completion = data.get("completion") if isinstance(data, dict) else None
        if not isinstance(completion, str):
            raise ClassifierError("Classifier response has no 'completion' text")
        return completion
