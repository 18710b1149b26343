"""URL safety classifiers."""

from __future__ import annotations

from link_monitor.classifier.base import (
    ERROR_VERDICT,
    SYSTEM_PROMPT,
    SafetyClassifier,
    build_messages,
    is_unsafe,
)
from link_monitor.classifier.claude import ClaudeClassifier
from link_monitor.classifier.endpoint import CompletionEndpointClassifier
from link_monitor.config import MonitorConfig


def build_classifier(config: MonitorConfig) -> SafetyClassifier:
    """Create the classifier backend named by ``config.classifier``."""
    if config.classifier == "claude":
        return ClaudeClassifier(api_key=config.anthropic_api_key, model=config.claude_model)
    return CompletionEndpointClassifier(endpoint=config.endpoint)


__all__ = [
    "ERROR_VERDICT",
    "SYSTEM_PROMPT",
    "SafetyClassifier",
    "CompletionEndpointClassifier",
    "ClaudeClassifier",
    "build_classifier",
    "build_messages",
    "is_unsafe",
]
