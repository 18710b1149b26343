"""Runtime configuration, read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

from link_monitor.exceptions import ConfigurationError

DEFAULT_ENDPOINT = "https://toolkit.rork.com/text/llm/"
DEFAULT_CLAUDE_MODEL = "claude-haiku-4-5-20251001"
POLL_INTERVAL = 2.0
BACKGROUND_INTERVAL = 900

CLASSIFIER_BACKENDS = ("endpoint", "claude")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


def _parse_positive(name: str, value: str, cast):
    try:
        parsed = cast(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e
    if parsed <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value!r}")
    return parsed


@dataclass
class MonitorConfig:
    """Settings for a monitoring session.

    Args:
        endpoint: URL of the completion endpoint used by the default classifier.
        classifier: ``"endpoint"`` or ``"claude"``.
        claude_model: Model name for the Claude classifier.
        anthropic_api_key: API key for the Claude classifier.
        poll_interval: Seconds between clipboard checks.
        background_interval: Seconds between scheduled background scans.
        notifications: Post desktop notifications for verdicts.
        log_level: Level name passed to ``logging.basicConfig`` by the CLI.
    """

    endpoint: str = DEFAULT_ENDPOINT
    classifier: str = "endpoint"
    claude_model: str = DEFAULT_CLAUDE_MODEL
    anthropic_api_key: str | None = None
    poll_interval: float = POLL_INTERVAL
    background_interval: int = BACKGROUND_INTERVAL
    notifications: bool = True
    log_level: str = "INFO"

    def __post_init__(self):
        if self.classifier not in CLASSIFIER_BACKENDS:
            raise ConfigurationError(
                f"Unknown classifier {self.classifier!r}. "
                f"Expected one of: {', '.join(CLASSIFIER_BACKENDS)}"
            )
        if not self.endpoint:
            raise ConfigurationError("Classifier endpoint must not be empty")
        if self.poll_interval <= 0:
            raise ConfigurationError("Poll interval must be positive")
        if self.background_interval <= 0:
            raise ConfigurationError("Background interval must be positive")
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ConfigurationError(f"Unknown log level {self.log_level!r}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> MonitorConfig:
        env = os.environ if environ is None else environ
        kwargs: dict = {}
        if "LINK_MONITOR_ENDPOINT" in env:
            kwargs["endpoint"] = env["LINK_MONITOR_ENDPOINT"]
        if "LINK_MONITOR_CLASSIFIER" in env:
            kwargs["classifier"] = env["LINK_MONITOR_CLASSIFIER"].strip().lower()
        if "LINK_MONITOR_CLAUDE_MODEL" in env:
            kwargs["claude_model"] = env["LINK_MONITOR_CLAUDE_MODEL"]
        if env.get("ANTHROPIC_API_KEY"):
            kwargs["anthropic_api_key"] = env["ANTHROPIC_API_KEY"]
        if "LINK_MONITOR_POLL_INTERVAL" in env:
            kwargs["poll_interval"] = _parse_positive(
                "LINK_MONITOR_POLL_INTERVAL", env["LINK_MONITOR_POLL_INTERVAL"], float
            )
        if "LINK_MONITOR_BACKGROUND_INTERVAL" in env:
            kwargs["background_interval"] = _parse_positive(
                "LINK_MONITOR_BACKGROUND_INTERVAL", env["LINK_MONITOR_BACKGROUND_INTERVAL"], int
            )
        if "LINK_MONITOR_NOTIFICATIONS" in env:
            kwargs["notifications"] = _parse_bool(
                "LINK_MONITOR_NOTIFICATIONS", env["LINK_MONITOR_NOTIFICATIONS"]
            )
        if "LINK_MONITOR_LOG_LEVEL" in env:
            kwargs["log_level"] = env["LINK_MONITOR_LOG_LEVEL"].upper()
        return cls(**kwargs)
