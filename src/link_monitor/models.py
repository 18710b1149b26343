"""Data models for link monitoring."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime

ANALYZING_STATUS = "Analyzing..."


def _new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class MonitoredLink:
    """One URL seen during the session and its classification status."""

    id: str
    url: str
    timestamp: str  # ISO 8601
    status: str = ANALYZING_STATUS

    @classmethod
    def new(cls, url: str) -> MonitoredLink:
        return cls(
            id=_new_id(),
            url=url,
            timestamp=datetime.now().isoformat(timespec="seconds"),
        )

    @property
    def pending(self) -> bool:
        return self.status == ANALYZING_STATUS


@dataclass(frozen=True)
class ClassificationResult:
    """A verdict addressed to the session entry that requested it."""

    entry_id: str
    url: str
    verdict: str


@dataclass
class Notification:
    """A desktop notification and the payload handed back when it is tapped."""

    title: str
    body: str
    data: dict[str, str] = field(default_factory=dict)
    sound: str | None = None
    urgency: str = "normal"  # "low", "normal" or "critical"
    sticky: bool = False
    id: str = field(default_factory=_new_id)
