"""In-memory session state: the enabled flag and the session list."""

from __future__ import annotations

import dataclasses
import logging

from link_monitor.models import MonitoredLink

logger = logging.getLogger(__name__)


class SessionState:
    """Process-lifetime state owned by a single ``LinkMonitor``.

    The list is newest-first and holds at most one entry per URL. Updates
    replace the list wholesale so readers never observe a half-applied change.
    """

    def __init__(self, enabled: bool = False):
        self.enabled = enabled
        self._links: list[MonitoredLink] = []

    @property
    def links(self) -> list[MonitoredLink]:
        return list(self._links)

    def __len__(self) -> int:
        return len(self._links)

    def has_url(self, url: str) -> bool:
        return any(link.url == url for link in self._links)

    def get(self, entry_id: str) -> MonitoredLink | None:
        for link in self._links:
            if link.id == entry_id:
                return link
        return None

    def add(self, url: str) -> MonitoredLink | None:
        """Insert a placeholder entry for ``url`` unless it is already listed."""
        if self.has_url(url):
            return None
        entry = MonitoredLink.new(url)
        self._links = [entry, *self._links]
        return entry

    def apply_result(self, entry_id: str, status: str) -> MonitoredLink | None:
        """Set the status of one entry by id. Returns the updated entry."""
        updated = None
        links = []
        for link in self._links:
            if link.id == entry_id:
                link = dataclasses.replace(link, status=status)
                updated = link
            links.append(link)
        if updated is None:
            logger.warning(f"No session entry with id {entry_id}, dropping result")
            return None
        self._links = links
        return updated
