"""Probe the OS capabilities monitoring depends on."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from link_monitor.exceptions import ClipboardError
from link_monitor.notifications.dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)


@dataclass
class PermissionReport:
    """Which capabilities were available when monitoring was switched on."""

    clipboard: bool
    notifications: bool

    @property
    def all_granted(self) -> bool:
        return self.clipboard and self.notifications


def request_permissions(
    dispatcher: NotificationDispatcher,
    reader: Callable[[], str],
) -> PermissionReport:
    """Check clipboard and notification access. Denials are logged, never raised."""
    try:
        reader()
        clipboard = True
    except ClipboardError as e:
        logger.warning(f"Clipboard access denied: {e}")
        clipboard = False

    notifications = dispatcher.request_permission()
    if not notifications:
        logger.warning("Notifications unavailable, verdicts will only be listed")

    return PermissionReport(clipboard=clipboard, notifications=notifications)
