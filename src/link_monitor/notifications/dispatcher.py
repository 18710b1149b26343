"""Turn verdicts into notifications and route notification clicks."""

from __future__ import annotations

import logging
import webbrowser
from typing import Callable

from link_monitor.classifier.base import is_unsafe
from link_monitor.exceptions import NotificationError
from link_monitor.models import Notification
from link_monitor.notifications.backends import NotificationBackend

logger = logging.getLogger(__name__)

SAFE_TITLE = "✅ Safe Link Detected"
UNSAFE_TITLE = "⚠️ Unsafe Link Detected"
FOREGROUND_TITLE = "Link monitoring active"
FOREGROUND_BODY = "Watching the clipboard for links."
MAX_DELIVERED = 100


class NotificationDispatcher:
    """Builds verdict notifications and opens their URL when one is clicked.

    Args:
        backend: Where notifications are shown. ``None`` only records them.
        opener: Called with the URL of a clicked notification.
    """

    def __init__(
        self,
        backend: NotificationBackend | None = None,
        opener: Callable[[str], object] = webbrowser.open,
    ):
        self.backend = backend
        self._opener = opener
        self._delivered: dict[str, Notification] = {}
        self._foreground: Notification | None = None
        self.max_delivered = MAX_DELIVERED

    @property
    def delivered(self) -> list[Notification]:
        return list(self._delivered.values())

    def build(self, url: str, verdict: str) -> Notification:
        if is_unsafe(verdict):
            return Notification(
                title=UNSAFE_TITLE,
                body=f"{url}\n{verdict}",
                data={"url": url},
                sound="alert",
                urgency="critical",
            )
        return Notification(
            title=SAFE_TITLE,
            body=f"{url}\n{verdict}",
            data={"url": url},
            sound="default",
            urgency="normal",
        )

    def _remember(self, notification: Notification) -> None:
        self._delivered[notification.id] = notification
        foreground_id = self._foreground.id if self._foreground else None
        excess = len(self._delivered) - self.max_delivered
        for nid in list(self._delivered):
            if excess <= 0:
                break
            if nid != foreground_id:
                del self._delivered[nid]
                excess -= 1

    def _show(self, notification: Notification) -> bool:
        self._remember(notification)
        if self.backend is None:
            logger.info(f"{notification.title}: {notification.body}")
            return False
        try:
            self.backend.show(notification, on_activate=self.handle_response)
        except NotificationError as e:
            logger.warning(f"Could not show notification: {e}")
            return False
        return True

    def notify(self, url: str, verdict: str) -> Notification:
        notification = self.build(url, verdict)
        self._show(notification)
        return notification

    def handle_response(self, notification: Notification | str) -> bool:
        """Open the URL carried by a clicked notification."""
        if isinstance(notification, str):
            notification = self._delivered.get(notification)
            if notification is None:
                return False
        url = notification.data.get("url")
        if not url:
            return False
        self._delivered.pop(notification.id, None)
        logger.info(f"Opening {url}")
        self._opener(url)
        return True

    def show_foreground_notice(self) -> Notification:
        """Post the persistent notice shown while monitoring is on."""
        if self._foreground is not None:
            return self._foreground
        notice = Notification(
            title=FOREGROUND_TITLE,
            body=FOREGROUND_BODY,
            urgency="low",
            sticky=True,
        )
        self._foreground = notice
        self._show(notice)
        return notice

    def dismiss_foreground_notice(self) -> None:
        notice, self._foreground = self._foreground, None
        if notice is None:
            return
        self._delivered.pop(notice.id, None)
        if self.backend is None:
            return
        try:
            self.backend.close(notice)
        except NotificationError as e:
            logger.warning(f"Could not dismiss monitoring notice: {e}")

    def request_permission(self) -> bool:
        if self.backend is None:
            return False
        return self.backend.request_permission()
