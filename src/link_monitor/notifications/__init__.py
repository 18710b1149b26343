"""Desktop notifications for link verdicts."""

from link_monitor.notifications.backends import (
    AppleScriptBackend,
    NotificationBackend,
    NotifySendBackend,
    default_backend,
)
from link_monitor.notifications.dispatcher import (
    SAFE_TITLE,
    UNSAFE_TITLE,
    NotificationDispatcher,
)

__all__ = [
    "AppleScriptBackend",
    "NotificationBackend",
    "NotifySendBackend",
    "default_backend",
    "NotificationDispatcher",
    "SAFE_TITLE",
    "UNSAFE_TITLE",
]
