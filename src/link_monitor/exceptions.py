"""Unified exception hierarchy for link-monitor."""


class LinkMonitorError(Exception):
    """Base exception for all link-monitor errors."""


class ConfigurationError(LinkMonitorError):
    """Invalid or missing configuration value."""


# Classifier
class ClassifierError(LinkMonitorError):
    """The safety classifier call failed or returned an unusable response."""


# Clipboard
class ClipboardError(LinkMonitorError):
    """Failed to read the system clipboard."""


# Notifications
class NotificationError(LinkMonitorError):
    """Failed to post or close a desktop notification."""


# Background scheduling
class BackgroundTaskError(LinkMonitorError):
    """Failed to register or unregister the periodic background task."""
