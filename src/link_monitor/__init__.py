"""Clipboard link monitoring with remote safety classification."""

from link_monitor.config import MonitorConfig
from link_monitor.extractor import extract_urls
from link_monitor.models import ANALYZING_STATUS, ClassificationResult, MonitoredLink, Notification
from link_monitor.monitor import LinkMonitor
from link_monitor.state import SessionState

__all__ = [
    "ANALYZING_STATUS",
    "ClassificationResult",
    "LinkMonitor",
    "MonitorConfig",
    "MonitoredLink",
    "Notification",
    "SessionState",
    "extract_urls",
]
