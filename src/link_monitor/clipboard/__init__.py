"""Clipboard reading and polling."""

from link_monitor.clipboard.poller import ClipboardPoller
from link_monitor.clipboard.reader import read_clipboard

__all__ = ["ClipboardPoller", "read_clipboard"]
