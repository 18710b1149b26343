"""OS-scheduled background scans."""

from link_monitor.background.launchd import BackgroundTaskRegistrant, TASK_LABEL

__all__ = ["BackgroundTaskRegistrant", "TASK_LABEL"]
