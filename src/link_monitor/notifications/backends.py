"""Desktop notification backends: osascript on macOS, notify-send elsewhere."""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
import threading
from abc import ABC, abstractmethod
from typing import Callable

from link_monitor.exceptions import NotificationError
from link_monitor.models import Notification

logger = logging.getLogger(__name__)

ActivateCallback = Callable[[Notification], object]

APP_NAME = "Link Monitor"


def _run_command(cmd: list[str], timeout: int = 10) -> subprocess.CompletedProcess:
    """Run a notification helper binary, wrapping OS failures."""
    logger.debug(f"Running {cmd[0]}: {' '.join(cmd[1:])[:200]}")
    try:
        return subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except subprocess.TimeoutExpired as e:
        raise NotificationError(f"{cmd[0]} timed out after {timeout}s") from e
    except FileNotFoundError as e:
        raise NotificationError(f"{cmd[0]} not found on this system") from e


class NotificationBackend(ABC):
    """Posts notifications through an OS-provided mechanism."""

    binary: str = ""

    @abstractmethod
    def show(self, notification: Notification, on_activate: ActivateCallback | None = None) -> None:
        """Display ``notification``. ``on_activate`` runs if the user clicks it."""
        ...

    def close(self, notification: Notification) -> None:
        """Withdraw a notification that is still on screen."""
        logger.debug(f"{type(self).__name__} cannot close notifications, ignoring")

    def request_permission(self) -> bool:
        """Whether this backend can post notifications here."""
        return shutil.which(self.binary) is not None


def _sanitize_applescript(text: str) -> str:
    """Sanitize a string for safe inclusion in AppleScript double-quoted strings."""
    return text.replace("\\", "\\\\").replace('"', '\\"')


class AppleScriptBackend(NotificationBackend):
    """macOS Notification Center via ``osascript``. Clicks are not reported."""

    binary = "osascript"
    sounds = {"alert": "Basso", "default": "Glass"}

    def show(self, notification: Notification, on_activate: ActivateCallback | None = None) -> None:
        title = _sanitize_applescript(notification.title)
        body = _sanitize_applescript(notification.body)
        script = f'display notification "{body}" with title "{title}" subtitle "{APP_NAME}"'
        sound = self.sounds.get(notification.sound or "")
        if sound:
            script += f' sound name "{sound}"'

        result = _run_command([self.binary, "-e", script])
        if result.returncode != 0:
            raise NotificationError(f"osascript failed: {result.stderr.strip()}")


class NotifySendBackend(NotificationBackend):
    """freedesktop notifications via ``notify-send``.

    Server-assigned ids are kept only while a notification can still be
    closed over D-Bus. When a click handler is given, ``notify-send --wait``
    is left running and its output is watched on a daemon thread.
    """

    binary = "notify-send"
    sounds = {"alert": "dialog-warning", "default": "message-new-instant"}

    def __init__(self):
        self._server_ids: dict[str, str] = {}

    def _command(self, notification: Notification) -> list[str]:
        cmd = [
            self.binary,
            f"--app-name={APP_NAME}",
            f"--urgency={notification.urgency}",
            "--print-id",
        ]
        if notification.sticky:
            cmd.append("--expire-time=0")
        sound = self.sounds.get(notification.sound or "")
        if sound:
            cmd.append(f"--hint=string:sound-name:{sound}")
        return cmd

    def show(self, notification: Notification, on_activate: ActivateCallback | None = None) -> None:
        cmd = self._command(notification)
        if on_activate is None:
            result = _run_command(cmd + [notification.title, notification.body])
            if result.returncode != 0:
                raise NotificationError(f"notify-send failed: {result.stderr.strip()}")
            server_id = result.stdout.strip()
            if server_id and notification.sticky:
                self._server_ids[notification.id] = server_id
            return

        cmd += ["--action=default=Open", "--wait", notification.title, notification.body]
        logger.debug(f"Running notify-send with click action for {notification.id}")
        try:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
                text=True,
            )
        except FileNotFoundError as e:
            raise NotificationError("notify-send not found on this system") from e
        threading.Thread(
            target=self._watch,
            args=(proc, notification, on_activate),
            daemon=True,
        ).start()

    def _watch(self, proc: subprocess.Popen, notification: Notification, on_activate: ActivateCallback) -> None:
        for line in proc.stdout:
            line = line.strip()
            if line.isdigit() and notification.id not in self._server_ids:
                self._server_ids[notification.id] = line
            elif line == "default":
                logger.info(f"Notification {notification.id} clicked")
                on_activate(notification)
        proc.wait()
        self._server_ids.pop(notification.id, None)

    def close(self, notification: Notification) -> None:
        server_id = self._server_ids.pop(notification.id, None)
        if server_id is None:
            return
        result = _run_command([
            "gdbus", "call", "--session",
            "--dest", "org.freedesktop.Notifications",
            "--object-path", "/org/freedesktop/Notifications",
            "--method", "org.freedesktop.Notifications.CloseNotification",
            server_id,
        ])
        if result.returncode != 0:
            raise NotificationError(f"Failed to close notification {server_id}: {result.stderr.strip()}")


def default_backend() -> NotificationBackend:
    """Pick the notification backend for the current platform."""
    if sys.platform == "darwin":
        return AppleScriptBackend()
    if shutil.which(NotifySendBackend.binary):
        return NotifySendBackend()
    raise NotificationError(
        "No notification backend available. "
        "Install libnotify (notify-send) or run on macOS."
    )
