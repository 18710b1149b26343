"""Periodic background scans scheduled through a launchd user agent."""

from __future__ import annotations

import logging
import plistlib
import subprocess
import sys
from pathlib import Path

from link_monitor.config import BACKGROUND_INTERVAL
from link_monitor.exceptions import BackgroundTaskError

logger = logging.getLogger(__name__)

LAUNCH_AGENTS_DIR = Path.home() / "Library" / "LaunchAgents"
TASK_LABEL = "com.linkmonitor.scan"


def _run_launchctl(args: list[str], timeout: int = 30) -> subprocess.CompletedProcess:
    """Execute a launchctl subcommand."""
    logger.debug(f"Running launchctl {' '.join(args)}")
    try:
        result = subprocess.run(
            ["launchctl", *args],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        raise BackgroundTaskError(f"launchctl timed out after {timeout}s") from e
    except FileNotFoundError as e:
        raise BackgroundTaskError("launchctl not found, background scans require macOS") from e
    if result.returncode != 0:
        raise BackgroundTaskError(
            f"launchctl {args[0]} failed: {result.stderr.strip() or result.returncode}"
        )
    return result


class BackgroundTaskRegistrant:
    """Registers ``link-monitor scan`` as a launchd job run every ``interval`` seconds.

    Args:
        label: launchd job label, also the plist file name.
        interval: Seconds between runs (launchd ``StartInterval``).
        agents_dir: Directory holding the plist. Defaults to ~/Library/LaunchAgents.
        program: Command line to run. Defaults to this interpreter's ``-m link_monitor scan``.
    """

    def __init__(
        self,
        label: str = TASK_LABEL,
        interval: int = BACKGROUND_INTERVAL,
        agents_dir: Path | None = None,
        program: list[str] | None = None,
    ):
        self.label = label
        self.interval = interval
        self.agents_dir = agents_dir or LAUNCH_AGENTS_DIR
        self.program = program or [sys.executable, "-m", "link_monitor", "scan"]

    @property
    def plist_path(self) -> Path:
        return self.agents_dir / f"{self.label}.plist"

    def build_plist(self) -> dict:
        return {
            "Label": self.label,
            "ProgramArguments": list(self.program),
            "StartInterval": self.interval,
            "RunAtLoad": False,
            "ProcessType": "Background",
        }

    def is_registered(self) -> bool:
        return self.plist_path.exists()

    def register(self) -> None:
        """Write the job plist and load it. Re-registering replaces the job."""
        if self.is_registered():
            self.unregister()
        try:
            self.agents_dir.mkdir(parents=True, exist_ok=True)
            with open(self.plist_path, "wb") as f:
                plistlib.dump(self.build_plist(), f)
        except OSError as e:
            raise BackgroundTaskError(f"Cannot write {self.plist_path}: {e}") from e
        try:
            _run_launchctl(["load", "-w", str(self.plist_path)])
        except BackgroundTaskError:
            self.plist_path.unlink(missing_ok=True)
            raise
        logger.info(f"Registered background scan {self.label} every {self.interval}s")

    def unregister(self) -> None:
        """Unload the job and delete its plist. No-op when not registered."""
        if not self.is_registered():
            return
        try:
            _run_launchctl(["unload", "-w", str(self.plist_path)])
        finally:
            self.plist_path.unlink(missing_ok=True)
        logger.info(f"Unregistered background scan {self.label}")
