"""The link monitoring controller: one object owning session state and its triggers."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Callable

from link_monitor.background.launchd import BackgroundTaskRegistrant
from link_monitor.classifier import SafetyClassifier, build_classifier
from link_monitor.clipboard.poller import ClipboardPoller
from link_monitor.clipboard.reader import read_clipboard
from link_monitor.config import POLL_INTERVAL, MonitorConfig
from link_monitor.exceptions import BackgroundTaskError, ClipboardError, NotificationError
from link_monitor.extractor import extract_urls
from link_monitor.models import ClassificationResult, MonitoredLink, Notification
from link_monitor.notifications import NotificationDispatcher, default_backend
from link_monitor.permissions import PermissionReport, request_permissions
from link_monitor.state import SessionState

logger = logging.getLogger(__name__)


class LinkMonitor:
    """Watches the clipboard, classifies new URLs and reports verdicts.

    The clipboard poller and the scheduled background scan both call
    ``scan_clipboard``. Classifications run as tasks on the event loop and
    publish ``ClassificationResult`` messages on a queue; a single consumer
    applies each one to the session entry with the matching id and posts the
    notification.

    Args:
        classifier: Produces verdicts for URLs.
        dispatcher: Posts verdict notifications and the monitoring notice.
        state: Session state. A fresh, disabled one by default.
        registrant: Background task registrant, or ``None`` to skip scheduling.
        reader: Returns the clipboard text.
        poll_interval: Seconds between clipboard polls while enabled.
    """

    def __init__(
        self,
        classifier: SafetyClassifier,
        dispatcher: NotificationDispatcher,
        state: SessionState | None = None,
        registrant: BackgroundTaskRegistrant | None = None,
        reader: Callable[[], str] = read_clipboard,
        poll_interval: float = POLL_INTERVAL,
    ):
        self.classifier = classifier
        self.dispatcher = dispatcher
        self.state = state or SessionState()
        self.registrant = registrant
        self.reader = reader
        self.poller = ClipboardPoller(self.scan_clipboard, interval=poll_interval)
        self.permissions: PermissionReport | None = None
        self.foreground_notice: Notification | None = None
        self._results: asyncio.Queue[ClassificationResult] | None = None
        self._consumer: asyncio.Task | None = None
        self._pending: set[asyncio.Task] = set()

    @classmethod
    def from_config(cls, config: MonitorConfig, background: bool = True) -> LinkMonitor:
        backend = None
        if config.notifications:
            try:
                backend = default_backend()
            except NotificationError as e:
                logger.warning(str(e))
        registrant = None
        if background and sys.platform == "darwin":
            registrant = BackgroundTaskRegistrant(interval=config.background_interval)
        return cls(
            classifier=build_classifier(config),
            dispatcher=NotificationDispatcher(backend),
            registrant=registrant,
            poll_interval=config.poll_interval,
        )

    @property
    def enabled(self) -> bool:
        return self.state.enabled

    @property
    def links(self) -> list[MonitoredLink]:
        return self.state.links

    # ---- Idle <-> Polling ----

    async def enable(self) -> None:
        """Switch monitoring on. Capability and scheduling failures are only logged."""
        if self.state.enabled:
            return
        self.permissions = await asyncio.to_thread(
            request_permissions, self.dispatcher, self.reader
        )
        self.foreground_notice = await asyncio.to_thread(self.dispatcher.show_foreground_notice)
        if self.registrant is not None:
            try:
                await asyncio.to_thread(self.registrant.register)
            except BackgroundTaskError as e:
                logger.warning(f"Background scans unavailable: {e}")
        self.state.enabled = True
        self.poller.start()
        logger.info("Link monitoring enabled")

    async def disable(self) -> None:
        """Switch monitoring off. In-flight classifications still complete."""
        if not self.state.enabled:
            return
        self.state.enabled = False
        await self.poller.stop()
        await asyncio.to_thread(self.dispatcher.dismiss_foreground_notice)
        self.foreground_notice = None
        if self.registrant is not None:
            try:
                await asyncio.to_thread(self.registrant.unregister)
            except BackgroundTaskError as e:
                logger.warning(f"Could not remove background scan: {e}")
        logger.info("Link monitoring disabled")

    async def toggle(self) -> bool:
        if self.state.enabled:
            await self.disable()
        else:
            await self.enable()
        return self.state.enabled

    # ---- Scan and submit ----

    async def scan_clipboard(self) -> list[MonitoredLink]:
        """Read the clipboard and queue every URL not yet in the session list."""
        if not self.state.enabled:
            return []
        try:
            text = await asyncio.to_thread(self.reader)
        except ClipboardError as e:
            logger.warning(f"Skipping clipboard scan: {e}")
            return []
        return self.scan_text(text)

    def scan_text(self, text: str) -> list[MonitoredLink]:
        queued = []
        for url in extract_urls(text):
            entry = self.submit(url)
            if entry is not None:
                queued.append(entry)
        return queued

    def submit(self, url: str) -> MonitoredLink | None:
        """Queue ``url`` for classification.

        Returns the new placeholder entry, or ``None`` when monitoring is off,
        the input is blank, or the URL is already in the session list. Must be
        called from a running event loop.
        """
        url = (url or "").strip()
        if not self.state.enabled or not url:
            return None
        entry = self.state.add(url)
        if entry is None:
            logger.debug(f"Already tracking {url}")
            return None
        logger.info(f"Analyzing {url}")
        self._ensure_consumer()
        task = asyncio.get_running_loop().create_task(self._classify(entry))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return entry

    async def run_scheduled_scan(self) -> list[MonitoredLink]:
        """One background invocation: scan, then wait for every verdict.

        The scheduled job only exists while monitoring is on, so the flag is
        set for the duration of the scan.
        """
        self.state.enabled = True
        try:
            queued = await self.scan_clipboard()
            await self.drain()
        finally:
            self.state.enabled = False
        return [self.state.get(entry.id) for entry in queued]

    # ---- Result channel ----

    def _ensure_consumer(self) -> None:
        if self._consumer is not None and not self._consumer.done():
            return
        self._results = asyncio.Queue()
        self._consumer = asyncio.get_running_loop().create_task(self._consume_results())

    async def _classify(self, entry: MonitoredLink) -> None:
        verdict = await self.classifier.classify(entry.url)
        await self._results.put(ClassificationResult(entry.id, entry.url, verdict))

    async def _consume_results(self) -> None:
        while True:
            result = await self._results.get()
            try:
                await self._apply(result)
            except Exception:
                logger.exception(f"Failed to apply verdict for {result.url}")
            finally:
                self._results.task_done()

    async def _apply(self, result: ClassificationResult) -> None:
        updated = self.state.apply_result(result.entry_id, result.verdict)
        if updated is None:
            return
        await asyncio.to_thread(self.dispatcher.notify, result.url, result.verdict)

    async def drain(self) -> None:
        """Wait until every queued classification has been applied."""
        while self._pending:
            await asyncio.gather(*list(self._pending))
        if self._results is not None:
            await self._results.join()

    async def close(self) -> None:
        await self.disable()
        await self.drain()
        consumer, self._consumer = self._consumer, None
        if consumer is not None:
            consumer.cancel()
            try:
                await consumer
            except asyncio.CancelledError:
                pass

    # ---- UI actions ----

    def open_link(self, entry_id: str) -> bool:
        """Open a listed URL in the browser, as a notification click would."""
        entry = self.state.get(entry_id)
        if entry is None:
            return False
        return self.dispatcher.handle_response(
            Notification(title=entry.url, body=entry.status, data={"url": entry.url})
        )
