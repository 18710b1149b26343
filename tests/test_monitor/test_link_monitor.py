"""Tests for the LinkMonitor controller."""

import asyncio
from unittest.mock import MagicMock

from link_monitor.background.launchd import BackgroundTaskRegistrant
from link_monitor.classifier.base import ERROR_VERDICT, SafetyClassifier
from link_monitor.config import MonitorConfig
from link_monitor.exceptions import BackgroundTaskError, ClipboardError, NotificationError
from link_monitor.models import ANALYZING_STATUS
from link_monitor.monitor import LinkMonitor
from link_monitor.notifications.backends import NotificationBackend
from link_monitor.notifications.dispatcher import NotificationDispatcher


class FakeClassifier(SafetyClassifier):
    """Returns canned verdicts; URLs listed in ``gates`` wait for their event."""

    def __init__(self, verdicts=None, error=None):
        self.verdicts = verdicts or {}
        self.error = error
        self.gates = {}
        self.calls = []

    async def complete(self, url):
        self.calls.append(url)
        if url in self.gates:
            await self.gates[url].wait()
        if self.error is not None:
            raise self.error
        return self.verdicts.get(url, "✅ SAFE: default")


def _monitor(classifier=None, clipboard="", registrant=None, backend=None):
    return LinkMonitor(
        classifier=classifier or FakeClassifier(),
        dispatcher=NotificationDispatcher(backend, opener=MagicMock()),
        registrant=registrant,
        reader=lambda: clipboard,
        poll_interval=60,
    )


async def _wait_for(condition, timeout=2.0):
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not condition():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


def test_submit_disabled_is_noop():
    classifier = FakeClassifier()
    monitor = _monitor(classifier)

    async def scenario():
        entry = monitor.submit("https://a.example")
        await monitor.drain()
        return entry

    assert asyncio.run(scenario()) is None
    assert monitor.links == []
    assert classifier.calls == []


def test_submit_blank_is_noop():
    monitor = _monitor()

    async def scenario():
        monitor.state.enabled = True
        return monitor.submit("   ")

    assert asyncio.run(scenario()) is None
    assert monitor.links == []


def test_duplicate_submission_yields_one_entry():
    classifier = FakeClassifier()
    monitor = _monitor(classifier)

    async def scenario():
        monitor.state.enabled = True
        first = monitor.submit("https://a.example")
        second = monitor.submit("https://a.example")
        await monitor.close()
        return first, second

    first, second = asyncio.run(scenario())
    assert first is not None
    assert second is None
    assert len(monitor.links) == 1
    assert classifier.calls == ["https://a.example"]


def test_placeholder_then_update_by_id():
    classifier = FakeClassifier({"https://a.example": "⚠️ UNSAFE: phishing kit"})
    monitor = _monitor(classifier)

    async def scenario():
        monitor.state.enabled = True
        other = monitor.state.add("https://other.example")
        entry = monitor.submit("https://a.example")
        placeholder = monitor.state.get(entry.id).status
        await monitor.drain()
        return other, entry, placeholder

    other, entry, placeholder = asyncio.run(scenario())
    assert placeholder == ANALYZING_STATUS
    assert monitor.state.get(entry.id).status == "⚠️ UNSAFE: phishing kit"
    assert monitor.state.get(other.id).status == ANALYZING_STATUS
    assert monitor.links[0].id == entry.id


def test_classifier_failure_sets_sentinel():
    classifier = FakeClassifier(error=ConnectionError("network down"))
    monitor = _monitor(classifier)

    async def scenario():
        monitor.state.enabled = True
        entry = monitor.submit("https://a.example")
        await monitor.drain()
        return entry

    entry = asyncio.run(scenario())
    assert monitor.state.get(entry.id).status == ERROR_VERDICT


def test_out_of_order_results_patch_the_right_entries():
    classifier = FakeClassifier({
        "https://slow.example": "✅ SAFE: slow",
        "https://fast.example": "⚠️ UNSAFE: fast",
    })
    monitor = _monitor(classifier)

    async def scenario():
        gate = asyncio.Event()
        classifier.gates["https://slow.example"] = gate
        monitor.state.enabled = True
        slow = monitor.submit("https://slow.example")
        fast = monitor.submit("https://fast.example")
        await _wait_for(lambda: not monitor.state.get(fast.id).pending)
        slow_status = monitor.state.get(slow.id).status
        gate.set()
        await monitor.drain()
        return slow, fast, slow_status

    slow, fast, slow_status = asyncio.run(scenario())
    assert slow_status == ANALYZING_STATUS
    assert monitor.state.get(slow.id).status == "✅ SAFE: slow"
    assert monitor.state.get(fast.id).status == "⚠️ UNSAFE: fast"


def test_in_flight_result_applied_after_disable():
    classifier = FakeClassifier({"https://a.example": "✅ SAFE: late"})
    monitor = _monitor(classifier)

    async def scenario():
        gate = asyncio.Event()
        classifier.gates["https://a.example"] = gate
        await monitor.enable()
        entry = monitor.submit("https://a.example")
        await monitor.disable()
        gate.set()
        await monitor.drain()
        return entry

    entry = asyncio.run(scenario())
    assert monitor.enabled is False
    assert monitor.state.get(entry.id).status == "✅ SAFE: late"


def test_scan_clipboard_dedups_against_list():
    classifier = FakeClassifier()
    monitor = _monitor(classifier, clipboard="https://a.example https://b.example https://a.example")

    async def scenario():
        monitor.state.enabled = True
        first = await monitor.scan_clipboard()
        second = await monitor.scan_clipboard()
        await monitor.drain()
        return first, second

    first, second = asyncio.run(scenario())
    assert [e.url for e in first] == ["https://a.example", "https://b.example"]
    assert second == []
    assert len(monitor.links) == 2


def test_scan_clipboard_tolerates_unreadable_clipboard():
    def reader():
        raise ClipboardError("no clipboard")

    monitor = _monitor()
    monitor.reader = reader

    async def scenario():
        monitor.state.enabled = True
        return await monitor.scan_clipboard()

    assert asyncio.run(scenario()) == []


def test_scan_without_urls_is_noop():
    classifier = FakeClassifier()
    monitor = _monitor(classifier, clipboard="just some text")

    async def scenario():
        monitor.state.enabled = True
        return await monitor.scan_clipboard()

    assert asyncio.run(scenario()) == []
    assert classifier.calls == []


def test_enable_disable_wires_platform_services():
    registrant = MagicMock(spec=BackgroundTaskRegistrant)
    backend = MagicMock(spec=NotificationBackend)
    backend.request_permission.return_value = True
    monitor = _monitor(registrant=registrant, backend=backend)

    async def scenario():
        await monitor.enable()
        state = (monitor.enabled, monitor.poller.is_running, monitor.foreground_notice)
        await monitor.enable()
        await monitor.disable()
        return state

    enabled, polling, notice = asyncio.run(scenario())
    assert enabled and polling
    assert notice is not None and notice.sticky
    registrant.register.assert_called_once()
    registrant.unregister.assert_called_once()
    backend.close.assert_called_once_with(notice)
    assert monitor.enabled is False
    assert not monitor.poller.is_running
    assert monitor.permissions.all_granted


def test_enable_survives_registration_failure():
    registrant = MagicMock(spec=BackgroundTaskRegistrant)
    registrant.register.side_effect = BackgroundTaskError("launchctl not found")
    registrant.unregister.side_effect = BackgroundTaskError("launchctl not found")
    monitor = _monitor(registrant=registrant)

    async def scenario():
        await monitor.enable()
        enabled = monitor.enabled
        await monitor.close()
        return enabled

    assert asyncio.run(scenario()) is True
    assert monitor.permissions.notifications is False


def test_toggle_on_poll_classify_notify_scenario():
    classifier = FakeClassifier({"https://good.example": "✅ SAFE: reputable domain"})
    backend = MagicMock(spec=NotificationBackend)
    backend.request_permission.return_value = True
    monitor = _monitor(classifier, clipboard="check https://good.example now", backend=backend)

    async def scenario():
        await monitor.toggle()
        await _wait_for(lambda: len(monitor.links) == 1)
        await monitor.drain()
        await monitor.close()

    asyncio.run(scenario())

    assert len(monitor.links) == 1
    entry = monitor.links[0]
    assert entry.url == "https://good.example"
    assert entry.status == "✅ SAFE: reputable domain"
    titles = [call.args[0].title for call in backend.show.call_args_list]
    assert any("Safe" in title for title in titles)
    verdict_notification = backend.show.call_args_list[-1].args[0]
    assert verdict_notification.data == {"url": "https://good.example"}


def test_run_scheduled_scan():
    classifier = FakeClassifier({"https://b.example": "⚠️ UNSAFE: malware"})
    monitor = _monitor(classifier, clipboard="go to https://b.example")

    async def scenario():
        entries = await monitor.run_scheduled_scan()
        await monitor.close()
        return entries

    entries = asyncio.run(scenario())
    assert [(e.url, e.status) for e in entries] == [("https://b.example", "⚠️ UNSAFE: malware")]
    assert monitor.enabled is False


def test_open_link():
    monitor = _monitor()
    entry = monitor.state.add("https://a.example")

    assert monitor.open_link(entry.id) is True
    monitor.dispatcher._opener.assert_called_once_with("https://a.example")
    assert monitor.open_link("missing") is False


def test_from_config_without_notification_backend(monkeypatch):
    monkeypatch.setattr("link_monitor.monitor.sys.platform", "darwin")
    monkeypatch.setattr(
        "link_monitor.monitor.default_backend",
        MagicMock(side_effect=NotificationError("no backend")),
    )
    monitor = LinkMonitor.from_config(MonitorConfig(poll_interval=5))
    assert monitor.dispatcher.backend is None
    assert monitor.poller.interval == 5
    assert monitor.registrant is not None
    assert LinkMonitor.from_config(MonitorConfig(), background=False).registrant is None


def test_from_config_skips_background_off_macos(monkeypatch):
    monkeypatch.setattr("link_monitor.monitor.sys.platform", "linux")
    monkeypatch.setattr(
        "link_monitor.monitor.default_backend",
        MagicMock(side_effect=NotificationError("no backend")),
    )
    assert LinkMonitor.from_config(MonitorConfig()).registrant is None
