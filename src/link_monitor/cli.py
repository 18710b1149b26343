"""Command-line front end: an interactive session plus one-shot commands."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from link_monitor.classifier import build_classifier
from link_monitor.config import MonitorConfig
from link_monitor.exceptions import LinkMonitorError
from link_monitor.monitor import LinkMonitor

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  on            start monitoring the clipboard
  off           stop monitoring
  add <url>     submit a URL by hand
  list          show links seen this session
  open <n>      open link number n in the browser
  status        show whether monitoring is on
  help          show this message
  quit          exit"""


def render_links(monitor: LinkMonitor) -> str:
    links = monitor.links
    if not links:
        return "No links yet."
    lines = []
    for n, link in enumerate(links, start=1):
        lines.append(f"{n}. [{link.timestamp}] {link.url}")
        lines.append(f"   {link.status}")
    return "\n".join(lines)


def render_status(monitor: LinkMonitor) -> str:
    if not monitor.enabled:
        return "Monitoring is off."
    status = "Monitoring is on."
    report = monitor.permissions
    if report is not None and not report.all_granted:
        missing = [name for name, ok in (("clipboard", report.clipboard),
                                         ("notifications", report.notifications)) if not ok]
        status += f" Unavailable: {', '.join(missing)}."
    return status


async def handle_command(monitor: LinkMonitor, line: str) -> str | None:
    """Run one interactive command. Returns the text to print, or None to quit."""
    command, _, arg = line.strip().partition(" ")
    command = command.lower()
    arg = arg.strip()

    if command in ("quit", "exit", "q"):
        return None
    if command == "on":
        await monitor.enable()
        return render_status(monitor)
    if command == "off":
        await monitor.disable()
        return render_status(monitor)
    if command == "status":
        return render_status(monitor)
    if command == "list":
        return render_links(monitor)
    if command == "add":
        entry = monitor.submit(arg)
        if entry is None:
            return "Nothing to add."
        return f"Analyzing {entry.url}"
    if command == "open":
        links = monitor.links
        try:
            n = int(arg)
        except ValueError:
            n = 0
        if not 1 <= n <= len(links):
            return f"No link number {arg!r}."
        entry = links[n - 1]
        monitor.open_link(entry.id)
        return f"Opening {entry.url}"
    if command in ("help", "?", ""):
        return HELP_TEXT
    return f"Unknown command {command!r}. Type 'help'."


async def run_session(monitor: LinkMonitor, enable: bool = False) -> None:
    if enable:
        await monitor.enable()
    print(HELP_TEXT)
    try:
        while True:
            try:
                line = await asyncio.to_thread(input, "> ")
            except EOFError:
                break
            output = await handle_command(monitor, line)
            if output is None:
                break
            if output:
                print(output)
    finally:
        await monitor.close()


async def run_scan(config: MonitorConfig) -> int:
    monitor = LinkMonitor.from_config(config, background=False)
    try:
        entries = await monitor.run_scheduled_scan()
    finally:
        await monitor.close()
    for entry in entries:
        print(f"{entry.url}: {entry.status}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="link-monitor",
        description="Watch the clipboard for links and check them for safety.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    run = sub.add_parser("run", help="Interactive monitoring session (default)")
    run.add_argument("--enable", action="store_true", help="Start with monitoring on")

    sub.add_parser("scan", help="Scan the clipboard once and wait for verdicts")

    check = sub.add_parser("check", help="Classify a single URL")
    check.add_argument("url")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = MonitorConfig.from_env()
    except LinkMonitorError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "check":
            print(build_classifier(config).classify_sync(args.url))
            return 0
        if args.command == "scan":
            return asyncio.run(run_scan(config))
        monitor = LinkMonitor.from_config(config)
        asyncio.run(run_session(monitor, enable=getattr(args, "enable", False)))
        return 0
    except LinkMonitorError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted. Exiting.")
        return 130
