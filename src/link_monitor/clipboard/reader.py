"""System clipboard access through pyperclip."""

from __future__ import annotations

import logging

import pyperclip

from link_monitor.exceptions import ClipboardError

logger = logging.getLogger(__name__)


def read_clipboard() -> str:
    """Return the clipboard's text content, or ``""`` if it holds none."""
    try:
        text = pyperclip.paste()
    except pyperclip.PyperclipException as e:
        raise ClipboardError(f"Clipboard is not accessible: {e}") from e
    return text or ""
