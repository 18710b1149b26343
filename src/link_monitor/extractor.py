"""Pull http(s) URLs out of arbitrary text."""

from __future__ import annotations

import re

URL_PATTERN = re.compile(r"https?://\S+")


def extract_urls(text: str | None) -> list[str]:
    """Return every ``http(s)://`` token in ``text``, left to right.

    Matches are greedy up to the next whitespace character. Nothing is
    validated or deduplicated here.
    """
    if not text:
        return []
    return URL_PATTERN.findall(text)
