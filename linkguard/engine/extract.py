"""Hyperlink extraction from assembled HTML content."""

from __future__ import annotations

import re
from typing import List

from bs4 import BeautifulSoup  # type: ignore

from .types import ExtractedLink

_WHITESPACE_RE = re.compile(r"\s+")


def _parse(content: str) -> BeautifulSoup:
    try:
        return BeautifulSoup(content, "lxml")
    except Exception:
        # Fallback to html.parser if lxml isn't installed
        return BeautifulSoup(content, "html.parser")


def extract_links(content: str | None) -> List[ExtractedLink]:
    """Return every ``<a href>`` in ``content`` in document order.

    Duplicates are kept. Anchors without an ``href`` attribute are named
    anchors rather than links and are skipped, while an empty ``href`` is
    returned as an empty URL so classification can flag it.
    """

    if not content:
        return []

    soup = _parse(content)
    links: List[ExtractedLink] = []
    for anchor in soup.find_all("a"):
        if not anchor.has_attr("href"):
            continue
        href = anchor.get("href")
        if isinstance(href, list):
            href = " ".join(href)
        anchor_text = _WHITESPACE_RE.sub(" ", anchor.get_text()).strip()
        links.append(ExtractedLink(url=(href or "").strip(), anchor_text=anchor_text))
    return links
