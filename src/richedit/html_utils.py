"""Shared HTML utilities for markup processing."""

from __future__ import annotations

import re

try:
    from bs4 import BeautifulSoup
    from bs4.element import Tag
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc


# Removed together with their content.
UNWANTED_TAGS = ("script", "style", "noscript", "template", "meta", "link", "head", "title")

_TEXT_ALIGN_RE = re.compile(r"text-align\s*:\s*(left|center|right|justify)", re.IGNORECASE)


def find_fragment_root(soup: BeautifulSoup) -> Tag:
    """Find the element holding a parsed fragment.

    The lxml parser wraps fragments in ``<html><body>``. Markup that is only
    whitespace or comments produces no body, in which case the soup itself is
    the root.
    """
    if soup.body:
        return soup.body
    return soup


def strip_unwanted_elements(soup: BeautifulSoup) -> None:
    for tag in soup.find_all(UNWANTED_TAGS):
        tag.decompose()


def text_align_of(tag: Tag) -> str | None:
    """Read ``text-align`` from an inline style; ``left`` is the default."""
    style = tag.get("style")
    if not style:
        return None
    match = _TEXT_ALIGN_RE.search(style)
    if not match:
        return None
    value = match.group(1).lower()
    return None if value == "left" else value
