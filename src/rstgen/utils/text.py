"""Shared text utilities for rendering and index processing."""

from __future__ import annotations

try:
    from bs4 import BeautifulSoup
except ImportError as exc:  # pragma: no cover - runtime dependency check
    raise RuntimeError(
        "BeautifulSoup4 is required for HTML parsing (pip install beautifulsoup4)."
    ) from exc


def normalize_style(text: str) -> str:
    """Fold ``text`` for style-insensitive comparison.

    Case and underscores are ignored, so ``split_after``, ``splitAfter`` and
    ``SPLITAFTER`` all fold to the same key.
    """
    return text.replace("_", "").lower()


def cmp_ignore_style(a: str, b: str) -> int:
    """Three-way compare two strings ignoring case and underscores."""
    left, right = normalize_style(a), normalize_style(b)
    return (left > right) - (left < right)


def strip_toc_html(text: str) -> str:
    """Return the visible text of a rendered HTML fragment.

    Tags are dropped and entities resolved, so ``"<em>a &amp; b</em>"``
    becomes ``"a & b"``. LaTeX fragments contain no tags and pass through
    with only entity-looking sequences affected.
    """
    if "<" not in text and "&" not in text:
        return text
    return BeautifulSoup(text, "lxml").get_text()
