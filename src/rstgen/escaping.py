"""Per-target character escaping and soft-wrap insertion."""

from __future__ import annotations

from typing import Final

from rstgen import config
from rstgen.generator import OutputTarget

_XML_ESCAPES: Final[dict[str, str]] = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
}

_TEX_ESCAPES: Final[dict[str, str]] = {
    "_": "\\_",
    "{": "\\symbol{123}",
    "}": "\\symbol{125}",
    "[": "\\symbol{91}",
    "]": "\\symbol{93}",
    "\\": "\\symbol{92}",
    "$": "\\$",
    "&": "\\&",
    "#": "\\#",
    "%": "\\%",
    "~": "\\symbol{126}",
    "@": "\\symbol{64}",
    "^": "\\symbol{94}",
    "`": "\\symbol{96}",
}


def escape_char(target: OutputTarget, char: str) -> str:
    """Return the target-safe spelling of a single character."""
    table = _TEX_ESCAPES if target is OutputTarget.LATEX else _XML_ESCAPES
    return table.get(char, char)


def next_split_point(text: str, start: int) -> int:
    """Return the last index of the chunk starting at ``start``.

    A chunk ends on an underscore or on a lowercase letter directly followed by
    an uppercase one, which is where long identifiers such as
    ``someLongName`` or ``some_long_name`` can be broken.
    """
    pos = start
    while pos < len(text):
        char = text[pos]
        if char == "_":
            return pos
        if "a" <= char <= "z" and pos + 1 < len(text) and "A" <= text[pos + 1] <= "Z":
            return pos
        pos += 1
    return pos - 1


def escape(target: OutputTarget, text: str, split_after: int = -1) -> str:
    """Escape ``text`` for ``target``, optionally inserting soft-wrap markers.

    Args:
        target: Output format whose special characters must be escaped.
        text: Raw text.
        split_after: When negative (the default) no markers are inserted.
            Otherwise the text is cut at :func:`next_split_point` boundaries
            and ``config.RSTGEN_SPLITTER`` is placed before each chunk. A
            plain-space splitter is only placed once the running chunk length
            exceeds ``split_after``.

    Returns:
        The escaped text.
    """
    if split_after < 0:
        return "".join(escape_char(target, char) for char in text)

    splitter = config.RSTGEN_SPLITTER
    parts: list[str] = []
    part_len = 0
    start = 0
    while start < len(text):
        end = next_split_point(text, start)
        chunk_len = end - start + 1
        if splitter != " " or part_len + chunk_len > split_after:
            part_len = 0
            parts.append(splitter)
        parts.extend(escape_char(target, char) for char in text[start : end + 1])
        part_len += chunk_len
        start = end + 1
    return "".join(parts)
