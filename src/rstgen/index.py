"""Record index terms while rendering and serialize them to ``.idx`` files.

Each line of an index file is ``keyword<TAB>link`` with two optional extra
columns, ``title<TAB>description``. ``link`` is ``file.html#anchor``; a link
without an anchor marks the document title and is always the first line.
"""

from __future__ import annotations

import re
from pathlib import Path, PurePath

from rstgen.config import RSTGEN_HTML_EXT
from rstgen.generator import MetaField, RstGenerator
from rstgen.utils.logging_config import get_logger
from rstgen.utils.text import strip_toc_html

logger = get_logger(__name__)

_UNQUOTE_RE = re.compile(r"\\(.)", re.DOTALL)
_UNQUOTE_MAP = {"\\": "\\", "n": "\n", "t": "\t"}
# The keyword column is not quoted; line structure survives only without these.
_KEYWORD_BREAKS_RE = re.compile(r"[\t\r\n]+")


def quote_index_column(text: str) -> str:
    """Make ``text`` safe for one column of a tab separated line."""
    return text.replace("\\", "\\\\").replace("\n", "\\n").replace("\t", "\\t")


def unquote_index_column(text: str) -> str:
    """Reverse :func:`quote_index_column`.

    Done in one left-to-right pass so that an escaped backslash followed by
    ``n`` or ``t`` is not mistaken for an escaped newline or tab.
    """
    return _UNQUOTE_RE.sub(lambda m: _UNQUOTE_MAP.get(m.group(1), m.group(0)), text)


def html_filename(filename: str) -> str:
    """Return the output page name for the source ``filename``."""
    stem = PurePath(filename).stem if filename else ""
    return f"{stem}.{RSTGEN_HTML_EXT}"


def set_index_term(
    gen: RstGenerator,
    id: str,
    term: str,
    link_title: str = "",
    link_desc: str = "",
) -> None:
    """Add ``term`` to the document index under the anchor ``id``.

    An empty ``id`` marks the entry as the document title. Title entries go to
    the front of the buffer so that readers can classify the file from its
    first line. The title and description columns are only written when at
    least one of them is non-empty.

    Nothing reaches the disk until :func:`write_index_file` is called.
    """
    link = html_filename(gen.filename)
    if id:
        link = f"{link}#{id}"
    columns = [_KEYWORD_BREAKS_RE.sub(" ", term), link]
    if link_title or link_desc:
        columns.append(quote_index_column(link_title))
        columns.append(quote_index_column(link_desc))
    entry = "\t".join(columns) + "\n"

    if id:
        gen.the_index += entry
    else:
        gen.the_index = entry + gen.the_index


def record_document_title(gen: RstGenerator) -> bool:
    """Record the rendered title, if any, as the document's title entry."""
    title = gen.meta[MetaField.TITLE]
    if not title:
        return False
    set_index_term(gen, "", strip_toc_html(title))
    return True


def write_index_file(gen: RstGenerator, outfile: Path | str) -> bool:
    """Write the index buffer to ``outfile``.

    Returns:
        False, without touching the filesystem, when the index is empty.
    """
    if not gen.the_index:
        return False
    Path(outfile).write_text(gen.the_index, encoding="utf-8")
    logger.debug("Wrote index %s", outfile)
    return True
