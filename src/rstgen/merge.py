"""Merge per-document ``.idx`` files into one HTML index.

Index files fall into two categories. A *documentation* file starts with a
title entry (a link without ``#``) and is essentially a table of contents;
its entries keep their order and hierarchy. Every other file is an *API*
file; the symbols of all API files are pooled into one big sorted index,
since the same name often appears in many modules.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from rstgen.config import RSTGEN_INDEX_EXT
from rstgen.escaping import escape
from rstgen.exceptions import IndexFormatError
from rstgen.generator import OutputTarget
from rstgen.index import unquote_index_column
from rstgen.schemas import IndexEntry
from rstgen.templating import format_named_vars
from rstgen.utils.logging_config import get_logger
from rstgen.utils.text import cmp_ignore_style, normalize_style

logger = get_logger(__name__)

IndexedDocs = dict[IndexEntry, list[IndexEntry]]


@dataclass
class IndexDirectory:
    """Contents of a directory of index files.

    Attributes:
        modules: Sorted stems of the API index files.
        symbols: Entries of all API files, in file order.
        docs: Documentation entries keyed by a synthetic title entry.
    """

    modules: list[str] = field(default_factory=list)
    symbols: list[IndexEntry] = field(default_factory=list)
    docs: IndexedDocs = field(default_factory=dict)


def sort_key(entry: IndexEntry) -> tuple[str, str, str, str]:
    """Order by keyword, then link, ignoring case and underscores first."""
    return (
        normalize_style(entry.keyword),
        normalize_style(entry.link),
        entry.keyword,
        entry.link,
    )


def sort_index(entries: list[IndexEntry]) -> list[IndexEntry]:
    """Return ``entries`` sorted by :func:`sort_key`; equal keys keep their order."""
    return sorted(entries, key=sort_key)


def parse_index_line(line: str, path: Path | str = "<string>") -> IndexEntry | None:
    """Parse one index line, or return None if it has no tab at all.

    Raises:
        IndexFormatError: If the link column carries extra columns but not
            exactly a title and a description.
    """
    keyword, sep, link = line.partition("\t")
    if not sep:
        return None
    if "\t" not in link:
        return IndexEntry(keyword=keyword, link=link)
    columns = link.split("\t")
    if len(columns) != 3:
        raise IndexFormatError(
            f"{path}: expected 3 columns after the keyword, got {len(columns)}: {line!r}"
        )
    return IndexEntry(
        keyword=keyword,
        link=columns[0],
        link_title=unquote_index_column(columns[1]),
        link_desc=unquote_index_column(columns[2]),
    )


def read_index_file(path: Path) -> list[IndexEntry]:
    """Read every well-formed entry of one index file, in order."""
    entries: list[IndexEntry] = []
    for lineno, line in enumerate(path.read_text(encoding="utf-8").split("\n"), 1):
        entry = parse_index_line(line.rstrip("\r"), path)
        if entry is None:
            if line.strip():
                logger.debug("Skipping malformed line %s:%d", path, lineno)
            continue
        entries.append(entry)
    return entries


def read_index_dir(directory: Path | str) -> IndexDirectory:
    """Read and classify all index files found directly inside ``directory``."""
    result = IndexDirectory()
    paths = sorted(
        path
        for path in Path(directory).iterdir()
        if path.is_file() and path.name.endswith(RSTGEN_INDEX_EXT)
    )
    for path in paths:
        entries = read_index_file(path)
        logger.debug("Read %d entries from %s", len(entries), path)
        if entries and entries[0].is_documentation_title:
            title = IndexEntry(keyword=entries[0].keyword, link=entries[0].link)
            result.docs[title] = entries[1:]
            continue
        for entry in entries:
            # TOC entries carry their level as leading spaces; keep them out.
            if entry.link_title and entry.link_title.startswith(" "):
                continue
            result.symbols.append(entry)
        result.modules.append(path.name[: -len(RSTGEN_INDEX_EXT)])

    result.modules.sort()
    return result


def strip_toc_level(text: str) -> tuple[int, str]:
    """Split the leading-space TOC level off ``text``."""
    stripped = text.lstrip(" ")
    return len(text) - len(stripped), stripped


def indent_to_level(level: int, new_level: int) -> tuple[str, int]:
    """Return the list markers that move from ``level`` to ``new_level``."""
    if new_level > level:
        return "<ul>" * (new_level - level), new_level
    if new_level < level:
        return "</ul>" * (level - new_level), new_level
    return "", level


def toc_levels(entries: list[IndexEntry]) -> list[tuple[int, str]]:
    """Assign a nesting level and display text to each entry.

    Headline entries carry an explicit level; plain symbols have none and are
    placed one level below the last explicit one.
    """
    levels: list[tuple[int, str]] = []
    level = 1
    for entry in entries:
        keyword = escape(OutputTarget.HTML, entry.keyword)
        raw = entry.link_title if entry.link_title is not None else keyword
        raw_level, raw_text = strip_toc_level(raw)
        if raw_level < 1:
            levels.append((level + 1, keyword))
        else:
            level = raw_level
            levels.append((raw_level, raw_text))
    return levels


def generate_documentation_toc(entries: list[IndexEntry]) -> str:
    """Render the entries of one documentation file as nested HTML lists."""
    parts = ["<ul>\n"]
    level = 1
    for entry, (entry_level, text) in zip(entries, toc_levels(entries)):
        if entry.is_documentation_title:
            continue
        markup, level = indent_to_level(level, entry_level)
        parts.append(markup)
        parts.append(f'<li><a href="{entry.link}">{text}</a>\n')
    markup, level = indent_to_level(level, 1)
    parts.append(markup + "</ul>\n")
    return "".join(parts)


def _sorted_titles(docs: IndexedDocs) -> list[IndexEntry]:
    return sort_index(list(docs))


def generate_documentation_index(docs: IndexedDocs) -> str:
    """Render every documentation TOC, ordered by document title."""
    parts: list[str] = []
    for title in _sorted_titles(docs):
        toc = generate_documentation_toc(docs[title])
        parts.append(
            f'<ul><li><a href="{title.link}">'
            f"{escape(OutputTarget.HTML, title.keyword)}</a>\n{toc}</ul>\n"
        )
    return "".join(parts)


def generate_documentation_jumps(docs: IndexedDocs) -> str:
    """Render a one-line list of links to every document."""
    chunks = [
        f'<a href="{title.link}">{escape(OutputTarget.HTML, title.keyword)}</a>'
        for title in _sorted_titles(docs)
    ]
    return "Documents: " + ", ".join(chunks) + ".<br>"


def generate_module_jumps(modules: list[str]) -> str:
    """Render a one-line list of links to every module page."""
    chunks = [f'<a href="{name}.html">{name}</a>' for name in modules]
    return "Modules: " + ", ".join(chunks) + ".<br>"


def group_symbols(symbols: list[IndexEntry]) -> list[list[IndexEntry]]:
    """Split sorted symbols into runs whose keywords are equal ignoring style."""
    groups: list[list[IndexEntry]] = []
    for symbol in symbols:
        if groups and cmp_ignore_style(groups[-1][0].keyword, symbol.keyword) == 0:
            groups[-1].append(symbol)
        else:
            groups.append([symbol])
    return groups


def generate_symbol_index(symbols: list[IndexEntry]) -> str:
    """Render sorted symbols grouped under their keyword."""
    parts: list[str] = []
    for group in group_symbols(symbols):
        keyword = escape(OutputTarget.HTML, group[0].keyword)
        parts.append(f'<dt><span>{keyword}:</span></dt><ul class="simple"><dd>\n')
        for symbol in group:
            text = symbol.link_title
            if text is None:
                text = escape(OutputTarget.HTML, symbol.link)
            if symbol.link_desc:
                parts.append(
                    format_named_vars(
                        '<li><a class="reference external" title="$3" '
                        'href="$1">$2</a></li>\n',
                        (),
                        (symbol.link, text, escape(OutputTarget.HTML, symbol.link_desc)),
                    )
                )
            else:
                parts.append(
                    format_named_vars(
                        '<li><a class="reference external" href="$1">$2</a></li>\n',
                        (),
                        (symbol.link, text),
                    )
                )
        parts.append("</ul></dd>\n")
    return "".join(parts)


def merge_indexes(directory: Path | str) -> str:
    """Merge all index files in ``directory`` into one HTML block.

    The block holds, in order: links to the documents, links to the modules,
    the documentation TOCs, and the sorted symbol index. Sections with no
    content are left out, so an empty directory yields ``""``.
    """
    index_dir = read_index_dir(directory)
    parts: list[str] = []

    if index_dir.docs:
        parts.append(generate_documentation_jumps(index_dir.docs))
        parts.append("<p />")

    if index_dir.modules:
        parts.append(generate_module_jumps(index_dir.modules))
        parts.append("<p />")

    if index_dir.docs:
        parts.append("<h2>Documentation files</h2>\n")
        parts.append(generate_documentation_index(index_dir.docs))

    if index_dir.symbols:
        parts.append("<h2>API symbols</h2>\n")
        parts.append(generate_symbol_index(sort_index(index_dir.symbols)))

    return "".join(parts)
