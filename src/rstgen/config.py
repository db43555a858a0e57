"""Local configuration for rstgen."""

from __future__ import annotations

import os
from collections.abc import Iterator, MutableMapping

from rstgen.utils.text import normalize_style

DEFAULT_SPLIT_ITEM_TOC = 20
DEFAULT_SPLITTER = "<wbr />"
DEFAULT_INDEX_EXT = ".idx"
DEFAULT_HTML_EXT = "html"
DEFAULT_LANGUAGE = "python"
DEFAULT_LOG_LEVEL = "WARNING"

# Soft-wrap marker inserted by escape() between identifier chunks.
RSTGEN_SPLITTER = os.getenv("RSTGEN_SPLITTER", DEFAULT_SPLITTER)
RSTGEN_SPLIT_ITEM_TOC = int(os.getenv("RSTGEN_SPLIT_ITEM_TOC", str(DEFAULT_SPLIT_ITEM_TOC)))
RSTGEN_INDEX_EXT = os.getenv("RSTGEN_INDEX_EXT", DEFAULT_INDEX_EXT)
RSTGEN_HTML_EXT = os.getenv("RSTGEN_HTML_EXT", DEFAULT_HTML_EXT)
RSTGEN_DEFAULT_LANGUAGE = os.getenv("RSTGEN_DEFAULT_LANGUAGE", DEFAULT_LANGUAGE)
RSTGEN_LOG_LEVEL = os.getenv("RSTGEN_LOG_LEVEL", DEFAULT_LOG_LEVEL)


class TemplateConfig(MutableMapping[str, str]):
    """String table whose keys compare ignoring case and underscores.

    ``config["doc.body_toc"]`` and ``config["Doc.BodyToc"]`` address the same
    slot. Missing keys read as the empty string, so templates that a caller
    never configured simply render as nothing.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, tuple[str, str]] = {}
        for key, value in (initial or {}).items():
            self[key] = value

    def __getitem__(self, key: str) -> str:
        entry = self._data.get(normalize_style(key))
        return entry[1] if entry else ""

    def __setitem__(self, key: str, value: str) -> None:
        self._data[normalize_style(key)] = (key, value)

    def __delitem__(self, key: str) -> None:
        del self._data[normalize_style(key)]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and normalize_style(key) in self._data

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._data.values())

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"TemplateConfig({dict(self.items())!r})"


def default_config() -> TemplateConfig:
    """Return the template set used for embedded HTML generation.

    ``doc.file`` holds only ``$content`` so that the result can be embedded
    into a page the caller provides.
    """
    config = TemplateConfig()
    config["split.item.toc"] = str(RSTGEN_SPLIT_ITEM_TOC)
    config["doc.section"] = """
<div class="section" id="$sectionID">
<h1><a class="toc-backref" href="#$sectionTitleID">$sectionTitle</a></h1>
<dl class="item">
$content
</dl></div>
"""
    config["doc.section.toc"] = """
<li>
  <a class="reference" href="#$sectionID" id="$sectionTitleID">$sectionTitle</a>
  <ul class="simple">
    $content
  </ul>
</li>
"""
    config["doc.item"] = """
<dt id="$itemID"><a name="$itemSymOrIDEnc"></a><pre>$header</pre></dt>
<dd>
$desc
</dd>
"""
    config["doc.item.toc"] = """
  <li><a class="reference" href="#$itemSymOrIDEnc"
    title="$header_plain">$name</a></li>
"""
    config["doc.toc"] = """
<div class="navigation" id="navigation">
<ul class="simple">
$content
</ul>
</div>"""
    config["doc.body_toc"] = """
$tableofcontents
<div class="content" id="content">
$moduledesc
$content
</div>
"""
    config["doc.body_no_toc"] = "$moduledesc $content"
    config["doc.file"] = "$content"
    return config
