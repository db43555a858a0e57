"""Index entry model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class IndexEntry(BaseModel):
    """One line of an index file.

    Entries are immutable and hashable, so a synthetic title entry can key the
    table of documentation indexes. Two entries are equal only when all four
    fields match.

    Attributes:
        keyword: Term shown in the index.
        link: ``file.html#anchor``, or just ``file.html`` for a title entry.
        link_title: Prettier text for the hyperlink. Leading spaces encode
            the TOC level of headline entries.
        link_desc: Hover text for the hyperlink.
    """

    model_config = ConfigDict(frozen=True)

    keyword: str
    link: str
    link_title: str | None = None
    link_desc: str | None = None

    @property
    def is_documentation_title(self) -> bool:
        """True for entries pointing at a whole document rather than an anchor."""
        return "#" not in self.link
