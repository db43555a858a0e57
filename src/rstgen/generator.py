"""Per-document rendering state."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath

from rstgen.config import TemplateConfig, default_config
from rstgen.nodes import Node
from rstgen.utils.logging_config import get_logger

logger = get_logger(__name__)


class OutputTarget(str, Enum):
    """Document type to generate."""

    HTML = "html"
    LATEX = "latex"


class MetaField(str, Enum):
    """Write-once metadata slots filled while rendering."""

    TITLE = "title"
    SUBTITLE = "subtitle"
    AUTHOR = "author"
    VERSION = "version"


class MsgKind(str, Enum):
    """Kinds of non-fatal diagnostics reported while rendering."""

    UNSUPPORTED_LANGUAGE = "language '%s' not supported"


MsgHandler = Callable[[str, int, int, MsgKind, str], None]


def default_msg_handler(
    filename: str, line: int, col: int, kind: MsgKind, arg: str
) -> None:
    """Log a rendering diagnostic as a warning."""
    logger.warning("%s(%d, %d) Warning: " + kind.value, filename, line, col, arg)


@dataclass
class TocEntry:
    """Headline collected for the table of contents."""

    refname: str
    node: Node
    header: str


@dataclass
class RstGenerator:
    """State for rendering one document.

    Attributes:
        target: Output format.
        config: Template configuration; ``split.item.toc`` is read here.
        filename: Source name, used for diagnostics and index links.
        split_after: Soft-wrap threshold for long TOC entries.
        toc_part: Headlines seen while a table of contents was requested.
        has_toc: Set once a ``contents`` node has been rendered.
        meta: Title, subtitle, author and version; each is written once.
        current_section: Last headline text, used as index term context.
        seen_index_terms: Occurrence count per index term refname.
        unnamed_headings: Headings so far whose text yields no anchor name.
        msg_handler: Receives non-fatal diagnostics.
    """

    target: OutputTarget = OutputTarget.HTML
    config: TemplateConfig = field(default_factory=default_config)
    filename: str = ""
    split_after: int = 20
    toc_part: list[TocEntry] = field(default_factory=list)
    has_toc: bool = False
    meta: dict[MetaField, str] = field(
        default_factory=lambda: {slot: "" for slot in MetaField}
    )
    current_section: str = ""
    seen_index_terms: dict[str, int] = field(default_factory=dict)
    unnamed_headings: int = 0
    msg_handler: MsgHandler = default_msg_handler
    the_index: str = ""

    def set_meta(self, slot: MetaField, value: str) -> bool:
        """Store ``value`` unless the slot is already populated."""
        if self.meta[slot]:
            return False
        self.meta[slot] = value
        return True


def init_rst_generator(
    target: OutputTarget,
    config: TemplateConfig | None = None,
    filename: str = "",
    msg_handler: MsgHandler | None = None,
) -> RstGenerator:
    """Create a generator ready to render one document.

    Args:
        target: HTML or LaTeX.
        config: Template configuration. Defaults to :func:`default_config`.
        filename: Used in diagnostics and to build index links. It may be
            empty when rendering an in-memory string. A ``.py`` filename makes
            ``"Module <name>"`` the initial section so index terms found before
            any headline still get a readable context.
        msg_handler: Diagnostics callback. Defaults to logging a warning.
    """
    gen = RstGenerator(
        target=target,
        config=config if config is not None else default_config(),
        filename=filename,
        msg_handler=msg_handler or default_msg_handler,
    )
    path = PurePath(filename)
    if path.suffix == ".py":
        gen.current_section = f"Module {path.stem}"
    split = gen.config["split.item.toc"]
    if split:
        gen.split_after = int(split)
    return gen
