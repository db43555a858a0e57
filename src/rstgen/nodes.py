"""Document tree node types consumed by the renderer.

Every node kind is its own frozen dataclass deriving from :class:`Node`. The
set is closed: :mod:`rstgen.renderer` keeps a rule for each class listed in
:data:`ALL_NODE_TYPES` and refuses anything else.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Node:
    """Base node: an ordered tuple of owned children."""

    children: tuple[Node, ...] = ()


# --- structure --------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Inner(Node):
    """Anonymous container; renders as the concatenation of its children."""


@dataclass(frozen=True, slots=True)
class Headline(Node):
    """Section heading."""

    level: int = 1


@dataclass(frozen=True, slots=True)
class Overline(Node):
    """Heading adorned above and below; the first two are title and subtitle."""

    level: int = 1


@dataclass(frozen=True, slots=True)
class Title(Node):
    """Explicit document title."""


@dataclass(frozen=True, slots=True)
class Contents(Node):
    """Table of contents request."""


@dataclass(frozen=True, slots=True)
class Transition(Node):
    pass


@dataclass(frozen=True, slots=True)
class Paragraph(Node):
    pass


@dataclass(frozen=True, slots=True)
class BlockQuote(Node):
    pass


@dataclass(frozen=True, slots=True)
class Container(Node):
    css_class: str = ""


@dataclass(frozen=True, slots=True)
class Directive(Node):
    """Metadata-only directive; renders as nothing."""


@dataclass(frozen=True, slots=True)
class DirArg(Node):
    pass


@dataclass(frozen=True, slots=True)
class IndexDirective(Node):
    """``.. index::`` content, rendered in place."""


# --- lists ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BulletList(Node):
    pass


@dataclass(frozen=True, slots=True)
class BulletItem(Node):
    pass


@dataclass(frozen=True, slots=True)
class EnumList(Node):
    pass


@dataclass(frozen=True, slots=True)
class EnumItem(Node):
    pass


@dataclass(frozen=True, slots=True)
class DefList(Node):
    pass


@dataclass(frozen=True, slots=True)
class DefItem(Node):
    pass


@dataclass(frozen=True, slots=True)
class DefName(Node):
    pass


@dataclass(frozen=True, slots=True)
class DefBody(Node):
    pass


@dataclass(frozen=True, slots=True)
class FieldList(Node):
    pass


@dataclass(frozen=True, slots=True)
class Field(Node):
    """Key/value pair; children are a :class:`FieldName` and a :class:`FieldBody`."""


@dataclass(frozen=True, slots=True)
class FieldName(Node):
    pass


@dataclass(frozen=True, slots=True)
class FieldBody(Node):
    pass


@dataclass(frozen=True, slots=True)
class OptionList(Node):
    pass


@dataclass(frozen=True, slots=True)
class OptionListItem(Node):
    pass


@dataclass(frozen=True, slots=True)
class OptionGroup(Node):
    pass


@dataclass(frozen=True, slots=True)
class Description(Node):
    pass


@dataclass(frozen=True, slots=True)
class Option(Node):
    pass


@dataclass(frozen=True, slots=True)
class OptionString(Node):
    pass


@dataclass(frozen=True, slots=True)
class OptionArgument(Node):
    pass


# --- literal and line blocks -------------------------------------------------


@dataclass(frozen=True, slots=True)
class LiteralBlock(Node):
    pass


@dataclass(frozen=True, slots=True)
class QuotedLiteralBlock(Node):
    pass


@dataclass(frozen=True, slots=True)
class LineBlock(Node):
    pass


@dataclass(frozen=True, slots=True)
class LineBlockItem(Node):
    pass


@dataclass(frozen=True, slots=True)
class CodeBlock(Node):
    """Source listing; an empty ``language`` means the host language."""

    language: str = ""
    text: str = ""
    # Source line of the block, 0 when unknown.
    line: int = field(default=0, compare=False)


# --- tables -----------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Table(Node):
    pass


@dataclass(frozen=True, slots=True)
class GridTable(Node):
    pass


@dataclass(frozen=True, slots=True)
class TableRow(Node):
    pass


@dataclass(frozen=True, slots=True)
class TableDataCell(Node):
    pass


@dataclass(frozen=True, slots=True)
class TableHeaderCell(Node):
    pass


# --- notes ------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Label(Node):
    pass


@dataclass(frozen=True, slots=True)
class Footnote(Node):
    pass


@dataclass(frozen=True, slots=True)
class Citation(Node):
    pass


# --- links, images and raw output --------------------------------------------


@dataclass(frozen=True, slots=True)
class Ref(Node):
    """Reference to an anchor inside the document, named by its text."""


@dataclass(frozen=True, slots=True)
class StandaloneHyperlink(Node):
    url: str = ""


@dataclass(frozen=True, slots=True)
class Hyperlink(Node):
    """Link whose children are the visible text."""

    target: str = ""


@dataclass(frozen=True, slots=True)
class Raw(Node):
    pass


@dataclass(frozen=True, slots=True)
class RawHtml(Node):
    text: str = ""


@dataclass(frozen=True, slots=True)
class RawLatex(Node):
    text: str = ""


@dataclass(frozen=True, slots=True)
class Image(Node):
    """Image reference; ``options`` may hold scale, height, width, alt and align."""

    uri: str = ""
    options: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Figure(Node):
    """Image followed by its caption children."""

    uri: str = ""
    options: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Smiley(Node):
    name: str = ""


@dataclass(frozen=True, slots=True)
class SubstitutionReference(Node):
    pass


@dataclass(frozen=True, slots=True)
class SubstitutionDef(Node):
    pass


# --- inline markup ------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class GeneralRole(Node):
    """Text marked with a custom role, rendered as a styled span."""

    role: str = ""


@dataclass(frozen=True, slots=True)
class Sub(Node):
    pass


@dataclass(frozen=True, slots=True)
class Sup(Node):
    pass


@dataclass(frozen=True, slots=True)
class Emphasis(Node):
    pass


@dataclass(frozen=True, slots=True)
class StrongEmphasis(Node):
    pass


@dataclass(frozen=True, slots=True)
class TripleEmphasis(Node):
    pass


@dataclass(frozen=True, slots=True)
class InterpretedText(Node):
    pass


@dataclass(frozen=True, slots=True)
class Idx(Node):
    """Index term: rendered in place and recorded in the document index."""


@dataclass(frozen=True, slots=True)
class InlineLiteral(Node):
    pass


@dataclass(frozen=True, slots=True)
class Leaf(Node):
    text: str = ""


ALL_NODE_TYPES: tuple[type[Node], ...] = tuple(
    cls
    for cls in list(globals().values())
    if isinstance(cls, type) and issubclass(cls, Node) and cls is not Node
)


def add_nodes(node: Node | None) -> str:
    """Concatenate the raw text of every leaf below ``node``."""
    if node is None:
        return ""
    if isinstance(node, Leaf):
        return node.text
    if isinstance(node, CodeBlock):
        return node.text
    return "".join(add_nodes(child) for child in node.children)


def rstnode_to_refname(node: Node) -> str:
    """Derive a stable anchor name from the text of ``node``.

    Letters of any script are lowercased, digits kept, every other run of
    characters turns into one ``-``. A name starting with a digit gets a ``z``
    prefix so it is a valid identifier in both HTML and LaTeX labels. The
    result is empty only when the text has no letters or digits at all.
    """
    parts: list[str] = []
    pending_dash = False
    for char in add_nodes(node):
        if char.isalnum():
            if pending_dash and parts:
                parts.append("-")
            pending_dash = False
            if not parts and char.isdigit():
                parts.append("z")
            parts.append(char.lower())
        else:
            pending_dash = True
    return "".join(parts)
