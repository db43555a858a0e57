"""Parse reStructuredText with docutils and convert it to :mod:`rstgen.nodes`."""

from __future__ import annotations

from docutils import nodes, utils
from docutils.core import publish_doctree
from docutils.parsers.rst import roles

from rstgen import nodes as rn
from rstgen.config import TemplateConfig
from rstgen.exceptions import ParseError
from rstgen.generator import MsgHandler, OutputTarget, init_rst_generator
from rstgen.renderer import render_rst_to_out
from rstgen.utils.logging_config import get_logger

logger = get_logger(__name__)

_IMAGE_OPTIONS = ("scale", "height", "width", "alt", "align")

_SETTINGS = {
    "report_level": 5,
    "halt_level": 5,
    "docinfo_xform": False,
    "syntax_highlight": "none",
    "file_insertion_enabled": False,
    "raw_enabled": True,
    "_disable_config": True,
}

# Dropped from the converted tree: link targets, comments, notes and parser
# messages have no rendering rule.
_DROPPED = frozenset(
    {
        "comment",
        "target",
        "substitution_definition",
        "footnote",
        "citation",
        "footnote_reference",
        "citation_reference",
        "label",
        "system_message",
        "pending",
        "decoration",
        "classifier",
    }
)


def idx_role(name, rawtext, text, lineno, inliner, options=None, content=None):
    """``:idx:`` role: marks its text as an index term."""
    node = nodes.inline(rawtext, utils.unescape(text), classes=["idx"])
    return [node], []


roles.register_local_role("idx", idx_role)


def _compact(children: list[rn.Node]) -> tuple[rn.Node, ...]:
    """Unwrap a lone paragraph so list items and cells hold inline content."""
    if len(children) == 1 and isinstance(children[0], rn.Paragraph):
        return children[0].children
    return tuple(children)


class DoctreeConverter:
    """Convert a docutils doctree into rstgen nodes.

    Each docutils node is handled by ``convert_<tagname>``; elements without a
    dedicated method are flattened into an :class:`rstgen.nodes.Inner`.
    """

    def __init__(self) -> None:
        self.section_depth = 0

    def convert(self, node: nodes.Node) -> list[rn.Node]:
        if isinstance(node, nodes.Text):
            return [rn.Leaf(text=node.astext())]
        if node.tagname in _DROPPED:
            return []
        handler = getattr(self, f"convert_{node.tagname}", self.convert_default)
        return handler(node)

    def children(self, node: nodes.Node) -> list[rn.Node]:
        result: list[rn.Node] = []
        for child in node.children:
            result.extend(self.convert(child))
        return result

    def _wrap(self, cls: type[rn.Node], node: nodes.Node) -> list[rn.Node]:
        return [cls(tuple(self.children(node)))]

    def convert_default(self, node: nodes.Node) -> list[rn.Node]:
        logger.debug("No dedicated conversion for docutils node %s", node.tagname)
        return [rn.Inner(tuple(self.children(node)))]

    # structure

    def convert_document(self, node: nodes.document) -> list[rn.Node]:
        children = self.children(node)
        if len(children) == 1 and isinstance(children[0], rn.Paragraph):
            return [rn.Inner(children[0].children)]
        return [rn.Inner(tuple(children))]

    def convert_section(self, node: nodes.section) -> list[rn.Node]:
        self.section_depth += 1
        try:
            result: list[rn.Node] = []
            for child in node.children:
                if isinstance(child, nodes.title):
                    result.append(
                        rn.Headline(tuple(self.children(child)), level=self.section_depth)
                    )
                else:
                    result.extend(self.convert(child))
            return result
        finally:
            self.section_depth -= 1

    def convert_title(self, node: nodes.title) -> list[rn.Node]:
        if isinstance(node.parent, nodes.document):
            return [rn.Overline(tuple(self.children(node)), level=1)]
        return [rn.Paragraph((rn.StrongEmphasis(tuple(self.children(node))),))]

    def convert_subtitle(self, node: nodes.subtitle) -> list[rn.Node]:
        if isinstance(node.parent, nodes.document):
            return [rn.Overline(tuple(self.children(node)), level=2)]
        return self._wrap(rn.Paragraph, node)

    def convert_topic(self, node: nodes.topic) -> list[rn.Node]:
        if "contents" in node["classes"]:
            return [rn.Contents()]
        return self.convert_default(node)

    def convert_paragraph(self, node: nodes.paragraph) -> list[rn.Node]:
        return self._wrap(rn.Paragraph, node)

    def convert_transition(self, node: nodes.transition) -> list[rn.Node]:
        return [rn.Transition()]

    def convert_block_quote(self, node: nodes.block_quote) -> list[rn.Node]:
        return [rn.BlockQuote(_compact(self.children(node)))]

    def convert_container(self, node: nodes.container) -> list[rn.Node]:
        css_class = " ".join(node["classes"])
        return [rn.Container(tuple(self.children(node)), css_class=css_class)]

    # lists

    def convert_bullet_list(self, node: nodes.bullet_list) -> list[rn.Node]:
        return self._wrap(rn.BulletList, node)

    def convert_enumerated_list(self, node: nodes.enumerated_list) -> list[rn.Node]:
        return self._wrap(rn.EnumList, node)

    def convert_list_item(self, node: nodes.list_item) -> list[rn.Node]:
        cls = rn.EnumItem if isinstance(node.parent, nodes.enumerated_list) else rn.BulletItem
        return [cls(_compact(self.children(node)))]

    def convert_definition_list(self, node: nodes.definition_list) -> list[rn.Node]:
        return self._wrap(rn.DefList, node)

    def convert_definition_list_item(self, node: nodes.definition_list_item) -> list[rn.Node]:
        return self._wrap(rn.DefItem, node)

    def convert_term(self, node: nodes.term) -> list[rn.Node]:
        return self._wrap(rn.DefName, node)

    def convert_definition(self, node: nodes.definition) -> list[rn.Node]:
        return [rn.DefBody(_compact(self.children(node)))]

    def convert_field_list(self, node: nodes.field_list) -> list[rn.Node]:
        return self._wrap(rn.FieldList, node)

    def convert_field(self, node: nodes.field) -> list[rn.Node]:
        return self._wrap(rn.Field, node)

    def convert_field_name(self, node: nodes.field_name) -> list[rn.Node]:
        return self._wrap(rn.FieldName, node)

    def convert_field_body(self, node: nodes.field_body) -> list[rn.Node]:
        return [rn.FieldBody(_compact(self.children(node)))]

    def convert_option_list(self, node: nodes.option_list) -> list[rn.Node]:
        return self._wrap(rn.OptionList, node)

    def convert_option_list_item(self, node: nodes.option_list_item) -> list[rn.Node]:
        return self._wrap(rn.OptionListItem, node)

    def convert_option_group(self, node: nodes.option_group) -> list[rn.Node]:
        # Options are flattened to their source text.
        return [rn.OptionGroup((rn.Leaf(text=node.astext()),))]

    def convert_description(self, node: nodes.description) -> list[rn.Node]:
        return [rn.Description(_compact(self.children(node)))]

    # literal and line blocks

    def convert_literal_block(self, node: nodes.literal_block) -> list[rn.Node]:
        classes = list(node["classes"])
        if "code" in classes:
            languages = [cls for cls in classes if cls != "code"]
            return [
                rn.CodeBlock(
                    language=languages[0] if languages else "",
                    text=node.astext(),
                    line=node.line or 0,
                )
            ]
        return [rn.LiteralBlock((rn.Leaf(text=node.astext()),))]

    def convert_doctest_block(self, node: nodes.doctest_block) -> list[rn.Node]:
        return [rn.LiteralBlock((rn.Leaf(text=node.astext()),))]

    def convert_math_block(self, node: nodes.math_block) -> list[rn.Node]:
        return [rn.LiteralBlock((rn.Leaf(text=node.astext()),))]

    def convert_line_block(self, node: nodes.line_block) -> list[rn.Node]:
        return self._wrap(rn.LineBlock, node)

    def convert_line(self, node: nodes.line) -> list[rn.Node]:
        return self._wrap(rn.LineBlockItem, node)

    # tables

    def convert_table(self, node: nodes.table) -> list[rn.Node]:
        rows: list[rn.Node] = []
        for tgroup in node.findall(nodes.tgroup):
            for part in tgroup.children:
                if not isinstance(part, (nodes.thead, nodes.tbody)):
                    continue
                cell_cls = rn.TableHeaderCell if isinstance(part, nodes.thead) else rn.TableDataCell
                for row in part.children:
                    cells = tuple(
                        cell_cls(_compact(self.children(entry))) for entry in row.children
                    )
                    rows.append(rn.TableRow(cells))
        return [rn.Table(tuple(rows))]

    # images

    def _image_options(self, node: nodes.image) -> dict[str, str]:
        return {name: str(node[name]) for name in _IMAGE_OPTIONS if name in node.attributes}

    def convert_image(self, node: nodes.image) -> list[rn.Node]:
        return [rn.Image(uri=node["uri"], options=self._image_options(node))]

    def convert_figure(self, node: nodes.figure) -> list[rn.Node]:
        image = next(iter(node.findall(nodes.image)), None)
        caption: list[rn.Node] = []
        for child in node.children:
            if isinstance(child, nodes.caption):
                caption.append(rn.Paragraph(tuple(self.children(child))))
            elif isinstance(child, nodes.legend):
                caption.extend(self.children(child))
        if image is None:
            return caption
        return [
            rn.Figure(tuple(caption), uri=image["uri"], options=self._image_options(image))
        ]

    def convert_raw(self, node: nodes.raw) -> list[rn.Node]:
        formats = node.get("format", "").split()
        if "html" in formats:
            return [rn.RawHtml(text=node.astext())]
        if "latex" in formats:
            return [rn.RawLatex(text=node.astext())]
        return []

    # inline markup

    def convert_emphasis(self, node: nodes.emphasis) -> list[rn.Node]:
        return self._wrap(rn.Emphasis, node)

    def convert_strong(self, node: nodes.strong) -> list[rn.Node]:
        return self._wrap(rn.StrongEmphasis, node)

    def convert_literal(self, node: nodes.literal) -> list[rn.Node]:
        return self._wrap(rn.InlineLiteral, node)

    def convert_math(self, node: nodes.math) -> list[rn.Node]:
        return self._wrap(rn.InlineLiteral, node)

    def convert_title_reference(self, node: nodes.title_reference) -> list[rn.Node]:
        return self._wrap(rn.InterpretedText, node)

    def convert_subscript(self, node: nodes.subscript) -> list[rn.Node]:
        return self._wrap(rn.Sub, node)

    def convert_superscript(self, node: nodes.superscript) -> list[rn.Node]:
        return self._wrap(rn.Sup, node)

    def convert_substitution_reference(
        self, node: nodes.substitution_reference
    ) -> list[rn.Node]:
        return self._wrap(rn.SubstitutionReference, node)

    def convert_inline(self, node: nodes.inline) -> list[rn.Node]:
        classes = list(node["classes"])
        if "idx" in classes:
            return self._wrap(rn.Idx, node)
        if classes:
            return [rn.GeneralRole(tuple(self.children(node)), role=classes[0])]
        return self._wrap(rn.Inner, node)

    def convert_reference(self, node: nodes.reference) -> list[rn.Node]:
        refuri = node.get("refuri")
        if refuri:
            if node.astext() == refuri:
                return [rn.StandaloneHyperlink(tuple(self.children(node)), url=refuri)]
            return [rn.Hyperlink(tuple(self.children(node)), target=refuri)]
        if node.get("refid") or node.get("refname"):
            return self._wrap(rn.Ref, node)
        return self._wrap(rn.Inner, node)

    def convert_problematic(self, node: nodes.problematic) -> list[rn.Node]:
        return [rn.Leaf(text=node.astext())]


def parse_rst(text: str, filename: str = "input") -> rn.Node:
    """Parse ``text`` into an rstgen document tree.

    Raises:
        ParseError: If docutils aborts on the input.
    """
    try:
        doctree = publish_doctree(
            text, source_path=filename, settings_overrides=dict(_SETTINGS)
        )
    except utils.SystemMessage as exc:
        raise ParseError(f"Failed to parse {filename}: {exc}") from exc
    return DoctreeConverter().convert(doctree)[0]


def rst_to_html(
    text: str,
    config: TemplateConfig | None = None,
    msg_handler: MsgHandler | None = None,
) -> str:
    """Convert rst ``text`` into embeddable HTML.

    Meant for snippets: the result carries no ``<html>`` or ``<body>``, and a
    document made of a single paragraph renders without the ``<p>`` wrapper.

    >>> rst_to_html("*Hello* **world**!")
    '<em>Hello</em> <strong>world</strong>!'
    """
    gen = init_rst_generator(OutputTarget.HTML, config, "input", msg_handler)
    return render_rst_to_out(gen, parse_rst(text, "input"))


def rst_to_latex(
    text: str,
    config: TemplateConfig | None = None,
    msg_handler: MsgHandler | None = None,
) -> str:
    """Convert rst ``text`` into a LaTeX fragment."""
    gen = init_rst_generator(OutputTarget.LATEX, config, "input", msg_handler)
    return render_rst_to_out(gen, parse_rst(text, "input"))
