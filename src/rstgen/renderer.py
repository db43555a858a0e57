"""Render a document tree to HTML or LaTeX.

Each node class has one rule in :data:`_RULES`. A rule receives the generator
state and the node and returns the rendered fragment; most of them recurse into
the children first and then fill an HTML or LaTeX format string through
:func:`rstgen.templating.disp_format`.
"""

from __future__ import annotations

from collections.abc import Callable

from rstgen import nodes as rn
from rstgen.config import RSTGEN_DEFAULT_LANGUAGE
from rstgen.escaping import escape
from rstgen.exceptions import UnsupportedNodeError
from rstgen.generator import MetaField, MsgKind, OutputTarget, RstGenerator, TocEntry
from rstgen.highlighting import get_source_language, iter_tokens
from rstgen.index import set_index_term
from rstgen.templating import disp, disp_format
from rstgen.utils.text import normalize_style, strip_toc_html

Rule = Callable[[RstGenerator, rn.Node], str]

_IMAGE_OPTIONS = (
    ("scale", ' scale="$1"', " scale=$1"),
    ("height", ' height="$1"', " height=$1"),
    ("width", ' width="$1"', " width=$1"),
    ("alt", ' alt="$1"', ""),
    ("align", ' align="$1"', ""),
)


def render_rst_to_out(gen: RstGenerator, node: rn.Node | None) -> str:
    """Render ``node`` with the configuration held by ``gen``.

    Raises:
        UnsupportedNodeError: If ``node`` is of a kind the renderer has no rule
            for, or one the parser never produces.
    """
    if node is None:
        return ""
    rule = _RULES.get(type(node))
    if rule is None:
        raise UnsupportedNodeError(f"no rendering rule for {type(node).__name__}")
    return rule(gen, node)


def render_aux(gen: RstGenerator, node: rn.Node) -> str:
    return "".join(render_rst_to_out(gen, child) for child in node.children)


def _wrap(html: str, latex: str) -> Rule:
    """Build a rule that renders the children into ``$1`` of a format."""

    def rule(gen: RstGenerator, node: rn.Node) -> str:
        return disp_format(gen.target, html, latex, render_aux(gen, node))

    return rule


def _unsupported(gen: RstGenerator, node: rn.Node) -> str:
    raise UnsupportedNodeError(
        f"{type(node).__name__} nodes are never produced by the parser"
    )


def _level_letter(level: int) -> str:
    return chr(level - 1 + ord("A"))


# --- headings and table of contents -------------------------------------------


def heading_refname(gen: RstGenerator, node: rn.Node) -> str:
    """Anchor name for a heading; never empty.

    An empty id marks the document title entry in the index, so a heading
    without letters or digits gets a numbered name instead. The leading
    underscore keeps it apart from every name derived from text.
    """
    refname = rn.rstnode_to_refname(node)
    if not refname:
        gen.unnamed_headings += 1
        refname = f"_section-{gen.unnamed_headings}"
    return refname


def render_headline(gen: RstGenerator, node: rn.Headline) -> str:
    tmp = render_aux(gen, node)
    gen.current_section = tmp
    refname = heading_refname(gen, node)
    args = (str(node.level), refname, tmp, _level_letter(node.level))
    if gen.has_toc:
        gen.toc_part.append(TocEntry(refname=refname, node=node, header=tmp))
        result = disp_format(
            gen.target,
            '\n<h$1><a class="toc-backref" id="$2" href="#$2_toc">$3</a></h$1>',
            "\\rsth$4{$3}\\label{$2}\n",
            *args,
        )
    else:
        result = disp_format(
            gen.target, '\n<h$1 id="$2">$3</h$1>', "\\rsth$4{$3}\\label{$2}\n", *args
        )

    # Leading spaces in the link title carry the TOC level into the index.
    set_index_term(gen, refname, strip_toc_html(tmp), " " * max(0, node.level) + tmp)
    return result


def render_overline(gen: RstGenerator, node: rn.Overline) -> str:
    for slot in (MetaField.TITLE, MetaField.SUBTITLE):
        if not gen.meta[slot]:
            gen.meta[slot] = render_aux(gen, node)
            gen.current_section = gen.meta[slot]
            return ""
    tmp = render_aux(gen, node)
    gen.current_section = tmp
    return disp_format(
        gen.target,
        '<h$1 id="$2"><center>$3</center></h$1>',
        "\\rstov$4{$3}\\label{$2}\n",
        str(node.level),
        heading_refname(gen, node),
        tmp,
        _level_letter(node.level),
    )


def render_title(gen: RstGenerator, node: rn.Title) -> str:
    if not gen.meta[MetaField.TITLE]:
        gen.meta[MetaField.TITLE] = render_aux(gen, node)
    return ""


def render_contents(gen: RstGenerator, node: rn.Contents) -> str:
    gen.has_toc = True
    return ""


def _render_toc_entry(gen: RstGenerator, entry: TocEntry) -> str:
    return disp_format(
        gen.target,
        '<li><a class="reference" id="$1_toc" href="#$1">$2</a></li>\n',
        "\\item\\label{$1_toc} $2\\ref{$1}\n",
        entry.refname,
        entry.header,
    )


def _render_toc_level(gen: RstGenerator, pos: int, lvl: int) -> tuple[str, int]:
    parts: list[str] = []
    while pos < len(gen.toc_part):
        level = abs(gen.toc_part[pos].node.level)
        if level == lvl:
            parts.append(_render_toc_entry(gen, gen.toc_part[pos]))
            pos += 1
        elif level > lvl:
            nested, pos = _render_toc_level(gen, pos, level)
            parts.append(nested)
        else:
            break
    tmp = "".join(parts)
    if lvl > 1:
        tmp = disp_format(
            gen.target,
            '<ul class="simple">$1</ul>',
            "\\begin{enumerate}$1\\end{enumerate}",
            tmp,
        )
    return tmp, pos


def render_toc_entries(gen: RstGenerator) -> str:
    """Render the collected headlines as a nested list, in document order."""
    parts: list[str] = []
    pos = 0
    while pos < len(gen.toc_part):
        chunk, pos = _render_toc_level(gen, pos, 1)
        if chunk:
            parts.append(chunk)
        elif pos < len(gen.toc_part):
            # Level 0 or below: no nesting applies.
            parts.append(_render_toc_entry(gen, gen.toc_part[pos]))
            pos += 1
    return "".join(parts)


# --- index terms ----------------------------------------------------------------


def render_index_term(gen: RstGenerator, node: rn.Idx) -> str:
    """Render an ``:idx:`` term and add it to the document index.

    Repeated terms get distinct anchors: the refname is suffixed with the
    number of times it has been seen so far in this document.
    """
    refname = rn.rstnode_to_refname(node)
    count = gen.seen_index_terms.get(refname, 0) + 1
    gen.seen_index_terms[refname] = count
    id = f"{refname}_{count}"

    term = render_aux(gen, node)
    set_index_term(gen, id, strip_toc_html(term), gen.current_section)
    return disp_format(gen.target, '<span id="$1">$2</span>', "$2\\label{$1}", id, term)


# --- fields ---------------------------------------------------------------------


def render_field(gen: RstGenerator, node: rn.Field) -> str:
    if gen.target is OutputTarget.LATEX and len(node.children) >= 2:
        fieldname = normalize_style(rn.add_nodes(node.children[0]))
        fieldval = escape(gen.target, rn.add_nodes(node.children[1]).strip())
        consumed = False
        if fieldname in ("author", "authors"):
            consumed = gen.set_meta(MetaField.AUTHOR, fieldval)
        elif fieldname == "version":
            consumed = gen.set_meta(MetaField.VERSION, fieldval)
        if consumed:
            return ""
    return disp_format(gen.target, "<tr>$1</tr>\n", "$1", render_aux(gen, node))


def render_field_list(gen: RstGenerator, node: rn.FieldList) -> str:
    tmp = render_aux(gen, node)
    if not tmp:
        return ""
    return disp_format(
        gen.target,
        '<table class="docinfo" frame="void" rules="none">'
        '<col class="docinfo-name" />'
        '<col class="docinfo-content" />'
        '<tbody valign="top">$1'
        "</tbody></table>",
        "\\begin{description}$1\\end{description}\n",
        tmp,
    )


# --- tables ---------------------------------------------------------------------


def tex_columns(node: rn.Node) -> str:
    """Column spec for the LaTeX table environment: one ``|X`` per column."""
    columns = max((len(row.children) for row in node.children), default=0)
    return "|X" * columns


def render_table(gen: RstGenerator, node: rn.Node) -> str:
    return disp_format(
        gen.target,
        '<table border="1" class="docutils">$1</table>',
        "\\begin{table}\\begin{rsttab}{"
        + tex_columns(node)
        + "|}\n\\hline\n$1\\end{rsttab}\\end{table}",
        render_aux(gen, node),
    )


def render_table_row(gen: RstGenerator, node: rn.TableRow) -> str:
    if not node.children:
        return ""
    if gen.target is OutputTarget.LATEX:
        cells = (render_rst_to_out(gen, child) for child in node.children)
        return " & ".join(cells) + "\\\\\n\\hline\n"
    return "<tr>" + render_aux(gen, node) + "</tr>\n"


# --- links and raw output -------------------------------------------------------


def render_ref(gen: RstGenerator, node: rn.Ref) -> str:
    return disp_format(
        gen.target,
        '<a class="reference external" href="#$2">$1</a>',
        "$1\\ref{$2}",
        render_aux(gen, node),
        rn.rstnode_to_refname(node),
    )


def render_standalone_hyperlink(gen: RstGenerator, node: rn.StandaloneHyperlink) -> str:
    url = escape(gen.target, node.url) if node.url else render_aux(gen, node)
    return disp_format(
        gen.target,
        '<a class="reference external" href="$1">$1</a>',
        "\\href{$1}{$1}",
        url,
    )


def render_hyperlink(gen: RstGenerator, node: rn.Hyperlink) -> str:
    return disp_format(
        gen.target,
        '<a class="reference external" href="$2">$1</a>',
        "\\href{$2}{$1}",
        render_aux(gen, node),
        escape(gen.target, node.target),
    )


def render_raw_html(gen: RstGenerator, node: rn.RawHtml) -> str:
    return node.text if gen.target is OutputTarget.HTML else ""


def render_raw_latex(gen: RstGenerator, node: rn.RawLatex) -> str:
    return node.text if gen.target is OutputTarget.LATEX else ""


# --- images, code and containers ------------------------------------------------


def _attribute(gen: RstGenerator, value: str) -> str:
    # LaTeX reads paths and lengths verbatim.
    return escape(gen.target, value) if gen.target is OutputTarget.HTML else value


def render_image(gen: RstGenerator, node: rn.Image | rn.Figure) -> str:
    options = ""
    for name, html, latex in _IMAGE_OPTIONS:
        value = node.options.get(name, "").strip()
        if value:
            options += disp_format(gen.target, html, latex, _attribute(gen, value))
    if options:
        options = disp_format(gen.target, "$1", "[$1]", options)

    result = disp_format(
        gen.target,
        '<img src="$1"$2 />',
        "\\includegraphics$2{$1}",
        _attribute(gen, node.uri),
        options,
    )
    return result + render_aux(gen, node)


def render_smiley(gen: RstGenerator, node: rn.Smiley) -> str:
    return disp_format(
        gen.target,
        '<img src="/images/smilies/$1.gif" width="15" '
        'height="17" hspace="2" vspace="2" />',
        "\\includegraphics{$1}",
        node.name,
    )


def render_code_block(gen: RstGenerator, node: rn.CodeBlock) -> str:
    """Render a listing, highlighting each token through the tokenizer.

    An unknown explicit language is reported through the diagnostics handler
    and the text is emitted unchanged.
    """
    langstr = node.language.strip()
    lexer = get_source_language(langstr or RSTGEN_DEFAULT_LANGUAGE)

    parts = [disp(gen.target, "<pre>", "\\begin{rstpre}\n")]
    if lexer is None:
        gen.msg_handler(
            gen.filename, node.line or 1, 0, MsgKind.UNSUPPORTED_LANGUAGE, langstr
        )
        parts.append(node.text)
    else:
        for text, token_class in iter_tokens(node.text, lexer):
            if token_class is None:
                # Whitespace and unclassified runs are escaped too so a listing
                # cannot inject markup into the page.
                parts.append(escape(gen.target, text))
            else:
                parts.append(
                    disp_format(
                        gen.target,
                        '<span class="$2">$1</span>',
                        "\\span$2{$1}",
                        escape(gen.target, text),
                        token_class,
                    )
                )
    parts.append(disp(gen.target, "</pre>", "\n\\end{rstpre}\n"))
    return "".join(parts)


def render_container(gen: RstGenerator, node: rn.Container) -> str:
    tmp = render_aux(gen, node)
    arg = node.css_class.strip()
    if not arg:
        return disp_format(gen.target, "<div>$1</div>", "$1", tmp)
    return disp_format(gen.target, '<div class="$1">$2</div>', "$2", arg, tmp)


def render_general_role(gen: RstGenerator, node: rn.GeneralRole) -> str:
    return disp_format(
        gen.target,
        '<span class="$2">$1</span>',
        "\\span$2{$1}",
        render_aux(gen, node),
        node.role,
    )


def render_leaf(gen: RstGenerator, node: rn.Leaf) -> str:
    return escape(gen.target, node.text)


_RULES: dict[type[rn.Node], Rule] = {
    rn.Inner: render_aux,
    rn.Headline: render_headline,
    rn.Overline: render_overline,
    rn.Title: render_title,
    rn.Contents: render_contents,
    rn.Transition: _wrap("<hr />\n", "\\hrule\n"),
    rn.Paragraph: _wrap("<p>$1</p>\n", "$1\n\n"),
    rn.BlockQuote: _wrap(
        "<blockquote><p>$1</p></blockquote>\n", "\\begin{quote}$1\\end{quote}\n"
    ),
    rn.Container: render_container,
    rn.Directive: lambda gen, node: "",
    rn.DirArg: render_aux,
    rn.Raw: render_aux,
    rn.IndexDirective: render_aux,
    rn.BulletList: _wrap(
        '<ul class="simple">$1</ul>\n', "\\begin{itemize}$1\\end{itemize}\n"
    ),
    rn.BulletItem: _wrap("<li>$1</li>\n", "\\item $1\n"),
    rn.EnumList: _wrap(
        '<ol class="simple">$1</ol>\n', "\\begin{enumerate}$1\\end{enumerate}\n"
    ),
    rn.EnumItem: _wrap("<li>$1</li>\n", "\\item $1\n"),
    rn.DefList: _wrap(
        '<dl class="docutils">$1</dl>\n', "\\begin{description}$1\\end{description}\n"
    ),
    rn.DefItem: render_aux,
    rn.DefName: _wrap("<dt>$1</dt>\n", "\\item[$1] "),
    rn.DefBody: _wrap("<dd>$1</dd>\n", "$1\n"),
    rn.FieldList: render_field_list,
    rn.Field: render_field,
    rn.FieldName: _wrap('<th class="docinfo-name">$1:</th>', "\\item[$1:]"),
    rn.FieldBody: _wrap("<td>$1</td>", " $1\n"),
    rn.OptionList: _wrap(
        '<table frame="void">$1</table>', "\\begin{description}\n$1\\end{description}\n"
    ),
    rn.OptionListItem: _wrap("<tr>$1</tr>\n", "$1"),
    rn.OptionGroup: _wrap('<th align="left">$1</th>', "\\item[$1]"),
    rn.Description: _wrap('<td align="left">$1</td>\n', " $1\n"),
    rn.Option: _unsupported,
    rn.OptionString: _unsupported,
    rn.OptionArgument: _unsupported,
    rn.LiteralBlock: _wrap("<pre>$1</pre>\n", "\\begin{rstpre}\n$1\n\\end{rstpre}\n"),
    rn.QuotedLiteralBlock: _unsupported,
    rn.LineBlock: _wrap("<p>$1</p>", "$1\n\n"),
    rn.LineBlockItem: _wrap("$1<br />", "$1\\\\\n"),
    rn.CodeBlock: render_code_block,
    rn.Table: render_table,
    rn.GridTable: render_table,
    rn.TableRow: render_table_row,
    rn.TableDataCell: _wrap("<td>$1</td>", "$1"),
    rn.TableHeaderCell: _wrap("<th>$1</th>", "\\textbf{$1}"),
    rn.Label: _unsupported,
    rn.Footnote: _unsupported,
    rn.Citation: _unsupported,
    rn.Ref: render_ref,
    rn.StandaloneHyperlink: render_standalone_hyperlink,
    rn.Hyperlink: render_hyperlink,
    rn.RawHtml: render_raw_html,
    rn.RawLatex: render_raw_latex,
    rn.Image: render_image,
    rn.Figure: render_image,
    rn.Smiley: render_smiley,
    rn.SubstitutionReference: _wrap("|$1|", "|$1|"),
    rn.SubstitutionDef: _wrap("|$1|", "|$1|"),
    rn.GeneralRole: render_general_role,
    rn.Sub: _wrap("<sub>$1</sub>", "\\rstsub{$1}"),
    rn.Sup: _wrap("<sup>$1</sup>", "\\rstsup{$1}"),
    rn.Emphasis: _wrap("<em>$1</em>", "\\emph{$1}"),
    rn.StrongEmphasis: _wrap("<strong>$1</strong>", "\\textbf{$1}"),
    rn.TripleEmphasis: _wrap("<strong><em>$1</em></strong>", "\\textbf{\\emph{$1}}"),
    rn.InterpretedText: _wrap("<cite>$1</cite>", "\\emph{$1}"),
    rn.Idx: render_index_term,
    rn.InlineLiteral: _wrap(
        '<tt class="docutils literal"><span class="pre">$1</span></tt>', "\\texttt{$1}"
    ),
    rn.Leaf: render_leaf,
}
