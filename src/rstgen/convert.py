"""Convert rst files on disk into HTML or LaTeX pages plus index files."""

from __future__ import annotations

from pathlib import Path

from rstgen.config import RSTGEN_HTML_EXT, RSTGEN_INDEX_EXT, TemplateConfig
from rstgen.generator import MetaField, MsgHandler, OutputTarget, RstGenerator, init_rst_generator
from rstgen.index import record_document_title, write_index_file
from rstgen.renderer import render_rst_to_out, render_toc_entries
from rstgen.rst_parser import parse_rst
from rstgen.schemas import ConversionResult
from rstgen.templating import format_named_vars
from rstgen.utils.logging_config import get_logger

logger = get_logger(__name__)

_TEMPLATE_VARS = (
    "title",
    "subtitle",
    "author",
    "version",
    "tableofcontents",
    "moduledesc",
    "content",
)


def output_extension(target: OutputTarget) -> str:
    return RSTGEN_HTML_EXT if target is OutputTarget.HTML else "tex"


def assemble_document(gen: RstGenerator, body: str) -> str:
    """Place the rendered ``body`` into the ``doc.*`` page templates.

    A table of contents is built from the collected headlines only when the
    document asked for one with a ``contents`` directive.
    """
    toc = ""
    if gen.has_toc:
        toc = format_named_vars(gen.config["doc.toc"], ("content",), (render_toc_entries(gen),))
    values = [
        gen.meta[MetaField.TITLE],
        gen.meta[MetaField.SUBTITLE],
        gen.meta[MetaField.AUTHOR],
        gen.meta[MetaField.VERSION],
        toc,
        body,
        "",
    ]
    body_template = "doc.body_toc" if gen.has_toc else "doc.body_no_toc"
    # moduledesc carries the rendered document; content is reserved for
    # generated API items, which plain rst files do not have.
    content = format_named_vars(gen.config[body_template], _TEMPLATE_VARS, values)
    values[-1] = content
    return format_named_vars(gen.config["doc.file"], _TEMPLATE_VARS, values)


def convert_file(
    path: Path | str,
    *,
    target: OutputTarget = OutputTarget.HTML,
    out_dir: Path | str | None = None,
    write_index: bool = False,
    config: TemplateConfig | None = None,
    msg_handler: MsgHandler | None = None,
) -> ConversionResult:
    """Render one rst file and write the results next to it or into ``out_dir``.

    Args:
        path: Source rst file.
        target: Output flavor.
        out_dir: Destination directory. Defaults to the source's directory.
        write_index: If True, also write ``<stem>.idx``. The file is only
            created when the document produced index entries.
        config: Template configuration. Uses defaults if None.
        msg_handler: Receiver for rendering diagnostics.

    Returns:
        ConversionResult describing the written files.
    """
    source = Path(path)
    destination = Path(out_dir) if out_dir is not None else source.parent
    destination.mkdir(parents=True, exist_ok=True)

    text = source.read_text(encoding="utf-8")
    gen = init_rst_generator(target, config, source.name, msg_handler)
    body = render_rst_to_out(gen, parse_rst(text, str(source)))
    document = assemble_document(gen, body)

    output_path = destination / f"{source.stem}.{output_extension(target)}"
    output_path.write_text(document, encoding="utf-8")
    logger.info("Wrote %s", output_path)

    index_path: Path | None = None
    if write_index:
        record_document_title(gen)
        candidate = destination / f"{source.stem}{RSTGEN_INDEX_EXT}"
        if write_index_file(gen, candidate):
            index_path = candidate
        else:
            logger.info("No index entries in %s", source)

    return ConversionResult(
        source=source,
        output_path=output_path,
        index_path=index_path,
        target=target.value,
        title=gen.meta[MetaField.TITLE],
        meta={field.value: value for field, value in gen.meta.items()},
    )
