"""rstgen: render reStructuredText to HTML or LaTeX and merge document indexes."""

from rstgen.config import TemplateConfig, default_config
from rstgen.convert import convert_file
from rstgen.escaping import escape
from rstgen.exceptions import (
    IndexFormatError,
    ParseError,
    RenderError,
    RstgenError,
    SubstitutionError,
    UnsupportedNodeError,
)
from rstgen.generator import MetaField, MsgKind, OutputTarget, RstGenerator, init_rst_generator
from rstgen.index import write_index_file
from rstgen.merge import merge_indexes
from rstgen.renderer import render_rst_to_out
from rstgen.rst_parser import parse_rst, rst_to_html, rst_to_latex
from rstgen.schemas import ConversionResult, IndexEntry
from rstgen.templating import format_named_vars

__all__ = [
    "ConversionResult",
    "IndexEntry",
    "IndexFormatError",
    "MetaField",
    "MsgKind",
    "OutputTarget",
    "ParseError",
    "RenderError",
    "RstGenerator",
    "RstgenError",
    "SubstitutionError",
    "TemplateConfig",
    "UnsupportedNodeError",
    "convert_file",
    "default_config",
    "escape",
    "format_named_vars",
    "init_rst_generator",
    "merge_indexes",
    "parse_rst",
    "render_rst_to_out",
    "rst_to_html",
    "rst_to_latex",
    "write_index_file",
]
