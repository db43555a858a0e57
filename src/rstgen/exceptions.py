"""Custom exceptions for rstgen."""


class RstgenError(Exception):
    """Base exception for rstgen operations."""


class SubstitutionError(RstgenError, ValueError):
    """Malformed ``$`` template or a substitution with missing values."""


class RenderError(RstgenError):
    """Error during tree rendering."""


class UnsupportedNodeError(RenderError):
    """Node kind the renderer has no rule for, or must never receive."""


class IndexFormatError(RstgenError):
    """Index file line with an inconsistent number of columns."""


class ParseError(RstgenError):
    """Error while parsing reStructuredText into a document tree."""
