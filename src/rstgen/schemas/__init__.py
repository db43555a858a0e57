"""Shared schemas for rstgen."""

from rstgen.schemas.conversion import ConversionResult
from rstgen.schemas.index import IndexEntry

__all__ = ["ConversionResult", "IndexEntry"]
