"""Conversion output model."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field


class ConversionResult(BaseModel):
    """Files produced by converting one rst document."""

    source: Path
    output_path: Path
    index_path: Path | None = None
    target: str
    title: str = ""
    meta: dict[str, str] = Field(default_factory=dict)
