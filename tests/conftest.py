"""Test setup for rstgen."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from rstgen.generator import OutputTarget, RstGenerator, init_rst_generator  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest.

    This allows skipping the tests that drive the full docutils pipeline:
        pytest -m "not docutils"
    """
    config.addinivalue_line(
        "markers",
        "docutils: marks tests that parse rst text through docutils",
    )


@pytest.fixture
def html_gen() -> RstGenerator:
    """Fresh HTML generator for a document named ``doc.rst``."""
    return init_rst_generator(OutputTarget.HTML, filename="doc.rst")


@pytest.fixture
def latex_gen() -> RstGenerator:
    """Fresh LaTeX generator for a document named ``doc.rst``."""
    return init_rst_generator(OutputTarget.LATEX, filename="doc.rst")
