"""Tests for file conversion and the command line."""

from __future__ import annotations

from pathlib import Path

import pytest

from rstgen.__main__ import main
from rstgen.config import TemplateConfig, default_config
from rstgen.convert import convert_file
from rstgen.generator import OutputTarget
from rstgen.merge import merge_indexes

pytestmark = pytest.mark.docutils

GUIDE = """\
==========
User Guide
==========

.. contents::

Setup
=====

Install :idx:`rstgen` first.

Usage
=====

Run it.
"""


@pytest.fixture
def guide(tmp_path: Path) -> Path:
    path = tmp_path / "src" / "guide.rst"
    path.parent.mkdir()
    path.write_text(GUIDE, encoding="utf-8")
    return path


class TestConvertFile:
    """Tests for convert_file."""

    def test_writes_html_next_to_source(self, guide: Path) -> None:
        result = convert_file(guide)

        assert result.output_path == guide.with_suffix(".html")
        assert result.index_path is None
        assert result.title == "User Guide"
        assert result.target == "html"
        html = result.output_path.read_text(encoding="utf-8")
        assert '<div class="navigation" id="navigation">' in html
        assert '<span id="rstgen_1">rstgen</span>' in html
        assert not guide.with_suffix(".idx").exists()

    def test_writes_index_into_out_dir(self, guide: Path, tmp_path: Path) -> None:
        out_dir = tmp_path / "out"

        result = convert_file(guide, out_dir=out_dir, write_index=True)

        assert result.output_path == out_dir / "guide.html"
        assert result.index_path == out_dir / "guide.idx"
        lines = result.index_path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == "User Guide\tguide.html"
        assert "Setup\tguide.html#setup\t Setup\t" in lines
        assert "rstgen\tguide.html#rstgen_1\tSetup\t" in lines

    def test_latex_output(self, guide: Path, tmp_path: Path) -> None:
        result = convert_file(guide, target=OutputTarget.LATEX, out_dir=tmp_path / "tex")

        assert result.output_path.suffix == ".tex"
        tex = result.output_path.read_text(encoding="utf-8")
        assert "\\rsthA{Setup}\\label{setup}" in tex
        assert result.meta["title"] == "User Guide"

    def test_custom_file_template(self, guide: Path) -> None:
        config = default_config()
        config["doc.file"] = "<h1>$title</h1>\n$content"

        result = convert_file(guide, config=config)

        assert result.output_path.read_text(encoding="utf-8").startswith("<h1>User Guide</h1>\n")

    def test_empty_templates_still_render(self, tmp_path: Path) -> None:
        source = tmp_path / "note.rst"
        source.write_text("Just text.\n", encoding="utf-8")

        result = convert_file(source, config=TemplateConfig())

        assert result.output_path.read_text(encoding="utf-8") == ""

    def test_converted_indexes_merge(self, guide: Path, tmp_path: Path) -> None:
        out_dir = tmp_path / "out"
        convert_file(guide, out_dir=out_dir, write_index=True)

        merged = merge_indexes(out_dir)

        assert merged.startswith('Documents: <a href="guide.html">User Guide</a>.<br><p />')
        assert '<li><a href="guide.html#setup">Setup</a>\n' in merged
        assert '<li><a href="guide.html#rstgen_1">rstgen</a>\n' in merged


class TestCli:
    """Tests for the rstgen command."""

    def test_render_and_merge(
        self, guide: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        out_dir = tmp_path / "site"

        assert main(["render", str(guide), "--index", "--out-dir", str(out_dir)]) == 0
        printed = capsys.readouterr().out.splitlines()
        assert printed == [str(out_dir / "guide.html"), str(out_dir / "guide.idx")]

        merged_path = tmp_path / "index.html"
        assert main(["merge", str(out_dir), "--output", str(merged_path)]) == 0
        assert "Documentation files" in merged_path.read_text(encoding="utf-8")

    def test_render_latex(self, guide: Path, tmp_path: Path) -> None:
        assert main(["render", str(guide), "--latex", "--out-dir", str(tmp_path)]) == 0
        assert (tmp_path / "guide.tex").exists()

    def test_merge_to_stdout(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (tmp_path / "mod.idx").write_text("run\tmod.html#run\n", encoding="utf-8")

        assert main(["merge", str(tmp_path)]) == 0
        assert capsys.readouterr().out.startswith("Modules: ")

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert main(["merge", str(tmp_path / "nope")]) == 2

    def test_missing_file(self, tmp_path: Path) -> None:
        assert main(["render", str(tmp_path / "nope.rst")]) == 1
