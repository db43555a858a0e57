"""Tests for index recording and index file output."""

from __future__ import annotations

from pathlib import Path

import pytest

from rstgen.generator import MetaField, OutputTarget, RstGenerator, init_rst_generator
from rstgen.index import (
    html_filename,
    quote_index_column,
    record_document_title,
    set_index_term,
    unquote_index_column,
    write_index_file,
)


class TestQuoting:
    """Tests for column quoting."""

    def test_quote_specials(self) -> None:
        assert quote_index_column("a\tb\nc\\d") == "a\\tb\\nc\\\\d"

    @pytest.mark.parametrize(
        "text",
        ["plain", "tab\there", "line\nbreak", "back\\slash", "literal \\n not newline", ""],
    )
    def test_unquote_reverses_quote(self, text: str) -> None:
        assert unquote_index_column(quote_index_column(text)) == text

    def test_unknown_escape_kept(self) -> None:
        assert unquote_index_column("a\\xb") == "a\\xb"


class TestSetIndexTerm:
    """Tests for set_index_term."""

    def test_html_filename(self) -> None:
        assert html_filename("docs/guide.rst") == "guide.html"

    def test_minimal_entry_has_two_columns(self, html_gen: RstGenerator) -> None:
        set_index_term(html_gen, "foo_1", "foo")
        assert html_gen.the_index == "foo\tdoc.html#foo_1\n"

    def test_title_and_description_are_quoted(self, html_gen: RstGenerator) -> None:
        set_index_term(html_gen, "x", "x", "A\tB", "line\nbreak")
        assert html_gen.the_index == "x\tdoc.html#x\tA\\tB\tline\\nbreak\n"

    def test_description_alone_adds_empty_title(self, html_gen: RstGenerator) -> None:
        set_index_term(html_gen, "x", "x", "", "desc")
        assert html_gen.the_index == "x\tdoc.html#x\t\tdesc\n"

    def test_title_entry_goes_first(self, html_gen: RstGenerator) -> None:
        set_index_term(html_gen, "a", "a")
        set_index_term(html_gen, "", "My Document")
        assert html_gen.the_index.splitlines() == ["My Document\tdoc.html", "a\tdoc.html#a"]

    def test_keyword_line_breaks_flattened(self, html_gen: RstGenerator) -> None:
        set_index_term(html_gen, "k", "two\nlines")
        assert html_gen.the_index == "two lines\tdoc.html#k\n"


class TestDocumentTitle:
    """Tests for record_document_title."""

    def test_records_plain_title(self, html_gen: RstGenerator) -> None:
        html_gen.meta[MetaField.TITLE] = "<em>Guide</em> &amp; more"
        set_index_term(html_gen, "a", "a")
        assert record_document_title(html_gen) is True
        assert html_gen.the_index.splitlines()[0] == "Guide & more\tdoc.html"

    def test_no_title_records_nothing(self, html_gen: RstGenerator) -> None:
        assert record_document_title(html_gen) is False
        assert html_gen.the_index == ""


class TestWriteIndexFile:
    """Tests for write_index_file."""

    def test_writes_buffer(self, tmp_path: Path, html_gen: RstGenerator) -> None:
        set_index_term(html_gen, "a", "a")
        out = tmp_path / "doc.idx"

        assert write_index_file(html_gen, out) is True
        assert out.read_text(encoding="utf-8") == "a\tdoc.html#a\n"

    def test_empty_index_writes_no_file(self, tmp_path: Path) -> None:
        gen = init_rst_generator(OutputTarget.LATEX, filename="empty.rst")
        out = tmp_path / "empty.idx"

        assert write_index_file(gen, out) is False
        assert not out.exists()
