"""Tests for merging index files."""

from __future__ import annotations

from pathlib import Path

import pytest

from rstgen import nodes as rn
from rstgen.exceptions import IndexFormatError
from rstgen.generator import OutputTarget, init_rst_generator
from rstgen.index import write_index_file
from rstgen.merge import (
    generate_documentation_toc,
    generate_module_jumps,
    group_symbols,
    indent_to_level,
    merge_indexes,
    parse_index_line,
    read_index_dir,
    read_index_file,
    sort_index,
    strip_toc_level,
)
from rstgen.renderer import render_rst_to_out
from rstgen.schemas import IndexEntry


def entry(keyword: str, link: str, title: str | None = None) -> IndexEntry:
    if title is None:
        return IndexEntry(keyword=keyword, link=link)
    return IndexEntry(keyword=keyword, link=link, link_title=title, link_desc="")


class TestParseIndexLine:
    """Tests for parse_index_line."""

    def test_two_columns(self) -> None:
        result = parse_index_line("foo\tmod.html#foo")
        assert result == IndexEntry(keyword="foo", link="mod.html#foo")
        assert result.link_title is None

    def test_four_columns_are_unquoted(self) -> None:
        result = parse_index_line("foo\tmod.html#foo\tTitle\\tX\tdesc\\nmore")
        assert result is not None
        assert result.link_title == "Title\tX"
        assert result.link_desc == "desc\nmore"

    def test_line_without_tab_is_skipped(self) -> None:
        assert parse_index_line("garbage") is None

    def test_three_columns_is_malformed(self) -> None:
        with pytest.raises(IndexFormatError, match="expected 3 columns"):
            parse_index_line("foo\tmod.html#foo\tTitle", "bad.idx")

    def test_five_columns_is_malformed(self) -> None:
        with pytest.raises(IndexFormatError):
            parse_index_line("a\tb\tc\td\te")


class TestReadIndexFile:
    """Tests for read_index_file."""

    def test_skips_blank_and_malformed_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "mod.idx"
        path.write_text("foo\tmod.html#foo\r\n\nnot an entry\nbar\tmod.html#bar\n")

        entries = read_index_file(path)

        assert [e.keyword for e in entries] == ["foo", "bar"]
        assert entries[0].link == "mod.html#foo"

    def test_malformed_columns_raise(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.idx"
        path.write_text("foo\tmod.html#foo\tonly-title\n")

        with pytest.raises(IndexFormatError, match="bad.idx"):
            read_index_file(path)


class TestSorting:
    """Tests for sort_index and group_symbols."""

    def test_sort_ignores_case_and_underscores(self) -> None:
        entries = [entry("b", "x.html#b"), entry("A_c", "x.html#ac"), entry("ab", "x.html#ab")]
        assert [e.keyword for e in sort_index(entries)] == ["ab", "A_c", "b"]

    def test_sort_is_stable_for_equal_keys(self) -> None:
        first = entry("foo", "m.html#foo", "first")
        second = entry("foo", "m.html#foo", "second")
        assert sort_index([first, second]) == [first, second]

    def test_groups_ignore_style(self) -> None:
        symbols = sort_index(
            [entry("foo", "a.html#foo"), entry("bar", "a.html#bar"), entry("Foo", "b.html#foo")]
        )
        groups = group_symbols(symbols)
        assert [[e.keyword for e in group] for group in groups] == [["bar"], ["foo", "Foo"]]


class TestDocumentationToc:
    """Tests for TOC generation."""

    def test_strip_toc_level(self) -> None:
        assert strip_toc_level("   Deep") == (3, "Deep")
        assert strip_toc_level("Flat") == (0, "Flat")

    def test_indent_to_level(self) -> None:
        assert indent_to_level(1, 3) == ("<ul><ul>", 3)
        assert indent_to_level(3, 1) == ("</ul></ul>", 1)
        assert indent_to_level(2, 2) == ("", 2)

    @pytest.mark.parametrize("levels", [[1, 2, 2, 3, 2, 1], [3, 1], [2, 3, 3]])
    def test_lists_are_balanced(self, levels: list[int]) -> None:
        entries = [
            entry(f"h{i}", f"d.html#h{i}", " " * level + f"h{i}")
            for i, level in enumerate(levels)
        ]
        result = generate_documentation_toc(entries)
        assert result.count("<ul>") == result.count("</ul>")
        assert result.count("<li>") == len(levels)

    def test_symbols_nest_below_last_headline(self) -> None:
        entries = [entry("Intro", "d.html#intro", " Intro"), entry("foo", "d.html#foo_1", "Intro")]
        result = generate_documentation_toc(entries)
        assert result == (
            "<ul>\n"
            '<li><a href="d.html#intro">Intro</a>\n'
            "<ul>"
            '<li><a href="d.html#foo_1">foo</a>\n'
            "</ul>"
            "</ul>\n"
        )

    def test_module_jumps(self) -> None:
        assert generate_module_jumps(["a", "b"]) == (
            'Modules: <a href="a.html">a</a>, <a href="b.html">b</a>.<br>'
        )


class TestReadIndexDir:
    """Tests for read_index_dir."""

    def test_classifies_files(self, tmp_path: Path) -> None:
        (tmp_path / "guide.idx").write_text(
            "User Guide\tguide.html\nSetup\tguide.html#setup\t Setup\t\n"
        )
        (tmp_path / "zmod.idx").write_text(
            "Types\tzmod.html#types\t Types\t\nparse\tzmod.html#parse\tTypes\t\n"
        )
        (tmp_path / "amod.idx").write_text("load\tamod.html#load\n")
        (tmp_path / "notes.txt").write_text("ignored\tx.html\n")

        result = read_index_dir(tmp_path)

        assert result.modules == ["amod", "zmod"]
        assert [e.keyword for e in result.symbols] == ["load", "parse"]
        title = IndexEntry(keyword="User Guide", link="guide.html")
        assert list(result.docs) == [title]
        assert [e.keyword for e in result.docs[title]] == ["Setup"]

    def test_non_ascii_headline_keeps_file_an_api_file(self, tmp_path: Path) -> None:
        gen = init_rst_generator(OutputTarget.HTML, filename="api.rst")
        tree = rn.Inner(
            (rn.Idx((rn.Leaf(text="foo"),)), rn.Headline((rn.Leaf(text="日本語"),), level=1))
        )
        render_rst_to_out(gen, tree)
        write_index_file(gen, tmp_path / "api.idx")

        result = read_index_dir(tmp_path)

        assert result.modules == ["api"]
        assert result.docs == {}
        assert [e.keyword for e in result.symbols] == ["foo"]


class TestMergeIndexes:
    """End-to-end tests for merge_indexes."""

    def test_empty_directory(self, tmp_path: Path) -> None:
        assert merge_indexes(tmp_path) == ""

    def test_symbols_grouped_across_modules(self, tmp_path: Path) -> None:
        (tmp_path / "a.idx").write_text("foo\ta.html#foo\nbar\ta.html#bar\n")
        (tmp_path / "b.idx").write_text("Foo\tb.html#foo\tproc Foo\tDoes <things>\n")

        result = merge_indexes(tmp_path)

        assert result.startswith(
            'Modules: <a href="a.html">a</a>, <a href="b.html">b</a>.<br><p />'
        )
        assert "<h2>API symbols</h2>\n" in result
        assert "Documentation files" not in result
        assert result.count("<dt>") == 2
        assert result.index("<span>bar:</span>") < result.index("<span>foo:</span>")
        assert (
            '<li><a class="reference external" title="Does &lt;things&gt;" '
            'href="b.html#foo">proc Foo</a></li>\n'
        ) in result
        assert '<li><a class="reference external" href="a.html#foo">a.html#foo</a></li>\n' in result

    def test_documents_listed_before_modules(self, tmp_path: Path) -> None:
        (tmp_path / "guide.idx").write_text(
            "Guide & Tips\tguide.html\nStart\tguide.html#start\t Start\t\n"
        )
        (tmp_path / "mod.idx").write_text("run\tmod.html#run\n")

        result = merge_indexes(tmp_path)

        assert result.startswith('Documents: <a href="guide.html">Guide &amp; Tips</a>.<br><p />')
        assert result.index("Modules:") < result.index("<h2>Documentation files</h2>")
        assert result.index("<h2>Documentation files</h2>") < result.index("<h2>API symbols</h2>")
        assert '<li><a href="guide.html#start">Start</a>\n' in result
