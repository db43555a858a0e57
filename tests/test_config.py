"""Tests for template configuration and generator setup."""

from __future__ import annotations

import logging

from rstgen.config import RSTGEN_SPLIT_ITEM_TOC, TemplateConfig, default_config
from rstgen.generator import MetaField, OutputTarget, init_rst_generator
from rstgen.utils.logging_config import configure_logging
from rstgen.utils.text import cmp_ignore_style, normalize_style, strip_toc_html


class TestTemplateConfig:
    """Tests for TemplateConfig."""

    def test_keys_ignore_case_and_underscores(self) -> None:
        config = TemplateConfig()
        config["doc.body_toc"] = "x"
        assert config["Doc.BodyToc"] == "x"
        assert "DOC.BODY_TOC" in config

    def test_missing_key_reads_empty(self) -> None:
        assert TemplateConfig()["doc.nothing"] == ""

    def test_overwrite_keeps_one_slot(self) -> None:
        config = TemplateConfig({"split_after": "1"})
        config["splitAfter"] = "2"
        assert len(config) == 1
        assert list(config) == ["splitAfter"]
        assert config["SPLITAFTER"] == "2"

    def test_delete(self) -> None:
        config = TemplateConfig({"a_b": "1"})
        del config["AB"]
        assert "a_b" not in config

    def test_default_config_templates(self) -> None:
        config = default_config()
        assert config["doc.file"] == "$content"
        assert config["split.item.toc"] == str(RSTGEN_SPLIT_ITEM_TOC)
        assert "$tableofcontents" in config["doc.body_toc"]


class TestInitRstGenerator:
    """Tests for init_rst_generator."""

    def test_defaults(self) -> None:
        gen = init_rst_generator(OutputTarget.HTML)
        assert gen.split_after == RSTGEN_SPLIT_ITEM_TOC
        assert gen.meta == {slot: "" for slot in MetaField}
        assert gen.the_index == ""
        assert gen.current_section == ""

    def test_split_after_read_from_config(self) -> None:
        gen = init_rst_generator(OutputTarget.HTML, TemplateConfig({"split.item.toc": "7"}))
        assert gen.split_after == 7

    def test_python_module_sets_section(self) -> None:
        gen = init_rst_generator(OutputTarget.LATEX, filename="pkg/strutils.py")
        assert gen.current_section == "Module strutils"

    def test_set_meta_is_write_once(self) -> None:
        gen = init_rst_generator(OutputTarget.LATEX)
        assert gen.set_meta(MetaField.AUTHOR, "Ann") is True
        assert gen.set_meta(MetaField.AUTHOR, "Bob") is False
        assert gen.meta[MetaField.AUTHOR] == "Ann"


class TestTextUtils:
    """Tests for the shared text helpers."""

    def test_normalize_style(self) -> None:
        assert normalize_style("Split_After") == "splitafter"

    def test_cmp_ignore_style(self) -> None:
        assert cmp_ignore_style("foo_bar", "FooBar") == 0
        assert cmp_ignore_style("a", "B") < 0
        assert cmp_ignore_style("c", "b") > 0

    def test_strip_toc_html(self) -> None:
        assert strip_toc_html('<a href="#x">A &amp; B</a>') == "A & B"
        assert strip_toc_html("plain") == "plain"


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_single_handler_and_level(self) -> None:
        logger = configure_logging("debug")
        configure_logging("INFO")
        handlers = [h for h in logger.handlers if getattr(h, "_rstgen_handler", False)]
        assert len(handlers) == 1
        assert logger.level == logging.INFO

    def test_unknown_level_falls_back_to_warning(self) -> None:
        logger = configure_logging("chatty")
        assert logger.level == logging.WARNING
