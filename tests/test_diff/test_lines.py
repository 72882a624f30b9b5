"""Tests for single-line classification."""

from __future__ import annotations

import pytest

from syncdoc.diff.lines import (
    DocMarkers,
    LineKind,
    classify_line,
    is_doc_comment,
    is_doc_literal_attribute,
    is_item_doc_line,
    is_module_doc_line,
    is_module_doc_macro,
    is_non_doc_attribute,
    is_reference_marker,
    is_regular_comment,
    squash,
)


class TestDocComments:
    """Doc comments versus ordinary comments."""

    @pytest.mark.parametrize("line", ["/// Doc", "    /// Indented", "//! Module", "///"])
    def test_doc_comments(self, line: str) -> None:
        assert is_doc_comment(line)
        assert not is_regular_comment(line)

    @pytest.mark.parametrize("line", ["// plain", "    // TODO: later", "//// banner"])
    def test_regular_comments(self, line: str) -> None:
        assert is_regular_comment(line)
        assert not is_doc_comment(line)

    def test_code_is_neither(self) -> None:
        assert not is_doc_comment("let x = 1; // trailing")
        assert not is_regular_comment("let x = 1; // trailing")


class TestAttributes:
    """Attribute forms, including token-stream spacing."""

    def test_squash(self) -> None:
        assert squash("# [derive (Debug)]") == "#[derive(Debug)]"

    @pytest.mark.parametrize(
        "line",
        [
            "#[derive(Debug)]",
            "# [derive (Debug)]",
            "#[cfg(test)]",
            "#![allow(dead_code)]",
            "# ! [cfg (test)]",
            "#[doc(hidden)]",
        ],
    )
    def test_non_doc_attributes(self, line: str) -> None:
        assert is_non_doc_attribute(line)

    @pytest.mark.parametrize(
        "line",
        [
            '#[doc = "Text"]',
            '# [doc = "Text"]',
            '#![doc = "Crate docs"]',
            '#[doc = r"raw"]',
            '#[doc = r#"raw"#]',
        ],
    )
    def test_doc_literal_attributes(self, line: str) -> None:
        assert is_doc_literal_attribute(line)
        assert not is_non_doc_attribute(line)

    def test_doc_macro_value_is_not_literal(self) -> None:
        assert not is_doc_literal_attribute("#![doc = module_doc!()]")

    @pytest.mark.parametrize(
        "line",
        ["#[omnidoc]", "#[syncdoc::omnidoc]", "# [syncdoc :: omnidoc]", '#[omnidoc(path = "x")]'],
    )
    def test_reference_markers(self, line: str) -> None:
        assert is_reference_marker(line)
        assert not is_non_doc_attribute(line)

    def test_reference_marker_needs_exact_segment(self) -> None:
        assert not is_reference_marker("#[omnidoc_extra]")
        assert not is_reference_marker("#![omnidoc]")

    @pytest.mark.parametrize(
        "line",
        [
            "#![doc = module_doc!()]",
            "#![doc = syncdoc::module_doc!()]",
            '#![ doc = syncdoc :: module_doc ! ( path = "docs" ) ]',
        ],
    )
    def test_module_doc_macro(self, line: str) -> None:
        assert is_module_doc_macro(line)
        assert not is_non_doc_attribute(line)

    def test_module_doc_macro_requires_inner_attribute(self) -> None:
        assert not is_module_doc_macro("#[doc = module_doc!()]")
        assert not is_module_doc_macro("#![doc = my_module_doc!()]")

    def test_custom_markers(self) -> None:
        markers = DocMarkers(reference_marker="extdoc", module_doc_macro="crate_doc")
        assert is_reference_marker("#[extdoc]", markers)
        assert not is_reference_marker("#[omnidoc]", markers)
        assert is_module_doc_macro("#![doc = crate_doc!()]", markers)


class TestDocLineForms:
    """Module-doc and item-doc forms used by the splitter."""

    @pytest.mark.parametrize(
        "line",
        [
            "//! Module doc",
            "#![doc = module_doc!()]",
            '#![doc = "Crate docs"]',
            '#[doc = "//! Module doc"]',
            '# [doc = "//! Module doc"]',
        ],
    )
    def test_module_doc_lines(self, line: str) -> None:
        assert is_module_doc_line(line)

    @pytest.mark.parametrize("line", ["/// Item", '#[doc = "/// Item"]', "#[omnidoc]", "fn f() {}"])
    def test_not_module_doc_lines(self, line: str) -> None:
        assert not is_module_doc_line(line)

    @pytest.mark.parametrize("line", ["/// Item", "#[omnidoc]", "#[derive(Debug)]"])
    def test_item_doc_lines(self, line: str) -> None:
        assert is_item_doc_line(line)

    def test_inner_forms_are_not_item_doc_lines(self) -> None:
        assert not is_item_doc_line("//! Module")
        assert not is_item_doc_line("#![doc = module_doc!()]")


class TestClassifyLine:
    """classify_line dispatch."""

    @pytest.mark.parametrize(
        ("line", "kind"),
        [
            ("", LineKind.BLANK),
            ("   ", LineKind.BLANK),
            ("/// Doc", LineKind.DOC_COMMENT),
            ("// note", LineKind.REGULAR_COMMENT),
            ("#![doc = module_doc!()]", LineKind.MODULE_DOC_MACRO),
            ("#[omnidoc]", LineKind.REFERENCE_MARKER),
            ('#[doc = "Text"]', LineKind.DOC_ATTRIBUTE),
            ("#[derive(Debug)]", LineKind.NON_DOC_ATTRIBUTE),
            ("pub fn test() {}", LineKind.CODE),
        ],
    )
    def test_kinds(self, line: str, kind: LineKind) -> None:
        assert classify_line(line) is kind
