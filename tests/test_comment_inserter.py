"""Tests for Javadoc formatting and attachment."""

import pytest

from docwriter.generators.comment_inserter import (
    CommentInserter,
    comment_lines,
    indent_comment,
    leading_width,
)
from docwriter.generators.llm_client import DocumentationResult
from docwriter.parsers.java_parser import JavaParser


@pytest.fixture
def parser() -> JavaParser:
    """Create a JavaParser instance for testing."""
    return JavaParser()


@pytest.fixture
def inserter() -> CommentInserter:
    """Create a CommentInserter instance for testing."""
    return CommentInserter()


class TestLeadingWidth:
    """Tests for indentation measurement."""

    def test_spaces(self) -> None:
        assert leading_width("    void f() {}") == 4

    def test_tabs_count_four(self) -> None:
        assert leading_width("\t\tvoid f() {}") == 8

    def test_mixed(self) -> None:
        assert leading_width("\t  x") == 6

    def test_custom_tab_width(self) -> None:
        assert leading_width("\tx", tab_width=2) == 2

    def test_no_indent(self) -> None:
        assert leading_width("class A {") == 0


class TestCommentLines:
    """Tests for body normalization."""

    def test_strips_star_decoration(self) -> None:
        body = "\n * Adds two numbers.\n *\n * @param a first\n "
        assert comment_lines(body) == ["Adds two numbers.", "", "@param a first"]

    def test_plain_lines(self) -> None:
        assert comment_lines(" Returns the total. ") == ["Returns the total."]

    def test_blank_body(self) -> None:
        assert comment_lines("\n *\n   \n") == []

    def test_keeps_relative_indentation(self) -> None:
        body = "\n * Example:\n * <pre>\n *     run();\n * </pre>\n * <ul>\n *   <li>one</li>\n * </ul>\n "
        assert comment_lines(body) == [
            "Example:",
            "<pre>",
            "    run();",
            "</pre>",
            "<ul>",
            "  <li>one</li>",
            "</ul>",
        ]

    def test_keeps_markdown_emphasis(self) -> None:
        assert comment_lines("\n * Returns the sum.\n **Never** null.\n") == [
            "Returns the sum.",
            "**Never** null.",
        ]

    def test_dedents_undecorated_lines(self) -> None:
        assert comment_lines("\n    Returns x.\n      Indented.\n") == ["Returns x.", "  Indented."]


class TestIndentComment:
    """Tests for formatting a body at a column."""

    def test_method_column(self) -> None:
        block = indent_comment("\n * Adds numbers.\n * @return the sum\n", 4)
        assert block.split("\n") == [
            "    /**",
            "     * Adds numbers.",
            "     * @return the sum",
            "    */",
        ]

    def test_column_zero_with_author(self) -> None:
        block = indent_comment(" Keeps stock. ", 0, author="Jane")
        assert block.split("\n") == [
            "/**",
            " * Keeps stock.",
            " *",
            " * @author Jane",
            "*/",
        ]

    def test_blank_interior_line(self) -> None:
        block = indent_comment("First.\n\nSecond.", 2)
        assert block.split("\n")[2] == "   *"

    def test_closing_delimiter_in_body_escaped(self) -> None:
        block = indent_comment("Matches /* and */ literally.", 0)
        assert " * Matches /* and *&#47; literally." in block.split("\n")
        assert block.count("*/") == 1

    def test_crlf(self) -> None:
        block = indent_comment("Doc.", 0, newline="\r\n")
        assert block == "/**\r\n * Doc.\r\n*/"

    def test_empty_body(self) -> None:
        assert indent_comment("  \n * \n", 4) == ""


class TestAttach:
    """Tests for attaching comments to parsed declarations."""

    def test_method(self, parser: JavaParser, inserter: CommentInserter) -> None:
        source = parser.parse_source("class A {\n    void f() {}\n}\n")
        (method,) = source.methods()
        assert inserter.attach(source, method, DocumentationResult(body=" Does f. "))
        assert source.render() == "class A {\n    /**\n     * Does f.\n    */\n    void f() {}\n}\n"

    def test_tab_indented_method(self, parser: JavaParser, inserter: CommentInserter) -> None:
        source = parser.parse_source("class A {\n\tvoid f() {}\n}\n")
        (method,) = source.methods()
        inserter.attach(source, method, DocumentationResult(body="Does f."))
        assert source.render() == "class A {\n    /**\n     * Does f.\n    */\n\tvoid f() {}\n}\n"

    def test_type_with_author(self, parser: JavaParser, inserter: CommentInserter) -> None:
        source = parser.parse_source("package p;\n\npublic class A {\n}\n")
        top = source.top_level_type()
        inserter.attach(source, top, DocumentationResult(body="An A."), author="Bob")
        assert source.render() == (
            "package p;\n\n/**\n * An A.\n *\n * @author Bob\n*/\npublic class A {\n}\n"
        )

    def test_type_attached_above_annotation(self, parser: JavaParser, inserter: CommentInserter) -> None:
        source = parser.parse_source("@Deprecated\nclass A {\n}\n")
        inserter.attach(source, source.top_level_type(), DocumentationResult(body="Old."))
        assert source.render() == "/**\n * Old.\n*/\n@Deprecated\nclass A {\n}\n"

    def test_method_sharing_line_with_code(self, parser: JavaParser, inserter: CommentInserter) -> None:
        source = parser.parse_source("class A { void f() {}\n}\n")
        (method,) = source.methods()
        inserter.attach(source, method, DocumentationResult(body="Does f."))
        assert source.render() == "class A { \n/**\n * Does f.\n*/\nvoid f() {}\n}\n"

    def test_keeps_crlf(self, parser: JavaParser, inserter: CommentInserter) -> None:
        source = parser.parse_source("class A {\r\n  void f() {}\r\n}\r\n")
        (method,) = source.methods()
        inserter.attach(source, method, DocumentationResult(body="Does f."))
        assert source.render() == "class A {\r\n  /**\r\n   * Does f.\r\n  */\r\n  void f() {}\r\n}\r\n"

    def test_result_without_body(self, parser: JavaParser, inserter: CommentInserter) -> None:
        source = parser.parse_source("class A {\n    void f() {}\n}\n")
        (method,) = source.methods()
        assert inserter.attach(source, method, DocumentationResult(body=None)) is False
        assert source.changed is False

    def test_empty_body(self, parser: JavaParser, inserter: CommentInserter) -> None:
        source = parser.parse_source("class A {\n    void f() {}\n}\n")
        (method,) = source.methods()
        assert inserter.attach(source, method, DocumentationResult(body="\n *\n")) is False
        assert source.changed is False
