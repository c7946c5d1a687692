"""
Tests for parser base classes and infrastructure.

Tests parse result types, error summaries and the Tree-sitter base helpers.
"""

from dataclasses import FrozenInstanceError

import pytest

from core.models.stylesheet import Stylesheet
from core.parser.base import (
    BaseParser,
    Failed,
    ParseError,
    Parsed,
    ParserProtocol,
    TreeSitterError,
    summarize_errors,
)
from core.parser.css_parser import CSSParser
from core.parser.tree_sitter_base import TreeSitterBase


class MockParser(BaseParser):
    """Mock parser for testing"""

    def __init__(self):
        super().__init__("mock")

    def parse(self, text: str):
        self._start_timing()
        if "!" in text:
            return self._create_error_result("bang", line=0)
        return self._create_success_result(Stylesheet())


class TestParseResults:
    """Test Parsed and Failed outcomes"""

    def test_parsed(self):
        result = MockParser().parse("a {}")

        assert isinstance(result, Parsed)
        assert result.success
        assert result.parse_time >= 0

    def test_failed(self):
        result = MockParser().parse("!")

        assert isinstance(result, Failed)
        assert not result.success
        assert result.reason == "bang"
        assert result.line == 0

    def test_results_are_frozen(self):
        result = Failed("reason")
        with pytest.raises(FrozenInstanceError):
            result.reason = "other"

    def test_language_name(self):
        parser = MockParser()

        assert isinstance(parser, ParserProtocol)
        assert parser.get_language_name() == "mock"


class TestSummarizeErrors:
    """Test error summaries"""

    def test_no_errors(self):
        assert summarize_errors([]) == "Unknown parse error"

    def test_single_error(self):
        assert summarize_errors([{"message": "Missing }", "line": 2}]) == "Missing } at line 3"

    def test_more_errors(self):
        errors = [{"message": "Bad", "line": 0}, {"message": "Worse", "line": 4}]
        assert summarize_errors(errors) == "Bad at line 1 (+1 more)"


class TestTreeSitterBase:
    """Test Tree-sitter setup and helpers"""

    def test_unsupported_language(self):
        class UnknownParser(TreeSitterBase):
            def parse(self, text):
                return Failed("unused")

        with pytest.raises(TreeSitterError):
            UnknownParser("cobol")

    def test_tree_sitter_error_is_parse_error(self):
        assert issubclass(TreeSitterError, ParseError)

    def test_syntax_errors_have_zero_based_lines(self):
        parser = CSSParser()
        source = "a { color: red; }\nb {\n  color: blue;\n".encode("utf-8")

        errors = parser._extract_syntax_errors(parser._parse_tree(source), source)

        assert errors
        assert all(error["line"] >= 0 for error in errors)
        assert errors[0]["type"] in ("SYNTAX_ERROR", "MISSING_NODE")

    def test_failed_parse_reports_line(self):
        result = CSSParser().parse("a { color: red; }\nb {\n  color: blue;\n")

        assert isinstance(result, Failed)
        assert result.line is not None
        assert "at line" in result.reason

    def test_text_helpers(self):
        parser = CSSParser()
        source = "p { margin: 0; }".encode("utf-8")
        tree = parser._parse_tree(source)
        rule_set = parser.find_child_by_type(tree.root_node, "rule_set")

        assert parser.get_node_text(rule_set, source) == "p { margin: 0; }"
        assert parser.get_text_between(source, 0, 1) == "p"
        assert parser.get_text_between(source, 5, 2) == ""
        assert parser.find_child_by_type(tree.root_node, "media_statement") is None

    def test_non_ascii_text(self):
        result = CSSParser().parse('a::before {\n  content: "é";\n  color: red;\n}\n')

        assert isinstance(result, Parsed)
        rule = next(result.document.walk_rules())
        assert rule.declarations[0].value == '"é"'
        assert rule.declarations[1].line == 2
