"""
Unit tests for CSS parser.

Tests stylesheet tree construction, line ranges and parse failure reporting.
"""

import pytest

from core.models.stylesheet import AtRule, Rule, Stylesheet
from core.parser.base import Failed, Parsed
from core.parser.css_parser import CSSParser, get_css_parser, parse_stylesheet


MEDIA_SHEET = (
    "body {\n"                          # 0
    "  margin: 0;\n"                    # 1
    "}\n"                               # 2
    "\n"                                # 3
    "@media (max-width: 600px) {\n"     # 4
    "  a {\n"                           # 5
    "    color: red;\n"                 # 6
    "  }\n"                             # 7
    "}\n"                               # 8
)


class TestCSSParser:
    """Test CSS parser functionality"""

    def setup_method(self):
        """Setup test instance"""
        self.parser = CSSParser()

    def test_language_name(self):
        """Test the parser reports the language it handles"""
        assert self.parser.get_language_name() == "css"

    def test_parse_simple_rule(self):
        """Test a single rule with its declaration"""
        result = self.parser.parse("a {\n  color: red;\n}\n")

        assert isinstance(result, Parsed)
        assert result.success
        rules = list(result.document.walk_rules())
        assert len(rules) == 1

        rule = rules[0]
        assert rule.selector == "a"
        assert (rule.start_line, rule.end_line) == (0, 2)
        assert len(rule.declarations) == 1

        declaration = rule.declarations[0]
        assert declaration.prop == "color"
        assert declaration.value == "red"
        assert declaration.line == 1
        assert declaration.rule is rule
        assert isinstance(rule.parent, Stylesheet)

    def test_multiple_declarations_keep_order(self):
        """Test declarations are recorded in source order"""
        result = self.parser.parse(".card {\n  display: block;\n  margin: 0 auto;\n}")

        rule = next(result.document.walk_rules())
        assert [d.prop for d in rule.declarations] == ["display", "margin"]
        assert rule.declarations[1].value == "0 auto"

    def test_rule_nested_in_media(self):
        """Test a rule inside @media gets the at-rule as parent"""
        result = self.parser.parse(MEDIA_SHEET)

        assert isinstance(result, Parsed)
        body, link = list(result.document.walk_rules())
        assert (body.start_line, body.end_line) == (0, 2)
        assert (link.start_line, link.end_line) == (5, 7)

        at_rule = link.parent
        assert isinstance(at_rule, AtRule)
        assert at_rule.name == "media"
        assert at_rule.params == "(max-width: 600px)"
        assert (at_rule.start_line, at_rule.end_line) == (4, 8)

    def test_media_query_with_keywords(self):
        """Test raw params are kept verbatim for complex queries"""
        result = self.parser.parse("@media screen and (min-width: 100px) {\n  p { color: blue; }\n}\n")

        at_rule = result.document.children[0]
        assert at_rule.params == "screen and (min-width: 100px)"
        rule = next(result.document.walk_rules())
        assert rule.parent is at_rule

    def test_keyframes(self):
        """Test keyframe blocks become rules under the @keyframes at-rule"""
        sheet = "@keyframes spin {\n  from { opacity: 0; }\n  to { opacity: 1; }\n}\n"
        result = self.parser.parse(sheet)

        assert isinstance(result, Parsed)
        at_rule = result.document.children[0]
        assert at_rule.name == "keyframes"
        assert at_rule.params == "spin"

        rules = list(result.document.walk_rules())
        assert [r.selector for r in rules] == ["from", "to"]
        assert all(r.parent is at_rule for r in rules)
        assert rules[0].declarations[0].prop == "opacity"

    def test_statement_at_rule_without_block(self):
        """Test @import is kept as an at-rule with no children"""
        result = self.parser.parse('@import "base.css";\na { color: red; }\n')

        assert isinstance(result, Parsed)
        at_rule = result.document.children[0]
        assert at_rule.name == "import"
        assert at_rule.params == '"base.css"'
        assert at_rule.children == []

    def test_empty_stylesheet(self):
        """Test empty text parses to an empty document"""
        result = self.parser.parse("")

        assert isinstance(result, Parsed)
        assert result.document.children == []

    def test_comment_only_stylesheet(self):
        """Test comments produce no rules"""
        result = self.parser.parse("/* nothing here */\n")

        assert isinstance(result, Parsed)
        assert list(result.document.walk_rules()) == []

    def test_unclosed_block_fails(self):
        """Test malformed text is reported as Failed"""
        result = self.parser.parse("a {\n  color: red;\n")

        assert isinstance(result, Failed)
        assert not result.success
        assert result.reason

    def test_declaration_without_value_fails(self):
        """Test a half-typed declaration is reported as Failed"""
        result = self.parser.parse("a {\n  color: \n")

        assert isinstance(result, Failed)

    def test_oversized_text_fails(self):
        """Test the size guard"""
        parser = CSSParser()
        parser.MAX_TEXT_SIZE = 10
        result = parser.parse("a { color: red; }")

        assert isinstance(result, Failed)
        assert "too large" in result.reason

    def test_reparse_is_independent(self):
        """Test every parse builds a fresh tree"""
        first = self.parser.parse("a { color: red; }")
        second = self.parser.parse("a { color: red; }")

        assert first.document is not second.document
        assert first.document == second.document


class TestModuleHelpers:
    """Test module-level parser helpers"""

    def test_shared_parser_is_cached(self):
        assert get_css_parser() is get_css_parser()

    def test_parse_stylesheet(self):
        result = parse_stylesheet("p { display: none; }")

        assert isinstance(result, Parsed)
        rule = next(result.document.walk_rules())
        assert isinstance(rule, Rule)
        assert rule.declarations[0].value == "none"
