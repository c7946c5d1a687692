"""
Tree-sitter based stylesheet parsing.

Key Components:
- ParserProtocol: interface the resolution pipeline relies on
- Parsed / Failed: explicit parse outcome
- TreeSitterBase: common Tree-sitter functionality
- CSSParser: Tree-sitter CSS grammar to Stylesheet tree
- parse_at_rule_params: at-rule parameter words via tinycss2
"""

from .base import Failed, ParseError, Parsed, ParseResult, ParserProtocol, TreeSitterError
from .css_parser import CSSParser, get_css_parser, parse_stylesheet
from .params import parse_at_rule_params

__all__ = [
    "ParserProtocol",
    "ParseResult",
    "Parsed",
    "Failed",
    "ParseError",
    "TreeSitterError",
    "CSSParser",
    "get_css_parser",
    "parse_stylesheet",
    "parse_at_rule_params"
]
