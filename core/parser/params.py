"""
At-rule parameter tokenization.

Splits the free-form parameter text of an at-rule (``(max-width: 600px)``)
into word tokens using tinycss2's component value parser.
"""

from typing import List

import tinycss2
from tinycss2 import ast

# Component value types counted as words
WORD_TOKEN_TYPES = {"ident", "number", "percentage", "dimension", "hash"}

# Literals acting as separators rather than words
DIVIDER_LITERALS = {":", ",", "/"}


def _is_word(token: ast.Node) -> bool:
    if token.type in WORD_TOKEN_TYPES:
        return True
    return token.type == "literal" and token.value not in DIVIDER_LITERALS


def _significant(nodes: List[ast.Node]) -> List[ast.Node]:
    return [node for node in nodes if node.type not in ("whitespace", "comment")]


def parse_at_rule_params(params: str) -> List[str]:
    """
    Get the word tokens of the first top-level parameter group.

    Only a parenthesised group yields words; its nested groups are skipped.
    A leading bare keyword (``screen and ...``) yields no words.

    Args:
        params: Raw at-rule parameter text

    Returns:
        Word tokens in source order, e.g. ``["max-width", "600px"]``
    """
    if not params or not params.strip():
        return []

    nodes = _significant(tinycss2.parse_component_value_list(params, skip_comments=True))
    if not nodes:
        return []

    first = nodes[0]
    if first.type != "() block":
        return []

    return [token.serialize() for token in first.content if _is_word(token)]
