"""
CSS parser using Tree-sitter.

Turns raw stylesheet text into the ``Stylesheet`` tree used by completion
resolution: rules with their declarations and zero-based line ranges, nested
inside at-rules that keep their name and raw parameter text.
"""

import logging
from functools import lru_cache
from typing import Optional

import tree_sitter

from .base import ParseResult, summarize_errors
from .tree_sitter_base import TreeSitterBase
from ..models.stylesheet import AtRule, Container, Declaration, Rule, Stylesheet

logger = logging.getLogger(__name__)


class CSSParser(TreeSitterBase):
    """
    Stylesheet parser built on the Tree-sitter CSS grammar.

    Features:
    - Rule sets and keyframe blocks as rules
    - At-rules (@media, @supports, @keyframes, generic at-rules) with raw params
    - Declarations with property name, value text and line
    - Nested rules inside rules and at-rules
    """

    # Nodes whose body is converted into an AtRule
    GENERIC_AT_RULE_TYPE = "at_rule"
    AT_RULE_SUFFIX = "_statement"

    # Children of an at-rule that hold its body
    AT_RULE_BODY_TYPES = {"block", "keyframe_block_list"}

    def __init__(self):
        super().__init__("css")
        logger.debug("CSS parser initialized")

    def parse(self, text: str) -> ParseResult:
        """
        Parse stylesheet text.

        Malformed text (any ERROR or MISSING node in the tree) is reported as
        ``Failed`` so callers can take the textual fallback path.

        Args:
            text: Full document text

        Returns:
            Parsed with the document tree, or Failed with a reason
        """
        self._start_timing()

        if len(text) > self.MAX_TEXT_SIZE:
            return self._create_error_result(f"Stylesheet too large: {len(text)} characters")

        try:
            source = self._safe_encode_content(text)
            tree = self._parse_tree(source)

            if tree is None or tree.root_node is None:
                return self._create_error_result("Tree-sitter parsing failed")

            if tree.root_node.has_error:
                errors = self._extract_syntax_errors(tree, source)
                line = errors[0]["line"] if errors else None
                logger.debug(f"CSS parse failed with {len(errors)} syntax errors")
                return self._create_error_result(summarize_errors(errors), line)

            document = Stylesheet()
            self._convert_children(tree.root_node, document, source)

            result = self._create_success_result(document)
            logger.debug(f"Parsed stylesheet in {result.parse_time * 1000:.1f}ms")
            return result

        except Exception as e:
            logger.error(f"CSS parsing failed: {e}", exc_info=True)
            return self._create_error_result(str(e))

    def _convert_children(
        self,
        ts_node: tree_sitter.Node,
        container: Container,
        source: bytes
    ) -> None:
        for child in ts_node.children:
            self._convert_node(child, container, source)

    def _convert_node(
        self,
        node: tree_sitter.Node,
        container: Container,
        source: bytes
    ) -> None:
        node_type = node.type

        if node_type == "rule_set":
            selectors_node = self.find_child_by_type(node, "selectors")
            selector = self.get_node_text(selectors_node, source).strip() if selectors_node else ""
            rule = self._make_rule(node, selector)
            container.add_child(rule)
            self._convert_block(self.find_child_by_type(node, "block"), rule, source)

        elif node_type == "keyframe_block":
            selector = self.get_node_text(node.children[0], source).strip() if node.children else ""
            rule = self._make_rule(node, selector)
            container.add_child(rule)
            self._convert_block(self.find_child_by_type(node, "block"), rule, source)

        elif node_type == "keyframe_block_list":
            self._convert_children(node, container, source)

        elif self._is_at_rule(node_type):
            at_rule = self._make_at_rule(node, source)
            if at_rule is None:
                return
            container.add_child(at_rule)
            body = self._find_body(node)
            if body is not None:
                if body.type == "block":
                    self._convert_block(body, at_rule, source)
                else:
                    self._convert_children(body, at_rule, source)

        # Declarations outside a rule (top level, directly in @font-face)
        # have no enclosing rule and are not matched by position.

    def _convert_block(
        self,
        block: Optional[tree_sitter.Node],
        container: Container,
        source: bytes
    ) -> None:
        if block is None:
            return

        for child in block.children:
            if child.type == "declaration":
                if isinstance(container, Rule):
                    declaration = self._make_declaration(child, source)
                    if declaration is not None:
                        container.add_declaration(declaration)
            else:
                self._convert_node(child, container, source)

    def _is_at_rule(self, node_type: str) -> bool:
        return node_type == self.GENERIC_AT_RULE_TYPE or node_type.endswith(self.AT_RULE_SUFFIX)

    def _find_body(self, node: tree_sitter.Node) -> Optional[tree_sitter.Node]:
        for child in node.children:
            if child.type in self.AT_RULE_BODY_TYPES:
                return child
        return None

    def _make_rule(self, node: tree_sitter.Node, selector: str) -> Rule:
        return Rule(
            selector=selector,
            start_line=node.start_point[0],
            end_line=node.end_point[0]
        )

    def _make_at_rule(self, node: tree_sitter.Node, source: bytes) -> Optional[AtRule]:
        """Build an AtRule from a statement node: keyword, raw params, line range"""
        if not node.children:
            return None

        keyword = node.children[0]
        name = self.get_node_text(keyword, source).strip().lstrip('@')
        if not name:
            return None

        # Params span from the keyword to the body, terminating ';' or node end
        params_end = node.end_byte
        for child in node.children[1:]:
            if child.type in self.AT_RULE_BODY_TYPES or child.type == ";":
                params_end = child.start_byte
                break
        params = self.get_text_between(source, keyword.end_byte, params_end).strip()

        return AtRule(
            name=name,
            params=params,
            start_line=node.start_point[0],
            end_line=node.end_point[0]
        )

    def _make_declaration(self, node: tree_sitter.Node, source: bytes) -> Optional[Declaration]:
        property_node = self.find_child_by_type(node, "property_name")
        if property_node is None:
            return None

        prop = self.get_node_text(property_node, source).strip()
        if not prop:
            return None

        value = ""
        colon = self.find_child_by_type(node, ":")
        if colon is not None:
            value_end = node.end_byte
            semicolon = self.find_child_by_type(node, ";")
            if semicolon is not None:
                value_end = semicolon.start_byte
            value = self.get_text_between(source, colon.end_byte, value_end).strip()

        return Declaration(prop=prop, value=value, line=node.start_point[0])


@lru_cache(maxsize=1)
def get_css_parser() -> CSSParser:
    """Shared parser instance; Tree-sitter language setup happens once"""
    return CSSParser()


def parse_stylesheet(text: str) -> ParseResult:
    """Parse stylesheet text with the shared parser"""
    return get_css_parser().parse(text)

