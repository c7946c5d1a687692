"""
Base Tree-sitter functionality for stylesheet parsers.

Provides language loading, syntax error extraction and AST traversal
utilities shared by the Tree-sitter-based parsers.
"""

import logging
from abc import ABC
from typing import Any, Dict, List, Optional

import tree_sitter

from .base import BaseParser, TreeSitterError

logger = logging.getLogger(__name__)


class TreeSitterBase(BaseParser, ABC):
    """
    Base class for Tree-sitter parsers with common functionality.

    Provides language loading, AST traversal and syntax error reporting.
    """

    LANGUAGE_MODULES = {
        "css": "tree_sitter_css",
    }

    def __init__(self, language: str):
        super().__init__(language)

        self.parser = tree_sitter.Parser()
        try:
            self._setup_language()
        except TreeSitterError:
            raise
        except Exception as e:
            logger.error(f"Failed to setup {language} parser: {e}")
            raise TreeSitterError(f"Cannot initialize {language} parser: {e}") from e

    def _setup_language(self) -> None:
        """Initialize Tree-sitter language for this parser"""
        if self.language not in self.LANGUAGE_MODULES:
            raise TreeSitterError(f"Unsupported language: {self.language}")

        module_name = self.LANGUAGE_MODULES[self.language]

        try:
            language_module = __import__(module_name)
            self.tree_sitter_language = tree_sitter.Language(language_module.language())
            self.parser.language = self.tree_sitter_language
            logger.debug(f"Successfully loaded {self.language} Tree-sitter language")

        except ImportError as e:
            raise TreeSitterError(
                f"Tree-sitter language module '{module_name}' not installed. "
                f"Install with: pip install {module_name.replace('_', '-')}"
            ) from e

    def _parse_tree(self, source: bytes) -> Optional[tree_sitter.Tree]:
        return self.parser.parse(source)

    def _extract_syntax_errors(
        self,
        tree: tree_sitter.Tree,
        source: bytes
    ) -> List[Dict[str, Any]]:
        """
        Extract syntax errors from a Tree-sitter AST.

        Args:
            tree: Tree-sitter AST
            source: Encoded source the tree was parsed from

        Returns:
            List of syntax error dictionaries, lines zero-based
        """
        errors: List[Dict[str, Any]] = []

        def find_errors(node: tree_sitter.Node, depth: int = 0) -> None:
            if len(errors) >= self.MAX_SYNTAX_ERRORS:
                return

            if node.type == "ERROR" or node.is_missing:
                error_text = self._safe_extract_text(node, source)
                errors.append({
                    "type": "SYNTAX_ERROR" if node.type == "ERROR" else "MISSING_NODE",
                    "message": self._generate_error_message(node, error_text),
                    "line": node.start_point[0],
                    "column": node.start_point[1],
                    "text": error_text,
                    "parent_type": node.parent.type if node.parent else None
                })
                return

            if depth < 64:
                for child in node.children:
                    if child.has_error or child.is_missing:
                        find_errors(child, depth + 1)

        if tree.root_node is not None and tree.root_node.has_error:
            find_errors(tree.root_node)

        return errors

    def get_node_text(self, node: tree_sitter.Node, source: bytes) -> str:
        """
        Get text content of a Tree-sitter node.

        Tree-sitter reports byte offsets, so slicing happens on the encoded
        source and the result is decoded back.
        """
        return source[node.start_byte:node.end_byte].decode('utf-8', errors='replace')

    def get_text_between(self, source: bytes, start_byte: int, end_byte: int) -> str:
        if end_byte <= start_byte:
            return ""
        return source[start_byte:end_byte].decode('utf-8', errors='replace')

    def find_child_by_type(
        self,
        node: tree_sitter.Node,
        child_type: str
    ) -> Optional[tree_sitter.Node]:
        """Find first child node of specified type"""
        for child in node.children:
            if child.type == child_type:
                return child
        return None

    def _safe_extract_text(
        self,
        node: tree_sitter.Node,
        source: bytes,
        max_length: int = 50
    ) -> str:
        """Extract a short, single-line preview of a node's text"""
        node_text = self.get_node_text(node, source)
        if len(node_text) > max_length:
            node_text = node_text[:max_length] + "..."
        return node_text.replace('\r\n', '\\n').replace('\n', '\\n')

    def _generate_error_message(self, node: tree_sitter.Node, error_text: str) -> str:
        """Generate descriptive error message based on node context"""
        if node.is_missing:
            parent_type = node.parent.type if node.parent else "unknown"
            return f"Missing {node.type} in {parent_type} context"

        if not error_text.strip():
            return "Unexpected empty syntax error"
        return f"Syntax error in {self.language}: '{error_text}'"

    def _safe_encode_content(self, content: str) -> bytes:
        """Encode content for Tree-sitter, replacing unencodable characters"""
        try:
            return content.encode('utf-8')
        except UnicodeEncodeError as e:
            logger.warning(f"UTF-8 encoding failed: {e}, using fallback")
            return content.encode('utf-8', errors='replace')
