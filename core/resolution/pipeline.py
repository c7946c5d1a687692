"""
Completion resolution pipeline.

Wires parsing, position and scope resolution, lookup and item construction:

    text + line -> parse -> Parsed -> declaration -> scope -> values -> items
                         -> Failed -> cursor line text -> root values -> items

The pipeline keeps no state between calls. It never raises: internal faults
are logged and produce an empty list.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ..models.completion import CompletionItem
from ..models.config import OverrideScope, Scope, SubsetConfig
from ..parser.base import Failed, ParserProtocol
from ..parser.css_parser import get_css_parser
from .completion import build_completions
from .fallback import property_from_line, resolve_fallback
from .lookup import lookup_values
from .position import resolve_declaration
from .scope import resolve_scope

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r'\r\n|\r|\n')


class ResolutionPath(Enum):
    """Which branch produced a resolution"""
    PARSED = "parsed"
    FALLBACK = "fallback"
    NO_DECLARATION = "no_declaration"


@dataclass
class Resolution:
    """Outcome of resolving one cursor position, before item construction"""
    path: ResolutionPath
    prop: Optional[str] = None
    values: List[str] = field(default_factory=list)
    scope: Optional[Scope] = None
    parse_error: Optional[str] = None

    @property
    def is_override(self) -> bool:
        return isinstance(self.scope, OverrideScope)


def get_line(text: str, line: int) -> str:
    """Text of a zero-based line; empty when out of range"""
    if line < 0:
        return ""
    lines = _LINE_BREAK.split(text)
    return lines[line] if line < len(lines) else ""


class CompletionResolver:
    """
    Resolves completion items for a cursor line against a subset config.

    The configuration snapshot is passed in on every call; a ``None``
    snapshot (missing or unloadable file) behaves like an empty one.
    """

    def __init__(self, parser: Optional[ParserProtocol] = None):
        self._parser = parser

    @property
    def parser(self) -> ParserProtocol:
        if self._parser is None:
            self._parser = get_css_parser()
        return self._parser

    def explain(self, text: str, line: int, config: Optional[SubsetConfig]) -> Resolution:
        """
        Resolve the property, scope and allowed values for a cursor line.

        Args:
            text: Full document text
            line: Zero-based cursor line
            config: Active configuration snapshot

        Returns:
            Resolution describing the branch taken and the values found
        """
        config = config if config is not None else SubsetConfig.empty()

        result = self.parser.parse(text)

        if isinstance(result, Failed):
            logger.debug(
                f"{self.parser.get_language_name()} parse failed ({result.reason}), using line fallback"
            )
            line_text = get_line(text, line)
            return Resolution(
                path=ResolutionPath.FALLBACK,
                prop=property_from_line(line_text) or None,
                values=resolve_fallback(line_text, config),
                scope=config,
                parse_error=result.reason
            )

        declaration = resolve_declaration(result.document, line)
        if declaration is None:
            logger.debug(f"No declaration encloses line {line}")
            return Resolution(path=ResolutionPath.NO_DECLARATION)

        scope = resolve_scope(config, declaration)
        return Resolution(
            path=ResolutionPath.PARSED,
            prop=declaration.prop,
            values=lookup_values(scope, declaration.prop),
            scope=scope
        )

    def resolve(self, text: str, line: int, config: Optional[SubsetConfig]) -> List[CompletionItem]:
        """
        Resolve ranked completion items for a cursor line.

        Returns an empty list for every non-result (no enclosing rule,
        property without a subset, unusable configuration, internal fault).
        """
        try:
            resolution = self.explain(text, line, config)
            if not resolution.values or not resolution.prop:
                return []
            return build_completions(resolution.values, resolution.prop)

        except Exception as e:
            logger.error(f"Completion resolution failed at line {line}: {e}", exc_info=True)
            return []


def resolve_completions(
    text: str,
    line: int,
    config: Optional[SubsetConfig],
    parser: Optional[ParserProtocol] = None
) -> List[CompletionItem]:
    """Resolve completion items with a throwaway resolver"""
    return CompletionResolver(parser).resolve(text, line, config)
