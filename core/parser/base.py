"""
Abstract base classes and result types for stylesheet parsers.

Defines the interface the resolution pipeline relies on, along with the
explicit parse outcome (``Parsed`` or ``Failed``) so malformed input is a
normal branch rather than an exception.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union
import time

from ..models.stylesheet import Stylesheet


@dataclass(frozen=True)
class Parsed:
    """Successful parse with the document tree"""
    document: Stylesheet
    parse_time: float = 0.0  # Seconds

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class Failed:
    """
    Failed parse.

    ``line`` is the zero-based line of the first syntax error when known.
    """
    reason: str
    line: Optional[int] = None
    parse_time: float = 0.0

    @property
    def success(self) -> bool:
        return False


ParseResult = Union[Parsed, Failed]


class ParserProtocol(ABC):
    """
    Abstract protocol for stylesheet parsers.

    Implementations turn raw text into a ``Stylesheet`` tree with zero-based
    line ranges, or report why they could not.
    """

    @abstractmethod
    def get_language_name(self) -> str:
        """Return the language name this parser handles"""
        pass

    @abstractmethod
    def parse(self, text: str) -> ParseResult:
        """
        Parse stylesheet text.

        Args:
            text: Full document text

        Returns:
            Parsed with the document tree, or Failed with a reason
        """
        pass


class BaseParser(ParserProtocol):
    """
    Base implementation with timing and result helpers.
    """

    MAX_TEXT_SIZE = 10 * 1024 * 1024  # 10MB
    MAX_SYNTAX_ERRORS = 50

    def __init__(self, language: str):
        self.language = language
        self._parser_start_time = 0.0

    def get_language_name(self) -> str:
        """Return language name"""
        return self.language

    def _start_timing(self) -> None:
        """Start timing for performance measurement"""
        self._parser_start_time = time.perf_counter()

    def _get_elapsed_time(self) -> float:
        """Get elapsed time since timing started"""
        return time.perf_counter() - self._parser_start_time

    def _create_error_result(self, reason: str, line: Optional[int] = None) -> Failed:
        """Create Failed result for error cases"""
        return Failed(reason=reason, line=line, parse_time=self._get_elapsed_time())

    def _create_success_result(self, document: Stylesheet) -> Parsed:
        return Parsed(document=document, parse_time=self._get_elapsed_time())


# Error types for parser exceptions
class ParseError(Exception):
    """Base class for parsing errors"""
    pass


class TreeSitterError(ParseError):
    """Raised when Tree-sitter cannot be set up"""
    pass


def summarize_errors(errors: List[Dict[str, Any]]) -> str:
    """Collapse syntax error records into one reason string"""
    if not errors:
        return "Unknown parse error"
    first = errors[0]
    reason = f"{first.get('message', 'Syntax error')} at line {first.get('line', 0) + 1}"
    if len(errors) > 1:
        reason += f" (+{len(errors) - 1} more)"
    return reason
