"""
Cursor position to declaration mapping.
"""

import logging
from typing import Optional

from ..models.stylesheet import Declaration, Stylesheet

logger = logging.getLogger(__name__)


def resolve_declaration(document: Stylesheet, line: int) -> Optional[Declaration]:
    """
    Find the declaration governing a cursor line.

    Rules are visited in document order. The first rule whose inclusive line
    range contains ``line`` and owns at least one declaration wins, and its
    first declaration is returned. Rules without a resolvable range are
    skipped.

    Args:
        document: Parsed stylesheet
        line: Zero-based cursor line

    Returns:
        The declaration, or None when no rule covers the line
    """
    for rule in document.walk_rules():
        if not rule.has_range:
            logger.debug(f"Skipping rule '{rule.selector}' without a source range")
            continue

        if not rule.contains_line(line):
            continue

        if rule.declarations:
            return rule.declarations[0]

    return None
