"""
Textual fallback used when the stylesheet cannot be parsed.
"""

import logging
from typing import List, Optional

from ..models.config import SubsetConfig
from .lookup import lookup_values

logger = logging.getLogger(__name__)


def property_from_line(line_text: str) -> str:
    """Candidate property name: text before the first colon, trimmed"""
    trimmed = line_text.strip()
    if ':' in trimmed:
        trimmed = trimmed.split(':', 1)[0]
    return trimmed.strip()


def resolve_fallback(line_text: str, config: Optional[SubsetConfig]) -> List[str]:
    """
    Look up the cursor line's property in the root scope only.

    No tree exists on this path, so at-rule overrides are never consulted.
    """
    prop = property_from_line(line_text)
    if not prop:
        return []

    values = lookup_values(config, prop)
    logger.debug(f"Fallback lookup for '{prop}' returned {len(values)} values")
    return values
