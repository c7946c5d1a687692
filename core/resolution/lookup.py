"""
Allowed-value lookup within a resolved scope.
"""

from typing import List, Optional

from ..models.config import Scope


def lookup_values(scope: Optional[Scope], prop: str) -> List[str]:
    """
    Get the ordered allowed values for a property.

    A property missing from the scope means no restriction is suggested, so
    the result is simply empty.
    """
    if scope is None:
        return []
    return list(scope.subsets.get(prop, ()))
