"""
subsetcss core package

Stylesheet parsing and subset value resolution.
"""

__version__ = "1.0.0"

from .models import SubsetConfig, OverrideScope, CompletionItem, CompletionKind

__all__ = [
    "SubsetConfig",
    "OverrideScope",
    "CompletionItem",
    "CompletionKind"
]
