"""
Core data models for subsetcss

Subset configuration, parsed stylesheet tree and completion items.
"""

from .config import OverrideScope, Scope, ServerSettings, SubsetConfig
from .stylesheet import AtRule, Declaration, Rule, Stylesheet
from .completion import CompletionItem, CompletionKind

__all__ = [
    # Configuration
    "SubsetConfig",
    "OverrideScope",
    "Scope",
    "ServerSettings",

    # Stylesheet tree
    "Stylesheet",
    "AtRule",
    "Rule",
    "Declaration",

    # Completion
    "CompletionItem",
    "CompletionKind"
]
