"""
Subset value resolution for a cursor position.

Key Components:
- position: cursor line to enclosing declaration
- scope: root vs. at-rule override scope for a declaration
- lookup: allowed values for a property within a scope
- completion: ranked completion items from allowed values
- fallback: textual lookup when the stylesheet does not parse
- pipeline: CompletionResolver tying the steps together

Example:
    from core.resolution import resolve_completions
    from core.models.config import SubsetConfig

    config = SubsetConfig.from_dict({"subsets": {"color": ["red", "blue"]}})
    items = resolve_completions("a {\\n  color: red;\\n}", 1, config)
"""

from .completion import build_completions, completion_kind
from .fallback import resolve_fallback
from .lookup import lookup_values
from .pipeline import CompletionResolver, Resolution, ResolutionPath, resolve_completions
from .position import resolve_declaration
from .scope import resolve_scope

__all__ = [
    "CompletionResolver",
    "Resolution",
    "ResolutionPath",
    "resolve_completions",
    "resolve_declaration",
    "resolve_scope",
    "lookup_values",
    "build_completions",
    "completion_kind",
    "resolve_fallback"
]
