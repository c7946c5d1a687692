"""
Configuration scope resolution for a declaration.

A declaration directly inside an at-rule (``@media (max-width: 600px) { a {
color: red } }``) may be governed by an override scope listed under the
at-rule's name in the subset configuration. Only the simple
``(<feature>: <value>)`` parameter shape is matched; anything else falls
back to the root scope.
"""

import logging
from typing import Optional

from ..models.config import OverrideScope, Scope, SubsetConfig
from ..models.stylesheet import AtRule, Declaration
from ..parser.params import parse_at_rule_params

logger = logging.getLogger(__name__)


def enclosing_at_rule(declaration: Declaration) -> Optional[AtRule]:
    """The declaration's grandparent when it is an at-rule"""
    rule = declaration.rule
    if rule is None:
        return None
    grandparent = rule.parent
    return grandparent if isinstance(grandparent, AtRule) else None


def match_override(at_rule: AtRule, config: SubsetConfig) -> Optional[OverrideScope]:
    """
    Find the override scope selected by an at-rule's parameters.

    Args:
        at_rule: Enclosing at-rule
        config: Root subset configuration

    Returns:
        First override whose params accept the at-rule's (name, value) pair
    """
    scopes = config.override_scopes(at_rule.name)
    if not scopes:
        return None

    words = parse_at_rule_params(at_rule.params)
    if len(words) != 2:
        logger.debug(
            f"@{at_rule.name} {at_rule.params!r} parsed to {len(words)} words, "
            f"using root scope"
        )
        return None

    param_name, param_value = words
    for scope in scopes:
        if scope.matches(param_name, param_value):
            return scope

    return None


def resolve_scope(config: SubsetConfig, declaration: Declaration) -> Scope:
    """
    Determine which configuration scope governs a declaration.

    Returns the matched override scope, or the root configuration.
    """
    at_rule = enclosing_at_rule(declaration)
    if at_rule is None:
        return config

    override = match_override(at_rule, config)
    return override if override is not None else config
