"""
Unit tests for configuration scope resolution.
"""

import pytest

from core.models.config import OverrideScope, SubsetConfig
from core.models.stylesheet import AtRule, Declaration, Rule, Stylesheet
from core.parser.css_parser import parse_stylesheet
from core.resolution.position import resolve_declaration
from core.resolution.scope import enclosing_at_rule, match_override, resolve_scope


CONFIG = SubsetConfig.from_dict({
    "subsets": {"color": ["black", "white"]},
    "@media": [
        {"params": {"max-width": ["600px"]}, "subsets": {"color": ["red"]}},
        {"params": {"max-width": ["600px", "800px"]}, "subsets": {"color": ["green"]}},
        {"params": {"orientation": "landscape portrait"}, "subsets": {"color": ["blue"]}},
    ],
})


def declaration_in(at_rule_name=None, params=""):
    """Build a color declaration, optionally wrapped in an at-rule"""
    document = Stylesheet()
    rule = Rule(selector="a", start_line=1, end_line=3)
    if at_rule_name:
        at_rule = document.add_child(AtRule(name=at_rule_name, params=params, start_line=0, end_line=4))
        at_rule.add_child(rule)
    else:
        document.add_child(rule)
    return rule.add_declaration(Declaration(prop="color", value="red", line=2))


class TestEnclosingAtRule:
    """Test grandparent lookup"""

    def test_top_level_rule(self):
        assert enclosing_at_rule(declaration_in()) is None

    def test_rule_inside_at_rule(self):
        at_rule = enclosing_at_rule(declaration_in("media", "(max-width: 600px)"))
        assert at_rule.name == "media"

    def test_detached_declaration(self):
        assert enclosing_at_rule(Declaration(prop="color")) is None

    def test_rule_inside_rule(self):
        document = Stylesheet()
        outer = document.add_child(Rule(selector="nav", start_line=0, end_line=5))
        inner = outer.add_child(Rule(selector="a", start_line=1, end_line=3))
        declaration = inner.add_declaration(Declaration(prop="color"))

        assert enclosing_at_rule(declaration) is None


class TestResolveScope:
    """Test override matching and root fallback"""

    def test_root_scope_without_at_rule(self):
        assert resolve_scope(CONFIG, declaration_in()) is CONFIG

    def test_override_match(self):
        scope = resolve_scope(CONFIG, declaration_in("media", "(max-width: 600px)"))

        assert isinstance(scope, OverrideScope)
        assert scope.subsets["color"] == ("red",)

    def test_first_matching_override_wins(self):
        scope = resolve_scope(CONFIG, declaration_in("media", "(max-width: 600px)"))
        assert scope is CONFIG.overrides["@media"][0]

    def test_later_override_when_first_does_not_match(self):
        scope = resolve_scope(CONFIG, declaration_in("media", "(max-width: 800px)"))
        assert scope is CONFIG.overrides["@media"][1]

    def test_no_matching_override(self):
        scope = resolve_scope(CONFIG, declaration_in("media", "(max-width: 1024px)"))
        assert scope is CONFIG

    def test_string_params_match_by_substring(self):
        scope = resolve_scope(CONFIG, declaration_in("media", "(orientation: landscape)"))
        assert scope is CONFIG.overrides["@media"][2]

    @pytest.mark.parametrize("params", [
        "screen and print",
        "screen and (max-width: 600px)",
        "(aspect-ratio: 16/9)",
        "(color)",
        "",
    ])
    def test_params_without_two_words_use_root(self, params):
        assert resolve_scope(CONFIG, declaration_in("media", params)) is CONFIG

    def test_at_rule_without_override_list(self):
        scope = resolve_scope(CONFIG, declaration_in("supports", "(display: grid)"))
        assert scope is CONFIG

    def test_empty_config(self):
        config = SubsetConfig.empty()
        assert resolve_scope(config, declaration_in("media", "(max-width: 600px)")) is config

    def test_match_override_directly(self):
        at_rule = AtRule(name="media", params="(max-width: 600px)")
        assert match_override(at_rule, CONFIG) is CONFIG.overrides["@media"][0]
        assert match_override(AtRule(name="page", params=":first"), CONFIG) is None


class TestScopeOnParsedDocument:
    """Test scope resolution on parser output"""

    def test_media_override(self):
        result = parse_stylesheet("@media (max-width: 600px) {\n  a {\n    color: red;\n  }\n}\n")
        declaration = resolve_declaration(result.document, 2)

        scope = resolve_scope(CONFIG, declaration)
        assert scope.subsets["color"] == ("red",)

    def test_complex_media_query_uses_root(self):
        result = parse_stylesheet("@media screen and print {\n  a {\n    color: red;\n  }\n}\n")
        declaration = resolve_declaration(result.document, 2)

        assert resolve_scope(CONFIG, declaration) is CONFIG
