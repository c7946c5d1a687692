"""
Stylesheet tree models produced by the CSS parser.

A parsed document is a small tree of at-rules, rules and declarations with
zero-based source line ranges. Every node keeps a back-reference to its
parent so resolution can climb from a declaration to its enclosing at-rule.
The tree lives for one resolution call and is never cached.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Union


@dataclass
class Declaration:
    """A single ``property: value`` pair inside a rule"""
    prop: str
    value: str = ""
    line: Optional[int] = None
    rule: Optional["Rule"] = field(default=None, repr=False, compare=False)

    @property
    def parent(self) -> Optional["Rule"]:
        return self.rule


@dataclass
class Rule:
    """Selector-bearing block owning zero or more declarations"""
    selector: str
    start_line: Optional[int] = None
    end_line: Optional[int] = None
    declarations: List[Declaration] = field(default_factory=list)
    children: List["Node"] = field(default_factory=list)
    parent: Optional["Container"] = field(default=None, repr=False, compare=False)

    @property
    def has_range(self) -> bool:
        """Check that both ends of the line range are known and ordered"""
        return (
            self.start_line is not None
            and self.end_line is not None
            and self.start_line <= self.end_line
        )

    def contains_line(self, line: int) -> bool:
        """Inclusive line-range check; rules without a range contain nothing"""
        if not self.has_range:
            return False
        return self.start_line <= line <= self.end_line

    def add_declaration(self, declaration: Declaration) -> Declaration:
        declaration.rule = self
        self.declarations.append(declaration)
        return declaration

    def add_child(self, node: "Node") -> "Node":
        node.parent = self
        self.children.append(node)
        return node


@dataclass
class AtRule:
    """At-rule such as ``@media (max-width: 600px) { ... }``"""
    name: str
    params: str = ""
    start_line: Optional[int] = None
    end_line: Optional[int] = None
    children: List["Node"] = field(default_factory=list)
    parent: Optional["Container"] = field(default=None, repr=False, compare=False)

    def add_child(self, node: "Node") -> "Node":
        node.parent = self
        self.children.append(node)
        return node


@dataclass
class Stylesheet:
    """Root of a parsed document"""
    children: List["Node"] = field(default_factory=list)

    @property
    def parent(self) -> None:
        return None

    def add_child(self, node: "Node") -> "Node":
        node.parent = self
        self.children.append(node)
        return node

    def walk_rules(self) -> Iterator[Rule]:
        """Yield every rule in document order, nested rules included"""
        def walk(nodes: List["Node"]) -> Iterator[Rule]:
            for node in nodes:
                if isinstance(node, Rule):
                    yield node
                yield from walk(node.children)

        yield from walk(self.children)


Node = Union[Rule, AtRule]
Container = Union[Stylesheet, Rule, AtRule]

