"""
Rule matcher: first-match-wins evaluation of an ordered rule table.

Each ``NodeMatcher`` field names a predicate; the table below maps field
names to the functions that evaluate them against a ``MatchContext``.
"""

from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict

from ppindent.models.indent_rule import CATCH_ALL_RULE, IndentRule, NodeMatcher, RuleSet
from ppindent.models.syntax_tree import SyntaxNode, SyntaxTree


class MatchContext(BaseModel):
    """The line being indented, as seen by rule predicates."""

    model_config = ConfigDict(frozen=True)

    tree: SyntaxTree
    row: int
    bol: Optional[int] = None
    node: Optional[SyntaxNode] = None
    parent: Optional[SyntaxNode] = None
    continued: bool = False


def _node_is(ctx: MatchContext, expected) -> bool:
    return ctx.node is not None and ctx.node.type in expected


def _parent_is(ctx: MatchContext, expected) -> bool:
    return ctx.parent is not None and ctx.parent.type in expected


def _node_text(ctx: MatchContext, expected) -> bool:
    return ctx.node is not None and ctx.tree.text_of(ctx.node) in expected


def _node_prefix(ctx: MatchContext, expected) -> bool:
    if ctx.node is None:
        return False
    text = ctx.tree.text_of(ctx.node)
    return any(text.startswith(prefix) for prefix in expected)


def _named_position(ctx: MatchContext, position: int) -> bool:
    if ctx.node is None or ctx.parent is None:
        return False
    siblings = ctx.tree.named_children_of(ctx.parent)
    return bool(siblings) and siblings[position].index == ctx.node.index


def _first_child(ctx: MatchContext, expected: bool) -> bool:
    return _named_position(ctx, 0) == expected


def _last_child(ctx: MatchContext, expected: bool) -> bool:
    return _named_position(ctx, -1) == expected


def _no_node(ctx: MatchContext, expected: bool) -> bool:
    return (ctx.node is None) == expected


def _top_level(ctx: MatchContext, expected: bool) -> bool:
    at_top = ctx.parent is None or ctx.tree.is_root(ctx.parent)
    return at_top == expected


def _continued(ctx: MatchContext, expected: bool) -> bool:
    return ctx.continued == expected


PREDICATES: Dict[str, Callable[[MatchContext, Any], bool]] = {
    "node_is": _node_is,
    "parent_is": _parent_is,
    "node_text": _node_text,
    "node_prefix": _node_prefix,
    "first_child": _first_child,
    "last_child": _last_child,
    "no_node": _no_node,
    "top_level": _top_level,
    "continued": _continued,
}


class RuleMatcher:
    """Evaluates a ``RuleSet`` against a line context."""

    def __init__(self, rule_set: RuleSet):
        self._rule_set = rule_set

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    def match(self, ctx: MatchContext) -> IndentRule:
        """
        Return the first rule whose matcher holds for ``ctx``.

        The rule set always ends with a catch-all, so a rule is always
        returned.
        """
        for rule in self._rule_set.rules:
            if self.matches(rule.match, ctx):
                return rule
        return CATCH_ALL_RULE

    @staticmethod
    def matches(matcher: NodeMatcher, ctx: MatchContext) -> bool:
        for field_name, expected in matcher:
            if expected is None:
                continue
            if not PREDICATES[field_name](ctx, expected):
                return False
        return True
