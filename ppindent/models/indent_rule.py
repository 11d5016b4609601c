"""
Indentation rule data models.

A rule pairs a ``NodeMatcher`` with an anchor and an offset in indent units.
Rules are kept in a ``RuleSet`` and evaluated in declaration order; the
first matching rule decides the line.
"""

from enum import Enum
from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Anchor(str, Enum):
    """Reference position an indentation offset is measured from."""

    COLUMN_0 = "column-0"
    PARENT = "parent"
    PARENT_BOL = "parent-bol"
    KEEP = "keep"


class NodeMatcher(BaseModel):
    """
    Conjunction of node predicates.

    Every predicate left unset is ignored, so an empty matcher matches any
    line. Set predicates must all hold for the matcher to succeed.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    node_is: Optional[FrozenSet[str]] = Field(None, description="Node type is one of these")
    parent_is: Optional[FrozenSet[str]] = Field(None, description="Parent type is one of these")
    node_text: Optional[FrozenSet[str]] = Field(None, description="Literal node text is one of these")
    node_prefix: Optional[FrozenSet[str]] = Field(None, description="Node text starts with one of these")
    first_child: Optional[bool] = Field(None, description="Node is the first named child of its parent")
    last_child: Optional[bool] = Field(None, description="Node is the last named child of its parent")
    no_node: Optional[bool] = Field(None, description="Line has no node of its own")
    top_level: Optional[bool] = Field(None, description="Parent is the document root")
    continued: Optional[bool] = Field(None, description="Line starts inside a multi-line token")

    @property
    def is_catch_all(self) -> bool:
        return all(value is None for value in self.__dict__.values())


class IndentRule(BaseModel):
    """An ordered (predicate, anchor, offset) entry."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Rule identifier used in logs and decisions")
    match: NodeMatcher = Field(default_factory=NodeMatcher)
    anchor: Anchor = Field(..., description="Position the offset is relative to")
    offset: int = Field(0, description="Offset in indent units")


CATCH_ALL_RULE = IndentRule(
    name="catch-all",
    match=NodeMatcher(),
    anchor=Anchor.PARENT_BOL,
    offset=1,
)


class RuleSet(BaseModel):
    """
    Ordered indentation rules for one language.

    Built once from static configuration and read-only afterwards. A
    trailing catch-all rule is always present so matching is total.
    """

    model_config = ConfigDict(frozen=True)

    language: str
    rules: Tuple[IndentRule, ...]
    attached_types: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="Delimited parts that belong to their parent construct (parameter lists, blocks)",
    )
    verbatim_types: FrozenSet[str] = Field(
        default_factory=frozenset,
        description="Multi-line tokens whose inner lines keep their indentation",
    )

    @field_validator("rules")
    @classmethod
    def ensure_catch_all(cls, rules: Tuple[IndentRule, ...]) -> Tuple[IndentRule, ...]:
        if not rules or not rules[-1].match.is_catch_all:
            return rules + (CATCH_ALL_RULE,)
        return rules

    def rule_named(self, name: str) -> Optional[IndentRule]:
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None
