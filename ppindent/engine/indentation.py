"""
Indentation engine.

Given a syntax tree snapshot and a line, the engine finds the node that
begins the line, asks the ``RuleMatcher`` for the first matching rule and
resolves the rule's anchor to a column. It holds no per-document state:
every call re-derives its answer from the tree it is handed.
"""

import logging
from typing import Dict, Iterator, Optional, Tuple

from ppindent.engine.errors import (
    LineOutOfRangeError,
    NoNodeAtPositionError,
    UnresolvableAnchorError,
)
from ppindent.engine.matcher import MatchContext, RuleMatcher
from ppindent.engine.rewrite import current_indentation, visual_width
from ppindent.models.indent_rule import Anchor, IndentRule, RuleSet
from ppindent.models.indentation import IndentConfig, IndentDecision
from ppindent.models.syntax_tree import SyntaxNode, SyntaxTree
from ppindent.utils.logging import get_logger, log_indent_decision

logger = get_logger(__name__)


class IndentationEngine:
    """Computes indentation columns from a ``RuleSet``."""

    def __init__(self, rule_set: RuleSet):
        """
        Initialize the engine.

        Args:
            rule_set: Ordered rules for the language being indented
        """
        self._rule_set = rule_set
        self._matcher = RuleMatcher(rule_set)

    @property
    def rule_set(self) -> RuleSet:
        return self._rule_set

    # Entry points

    def indent_line(
        self,
        tree: SyntaxTree,
        line_number: int,
        config: Optional[IndentConfig] = None,
    ) -> int:
        """
        Column a single line should be indented to.

        Anchor lines are read with their current indentation.

        Args:
            tree: Syntax tree snapshot
            line_number: Line to indent (1-indexed)
            config: Indentation options

        Returns:
            Target column
        """
        return self.indent_for_line(tree, line_number, config)

    def indent_for_line(
        self,
        tree: SyntaxTree,
        line_number: int,
        config: Optional[IndentConfig] = None,
        resolved: Optional[Dict[int, int]] = None,
    ) -> int:
        """
        Column for ``line_number``, honoring columns already resolved.

        Args:
            tree: Syntax tree snapshot
            line_number: Line to indent (1-indexed)
            config: Indentation options
            resolved: Columns computed earlier in the same region pass

        Returns:
            Target column
        """
        return self.decide(tree, line_number, config, resolved).column

    def indent_region(
        self,
        tree: SyntaxTree,
        start_line: int,
        end_line: int,
        config: Optional[IndentConfig] = None,
    ) -> Dict[int, int]:
        """
        Columns for every line in ``start_line..end_line`` (inclusive).

        Lines are resolved top to bottom so later lines anchor to the
        columns computed for earlier ones.

        Returns:
            Mapping of line number to column
        """
        return {
            decision.line_number: decision.column
            for decision in self.iter_region(tree, start_line, end_line, config)
        }

    def iter_region(
        self,
        tree: SyntaxTree,
        start_line: int,
        end_line: int,
        config: Optional[IndentConfig] = None,
    ) -> Iterator[IndentDecision]:
        """
        Yield one decision per line, top to bottom.

        Each yielded decision is final, so callers may stop iterating at any
        line and keep what they already received.
        """
        self._check_line(tree, start_line)
        self._check_line(tree, end_line)
        config = config or IndentConfig()

        resolved: Dict[int, int] = {}
        for line_number in range(start_line, end_line + 1):
            decision = self.decide(tree, line_number, config, resolved)
            resolved[line_number] = decision.column
            yield decision

    def decide(
        self,
        tree: SyntaxTree,
        line_number: int,
        config: Optional[IndentConfig] = None,
        resolved: Optional[Dict[int, int]] = None,
    ) -> IndentDecision:
        """
        Full decision for one line: matched rule, anchor and column.

        Raises:
            LineOutOfRangeError: If the line is not in the document
        """
        self._check_line(tree, line_number)
        config = config or IndentConfig()
        row = line_number - 1

        try:
            ctx = self.locate(tree, row)
        except NoNodeAtPositionError as e:
            logger.debug(f"{e}; treating line {line_number} as top level")
            ctx = MatchContext(tree=tree, row=row, bol=tree.first_nonblank(row), parent=tree.root)

        rule = self._matcher.match(ctx)

        try:
            anchor_row, anchor_column = self._resolve_anchor(rule, ctx, config, resolved)
        except UnresolvableAnchorError as e:
            logger.debug(f"Unresolvable anchor for line {line_number}: {e}")
            anchor_row, anchor_column = None, 0
            column = 0
        else:
            if rule.anchor == Anchor.KEEP:
                column = anchor_column
            else:
                column = max(0, anchor_column + rule.offset * config.indent_width)

        decision = IndentDecision(
            line_number=line_number,
            column=column,
            rule_name=rule.name,
            anchor=rule.anchor,
            anchor_line=anchor_row + 1 if anchor_row is not None else None,
            anchor_column=anchor_column,
            offset=rule.offset,
        )
        if logger.isEnabledFor(logging.DEBUG):
            log_indent_decision(logger, decision)
        return decision

    # Locating the line's node

    def locate(self, tree: SyntaxTree, row: int) -> MatchContext:
        """
        Build the match context for ``row`` (0-indexed).

        For a line with text, the node is the largest node starting at the
        line's first non-whitespace character. For a blank line there is no
        node and the parent is the smallest node covering the position just
        before the line.

        Raises:
            NoNodeAtPositionError: If no node covers the position being looked up
        """
        bol = tree.first_nonblank(row)

        if bol is None:
            if row == 0:
                return MatchContext(tree=tree, row=row, parent=tree.root)
            line_start = tree.line_start(row)
            covering = tree.node_at(line_start - 1)
            if covering is None:
                raise NoNodeAtPositionError(line_start - 1)
            verbatim = self._enclosing_verbatim(tree, covering, line_start)
            if verbatim is not None and verbatim.end > line_start:
                return MatchContext(
                    tree=tree, row=row, node=verbatim,
                    parent=tree.parent_of(verbatim), continued=True,
                )
            # A token ending with the previous line's newline is not a container
            while covering.end <= line_start and not tree.is_root(covering):
                covering = tree.parent_of(covering)
            return MatchContext(tree=tree, row=row, parent=covering)

        smallest = tree.node_at(bol)
        if smallest is None:
            raise NoNodeAtPositionError(bol)
        if tree.is_root(smallest):
            return MatchContext(tree=tree, row=row, bol=bol, parent=smallest)

        line_start = tree.line_start(row)
        verbatim = self._enclosing_verbatim(tree, smallest, line_start)
        if verbatim is not None:
            return MatchContext(
                tree=tree, row=row, bol=bol, node=verbatim,
                parent=tree.parent_of(verbatim), continued=True,
            )

        if smallest.start < bol:
            # The line starts in a gap between the children of ``smallest``
            return MatchContext(tree=tree, row=row, bol=bol, parent=smallest)

        node = smallest
        while True:
            parent = tree.parent_of(node)
            if parent is None or tree.is_root(parent) or parent.start != node.start:
                break
            node = parent

        return MatchContext(tree=tree, row=row, bol=bol, node=node, parent=tree.parent_of(node))

    def _enclosing_verbatim(
        self,
        tree: SyntaxTree,
        node: SyntaxNode,
        line_start: int,
    ) -> Optional[SyntaxNode]:
        """
        Multi-line token the line continues, if any.

        A leaf that started on an earlier line, or any ancestor of a
        verbatim type that did, makes the line a continuation.
        """
        if not node.children and node.start < line_start and not tree.is_root(node):
            return node
        current: Optional[SyntaxNode] = node
        while current is not None and not tree.is_root(current):
            if current.type in self._rule_set.verbatim_types and current.start < line_start:
                return current
            current = tree.parent_of(current)
        return None

    # Anchors

    def _resolve_anchor(
        self,
        rule: IndentRule,
        ctx: MatchContext,
        config: IndentConfig,
        resolved: Optional[Dict[int, int]],
    ) -> Tuple[Optional[int], int]:
        tree = ctx.tree

        if rule.anchor == Anchor.COLUMN_0:
            return None, 0

        if rule.anchor == Anchor.KEEP:
            return ctx.row, current_indentation(tree.line_text(ctx.row), config.tab_width)

        if ctx.parent is None or tree.is_root(ctx.parent):
            raise UnresolvableAnchorError(f"rule '{rule.name}' anchors past the document root")

        if rule.anchor == Anchor.PARENT:
            row = ctx.parent.start_point[0]
            indent = self._line_indentation(tree, row, config, resolved)
            bol = tree.first_nonblank(row)
            between = tree.source[bol:ctx.parent.start] if bol is not None else ""
            return row, indent + visual_width(between, config.tab_width, indent)

        construct = self.construct_of(tree, ctx.parent)
        row = construct.start_point[0]
        return row, self._line_indentation(tree, row, config, resolved)

    def construct_of(self, tree: SyntaxTree, node: SyntaxNode) -> SyntaxNode:
        """
        The construct a delimited part belongs to.

        Parameter lists, blocks and argument lists anchor to the node that
        owns them (the ``define``, ``class``, call or conditional), so a
        delimiter opened on its own line still lines up with the keyword.
        """
        while node.type in self._rule_set.attached_types:
            parent = tree.parent_of(node)
            if parent is None or tree.is_root(parent):
                break
            node = parent
        return node

    @staticmethod
    def _line_indentation(
        tree: SyntaxTree,
        row: int,
        config: IndentConfig,
        resolved: Optional[Dict[int, int]],
    ) -> int:
        if resolved is not None and row + 1 in resolved:
            return resolved[row + 1]
        return current_indentation(tree.line_text(row), config.tab_width)

    @staticmethod
    def _check_line(tree: SyntaxTree, line_number: int) -> None:
        if not 1 <= line_number <= tree.line_count:
            raise LineOutOfRangeError(line_number, tree.line_count)
