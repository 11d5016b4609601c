"""
Concrete syntax tree snapshot used by the indentation engine.

Nodes live in a flat arena owned by ``SyntaxTree``. Each node refers to its
parent and children by arena index, so the parent link is a plain
back-reference and never keeps anything alive on its own. Offsets and
columns are measured in characters of the decoded source text.
"""

from bisect import bisect_right
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, PrivateAttr

from ppindent.models.error import ParseDiagnostic


ROOT_INDEX = 0


class SyntaxNode(BaseModel):
    """A single node of the concrete syntax tree."""

    model_config = ConfigDict(frozen=True)

    index: int
    type: str
    named: bool = True
    missing: bool = False
    start: int
    end: int
    start_point: Tuple[int, int]
    end_point: Tuple[int, int]
    parent: Optional[int] = None
    children: Tuple[int, ...] = ()

    @property
    def is_error(self) -> bool:
        return self.type == "ERROR"

    def covers(self, offset: int) -> bool:
        """Return True if the character at ``offset`` lies inside this node."""
        return self.start <= offset < self.end


class SyntaxTree(BaseModel):
    """Immutable arena of syntax nodes plus the text they were parsed from."""

    model_config = ConfigDict(frozen=True)

    source: str
    nodes: Tuple[SyntaxNode, ...]

    _line_starts: List[int] = PrivateAttr(default_factory=list)
    _child_starts: List[List[int]] = PrivateAttr(default_factory=list)

    def model_post_init(self, __context) -> None:
        self._line_starts = compute_line_starts(self.source)
        self._child_starts = [
            [self.nodes[i].start for i in node.children] for node in self.nodes
        ]

    # Tree provider interface

    @property
    def root(self) -> SyntaxNode:
        return self.nodes[ROOT_INDEX]

    def is_root(self, node: Optional[SyntaxNode]) -> bool:
        return node is not None and node.index == ROOT_INDEX

    def node_at(self, offset: int) -> Optional[SyntaxNode]:
        """
        Return the smallest node covering the character at ``offset``.

        Args:
            offset: Character offset into the source

        Returns:
            Covering SyntaxNode, or None when the offset lies outside the root
        """
        node = self.root
        if not node.covers(offset):
            return None

        while node.children:
            pos = bisect_right(self._child_starts[node.index], offset) - 1
            if pos < 0:
                break
            candidate = self.nodes[node.children[pos]]
            if not candidate.covers(offset):
                break
            node = candidate

        return node

    def parent_of(self, node: SyntaxNode) -> Optional[SyntaxNode]:
        if node.parent is None:
            return None
        return self.nodes[node.parent]

    def children_of(self, node: SyntaxNode) -> List[SyntaxNode]:
        return [self.nodes[i] for i in node.children]

    def named_children_of(self, node: SyntaxNode) -> List[SyntaxNode]:
        return [child for child in self.children_of(node) if child.named]

    def type_of(self, node: SyntaxNode) -> str:
        return node.type

    def text_of(self, node: SyntaxNode) -> str:
        return self.source[node.start:node.end]

    def ancestors_of(self, node: SyntaxNode) -> List[SyntaxNode]:
        """Return the parent chain of ``node``, innermost first."""
        chain = []
        current = self.parent_of(node)
        while current is not None:
            chain.append(current)
            current = self.parent_of(current)
        return chain

    # Line helpers

    @property
    def line_count(self) -> int:
        return len(self._line_starts)

    def line_start(self, row: int) -> int:
        """Character offset of the first character of ``row`` (0-indexed)."""
        return self._line_starts[row]

    def line_text(self, row: int) -> str:
        """Text of ``row`` without its line terminator."""
        start = self._line_starts[row]
        if row + 1 < len(self._line_starts):
            end = self._line_starts[row + 1]
        else:
            end = len(self.source)
        return self.source[start:end].rstrip("\r\n")

    def first_nonblank(self, row: int) -> Optional[int]:
        """
        Offset of the first non-whitespace character on ``row``.

        Returns:
            Character offset, or None if the line is blank
        """
        text = self.line_text(row)
        stripped = text.lstrip(" \t\f\v")
        if not stripped:
            return None
        return self._line_starts[row] + (len(text) - len(stripped))

    def row_of(self, offset: int) -> int:
        return bisect_right(self._line_starts, offset) - 1

    # Recovery nodes

    def diagnostics(self) -> List[ParseDiagnostic]:
        """Collect ERROR and MISSING nodes for display elsewhere."""
        found = []
        for node in self.nodes:
            if node.is_error:
                found.append(ParseDiagnostic(
                    kind="error",
                    node_type=node.type,
                    start_line=node.start_point[0] + 1,
                    start_column=node.start_point[1],
                    end_line=node.end_point[0] + 1,
                    end_column=node.end_point[1],
                    message="Syntax error",
                ))
            elif node.missing:
                found.append(ParseDiagnostic(
                    kind="missing",
                    node_type=node.type,
                    start_line=node.start_point[0] + 1,
                    start_column=node.start_point[1],
                    end_line=node.end_point[0] + 1,
                    end_column=node.end_point[1],
                    message=f"Missing '{node.type}'",
                ))
        return found


class SyntaxTreeBuilder:
    """
    Mutable builder that freezes into a ``SyntaxTree``.

    The first node added is the root. Children may be added in any order;
    ``build`` sorts them by position and computes line/column points.
    """

    def __init__(self, source: str):
        self._source = source
        self._records: List[Dict] = []

    def add_node(
        self,
        node_type: str,
        start: int,
        end: int,
        parent: Optional[int] = None,
        named: bool = True,
        missing: bool = False,
    ) -> int:
        """
        Append a node to the arena.

        Args:
            node_type: Node type tag
            start: Start character offset (inclusive)
            end: End character offset (exclusive)
            parent: Arena index of the parent (None for the root only)
            named: Whether the grammar names this node
            missing: Whether the node was inserted by error recovery

        Returns:
            Arena index of the new node
        """
        index = len(self._records)
        if index == ROOT_INDEX and parent is not None:
            raise ValueError("The first node added must be the root")
        if index != ROOT_INDEX and parent is None:
            raise ValueError(f"Node '{node_type}' needs a parent")
        if parent is not None and not 0 <= parent < index:
            raise ValueError(f"Unknown parent index {parent}")
        if end < start:
            raise ValueError(f"Node '{node_type}' ends before it starts")

        self._records.append({
            "type": node_type,
            "start": start,
            "end": end,
            "parent": parent,
            "named": named,
            "missing": missing,
            "children": [],
        })
        if parent is not None:
            self._records[parent]["children"].append(index)
        return index

    def build(self) -> SyntaxTree:
        if not self._records:
            raise ValueError("Cannot build an empty syntax tree")

        line_starts = compute_line_starts(self._source)

        def point(offset: int) -> Tuple[int, int]:
            row = bisect_right(line_starts, offset) - 1
            return row, offset - line_starts[row]

        nodes = []
        for index, record in enumerate(self._records):
            children = sorted(
                record["children"],
                key=lambda i: (self._records[i]["start"], self._records[i]["end"]),
            )
            nodes.append(SyntaxNode(
                index=index,
                type=record["type"],
                named=record["named"],
                missing=record["missing"],
                start=record["start"],
                end=record["end"],
                start_point=point(record["start"]),
                end_point=point(record["end"]),
                parent=record["parent"],
                children=tuple(children),
            ))

        return SyntaxTree(source=self._source, nodes=tuple(nodes))


def compute_line_starts(source: str) -> List[int]:
    """Offsets at which each line begins; a trailing newline opens an empty last line."""
    starts = [0]
    for i, ch in enumerate(source):
        if ch == "\n":
            starts.append(i + 1)
    return starts
