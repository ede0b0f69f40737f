"""Flat, index-addressed snapshot of a syntax tree.

Every named node of one parse is copied into an ``ArenaNode`` record that
refers to its parent and named children by index. Ancestor walks therefore
never hold live references into the parser's tree, and the snapshot stays
valid after the tree is edited or reparsed.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, replace

Point = tuple[int, int]


@dataclass(frozen=True)
class ArenaNode:
    """One named syntax node; positions are ``(row, column)`` in characters."""

    index: int
    type: str
    start: Point
    end: Point
    parent: int | None
    children: tuple[int, ...]

    @property
    def start_row(self) -> int:
        return self.start[0]

    @property
    def end_row(self) -> int:
        return self.end[0]


def _byte_column_converter(lines: Sequence[str]):
    """Return ``(row, byte_col) -> char_col`` for UTF-8 encoded ``lines``."""
    encoded: dict[int, bytes] = {}

    def convert(row: int, byte_col: int) -> int:
        if row < 0 or row >= len(lines) or byte_col <= 0:
            return max(0, byte_col)
        raw = encoded.get(row)
        if raw is None:
            raw = lines[row].encode("utf-8", errors="replace")
            encoded[row] = raw
        if raw.isascii():
            return byte_col
        return len(raw[:byte_col].decode("utf-8", errors="ignore"))

    return convert


class SyntaxArena:
    """Container owning all ``ArenaNode`` records of one parse."""

    def __init__(self, nodes: list[ArenaNode]) -> None:
        self._nodes = nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[ArenaNode]:
        return iter(self._nodes)

    @property
    def root(self) -> ArenaNode | None:
        return self._nodes[0] if self._nodes else None

    def parent(self, node: ArenaNode) -> ArenaNode | None:
        if node.parent is None:
            return None
        return self._nodes[node.parent]

    def named_children(self, node: ArenaNode) -> list[ArenaNode]:
        return [self._nodes[index] for index in node.children]

    def ancestors(self, node: ArenaNode) -> Iterator[ArenaNode]:
        """Yield ``node`` and then each ancestor up to the root."""
        current: ArenaNode | None = node
        while current is not None:
            yield current
            current = self.parent(current)

    def node_at(self, row: int, column: int) -> ArenaNode | None:
        """Return the deepest named node whose span contains ``(row, column)``.

        Points outside every child resolve to the nearest enclosing node; the
        root is returned for points past the end of the tree.
        """
        current = self.root
        if current is None:
            return None
        point = (row, column)
        while True:
            chosen: ArenaNode | None = None
            for child in self.named_children(current):
                if child.start <= point < child.end:
                    chosen = child
                    break
                if child.start == child.end == point:
                    chosen = child
                    break
            if chosen is None:
                return current
            current = chosen

    def find_descendant(self, node: ArenaNode, node_type: str) -> ArenaNode | None:
        """Find a descendant of ``node_type``, checking direct children before deeper levels."""
        children = self.named_children(node)
        for child in children:
            if child.type == node_type:
                return child
        for child in children:
            deep_child = self.find_descendant(child, node_type)
            if deep_child is not None:
                return deep_child
        return None

    @classmethod
    def from_tree_sitter(cls, root, lines: Sequence[str] | None = None) -> SyntaxArena:
        """Snapshot a tree-sitter (or compatible) root node.

        ``root`` needs ``type``, ``start_point``, ``end_point`` and
        ``named_children``. When ``lines`` is given, byte columns reported by
        tree-sitter are converted to character columns of those lines.
        """
        convert = _byte_column_converter(lines) if lines is not None else None

        def point(raw) -> Point:
            row, col = int(raw[0]), int(raw[1])
            if convert is not None:
                col = convert(row, col)
            return (row, col)

        nodes: list[ArenaNode] = []
        child_lists: list[list[int]] = []
        # (tree node, parent index) pairs; iterative to survive deep trees.
        pending: list[tuple[object, int | None]] = [(root, None)]
        while pending:
            ts_node, parent_index = pending.pop()
            index = len(nodes)
            child_lists.append([])
            nodes.append(
                ArenaNode(
                    index=index,
                    type=str(ts_node.type),
                    start=point(ts_node.start_point),
                    end=point(ts_node.end_point),
                    parent=parent_index,
                    children=(),
                )
            )
            if parent_index is not None:
                child_lists[parent_index].append(index)
            for child in reversed(list(ts_node.named_children)):
                pending.append((child, index))

        return cls([replace(node, children=tuple(child_lists[node.index])) for node in nodes])
