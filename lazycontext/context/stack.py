"""Enclosing-context stack computation.

Walks from the node under the cursor up through its ancestors and keeps the
context-worthy ones that have scrolled out of view above the viewport.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..tree.arena import ArenaNode, SyntaxArena
from .patterns import PatternSet, is_context_node


@dataclass(frozen=True)
class ContextEntry:
    """One sticky header: the context node, its matched rule, and its start row."""

    node: ArenaNode
    pattern: str
    row: int


def node_at_cursor(arena: SyntaxArena | None, row: int, column: int) -> ArenaNode | None:
    """Resolve the deepest named node under the cursor, if any."""
    if arena is None:
        return None
    return arena.node_at(row, column)


def build_context_stack(
    arena: SyntaxArena,
    cursor_node: ArenaNode | None,
    first_visible_line: int,
    language: str | None,
    patterns: PatternSet,
    max_lines: int = 0,
) -> list[ContextEntry]:
    """Collect context entries enclosing ``cursor_node``, outermost first.

    ``first_visible_line`` is the 1-based number of the top visible line. A
    node qualifies when it matches a pattern, does not start on the file's
    first row, and starts above the line just before the viewport top. Nodes
    starting on the same row collapse into the outermost one. ``max_lines``
    keeps only that many innermost entries; ``0`` means no limit.
    """
    if cursor_node is None:
        return []

    matches: list[ContextEntry] = []
    last_row = -1
    for current in arena.ancestors(cursor_node):
        row = current.start_row
        matched, pattern = is_context_node(current.type, language, patterns)
        if matched and 0 < row < (first_visible_line - 1):
            assert pattern is not None
            entry = ContextEntry(node=current, pattern=pattern, row=row)
            if row == last_row:
                matches[-1] = entry
            else:
                if max_lines > 0 and len(matches) >= max_lines:
                    break
                matches.append(entry)
                last_row = row

    matches.reverse()
    return matches
