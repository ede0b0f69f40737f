"""Reduce a (possibly multi-line) context node to one display line.

A node's header normally ends with its first source line. For construct kinds
configured with a terminal descendant type (for example a function's
parameter list) the header runs until that descendant ends, and the extra
lines are merged into the first with their indentation stripped.
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from ..tree.arena import ArenaNode, SyntaxArena
from .patterns import PatternSet, type_key

INDENT_RE = re.compile(r"^\s+")
LINE_JOINER = " "

# type key -> language -> descendant type ending a multi-line header.
DEFAULT_TERMINAL_TYPES: dict[str, dict[str, str]] = {
    "function": {
        "c": "function_declarator",
        "cpp": "function_declarator",
        "lua": "parameters",
        "python": "parameters",
        "rust": "parameters",
        "javascript": "formal_parameters",
        "typescript": "formal_parameters",
    },
}

# type key -> language -> leading child type skipped before the header.
DEFAULT_SKIP_LEADING_TYPES: dict[str, dict[str, str]] = {
    "class": {"php": "attribute_list"},
    "method": {"php": "attribute_list"},
}

SourceRange = tuple[int, int, int, int]


@dataclass(frozen=True)
class DisplayLine:
    """Merged header text plus what the highlight remapper needs.

    ``lines`` are the captured source lines after truncation, ``indents`` the
    stripped indentation of each (first always 0) and ``range`` the covered
    source span as ``(start_row, start_col, end_row, end_col)``.
    """

    text: str
    lines: tuple[str, ...]
    range: SourceRange
    indents: tuple[int, ...]
    anchor_row: int

    @property
    def start_row(self) -> int:
        return self.range[0]


def line_indents(lines: Sequence[str]) -> list[int]:
    """Leading-whitespace width of each line; the first line counts as 0."""
    indents = []
    for line in lines:
        match = INDENT_RE.match(line)
        indents.append(len(match.group(0)) if match else 0)
    if indents:
        indents[0] = 0
    return indents


def merge_lines(lines: Sequence[str]) -> str:
    """Join lines with single spaces, dropping indentation after the first."""
    if not lines:
        return ""
    text = [lines[0]]
    for line in lines[1:]:
        text.append(INDENT_RE.sub("", line, count=1))
    return LINE_JOINER.join(text)


def _node_lines(lines: Sequence[str], node: ArenaNode) -> list[str]:
    """Source lines covered by ``node``.

    A node starting mid-line gets its whole first source line so whatever
    precedes it on that line stays visible.
    """
    start_row, start_col = node.start
    end_row, end_col = node.end
    captured: list[str] = []
    for row in range(start_row, end_row + 1):
        text = lines[row] if 0 <= row < len(lines) else ""
        if row == end_row:
            text = text[:end_col]
        if row == start_row:
            text = text[start_col:]
        captured.append(text)
    if start_col != 0 and captured:
        captured[0] = lines[start_row] if 0 <= start_row < len(lines) else ""
    return captured


def _skip_leading_children(arena: SyntaxArena, node: ArenaNode, skip_type: str) -> ArenaNode:
    for child in arena.named_children(node):
        if child.type != skip_type:
            return child
    return node


def reduce_node(
    arena: SyntaxArena,
    lines: Sequence[str],
    node: ArenaNode,
    language: str | None,
    patterns: PatternSet,
    terminal_types: Mapping[str, Mapping[str, str]] | None = None,
    skip_leading_types: Mapping[str, Mapping[str, str]] | None = None,
) -> DisplayLine:
    """Produce the ``DisplayLine`` shown for context node ``node``."""
    if terminal_types is None:
        terminal_types = DEFAULT_TERMINAL_TYPES
    if skip_leading_types is None:
        skip_leading_types = DEFAULT_SKIP_LEADING_TYPES

    key = type_key(node.type, patterns)
    anchor_row = node.start_row

    skip_type = skip_leading_types.get(key, {}).get(language or "")
    if skip_type:
        node = _skip_leading_children(arena, node, skip_type)

    start_row = node.start_row
    captured = _node_lines(lines, node)

    last_type = terminal_types.get(key, {}).get(language or "")
    terminal = arena.find_descendant(node, last_type) if last_type else None

    if terminal is not None:
        end_row, end_col = terminal.end
        last_index = end_row - start_row
        captured = captured[: last_index + 1]
        if captured:
            captured[-1] = captured[-1][:end_col]
    else:
        captured = captured[:1] or [""]
        end_row = start_row
        end_col = len(captured[0])

    indents = line_indents(captured)
    return DisplayLine(
        text=merge_lines(captured),
        lines=tuple(captured),
        range=(start_row, 0, end_row, end_col),
        indents=tuple(indents),
        anchor_row=anchor_row,
    )
