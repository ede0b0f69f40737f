"""Project highlight captures from source coordinates onto merged header lines.

A header line is built as ``lines[0] + " " + lines[1].lstrip() + " " + ...``,
so a character at column ``c`` of captured line ``k`` lands at::

    k + sum(len(lines[j]) - indents[j] for j < k) + c - indents[k]

in the merged text. Each earlier line contributes its stripped length plus
one joiner, and line ``k`` loses its own stripped indentation.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .reducer import LINE_JOINER, DisplayLine


@dataclass(frozen=True)
class HighlightCapture:
    """A highlight group applied to a source range (end exclusive)."""

    start_row: int
    start_col: int
    end_row: int
    end_col: int
    group: str


@dataclass(frozen=True)
class HighlightSpan:
    """A highlight group applied to columns of one header line."""

    line: int
    start_col: int
    end_col: int
    group: str


def line_offsets(display: DisplayLine) -> list[int]:
    """Column shift for each captured line of ``display``."""
    offsets: list[int] = []
    consumed = 0
    for line, indent in zip(display.lines, display.indents):
        offsets.append(consumed - indent)
        consumed += len(line) - indent + len(LINE_JOINER)
    return offsets


def merged_column(display: DisplayLine, row: int, column: int) -> int | None:
    """Map source ``(row, column)`` into ``display.text``; ``None`` if not captured."""
    line_index = row - display.start_row
    if line_index < 0 or line_index >= len(display.lines):
        return None
    return column + line_offsets(display)[line_index]


def remap_captures(
    display: DisplayLine,
    line_index: int,
    captures: Iterable[HighlightCapture],
) -> list[HighlightSpan]:
    """Convert ``captures`` (in document order) into spans on header ``line_index``.

    Captures starting above the header's node are skipped. Scanning stops at
    the first capture ending past the truncation boundary. Captures that
    would land outside the merged text, or inside indentation that was
    stripped, are dropped.
    """
    start_row, _start_col, end_row, end_col = display.range
    first_row = max(start_row, display.anchor_row)
    offsets = line_offsets(display)
    text_length = len(display.text)

    spans: list[HighlightSpan] = []
    for capture in captures:
        if capture.end_row > end_row or (capture.end_row == end_row and capture.end_col > end_col):
            break
        if capture.start_row < first_row:
            continue

        first_index = capture.start_row - start_row
        last_index = capture.end_row - start_row
        if first_index >= len(offsets) or last_index >= len(offsets):
            continue
        if first_index > 0 and capture.start_col < display.indents[first_index]:
            continue

        span_start = capture.start_col + offsets[first_index]
        span_end = capture.end_col + offsets[last_index]
        if span_start < 0 or span_end > text_length or span_end <= span_start:
            continue
        spans.append(
            HighlightSpan(
                line=line_index,
                start_col=span_start,
                end_col=span_end,
                group=capture.group,
            )
        )
    return spans
