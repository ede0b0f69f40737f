"""Compose the publishable header view from a context stack."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass

from ..tree.arena import SyntaxArena
from .highlights import HighlightCapture, HighlightSpan, remap_captures
from .patterns import PatternSet
from .reducer import DisplayLine, reduce_node
from .stack import ContextEntry


@dataclass(frozen=True)
class ContextView:
    """Everything a renderer needs to draw the header."""

    lines: tuple[str, ...]
    gutter: tuple[str, ...]
    spans: tuple[HighlightSpan, ...]
    width: int
    gutter_width: int

    @property
    def height(self) -> int:
        return max(1, len(self.lines))


def format_gutter_label(row: int, gutter_width: int) -> str:
    """Right-align the 1-based line number of ``row`` with one trailing space."""
    number = f"{row + 1}"
    padding = " " * max(0, gutter_width - 1 - len(number))
    return f"{padding}{number} "


def display_lines(
    arena: SyntaxArena,
    lines: Sequence[str],
    entries: Sequence[ContextEntry],
    language: str | None,
    patterns: PatternSet,
    terminal_types: Mapping[str, Mapping[str, str]] | None = None,
    skip_leading_types: Mapping[str, Mapping[str, str]] | None = None,
) -> list[DisplayLine]:
    return [
        reduce_node(
            arena,
            lines,
            entry.node,
            language,
            patterns,
            terminal_types=terminal_types,
            skip_leading_types=skip_leading_types,
        )
        for entry in entries
    ]


def header_spans(
    entries: Sequence[ContextEntry],
    displays: Sequence[DisplayLine],
    captures: Callable[[int, int], Iterable[HighlightCapture]] | None,
) -> list[HighlightSpan]:
    """Remap captures for every header line; no capture source means no spans."""
    if captures is None:
        return []
    spans: list[HighlightSpan] = []
    for line_index, (entry, display) in enumerate(zip(entries, displays)):
        node_end_row = entry.node.end_row
        spans.extend(remap_captures(display, line_index, captures(display.start_row, node_end_row)))
    return spans


def compose_view(
    displays: Sequence[DisplayLine],
    spans: Sequence[HighlightSpan],
    width: int,
    gutter_width: int,
) -> ContextView:
    return ContextView(
        lines=tuple(display.text for display in displays),
        gutter=tuple(format_gutter_label(display.start_row, gutter_width) for display in displays),
        spans=tuple(spans),
        width=max(1, width - gutter_width),
        gutter_width=gutter_width,
    )
