"""Terminal rendering of a ``ContextView``.

Rows are gutter label plus header text, colored from a Pygments style and
clipped to the view width. Nothing here decides what to show; that is done
before a view reaches the renderer.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import TextIO

from .ansi import RESET, format_sticky_header_line
from .context.header import ContextView
from .context.highlights import HighlightSpan
from .highlight import DEFAULT_STYLE, sgr_for_group
from .source import sanitize_terminal_text

GUTTER_SGR = "2;38;5;245"


def styled_header_text(
    text: str,
    spans: Sequence[HighlightSpan],
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
) -> str:
    """Apply span colors to ``text``; later spans win where spans overlap."""
    if no_color or not spans:
        return sanitize_terminal_text(text)

    column_sgr = [""] * len(text)
    for span in spans:
        sgr = sgr_for_group(span.group, style)
        for column in range(max(0, span.start_col), min(len(text), span.end_col)):
            column_sgr[column] = sgr

    out: list[str] = []
    start = 0
    while start < len(text):
        end = start + 1
        while end < len(text) and column_sgr[end] == column_sgr[start]:
            end += 1
        segment = sanitize_terminal_text(text[start:end])
        if column_sgr[start]:
            out.append(f"\033[{column_sgr[start]}m{segment}{RESET}")
        else:
            out.append(segment)
        start = end
    return "".join(out)


def render_rows(view: ContextView, style: str = DEFAULT_STYLE, no_color: bool = False) -> list[str]:
    """Format every header row of ``view`` for a terminal."""
    rows: list[str] = []
    for index, text in enumerate(view.lines):
        line_spans = [span for span in view.spans if span.line == index]
        body = format_sticky_header_line(
            styled_header_text(text, line_spans, style, no_color),
            view.width,
            color=not no_color,
        )
        gutter = view.gutter[index] if index < len(view.gutter) else ""
        if gutter and not no_color:
            gutter = f"\033[{GUTTER_SGR}m{gutter}{RESET}"
        rows.append(f"{gutter}{body}")
    return rows


class TerminalRenderer:
    """Writes header rows to a text stream and remembers what is displayed."""

    def __init__(self, stream: TextIO | None = None, style: str = DEFAULT_STYLE, no_color: bool = False) -> None:
        self._stream = stream
        self.style = style
        self.no_color = no_color
        self.rows: list[str] = []
        self.shown = 0

    def show(self, view: ContextView) -> None:
        self.rows = render_rows(view, self.style, self.no_color)
        self.shown += 1
        stream = self._stream if self._stream is not None else sys.stdout
        for row in self.rows:
            stream.write(row)
            stream.write("\n")
        stream.flush()

    def close(self) -> None:
        self.rows = []
