"""Command-line front door for lazycontext.

Parses a source file, computes the sticky context header for a cursor line
and viewport top, and prints the header rows the way an editor would draw
them above the window.
"""

from __future__ import annotations

import argparse
import io
import logging
import shutil
import sys
from dataclasses import replace
from pathlib import Path

from .config import load_context_config
from .document import Document
from .highlight import DEFAULT_STYLE
from .languages import MISSING_PARSER_ERROR
from .render import TerminalRenderer
from .session import ContextSession, ViewportState


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _nonnegative_int(value: str) -> int:
    """argparse type for integer values that may be zero."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("value must be >= 0")
    return parsed


def _default_render_width() -> int:
    """Resolve default render width from current terminal size."""
    term = shutil.get_terminal_size((80, 24))
    return max(1, term.columns)


def default_gutter_width(line_count: int) -> int:
    """Line-number column width: digits plus one space, at least four cells."""
    return max(4, len(str(max(1, line_count))) + 1)


def render_context(
    path: Path,
    line: int,
    top: int | None = None,
    column: int = 0,
    max_lines: int | None = None,
    style: str = DEFAULT_STYLE,
    no_color: bool = False,
    width: int | None = None,
) -> str:
    """Return the rendered header rows for cursor ``line`` (1-based) in ``path``."""
    document = Document.from_path(path, highlight=not no_color)
    if document.arena is None:
        raise SystemExit(document.error or MISSING_PARSER_ERROR)

    overrides: dict[str, object] = {}
    if max_lines is not None:
        overrides["max_lines"] = max_lines
    config = replace(load_context_config(overrides), throttle=False)

    viewport = ViewportState(
        cursor_row=line - 1,
        cursor_column=column,
        first_visible_line=top if top is not None else line,
        width=width if width is not None else _default_render_width(),
        gutter_width=default_gutter_width(len(document.lines)),
    )
    out = io.StringIO()
    renderer = TerminalRenderer(out, style=style, no_color=no_color)
    session = ContextSession(config, renderer, lambda: document, lambda: viewport)
    session.enable()
    return out.getvalue()


def main() -> None:
    """Parse CLI arguments and print the context header for a file position."""
    parser = argparse.ArgumentParser(
        description="Show the enclosing code context (functions, classes, loops) above a line."
    )
    parser.add_argument("path", help="Source file to inspect.")
    parser.add_argument("--line", type=_positive_int, required=True, help="Cursor line (1-based).")
    parser.add_argument("--column", type=_nonnegative_int, default=0, help="Cursor column (0-based).")
    parser.add_argument(
        "--top",
        type=_positive_int,
        default=None,
        help="First visible line of the viewport (default: the cursor line).",
    )
    parser.add_argument(
        "--max-lines",
        type=_nonnegative_int,
        default=None,
        help="Maximum number of header rows (0 for no limit).",
    )
    parser.add_argument("--style", default=DEFAULT_STYLE, help="Pygments style name.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument(
        "--width",
        type=_positive_int,
        default=None,
        help="Column width of the header (default: terminal width).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log debug messages to stderr.")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    path = Path(args.path)
    if not path.is_file():
        raise SystemExit(f"Path not found: {path}")

    sys.stdout.write(
        render_context(
            path,
            args.line,
            top=args.top,
            column=args.column,
            max_lines=args.max_lines,
            style=args.style,
            no_color=args.no_color,
            width=args.width,
        )
    )


if __name__ == "__main__":
    main()
