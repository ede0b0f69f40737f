"""ANSI-aware text measurement and header row shaping.

Clipping preserves escape sequences so colored header rows stay aligned when
color codes, tabs and wide characters are present.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8
RESET = "\033[0m"


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def ansi_display_width(text: str) -> int:
    """Return display width after removing ANSI escape sequences."""
    col = 0
    for ch in ANSI_ESCAPE_RE.sub("", text):
        col += char_display_width(ch, col)
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    Tabs are expanded into spaces so clipping aligns with rendered terminal cells.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        w = char_display_width(ch, col)
        if col + w > max_cols:
            break
        out.append(" " * w if ch == "\t" else ch)
        col += w
        i += 1

    return "".join(out)


def underline_with_ansi(text: str) -> str:
    """Underline text while preserving existing ANSI color/style sequences.

    For SGR sequences the underline attribute is re-applied after each style
    reset/change so nested colorized tokens remain underlined end-to-end.
    """
    if not text:
        return text

    out: list[str] = ["\033[4m"]
    idx = 0
    while idx < len(text):
        if text[idx] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, idx)
            if match is not None:
                seq = match.group(0)
                if seq.endswith("m"):
                    params = seq[2:-1]
                    if params:
                        out.append(f"\033[{params};4m")
                    else:
                        out.append("\033[4m")
                else:
                    out.append(seq)
                idx = match.end()
                continue
        out.append(text[idx])
        idx += 1

    out.append("\033[24m")
    return "".join(out)


def format_sticky_header_line(text: str, width: int, color: bool = True) -> str:
    """Format one header row, clipped to ``width`` and padded with a separator.

    Without ``color`` the row is neither underlined nor dimmed.
    """
    if width <= 0:
        return ""

    line_text = clip_ansi_line(text, width)
    styled = underline_with_ansi(line_text) if color else line_text
    line_width = ansi_display_width(line_text)
    if line_width >= width:
        return styled

    separator = "─" * (width - line_width)
    if not color:
        return f"{styled}{separator}"
    return f"{styled}\033[2;38;5;245m{separator}{RESET}"
