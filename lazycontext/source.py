"""Source loading and sanitization for header text."""

from __future__ import annotations

import re
from pathlib import Path

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def read_text(path: Path) -> str:
    """Read text using tolerant encoding fallback order.

    Attempts UTF-8, UTF-8 with BOM, then latin-1; as a final fallback decodes
    raw bytes with UTF-8 replacement semantics.
    """
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def source_lines(source: str) -> list[str]:
    """Split source on newlines the way Tree-sitter counts rows; CRLF endings are trimmed."""
    return [line[:-1] if line.endswith("\r") else line for line in source.split("\n")]


def sanitize_terminal_text(text: str) -> str:
    """Escape terminal control bytes so header rows cannot move the cursor.

    Each escaped byte becomes four visible characters, so callers apply this
    per styled segment, after highlight columns have been resolved.
    """
    if _CONTROL_RE.search(text) is None:
        return text

    out: list[str] = []
    for ch in text:
        code = ord(ch)
        if ch == "\t":
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)
