"""Pygments-backed highlight captures and terminal styling.

Source text is tokenized once per document. Each token becomes one or more
single-line ``HighlightCapture`` records whose group is the Pygments token
type name (``Token.Keyword``, ``Token.Name.Function``, ...). The same group
names are resolved back to terminal colors through a Pygments style.
"""

from __future__ import annotations

import bisect
import logging
from functools import lru_cache
from pathlib import Path

from pygments.lexer import Lexer
from pygments.lexers import TextLexer, get_lexer_by_name, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.token import Text, string_to_tokentype
from pygments.util import ClassNotFound

from .context.highlights import HighlightCapture

logger = logging.getLogger(__name__)

DEFAULT_STYLE = "monokai"


def lexer_for(path: Path | None = None, language: str | None = None, source: str = "") -> Lexer:
    """Pick a Pygments lexer by file name, then language name, then plain text."""
    if path is not None:
        try:
            return get_lexer_for_filename(path.name, source)
        except ClassNotFound:
            pass
    if language:
        try:
            return get_lexer_by_name(language)
        except ClassNotFound:
            logger.debug("no Pygments lexer for %s", language)
    return TextLexer()


def _is_plain(token_type) -> bool:
    return token_type in Text


def tokenize_captures(source: str, lexer: Lexer) -> list[HighlightCapture]:
    """Tokenize ``source`` into single-line captures in document order.

    Plain text and whitespace tokens carry no highlight and are omitted.
    """
    captures: list[HighlightCapture] = []
    row = 0
    col = 0
    for _index, token_type, value in lexer.get_tokens_unprocessed(source):
        pieces = value.split("\n")
        for piece_index, piece in enumerate(pieces):
            if piece_index > 0:
                row += 1
                col = 0
            text = piece.rstrip("\r")
            if text.strip() and not _is_plain(token_type):
                captures.append(
                    HighlightCapture(
                        start_row=row,
                        start_col=col,
                        end_row=row,
                        end_col=col + len(text),
                        group=str(token_type),
                    )
                )
            col += len(piece)
    return captures


class HighlightIndex:
    """Row-indexed captures for one document, queried per header node."""

    def __init__(self, captures: list[HighlightCapture]) -> None:
        self._captures = sorted(captures, key=lambda item: (item.start_row, item.start_col))
        self._rows = [capture.start_row for capture in self._captures]

    @classmethod
    def from_source(cls, source: str, path: Path | None = None, language: str | None = None) -> HighlightIndex:
        return cls(tokenize_captures(source, lexer_for(path, language, source)))

    def __call__(self, start_row: int, end_row: int) -> list[HighlightCapture]:
        """Captures starting on rows ``start_row..end_row`` inclusive, in order."""
        lo = bisect.bisect_left(self._rows, start_row)
        hi = bisect.bisect_right(self._rows, end_row)
        return self._captures[lo:hi]


@lru_cache(maxsize=16)
def _style_class(style: str):
    try:
        return get_style_by_name(style)
    except ClassNotFound:
        logger.debug("unknown Pygments style %s, using %s", style, DEFAULT_STYLE)
        return get_style_by_name(DEFAULT_STYLE)


@lru_cache(maxsize=1024)
def sgr_for_group(group: str, style: str = DEFAULT_STYLE) -> str:
    """Return the SGR parameter string for a highlight group, or ``""``."""
    style_class = _style_class(style)
    # Group names are full token paths; the parser expects them relative to Token.
    try:
        token_type = string_to_tokentype(group[len("Token.") :] if group.startswith("Token.") else group)
        spec = style_class.style_for_token(token_type)
    except (AttributeError, KeyError):
        return ""

    params: list[str] = []
    if spec.get("bold"):
        params.append("1")
    if spec.get("italic"):
        params.append("3")
    color = spec.get("color")
    if color:
        red, green, blue = int(color[0:2], 16), int(color[2:4], 16), int(color[4:6], 16)
        params.append(f"38;2;{red};{green};{blue}")
    return ";".join(params)
