"""One parsed source file: text, syntax arena, and highlight captures."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from pathlib import Path

from .context.highlights import HighlightCapture
from .highlight import HighlightIndex
from .languages import language_for_path
from .source import read_text, source_lines
from .tree.arena import SyntaxArena
from .tree.parser import parse_source

CaptureSource = Callable[[int, int], Iterable[HighlightCapture]]


@dataclass(frozen=True)
class Document:
    """Inputs the context pipeline reads; never modified after construction."""

    lines: tuple[str, ...]
    language: str | None
    arena: SyntaxArena | None
    captures: CaptureSource | None = None
    path: Path | None = None
    error: str | None = None

    @classmethod
    def from_source(
        cls,
        source: str,
        language: str | None,
        path: Path | None = None,
        arena: SyntaxArena | None = None,
        highlight: bool = True,
    ) -> Document:
        """Parse ``source`` unless an ``arena`` is supplied."""
        error = None
        if arena is None and language is not None:
            arena, error = parse_source(source, language)
        captures = HighlightIndex.from_source(source, path, language) if highlight else None
        return cls(
            lines=tuple(source_lines(source)),
            language=language,
            arena=arena,
            captures=captures,
            path=path,
            error=error,
        )

    @classmethod
    def from_path(cls, path: Path, highlight: bool = True) -> Document:
        language = language_for_path(path)
        error = None
        if language is None:
            suffix = path.suffix or "<no extension>"
            error = f"No Tree-sitter grammar configured for {suffix}."
        document = cls.from_source(read_text(path), language, path=path, highlight=highlight)
        if error is not None:
            return replace(document, error=error)
        return document
