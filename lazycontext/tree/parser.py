"""Tree-sitter parser loading and arena construction."""

from __future__ import annotations

import logging
from functools import lru_cache

from ..languages import MISSING_PARSER_ERROR
from ..source import source_lines
from .arena import SyntaxArena

logger = logging.getLogger(__name__)


@lru_cache(maxsize=32)
def load_parser(language_name: str):
    """Load a Tree-sitter parser using supported provider packages.

    Tries ``tree_sitter_language_pack`` first, then ``tree_sitter_languages``.
    Returns ``(parser, error_message)``.
    """
    errors: list[str] = []

    try:
        from tree_sitter_language_pack import get_parser

        return get_parser(language_name), None
    except ModuleNotFoundError:
        pass
    except Exception as exc:
        errors.append(f"Failed to load Tree-sitter parser for {language_name}: {exc}")

    try:
        from tree_sitter_languages import get_parser

        return get_parser(language_name), None
    except ModuleNotFoundError:
        pass
    except Exception as exc:
        errors.append(f"Failed to load Tree-sitter parser for {language_name}: {exc}")

    if errors:
        return None, errors[0]

    return None, MISSING_PARSER_ERROR


def parse_source(source: str, language_name: str) -> tuple[SyntaxArena | None, str | None]:
    """Parse ``source`` and snapshot it into an arena.

    Returns ``(arena, error_message)``; the arena is ``None`` when no grammar
    is available or parsing fails.
    """
    parser, parser_error = load_parser(language_name)
    if parser is None:
        logger.debug("no parser for %s: %s", language_name, parser_error)
        return None, parser_error or MISSING_PARSER_ERROR

    try:
        tree = parser.parse(source.encode("utf-8", errors="replace"))
    except Exception as exc:
        logger.debug("parse failed for %s", language_name, exc_info=True)
        return None, f"Tree-sitter parse failed: {exc}"

    return SyntaxArena.from_tree_sitter(tree.root_node, source_lines(source)), None
