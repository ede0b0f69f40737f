"""Syntax tree access: parser loading and index-based node arenas."""

from __future__ import annotations

from .arena import ArenaNode, SyntaxArena
from .parser import load_parser, parse_source

__all__ = ["ArenaNode", "SyntaxArena", "load_parser", "parse_source"]
