"""Context computation: matching, stacking, reducing, remapping, diffing.

Everything in this package is pure with respect to the editor: inputs are an
arena, source lines and a viewport position, outputs are plain dataclasses.
"""

from __future__ import annotations

from .differ import RenderState, diff_render, lines_changed
from .header import ContextView, compose_view, display_lines, format_gutter_label, header_spans
from .highlights import HighlightCapture, HighlightSpan, merged_column, remap_captures
from .patterns import PatternRule, PatternSet, is_context_node, type_key, word_pattern
from .reducer import DisplayLine, line_indents, merge_lines, reduce_node
from .stack import ContextEntry, build_context_stack, node_at_cursor

__all__ = [
    "ContextEntry",
    "ContextView",
    "DisplayLine",
    "HighlightCapture",
    "HighlightSpan",
    "PatternRule",
    "PatternSet",
    "RenderState",
    "build_context_stack",
    "compose_view",
    "diff_render",
    "display_lines",
    "format_gutter_label",
    "header_spans",
    "is_context_node",
    "line_indents",
    "lines_changed",
    "merge_lines",
    "merged_column",
    "node_at_cursor",
    "reduce_node",
    "remap_captures",
    "type_key",
    "word_pattern",
]
