"""Remapping highlight captures into merged header coordinates."""

from __future__ import annotations

import unittest

from fake_syntax import JS_FUNCTION_LINES, arena_for, find_type, js_function_tree
from lazycontext.config import build_config
from lazycontext.context.highlights import HighlightCapture, HighlightSpan, merged_column, remap_captures
from lazycontext.context.reducer import DisplayLine, line_indents, merge_lines, reduce_node


def _capture(row: int, start: int, end: int, group: str, end_row: int | None = None) -> HighlightCapture:
    return HighlightCapture(
        start_row=row,
        start_col=start,
        end_row=row if end_row is None else end_row,
        end_col=end,
        group=group,
    )


def _display(lines: list[str], start_row: int, end_col: int | None = None) -> DisplayLine:
    end_row = start_row + len(lines) - 1
    return DisplayLine(
        text=merge_lines(lines),
        lines=tuple(lines),
        range=(start_row, 0, end_row, len(lines[-1]) if end_col is None else end_col),
        indents=tuple(line_indents(lines)),
        anchor_row=start_row,
    )


class RemapCapturesTests(unittest.TestCase):
    def setUp(self) -> None:
        arena = arena_for(js_function_tree())
        function = find_type(arena, "function_declaration")
        self.display = reduce_node(arena, JS_FUNCTION_LINES, function, "javascript", build_config().pattern_set)

    def test_wrapped_parameters_land_on_merged_characters(self) -> None:
        captures = [
            _capture(1, 0, 8, "keyword"),
            _capture(1, 9, 12, "function"),
            _capture(1, 13, 14, "parameter"),
            _capture(2, 13, 14, "parameter"),
            _capture(2, 16, 17, "parameter"),
            _capture(2, 17, 18, "punctuation"),
        ]

        spans = remap_captures(self.display, 0, captures)

        text = self.display.text
        self.assertEqual(
            [(text[span.start_col : span.end_col], span.group) for span in spans],
            [
                ("function", "keyword"),
                ("foo", "function"),
                ("a", "parameter"),
                ("b", "parameter"),
                ("c", "parameter"),
                (")", "punctuation"),
            ],
        )
        self.assertEqual(spans[3], HighlightSpan(line=0, start_col=16, end_col=17, group="parameter"))

    def test_scanning_stops_at_first_capture_past_truncation(self) -> None:
        captures = [
            _capture(1, 0, 8, "keyword"),
            _capture(2, 19, 20, "punctuation"),
            _capture(2, 13, 14, "parameter"),
            _capture(3, 2, 5, "keyword"),
        ]

        spans = remap_captures(self.display, 2, captures)

        self.assertEqual(spans, [HighlightSpan(line=2, start_col=0, end_col=8, group="keyword")])

    def test_captures_before_node_start_are_skipped(self) -> None:
        captures = [_capture(0, 0, 7, "comment"), _capture(1, 9, 12, "function")]

        spans = remap_captures(self.display, 0, captures)

        self.assertEqual(spans, [HighlightSpan(line=0, start_col=9, end_col=12, group="function")])

    def test_first_line_capture_has_zero_offset(self) -> None:
        display = _display(["    while running:"], start_row=4)

        spans = remap_captures(display, 1, [_capture(4, 4, 9, "keyword")])

        self.assertEqual(spans, [HighlightSpan(line=1, start_col=4, end_col=9, group="keyword")])
        self.assertEqual(merged_column(display, 4, 4), 4)

    def test_capture_inside_stripped_indentation_is_dropped(self) -> None:
        display = _display(["f(a,", "      b)"], start_row=1)

        spans = remap_captures(display, 0, [_capture(2, 2, 7, "whitespace"), _capture(2, 6, 7, "parameter")])

        self.assertEqual(spans, [HighlightSpan(line=0, start_col=5, end_col=6, group="parameter")])
        self.assertEqual(display.text[5:6], "b")

    def test_multi_line_capture_ends_on_its_own_line(self) -> None:
        display = _display(["call(x,", "   'a',", "   y)"], start_row=1)

        spans = remap_captures(display, 0, [_capture(1, 5, 6, "string", end_row=2)])

        self.assertEqual(spans, [HighlightSpan(line=0, start_col=5, end_col=11, group="string")])
        self.assertEqual(display.text, "call(x, 'a', y)")

    def test_every_character_maps_to_its_merged_position(self) -> None:
        lines = ["if (ready &&", "      \tsteady ||", "  go)"]
        display = _display(lines, start_row=7)
        for k, line in enumerate(lines):
            for column in range(display.indents[k], len(line)):
                merged = merged_column(display, 7 + k, column)
                self.assertEqual(display.text[merged], line[column])
        self.assertIsNone(merged_column(display, 6, 0))
        self.assertIsNone(merged_column(display, 10, 0))


if __name__ == "__main__":
    unittest.main()
