"""Pygments token captures and style resolution."""

from __future__ import annotations

import unittest
from pathlib import Path

from pygments.lexers import PythonLexer

from lazycontext.context.highlights import HighlightCapture
from lazycontext.highlight import HighlightIndex, lexer_for, sgr_for_group, tokenize_captures


class TokenizeCapturesTests(unittest.TestCase):
    def test_python_tokens_become_single_line_captures(self) -> None:
        source = 'def run(x):\n    return """a\nb"""\n'

        captures = tokenize_captures(source, PythonLexer())

        self.assertIn(HighlightCapture(0, 0, 0, 3, "Token.Keyword"), captures)
        self.assertIn(HighlightCapture(0, 4, 0, 7, "Token.Name.Function"), captures)
        self.assertIn(HighlightCapture(1, 4, 1, 10, "Token.Keyword"), captures)
        lines = source.split("\n")
        for capture in captures:
            self.assertEqual(capture.start_row, capture.end_row)
            self.assertLess(capture.start_col, capture.end_col)
            self.assertTrue(lines[capture.start_row][capture.start_col : capture.end_col].strip())
        self.assertTrue(any(capture.start_row == 2 for capture in captures))

    def test_whitespace_and_plain_text_are_not_captured(self) -> None:
        captures = tokenize_captures("plain words\n", lexer_for(language="text"))

        self.assertEqual(captures, [])

    def test_lexer_selection_prefers_file_name(self) -> None:
        self.assertEqual(lexer_for(Path("demo.py")).name, "Python")
        self.assertEqual(lexer_for(None, "javascript").name, "JavaScript")
        self.assertEqual(lexer_for(Path("notes.unknown-ext"), "no-such-language").name, "Text only")


class HighlightIndexTests(unittest.TestCase):
    def test_rows_are_selected_inclusively_in_document_order(self) -> None:
        index = HighlightIndex(
            [
                HighlightCapture(3, 0, 3, 1, "c"),
                HighlightCapture(1, 5, 1, 6, "b"),
                HighlightCapture(1, 0, 1, 1, "a"),
                HighlightCapture(5, 0, 5, 1, "d"),
            ]
        )

        self.assertEqual([capture.group for capture in index(1, 3)], ["a", "b", "c"])
        self.assertEqual(index(6, 9), [])

    def test_from_source_uses_path_lexer(self) -> None:
        index = HighlightIndex.from_source("class A:\n    pass\n", Path("a.py"))

        self.assertEqual(index(0, 0)[0], HighlightCapture(0, 0, 0, 5, "Token.Keyword"))


class StyleResolutionTests(unittest.TestCase):
    def test_token_groups_resolve_to_truecolor_sgr(self) -> None:
        self.assertIn("38;2;102;217;239", sgr_for_group("Token.Keyword", "monokai"))

    def test_unknown_groups_and_styles_are_harmless(self) -> None:
        self.assertEqual(sgr_for_group("not-a-token-group", "monokai"), "")
        self.assertEqual(sgr_for_group("Token.Keyword", "no-such-style"), sgr_for_group("Token.Keyword", "monokai"))


if __name__ == "__main__":
    unittest.main()
