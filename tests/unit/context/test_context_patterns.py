"""Pattern matching rules for context-worthy node types."""

from __future__ import annotations

import unittest

from lazycontext.config import build_config
from lazycontext.context.patterns import PatternRule, PatternSet, is_context_node, type_key, word_pattern


class PatternMatcherTests(unittest.TestCase):
    def setUp(self) -> None:
        self.patterns = build_config().pattern_set

    def test_default_rules_match_whole_words_split_by_underscores(self) -> None:
        self.assertEqual(is_context_node("function_definition", "python", self.patterns), (True, "function"))
        self.assertEqual(is_context_node("arrow_function", "javascript", self.patterns), (True, "function"))
        self.assertEqual(is_context_node("if_statement", "python", self.patterns), (True, "if"))
        self.assertEqual(is_context_node("identifier", "python", self.patterns), (False, None))
        self.assertEqual(is_context_node("functions", "python", self.patterns), (False, None))

    def test_language_rules_only_apply_to_their_language(self) -> None:
        self.assertEqual(is_context_node("impl_item", "rust", self.patterns), (True, "impl_item"))
        self.assertEqual(is_context_node("impl_item", "python", self.patterns), (False, None))
        self.assertEqual(is_context_node("impl_item", None, self.patterns), (False, None))

    def test_default_rules_win_over_language_rules(self) -> None:
        patterns = PatternSet.build({"default": ["class"], "python": ["class_definition"]})
        self.assertEqual(is_context_node("class_definition", "python", patterns), (True, "class"))

    def test_rule_order_breaks_ties(self) -> None:
        patterns = PatternSet.build({"default": ["method", "function"]})
        self.assertEqual(is_context_node("function_method", "go", patterns), (True, "method"))
        reordered = PatternSet.build({"default": ["function", "method"]})
        self.assertEqual(is_context_node("function_method", "go", reordered), (True, "function"))

    def test_exact_languages_require_equality(self) -> None:
        patterns = PatternSet.build(
            {"default": [], "lua": ["function_declaration"]},
            exact_patterns={"lua": True},
        )
        self.assertEqual(is_context_node("function_declaration", "lua", patterns), (True, "function_declaration"))
        self.assertEqual(is_context_node("local_function_declaration", "lua", patterns), (False, None))

    def test_unmatchable_rule_is_inert(self) -> None:
        patterns = PatternSet.build({"default": ["(unclosed"]})
        self.assertEqual(is_context_node("function_definition", "python", patterns), (False, None))

    def test_type_key_uses_first_default_rule_or_raw_type(self) -> None:
        self.assertEqual(type_key("method_declaration", self.patterns), "method")
        self.assertEqual(type_key("impl_item", self.patterns), "impl_item")

    def test_pattern_sets_are_hashable_for_memoization(self) -> None:
        first = PatternSet.build({"default": ["class"]})
        second = PatternSet.build({"default": ["class"]})
        self.assertEqual(first, second)
        self.assertEqual(hash(first), hash(second))
        self.assertEqual(PatternRule.compile("class"), PatternRule.compile("class"))

    def test_word_pattern_frontiers(self) -> None:
        self.assertEqual(word_pattern("for"), "(?<![0-9A-Za-z])for(?![0-9A-Za-z])")
        self.assertEqual(is_context_node("for_in_statement", "javascript", self.patterns), (True, "for"))
        self.assertEqual(is_context_node("format_string", "python", self.patterns), (False, None))


if __name__ == "__main__":
    unittest.main()
