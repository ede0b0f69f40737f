"""Index-based syntax arena built from tree-sitter style nodes."""

from __future__ import annotations

import unittest

from fake_syntax import arena_for, find_type, node, py_nested_tree
from lazycontext.tree.arena import SyntaxArena


class SyntaxArenaTests(unittest.TestCase):
    def test_snapshot_preserves_preorder_and_parent_indices(self) -> None:
        arena = arena_for(py_nested_tree())

        root = arena.root
        assert root is not None
        self.assertEqual(root.type, "module")
        self.assertIsNone(root.parent)
        self.assertEqual([child.type for child in arena.named_children(root)], ["comment", "class_definition"])

        for item in arena:
            for child in arena.named_children(item):
                self.assertEqual(child.parent, item.index)
                self.assertGreater(child.index, item.index)

    def test_ancestors_walk_to_root(self) -> None:
        arena = arena_for(py_nested_tree())
        call = find_type(arena, "call")

        self.assertEqual(
            [item.type for item in arena.ancestors(call)],
            [
                "call",
                "expression_statement",
                "block",
                "if_statement",
                "block",
                "for_statement",
                "block",
                "function_definition",
                "block",
                "class_definition",
                "module",
            ],
        )

    def test_node_at_returns_deepest_named_node(self) -> None:
        arena = arena_for(py_nested_tree())

        self.assertEqual(arena.node_at(5, 16).type, "identifier")
        self.assertEqual(arena.node_at(5, 19).type, "argument_list")
        # Indentation before the if statement belongs to the enclosing loop.
        self.assertEqual(arena.node_at(4, 2).type, "for_statement")
        self.assertEqual(arena.node_at(0, 2).type, "comment")
        self.assertEqual(arena.node_at(99, 0).type, "module")

    def test_empty_arena(self) -> None:
        arena = SyntaxArena([])

        self.assertIsNone(arena.root)
        self.assertIsNone(arena.node_at(0, 0))
        self.assertEqual(len(arena), 0)

    def test_find_descendant_prefers_shallow_matches(self) -> None:
        root = node(
            "root",
            (0, 0),
            (3, 0),
            node("wrapper", (0, 0), (1, 0), node("target", (0, 1), (0, 2))),
            node("target", (2, 0), (2, 5)),
        )
        arena = arena_for(root)

        found = arena.find_descendant(arena.root, "target")

        self.assertEqual(found.start, (2, 0))
        self.assertIsNone(arena.find_descendant(arena.root, "missing"))

    def test_byte_columns_are_converted_to_characters(self) -> None:
        lines = ["# é", "def café(x):", "    pass"]
        root = node(
            "module",
            (0, 0),
            (2, 8),
            node("comment", (0, 0), (0, 4)),
            node("function_definition", (1, 0), (2, 8), node("parameters", (1, 9), (1, 12))),
        )

        arena = SyntaxArena.from_tree_sitter(root, lines)

        self.assertEqual(find_type(arena, "comment").end, (0, 3))
        self.assertEqual(find_type(arena, "parameters").start, (1, 8))
        self.assertEqual(find_type(arena, "parameters").end, (1, 11))
        self.assertEqual(find_type(arena, "function_definition").end, (2, 8))


if __name__ == "__main__":
    unittest.main()
