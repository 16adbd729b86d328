#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
test_llrb_tree.py
-----------------

Exercises the LLRBTree balancing engine:

* the concrete scenarios (empty tree, one key, two keys, 1..6, 0..74)
* insert / overwrite / delete round trips
* delete_min draining a tree in ascending order
* randomised insert/delete compared against Python's built‑in dict, with
  ``validate()`` after every mutation
* detection of corrupted trees by ``validate()``
* text rendering and debug tracing
"""

import math
import random
import unittest
from unittest import mock
from typing import List

from llrb_node import BLACK, RED, MemoryStorage, Node
from llrb_tree import LLRBTree

WORDS = ["one", "two", "three", "four", "five", "six"]


class CountingStorage(MemoryStorage):
    """In‑memory backend that remembers which keys were released."""

    def __init__(self) -> None:
        self.released: List[int] = []

    def release(self, node: Node) -> None:
        self.released.append(node.key)


class TestLLRBTree(unittest.TestCase):
    # ------------------------------------------------------------------
    #  Concrete scenarios
    # ------------------------------------------------------------------
    def test_empty_tree(self):
        tree = LLRBTree[int, str]()
        self.assertEqual(tree.size(), 0)
        self.assertEqual(len(tree), 0)
        self.assertFalse(tree)
        self.assertTrue(tree.is_empty())
        self.assertIsNone(tree.root)
        self.assertIsNone(tree.search(42))
        self.assertEqual(tree.max_depth(), 0)
        tree.validate()

    def test_single_key(self):
        tree = LLRBTree[int, str]()
        tree.insert(1, "one")
        self.assertEqual(tree.search(1), "one")
        self.assertEqual(tree.root.color, BLACK)
        self.assertEqual(tree.size(), 1)
        tree.validate()

    def test_two_keys(self):
        tree = LLRBTree[int, str]()
        tree.insert(1, "one")
        tree.insert(2, "two")
        self.assertEqual(tree.search(1), "one")
        self.assertEqual(tree.search(2), "two")
        self.assertEqual(tree.size(), 2)
        tree.validate()

        # the red link leans left: 2 is the root, 1 hangs red on its left
        self.assertEqual(tree.root.key, 2)
        self.assertEqual(tree.root.left.color, RED)
        self.assertIsNone(tree.root.right)

    def test_three_ascending_keys_balance(self):
        tree = LLRBTree[int, str]()
        for k in (1, 2, 3):
            tree.insert(k, str(k))
        tree.validate()
        self.assertEqual(tree.root.key, 2)
        self.assertEqual(tree.root.left.color, BLACK)
        self.assertEqual(tree.root.right.color, BLACK)
        self.assertEqual(tree.black_height(), 2)

    def test_six_keys(self):
        tree = LLRBTree[int, str]()
        for k, word in enumerate(WORDS, start=1):
            tree.insert(k, word)
        self.assertEqual(tree.search(1), "one")
        self.assertEqual(tree.search(5), "five")
        self.assertEqual(tree.size(), 6)
        tree.validate()

    def test_delete_from_six_keys(self):
        tree = LLRBTree[int, str](zip(range(1, 7), WORDS))
        tree.delete(3)
        self.assertEqual(tree.size(), 5)
        self.assertIsNone(tree.search(3))
        for k, word in zip(range(1, 7), WORDS):
            if k != 3:
                self.assertEqual(tree.search(k), word)
        tree.validate()

    def test_lots_of_keys(self):
        tree = LLRBTree[int, str]()
        for i in range(75):
            tree.insert(i, str(i))
            tree.validate()
        self.assertEqual(tree.size(), 75)
        self.assertLessEqual(tree.max_depth(), 2 * math.ceil(math.log2(75)))

    def test_delete_only_key(self):
        tree = LLRBTree[int, str]()
        tree.insert(1, "one")
        tree.delete(1)
        self.assertEqual(tree.size(), 0)
        self.assertIsNone(tree.root)
        self.assertIsNone(tree.search(1))
        tree.validate()

    # ------------------------------------------------------------------
    #  Round trips
    # ------------------------------------------------------------------
    def test_overwrite_keeps_size(self):
        tree = LLRBTree[int, str]()
        for k in range(10):
            tree.insert(k, "old")
        tree.insert(4, "a")
        tree.insert(4, "b")
        self.assertEqual(tree.search(4), "b")
        self.assertEqual(tree.size(), 10)
        tree.validate()

    def test_insert_then_delete_restores_size(self):
        tree = LLRBTree[int, int]((k, k) for k in range(0, 40, 2))
        before = tree.size()
        tree.insert(17, 17)
        self.assertEqual(tree.search(17), 17)
        tree.delete(17)
        self.assertIsNone(tree.search(17))
        self.assertEqual(tree.size(), before)
        tree.validate()

    def test_delete_absent_key_is_noop(self):
        tree = LLRBTree[int, str]((k, str(k)) for k in range(20))
        snapshot = tree.render()
        tree.delete(100)
        tree.delete(-5)
        tree.delete(7.5)
        self.assertEqual(tree.render(), snapshot)
        self.assertEqual(tree.size(), 20)
        tree.validate()

        empty = LLRBTree[int, str]()
        empty.delete(1)
        self.assertEqual(empty.size(), 0)

    def test_delete_min_drains_in_order(self):
        keys = list(range(1, 51))
        random.Random(7).shuffle(keys)
        tree = LLRBTree[int, str]((k, str(k)) for k in keys)

        drained = []
        for _ in range(50):
            key, value = tree.delete_min()
            self.assertEqual(value, str(key))
            drained.append(key)
            tree.validate()

        self.assertEqual(drained, list(range(1, 51)))
        self.assertTrue(tree.is_empty())
        with self.assertRaises(ValueError):
            tree.delete_min()

    # ------------------------------------------------------------------
    #  Mapping conveniences
    # ------------------------------------------------------------------
    def test_mapping_protocol(self):
        tree = LLRBTree[str, int]()
        tree["b"] = 2
        tree["a"] = 1
        self.assertEqual(tree["a"], 1)
        self.assertIn("b", tree)
        self.assertNotIn("c", tree)
        self.assertEqual(tree.get("c", 0), 0)

        with self.assertRaises(KeyError):
            tree["c"]
        with self.assertRaises(KeyError):
            del tree["c"]

        del tree["a"]
        self.assertNotIn("a", tree)
        self.assertEqual(len(tree), 1)

    def test_bytes_keys(self):
        tree = LLRBTree[bytes, int]()
        blobs = [b"\x00", b"\xff", b"abc", b"ab", b""]
        for i, blob in enumerate(blobs):
            tree.insert(blob, i)
        tree.validate()
        self.assertEqual(tree.search(b"ab"), 3)
        self.assertEqual(tree.delete_min(), (b"", 4))

    def test_incomparable_keys_raise(self):
        tree = LLRBTree()
        tree.insert(1, "one")
        with self.assertRaises(TypeError):
            tree.insert("one", 1)

    def test_stored_none_is_distinguishable(self):
        tree = LLRBTree[int, object]()
        tree.insert(1, None)
        missing = object()
        self.assertIsNone(tree.search(1))
        self.assertIn(1, tree)
        self.assertIsNone(tree.get(1, missing))
        self.assertIs(tree.get(2, missing), missing)
        self.assertIsNone(tree[1])

    def test_delitem_walks_the_path_once(self):
        tree = LLRBTree[int, int]((k, k) for k in range(20))
        with mock.patch.object(
            LLRBTree, "_search_node", autospec=True, side_effect=LLRBTree._search_node
        ) as search_node:
            del tree[7]
        self.assertEqual(search_node.call_count, 1)
        self.assertNotIn(7, tree)
        self.assertEqual(tree.size(), 19)
        tree.validate()

    # ------------------------------------------------------------------
    #  Storage hand‑off
    # ------------------------------------------------------------------
    def test_each_excised_node_is_released_once(self):
        storage = CountingStorage()
        tree = LLRBTree[int, int](((k, k) for k in range(30)), storage=storage)
        self.assertIs(tree.storage, storage)
        self.assertEqual(storage.released, [])

        tree.insert(5, -5)
        self.assertEqual(storage.released, [])

        for expected_released, k in enumerate((10, 0, 29, 15), start=1):
            tree.delete(k)
            self.assertEqual(len(storage.released), expected_released)
        tree.delete(1000)
        self.assertEqual(len(storage.released), 4)
        self.assertEqual(tree.size(), 26)

    # ------------------------------------------------------------------
    #  Randomised stress test vs. Python dict
    # ------------------------------------------------------------------
    def test_random_operations_against_dict(self):
        rng = random.Random(12345)
        tree = LLRBTree[int, int]()
        reference = {}

        for _ in range(3_000):
            op = rng.choice(["insert", "insert", "delete", "delete_min"])
            k = rng.randrange(0, 300)
            if op == "insert":
                v = rng.randint(-1_000, 1_000)
                tree.insert(k, v)
                reference[k] = v
            elif op == "delete":
                tree.delete(k)
                reference.pop(k, None)
            elif reference:
                smallest = min(reference)
                self.assertEqual(tree.delete_min(), (smallest, reference.pop(smallest)))

            tree.validate()

        self.assertEqual(tree.size(), len(reference))
        for k in range(300):
            self.assertEqual(tree.search(k), reference.get(k))

    # ------------------------------------------------------------------
    #  Validation catches corrupted trees
    # ------------------------------------------------------------------
    def test_validate_detects_red_root(self):
        tree = LLRBTree[int, str]((k, str(k)) for k in range(1, 8))
        tree.validate()
        tree.root.color = RED
        with self.assertRaises(AssertionError):
            tree.validate()

    def test_validate_detects_right_leaning_red(self):
        tree = LLRBTree[int, str]((k, str(k)) for k in range(1, 8))
        tree.root.right.color = RED
        with self.assertRaises(AssertionError):
            tree.validate()

    def test_validate_detects_key_order(self):
        tree = LLRBTree[int, str]((k, str(k)) for k in range(1, 8))
        tree.root.left.key = 100
        with self.assertRaises(AssertionError):
            tree.validate()

    def test_validate_detects_black_imbalance(self):
        tree = LLRBTree[int, str]((k, str(k)) for k in (1, 2, 3))
        # 1 is a black leaf under a black root; dropping it unbalances the tree
        tree.root.left = None
        with self.assertRaises(AssertionError):
            tree.validate()

    def test_validate_detects_red_red(self):
        tree = LLRBTree[int, str]((k, str(k)) for k in range(1, 8))
        tree.root.left.color = RED
        tree.root.left.left.color = RED
        with self.assertRaises(AssertionError):
            tree.validate()

    def test_rotation_without_pivot_raises(self):
        tree = LLRBTree[int, str]()
        tree.insert(1, "one")
        with self.assertRaises(RuntimeError):
            tree._rotate_left(tree.root)
        with self.assertRaises(RuntimeError):
            tree._rotate_right(tree.root)

    # ------------------------------------------------------------------
    #  Rendering / tracing
    # ------------------------------------------------------------------
    def test_render(self):
        tree = LLRBTree[int, str]()
        self.assertEqual(tree.render(), "")
        tree.insert(1, "one")
        tree.insert(2, "two")
        self.assertEqual(
            str(tree),
            "#1: key=2,color=BLACK,left=#2,right=#0,value='two'\n"
            "#2: key=1,color=RED,left=#0,right=#0,value='one'",
        )
        self.assertEqual(repr(tree), "LLRBTree(size=2, storage=MemoryStorage)")

    def test_rotations_are_traced(self):
        tree = LLRBTree[int, str]()
        tree.insert(1, "one")
        with self.assertLogs("llrb_tree", level="DEBUG") as cm:
            tree.insert(2, "two")
        self.assertTrue(any("rotate_left at 1" in line for line in cm.output))


if __name__ == "__main__":
    unittest.main(verbosity=2)
