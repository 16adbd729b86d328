#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
llrb_tree.py
------------

An ordered key → value map backed by a **left‑leaning red‑black tree**
(Sedgewick, "Left‑Leaning Red‑Black Trees", 2008).  Every red link leans
left, which gives a one‑to‑one correspondence with 2‑3 trees and keeps the
height below ``2·log2(n)``.

The algorithm is written purely against the node capability of
``llrb_node``: the tree never creates or inspects a concrete node class, it
asks its :class:`~llrb_node.NodeStorage` for new nodes and hands back the ones
it removes.  Swap the storage and the same balancing code runs over an
in‑memory object graph or an index‑addressed arena (see ``arena_storage``).

Features
~~~~~~~~
* ``tree.insert(key, value)`` / ``tree[key] = value`` – insert or replace
* ``tree.search(key)`` – value or ``None``; ``tree[key]`` raises KeyError
* ``tree.delete(key)`` – silent no‑op on a missing key; ``del tree[key]``
  raises KeyError
* ``tree.delete_min()`` – remove and return the smallest ``(key, value)``
* ``tree.size()`` / ``len(tree)`` – fresh O(n) count, no running counter
* ``tree.validate()`` – assert every LLRB invariant (for tests/debugging)
* ``tree.render()`` – numbered, one‑line‑per‑node text dump

Rotations and red‑link moves are traced through the ``llrb_tree`` logger at
DEBUG level.

The tree is not thread safe: rotations rewrite several links in place and the
structure is only consistent between operations.

Typical usage
~~~~~~~~~~~~~
>>> from llrb_tree import LLRBTree
>>> tree = LLRBTree()
>>> for k in range(1, 7):
...     tree.insert(k, str(k))
>>> tree.search(5)
'5'
>>> tree.delete(3)
>>> 3 in tree, tree.size()
(False, 5)
>>> tree.delete_min()
(1, '1')
"""

from __future__ import annotations

import logging
import math
from typing import (
    Generic,
    Iterable,
    List,
    Optional,
    Tuple,
    TypeVar,
)

from llrb_node import (
    BLACK,
    RED,
    MemoryStorage,
    Node,
    NodeStorage,
    color_name,
    is_red,
)

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


def _compare(a: K, b: K) -> int:
    """Three‑way comparison using only ``<``: -1, 0 or 1."""
    if a < b:
        return -1
    if b < a:
        return 1
    return 0


class LLRBTree(Generic[K, V]):
    """
    A left‑leaning red‑black tree mapping unique keys to values.

    Parameters
    ----------
    items : iterable of (key, value), optional
        Initial contents, inserted one by one.
    storage : NodeStorage, optional
        Node backend.  Defaults to a fresh :class:`~llrb_node.MemoryStorage`.

    All keys stored in one tree must be mutually comparable; mixing e.g.
    ``int`` and ``str`` keys lets Python's ``TypeError`` propagate.
    """

    __slots__ = ("_root", "_storage")

    def __init__(
        self,
        items: Optional[Iterable[Tuple[K, V]]] = None,
        *,
        storage: Optional[NodeStorage[K, V]] = None,
    ) -> None:
        self._storage: NodeStorage[K, V] = (
            MemoryStorage() if storage is None else storage
        )
        self._root: Optional[Node[K, V]] = None

        if items is not None:
            for key, value in items:
                self.insert(key, value)

    # ------------------------------------------------------------------
    #   Read‑only accessors
    # ------------------------------------------------------------------
    @property
    def root(self) -> Optional[Node[K, V]]:
        return self._root

    @property
    def storage(self) -> NodeStorage[K, V]:
        return self._storage

    # ------------------------------------------------------------------
    #   Search
    # ------------------------------------------------------------------
    def _search_node(self, key: K) -> Optional[Node[K, V]]:
        """Return the node holding *key*, or ``None``."""
        h = self._root
        while h is not None:
            cmp = _compare(key, h.key)
            if cmp == 0:
                return h
            h = h.left if cmp < 0 else h.right
        return None

    def search(self, key: K) -> Optional[V]:
        """
        Return the value stored under *key*, or ``None`` if absent.

        A stored ``None`` looks the same as a missing key; use ``key in tree``
        or ``get(key, default)`` with a sentinel default to tell them apart.
        """
        node = self._search_node(key)
        return None if node is None else node.value

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        node = self._search_node(key)
        return default if node is None else node.value

    # ------------------------------------------------------------------
    #   Public mutators
    # ------------------------------------------------------------------
    def insert(self, key: K, value: V) -> None:
        """Insert *key* with *value* or replace the value already stored."""
        self._root = self._insert(self._root, key, value)
        self._root.color = BLACK

    def delete(self, key: K) -> None:
        """Remove *key* from the tree.  Does nothing if *key* is absent."""
        if self._search_node(key) is not None:
            self._remove(key)

    def _remove(self, key: K) -> None:
        """Delete *key*, which the caller has already found in the tree."""
        self._prepare_root_for_delete()
        self._root = self._delete(self._root, key)
        if self._root is not None:
            self._root.color = BLACK

    def delete_min(self) -> Tuple[K, V]:
        """
        Remove the smallest key and return its ``(key, value)`` pair.
        Raises ``ValueError`` if the tree is empty.
        """
        if self._root is None:
            raise ValueError("Tree is empty")
        h = self._root
        while h.left is not None:
            h = h.left
        item = (h.key, h.value)

        self._prepare_root_for_delete()
        self._root = self._delete_min(self._root)
        if self._root is not None:
            self._root.color = BLACK
        return item

    def _prepare_root_for_delete(self) -> None:
        # A black root between two black children has nothing to lend to the
        # first move_red_*; paint it red for the descent.
        root = self._root
        if not is_red(root.left) and not is_red(root.right):
            root.color = RED

    # ------------------------------------------------------------------
    #   Size / diagnostics
    # ------------------------------------------------------------------
    def size(self) -> int:
        """Number of stored keys, counted afresh on every call (O(n))."""

        def count(h: Optional[Node[K, V]]) -> int:
            if h is None:
                return 0
            return 1 + count(h.left) + count(h.right)

        return count(self._root)

    def is_empty(self) -> bool:
        return self._root is None

    def max_depth(self) -> int:
        """Number of nodes on the longest root‑to‑leaf path (0 when empty)."""

        def depth(h: Optional[Node[K, V]]) -> int:
            if h is None:
                return 0
            return 1 + max(depth(h.left), depth(h.right))

        return depth(self._root)

    def black_height(self) -> int:
        """Black links on the leftmost root‑to‑leaf path."""
        height = 0
        h = self._root
        while h is not None:
            if not h.is_red():
                height += 1
            h = h.left
        return height

    # ------------------------------------------------------------------
    #   Python protocol support
    # ------------------------------------------------------------------
    def __contains__(self, key: object) -> bool:
        return self._search_node(key) is not None  # type: ignore[arg-type]

    def __len__(self) -> int:
        return self.size()

    def __bool__(self) -> bool:
        return self._root is not None

    def __getitem__(self, key: K) -> V:
        node = self._search_node(key)
        if node is None:
            raise KeyError(key)
        return node.value

    def __setitem__(self, key: K, value: V) -> None:
        self.insert(key, value)

    def __delitem__(self, key: K) -> None:
        if self._search_node(key) is None:
            raise KeyError(key)
        self._remove(key)

    # ------------------------------------------------------------------
    #   Recursive insert
    # ------------------------------------------------------------------
    def _insert(self, h: Optional[Node[K, V]], key: K, value: V) -> Node[K, V]:
        if h is None:
            return self._storage.new_node(key, value)

        # Split a 4-node on the way down.
        if is_red(h.left) and is_red(h.right):
            h.flip_colors()

        cmp = _compare(key, h.key)
        if cmp == 0:
            h.value = value
        elif cmp < 0:
            h.left = self._insert(h.left, key, value)
        else:
            h.right = self._insert(h.right, key, value)

        return self._fix_up(h)

    # ------------------------------------------------------------------
    #   Recursive deletes
    # ------------------------------------------------------------------
    def _delete_min(self, h: Node[K, V]) -> Optional[Node[K, V]]:
        if h.left is None:
            # h.right is None too, otherwise black balance is already broken
            logger.debug("delete_min: excising %r", h.key)
            self._storage.release(h)
            return None

        if not is_red(h.left) and not is_red(h.left.left):
            h = self._move_red_left(h)

        h.left = self._delete_min(h.left)
        return self._fix_up(h)

    def _delete(self, h: Node[K, V], key: K) -> Optional[Node[K, V]]:
        if _compare(key, h.key) < 0:
            if not is_red(h.left) and not is_red(h.left.left):
                h = self._move_red_left(h)
            h.left = self._delete(h.left, key)
        else:
            if is_red(h.left):
                h = self._rotate_right(h)
            if _compare(key, h.key) == 0 and h.right is None:
                logger.debug("delete: excising leaf %r", h.key)
                self._storage.release(h)
                return None
            if not is_red(h.right) and not is_red(h.right.left):
                h = self._move_red_right(h)
            if _compare(key, h.key) == 0:
                successor = h.right
                while successor.left is not None:
                    successor = successor.left
                logger.debug(
                    "delete: promoting successor %r over %r", successor.key, h.key
                )
                h.key = successor.key
                h.value = successor.value
                h.right = self._delete_min(h.right)
            else:
                h.right = self._delete(h.right, key)

        return self._fix_up(h)

    # ------------------------------------------------------------------
    #   Rebalancing primitives
    # ------------------------------------------------------------------
    def _rotate_left(self, h: Node[K, V]) -> Node[K, V]:
        """Make the right child of *h* the new subtree root."""
        x = h.right
        if x is None:
            raise RuntimeError("rotate_left called on a node with no right child")
        logger.debug("rotate_left at %r", h.key)
        h.right = x.left
        x.left = h
        x.color = h.color
        h.color = RED
        return x

    def _rotate_right(self, h: Node[K, V]) -> Node[K, V]:
        """Make the left child of *h* the new subtree root."""
        x = h.left
        if x is None:
            raise RuntimeError("rotate_right called on a node with no left child")
        logger.debug("rotate_right at %r", h.key)
        h.left = x.right
        x.right = h
        x.color = h.color
        h.color = RED
        return x

    def _move_red_left(self, h: Node[K, V]) -> Node[K, V]:
        """
        Make ``h.left`` or one of its children red, borrowing from the right
        sibling when it is a 3‑node and merging with it otherwise.
        """
        logger.debug("move_red_left at %r", h.key)
        h.flip_colors()
        if is_red(h.right.left):
            h.right = self._rotate_right(h.right)
            h = self._rotate_left(h)
            h.flip_colors()
        return h

    def _move_red_right(self, h: Node[K, V]) -> Node[K, V]:
        """Mirror of :meth:`_move_red_left`."""
        logger.debug("move_red_right at %r", h.key)
        h.flip_colors()
        if is_red(h.left.left):
            h = self._rotate_right(h)
            h.flip_colors()
        return h

    def _fix_up(self, h: Node[K, V]) -> Node[K, V]:
        # Order matters: each step relies on the shape left by the previous.
        if is_red(h.right):
            h = self._rotate_left(h)
        if is_red(h.left) and is_red(h.left.left):
            h = self._rotate_right(h)
        if is_red(h.left) and is_red(h.right):
            h.flip_colors()
        return h

    # ------------------------------------------------------------------
    #   Validation – useful for debugging and tests
    # ------------------------------------------------------------------
    def validate(self) -> None:
        """
        Verify that the tree satisfies all LLRB invariants.
        Raises ``AssertionError`` with a descriptive message if something is broken.
        """
        root = self._root
        if root is None:
            return

        assert not root.is_red(), "Root is not black"

        def dfs(
            h: Optional[Node[K, V]], low: Optional[Node[K, V]], high: Optional[Node[K, V]]
        ) -> int:
            """Return the black height of the subtree rooted at *h*."""
            if h is None:
                return 0

            # BST ordering against the nearest ancestors on either side
            if low is not None:
                assert low.key < h.key, f"Key order violated at {h.key!r}"
            if high is not None:
                assert h.key < high.key, f"Key order violated at {h.key!r}"

            assert not is_red(h.right), f"Right-leaning red link below {h.key!r}"
            if h.is_red():
                assert not is_red(h.left), f"Red node {h.key!r} has red left child"

            left_black = dfs(h.left, low, h)
            right_black = dfs(h.right, h, high)
            assert left_black == right_black, f"Black-height mismatch at {h.key!r}"
            return left_black + (0 if h.is_red() else 1)

        dfs(root, None, None)

        size = self.size()
        limit = 1 if size <= 1 else 2 * math.ceil(math.log2(size))
        depth = self.max_depth()
        assert depth <= limit, f"Depth {depth} exceeds {limit} for {size} keys"

    # ------------------------------------------------------------------
    #   Text rendering (for debugging)
    # ------------------------------------------------------------------
    def render(self) -> str:
        """
        One line per node in pre‑order.  Nodes are numbered like a binary
        heap (root ``#1``, children of ``#n`` are ``#2n`` and ``#2n+1``);
        ``#0`` marks a missing child.
        """
        lines: List[str] = []

        def visit(h: Optional[Node[K, V]], nix: int) -> None:
            if h is None:
                return
            lix = 2 * nix if h.left is not None else 0
            rix = 2 * nix + 1 if h.right is not None else 0
            lines.append(
                f"#{nix}: key={h.key!r},color={color_name(h.color)},"
                f"left=#{lix},right=#{rix},value={h.value!r}"
            )
            visit(h.left, lix)
            visit(h.right, rix)

        visit(self._root, 1)
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"LLRBTree(size={self.size()}, storage={type(self._storage).__name__})"
