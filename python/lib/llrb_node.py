#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
llrb_node.py
------------

The node capability a left‑leaning red‑black tree is written against.

The balancing engine in ``llrb_tree`` never touches a concrete node class.
It only reads and writes the handful of properties declared on :class:`Node`
and asks a :class:`NodeStorage` for fresh nodes.  Anything that implements
these two contracts (plain objects, an index‑addressed arena, a node cache in
front of an append‑only file …) can be driven by the same algorithm.

Conventions
~~~~~~~~~~~
* Colours are booleans: ``RED = True``, ``BLACK = False``.
* A missing child is ``None``.  ``None`` counts as a **black** leaf and is
  never mutated; use the module level :func:`is_red` / :func:`color_of`
  helpers whenever the node may be absent.
* New nodes are always created RED with no children.

Typical usage
~~~~~~~~~~~~~
>>> from llrb_node import MemoryStorage, is_red
>>> storage = MemoryStorage()
>>> node = storage.new_node(1, "one")
>>> is_red(node), is_red(node.left)
(True, False)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

# ----------------------------------------------------------------------
#  Type variables (keys must be totally ordered, values may be anything)
# ----------------------------------------------------------------------
K = TypeVar("K")
V = TypeVar("V")

# ----------------------------------------------------------------------
#  Node colour constants
# ----------------------------------------------------------------------
RED = True
BLACK = False


def color_name(color: bool) -> str:
    return "RED" if color == RED else "BLACK"


class Node(ABC, Generic[K, V]):
    """
    Read/write surface of one tree node.

    Subclasses provide the five stored properties; ``is_red`` and
    ``flip_colors`` are derived from them and rarely need overriding.
    """

    __slots__ = ()

    @property
    @abstractmethod
    def key(self) -> K:
        """Key stored at this node."""

    @key.setter
    @abstractmethod
    def key(self, key: K) -> None:
        ...

    @property
    @abstractmethod
    def value(self) -> V:
        """Value stored at this node."""

    @value.setter
    @abstractmethod
    def value(self, value: V) -> None:
        ...

    @property
    @abstractmethod
    def left(self) -> Optional["Node[K, V]"]:
        """Left child, or ``None``."""

    @left.setter
    @abstractmethod
    def left(self, node: Optional["Node[K, V]"]) -> None:
        ...

    @property
    @abstractmethod
    def right(self) -> Optional["Node[K, V]"]:
        """Right child, or ``None``."""

    @right.setter
    @abstractmethod
    def right(self, node: Optional["Node[K, V]"]) -> None:
        ...

    @property
    @abstractmethod
    def color(self) -> bool:
        """``RED`` or ``BLACK``."""

    @color.setter
    @abstractmethod
    def color(self, color: bool) -> None:
        ...

    # ------------------------------------------------------------------
    #   Derived operations
    # ------------------------------------------------------------------
    def is_red(self) -> bool:
        return self.color == RED

    def flip_colors(self) -> None:
        """Toggle the colour of this node and of every child it has."""
        self.color = not self.color
        left = self.left
        if left is not None:
            left.color = not left.color
        right = self.right
        if right is not None:
            right.color = not right.color

    def __repr__(self) -> str:
        col = "R" if self.color == RED else "B"
        return f"<{col} {self.key!r}:{self.value!r}>"


def is_red(node: Optional[Node]) -> bool:
    """True iff *node* exists and is RED.  Safe to call with ``None``."""
    return node is not None and node.is_red()


def color_of(node: Optional[Node]) -> bool:
    """Colour of *node*; a missing node is BLACK."""
    return BLACK if node is None else node.color


class NodeStorage(ABC, Generic[K, V]):
    """
    Owner of the nodes of one tree.

    The tree asks the storage for every node it creates and hands back every
    node it excises, so a backend can recycle or persist them as it likes.
    """

    @abstractmethod
    def new_node(self, key: K, value: V) -> Node[K, V]:
        """Return a fresh RED node holding ``(key, value)`` and no children."""

    def release(self, node: Node[K, V]) -> None:
        """Called once for each node removed from the tree.  No‑op by default."""


# ----------------------------------------------------------------------
#  Plain in‑memory backend
# ----------------------------------------------------------------------
class MemoryNode(Node[K, V]):
    """A node that simply holds its fields as attributes."""

    __slots__ = ("_key", "_value", "_left", "_right", "_color")

    def __init__(
        self,
        key: K,
        value: V,
        color: bool = RED,
        left: Optional["MemoryNode[K, V]"] = None,
        right: Optional["MemoryNode[K, V]"] = None,
    ) -> None:
        self._key = key
        self._value = value
        self._color = color
        self._left = left
        self._right = right

    @property
    def key(self) -> K:
        return self._key

    @key.setter
    def key(self, key: K) -> None:
        self._key = key

    @property
    def value(self) -> V:
        return self._value

    @value.setter
    def value(self, value: V) -> None:
        self._value = value

    @property
    def left(self) -> Optional["MemoryNode[K, V]"]:
        return self._left

    @left.setter
    def left(self, node: Optional["MemoryNode[K, V]"]) -> None:
        self._left = node

    @property
    def right(self) -> Optional["MemoryNode[K, V]"]:
        return self._right

    @right.setter
    def right(self, node: Optional["MemoryNode[K, V]"]) -> None:
        self._right = node

    @property
    def color(self) -> bool:
        return self._color

    @color.setter
    def color(self, color: bool) -> None:
        self._color = color

    # attribute access is cheaper than going through the property
    def is_red(self) -> bool:
        return self._color == RED


class MemoryStorage(NodeStorage[K, V]):
    """Allocates :class:`MemoryNode` objects; removed nodes go to the GC."""

    def new_node(self, key: K, value: V) -> MemoryNode[K, V]:
        return MemoryNode(key, value, RED)
