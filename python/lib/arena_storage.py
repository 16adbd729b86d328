#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
arena_storage.py
----------------

An index‑addressed node backend for :class:`llrb_tree.LLRBTree`.

Instead of one Python object per node, every field lives in a parallel list
and a node is identified by its integer *slot*.  :class:`ArenaNode` is only a
light handle ``(arena, slot)`` that implements the ``llrb_node.Node``
capability by reading and writing those lists, so the balancing algorithm
runs over it unchanged.  Slots freed by deletions go onto a free list and are
handed out again before the arena grows.

This is the shape an append‑only or on‑disk backend would take: stable
integer addresses, links stored as numbers, and an explicit owner that knows
which slots are live.

Typical usage
~~~~~~~~~~~~~
>>> from arena_storage import ArenaStorage
>>> from llrb_tree import LLRBTree
>>> arena = ArenaStorage()
>>> tree = LLRBTree(storage=arena)
>>> for k in range(10):
...     tree.insert(k, k * k)
>>> len(arena), arena.capacity
(10, 10)
>>> tree.delete(4)
>>> len(arena), arena.capacity
(9, 10)
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from llrb_node import BLACK, RED, Node, NodeStorage

logger = logging.getLogger(__name__)

# slot number standing for "no node"
NIL = -1


class ArenaNode(Node[Any, Any]):
    """Handle to one live slot of an :class:`ArenaStorage`."""

    __slots__ = ("_arena", "_slot")

    def __init__(self, arena: "ArenaStorage", slot: int) -> None:
        self._arena = arena
        self._slot = slot

    @property
    def slot(self) -> int:
        return self._slot

    @property
    def key(self) -> Any:
        return self._arena._keys[self._live()]

    @key.setter
    def key(self, key: Any) -> None:
        self._arena._keys[self._live()] = key

    @property
    def value(self) -> Any:
        return self._arena._values[self._live()]

    @value.setter
    def value(self, value: Any) -> None:
        self._arena._values[self._live()] = value

    @property
    def left(self) -> Optional["ArenaNode"]:
        return self._arena._handle(self._arena._lefts[self._live()])

    @left.setter
    def left(self, node: Optional["ArenaNode"]) -> None:
        self._arena._lefts[self._live()] = self._arena._slot_of(node)

    @property
    def right(self) -> Optional["ArenaNode"]:
        return self._arena._handle(self._arena._rights[self._live()])

    @right.setter
    def right(self, node: Optional["ArenaNode"]) -> None:
        self._arena._rights[self._live()] = self._arena._slot_of(node)

    @property
    def color(self) -> bool:
        return self._arena._colors[self._live()]

    @color.setter
    def color(self, color: bool) -> None:
        self._arena._colors[self._live()] = color

    def _live(self) -> int:
        if not self._arena._in_use[self._slot]:
            raise ValueError(f"Arena slot {self._slot} has been released")
        return self._slot

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ArenaNode):
            return NotImplemented
        return self._arena is other._arena and self._slot == other._slot

    def __hash__(self) -> int:
        return hash((id(self._arena), self._slot))

    def __repr__(self) -> str:
        if not self._arena._in_use[self._slot]:
            return f"<released slot {self._slot}>"
        col = "R" if self.color == RED else "B"
        return f"<{col} #{self._slot} {self.key!r}:{self.value!r}>"


class ArenaStorage(NodeStorage[Any, Any]):
    """
    Parallel‑list node arena with slot reuse.

    ``len(arena)`` is the number of live nodes, ``capacity`` the number of
    slots ever allocated.
    """

    def __init__(self) -> None:
        self._keys: List[Any] = []
        self._values: List[Any] = []
        self._lefts: List[int] = []
        self._rights: List[int] = []
        self._colors: List[bool] = []
        self._in_use: List[bool] = []
        self._free: List[int] = []

    # ------------------------------------------------------------------
    #   NodeStorage contract
    # ------------------------------------------------------------------
    def new_node(self, key: Any, value: Any) -> ArenaNode:
        if self._free:
            slot = self._free.pop()
            logger.debug("arena: reusing slot %d for %r", slot, key)
            self._keys[slot] = key
            self._values[slot] = value
            self._lefts[slot] = NIL
            self._rights[slot] = NIL
            self._colors[slot] = RED
            self._in_use[slot] = True
        else:
            slot = len(self._keys)
            self._keys.append(key)
            self._values.append(value)
            self._lefts.append(NIL)
            self._rights.append(NIL)
            self._colors.append(RED)
            self._in_use.append(True)
        return ArenaNode(self, slot)

    def release(self, node: Node[Any, Any]) -> None:
        slot = self._slot_of(node)
        if slot == NIL or not self._in_use[slot]:
            raise ValueError(f"Arena slot {slot} is not in use")
        self._keys[slot] = None
        self._values[slot] = None
        self._lefts[slot] = NIL
        self._rights[slot] = NIL
        self._colors[slot] = BLACK
        self._in_use[slot] = False
        self._free.append(slot)

    # ------------------------------------------------------------------
    #   Introspection
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._keys) - len(self._free)

    @property
    def capacity(self) -> int:
        return len(self._keys)

    def free_slots(self) -> List[int]:
        return list(self._free)

    # ------------------------------------------------------------------
    #   Handle <-> slot conversion
    # ------------------------------------------------------------------
    def _handle(self, slot: int) -> Optional[ArenaNode]:
        return None if slot == NIL else ArenaNode(self, slot)

    def _slot_of(self, node: Optional[Node[Any, Any]]) -> int:
        if node is None:
            return NIL
        if not isinstance(node, ArenaNode) or node._arena is not self:
            raise ValueError(f"{node!r} does not belong to this arena")
        return node._slot
