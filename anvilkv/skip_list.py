"""A thread-safe ordered map built on a skip list.

Writers are serialised by a lock; readers and iterators traverse without
locking. A removed node keeps forward pointers to its old predecessors, so a
reader that is standing on it is guided back onto the live list. Iteration is
therefore weakly consistent: it sees keys in ascending order, each at most
once, and may or may not observe concurrent changes.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from typing import Any

_MASK64 = 0xFFFFFFFFFFFFFFFF
_DEFAULT_MAX_LEVEL = 16

_HEAD = -1
_REAL = 0
_TAIL = 1


class XorShift:
    """A thread-safe xorshift64 pseudo-random generator."""

    def __init__(self, seed: int = 1337) -> None:
        self._state = seed & _MASK64
        self._lock = threading.Lock()

    def next(self) -> int:
        """Advance the generator and return the new 64-bit state."""
        with self._lock:
            x = self._state or 1
            x ^= (x << 13) & _MASK64
            x ^= x >> 7
            x ^= (x << 17) & _MASK64
            self._state = x
            return x


class _Node:
    __slots__ = ("kind", "key", "value", "forward", "removed")

    def __init__(self, kind: int, key: Any, value: Any, height: int) -> None:
        self.kind = kind
        self.key = key
        self.value = value
        self.forward: list[_Node | None] = [None] * height
        self.removed = False


class ConcurrentSkipList:
    """An ordered key-value map that is safe to share between threads."""

    def __init__(self, pairs: Iterable[tuple[Any, Any]] | None = None) -> None:
        self._max_level = _DEFAULT_MAX_LEVEL
        self._tail = _Node(_TAIL, None, None, 0)
        self._head = _Node(_HEAD, None, None, self._max_level + 1)
        self._head.forward = [self._tail] * (self._max_level + 1)
        self._level = 0
        self._rng = XorShift()
        self._lock = threading.RLock()
        for key, value in pairs or ():
            self.set(key, value)

    @staticmethod
    def _precedes(node: _Node, key: Any) -> bool:
        return node.kind == _HEAD or (node.kind == _REAL and node.key < key)

    def _is_real(self, node: _Node, key: Any) -> bool:
        return node.kind == _REAL and not node.removed and node.key == key

    def _predecessors(self, key: Any) -> list[_Node]:
        """Return, per level, the last node whose key is below ``key``."""
        update = [self._head] * (self._max_level + 1)
        x = self._head
        for i in reversed(range(self._level + 1)):
            y = x.forward[i]
            while self._precedes(y, key):
                x = y
                y = x.forward[i]
            update[i] = x
        return update

    def _predecessor(self, key: Any) -> _Node:
        """Return the last level-0 node whose key is below ``key``, lock-free."""
        x = self._head
        for i in reversed(range(self._level + 1)):
            y = x.forward[i]
            while self._precedes(y, key):
                x = y
                y = x.forward[i]
        return x

    def _walk(self, start: _Node) -> Iterator[_Node]:
        """Yield live nodes after ``start`` in ascending key order."""
        last = None
        have_last = False
        node = start
        while True:
            node = node.forward[0]
            if node.kind == _TAIL:
                return
            if node.kind == _HEAD or node.removed:
                continue
            if have_last and not last < node.key:
                continue
            last, have_last = node.key, True
            yield node

    def _random_level(self) -> int:
        level = 0
        while self._rng.next() % 10_000 < 5_000 and level < self._max_level - 1:
            level += 1
        return level

    def get(self, key: Any) -> Any:
        """Return the value stored under ``key``, or None if absent."""
        node = self._predecessor(key).forward[0]
        if self._is_real(node, key):
            return node.value
        return None

    def set(self, key: Any, value: Any) -> None:
        """Store ``value`` under ``key``, inserting or replacing."""
        with self._lock:
            update = self._predecessors(key)
            existing = update[0].forward[0]
            if self._is_real(existing, key):
                existing.value = value
                return
            level = self._random_level()
            node = _Node(_REAL, key, value, level + 1)
            for i in range(level + 1):
                node.forward[i] = update[i].forward[i]
            for i in range(level + 1):
                update[i].forward[i] = node
            while (
                self._level < self._max_level
                and self._head.forward[self._level + 1].kind != _TAIL
            ):
                self._level += 1

    def remove(self, key: Any) -> Any:
        """Remove ``key``; return its value, or None if it was absent."""
        with self._lock:
            update = self._predecessors(key)
            node = update[0].forward[0]
            if not self._is_real(node, key):
                return None
            node.removed = True
            for i in reversed(range(len(node.forward))):
                update[i].forward[i] = node.forward[i]
                node.forward[i] = update[i]
            while self._level > 0 and self._head.forward[self._level].kind == _TAIL:
                self._level -= 1
            return node.value

    def contains(self, key: Any) -> bool:
        """Return True if ``key`` is present."""
        return self._is_real(self._predecessor(key).forward[0], key)

    def __contains__(self, key: Any) -> bool:
        return self.contains(key)

    def __iter__(self) -> Iterator[tuple[Any, Any]]:
        """Iterate over ``(key, value)`` pairs in ascending key order."""
        for node in self._walk(self._head):
            yield node.key, node.value