"""Range scans over a :class:`~anvilkv.skip_list.ConcurrentSkipList`.

A scanner walks the list lazily, so it may observe writes that happen while
it is in progress. Keys still come out in ascending order, each at most once.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, NamedTuple

from anvilkv.skip_list import ConcurrentSkipList


class SkipListPair(NamedTuple):
    """A key and the value it held when the scanner reached it."""

    key: Any
    value: Any


class SkipListScanner:
    """A lazy, optionally bounded iterator over a skip list.

    Bounds are set with :meth:`from_key` (inclusive) and :meth:`to`
    (exclusive) before iteration begins.
    """

    def __init__(self, skip_list: ConcurrentSkipList) -> None:
        self._skip_list = skip_list
        self._start = skip_list._head
        self._lower: Any = None
        self._has_lower = False
        self._end: Any = None
        self._has_end = False
        self._nodes: Iterator[Any] | None = None
        self._done = False

    @property
    def started(self) -> bool:
        """True once the first item has been requested."""
        return self._nodes is not None

    def from_key(self, key: Any) -> "SkipListScanner":
        """Begin the scan at the first key not below ``key``."""
        if self.started:
            raise RuntimeError("from_key cannot be called once the scan has started")
        if not self._has_lower or self._lower < key:
            self._start = self._skip_list._predecessor(key)
            self._lower = key
            self._has_lower = True
        return self

    def to(self, key: Any) -> "SkipListScanner":
        """Stop the scan before the first key not below ``key``."""
        if self.started:
            raise RuntimeError("to cannot be called once the scan has started")
        self._end = key
        self._has_end = True
        return self

    def __iter__(self) -> "SkipListScanner":
        return self

    def __next__(self) -> SkipListPair:
        if self._nodes is None:
            self._nodes = self._skip_list._walk(self._start)
        if self._done:
            raise StopIteration
        for node in self._nodes:
            if self._has_lower and node.key < self._lower:
                continue
            if self._has_end and not node.key < self._end:
                break
            return SkipListPair(node.key, node.value)
        self._done = True
        raise StopIteration


def scan(skip_list: ConcurrentSkipList) -> SkipListScanner:
    """Return an unbounded scanner over ``skip_list``."""
    return SkipListScanner(skip_list)