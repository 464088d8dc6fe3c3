"""A thread-safe hash map based on hopscotch hashing.

Keys are spread over a fixed number of segments by their first hash. Each
segment is an open-addressed table indexed by the second hash. Every bucket
keeps a bitmap of which of the next ``HOP_RANGE`` buckets hold keys that
hash to it, so a lookup only ever inspects a small neighbourhood. A segment
that cannot place a key doubles in size and rehashes its contents.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Protocol

from anvilkv.bloom_filter import murmur_hash_3_32
from anvilkv.checksum import crc32

HOP_RANGE = 32
NUM_SEGMENTS = 1024
INIT_BUCKETS_PER_SEGMENT = 8
ADD_RANGE = 256
_MAX_GROWTHS_PER_INSERT = 8


class _Hashable(Protocol):
    def hash1(self) -> int: ...

    def hash2(self) -> int: ...


@dataclass(frozen=True)
class HopscotchKey:
    """A byte-string key carrying the two hashes the map needs."""

    data: bytes

    def hash1(self) -> int:
        """Hash used to choose the segment."""
        return crc32(0, self.data)

    def hash2(self) -> int:
        """Hash used to choose the home bucket within a segment."""
        return murmur_hash_3_32(self.data, 0)


class _Segment:
    __slots__ = ("entries", "hop_info", "lock")

    def __init__(self, size: int) -> None:
        self.entries: list[tuple[Any, Any] | None] = [None] * size
        self.hop_info: list[int] = [0] * size
        self.lock = threading.Lock()

    def _home(self, key: _Hashable) -> int:
        return key.hash2() % len(self.entries)

    def find(self, key: _Hashable) -> int | None:
        """Return the bucket index holding ``key``, or None."""
        home = self._home(key)
        info = self.hop_info[home]
        while info:
            low = info & -info
            idx = home + low.bit_length() - 1
            entry = self.entries[idx]
            if entry is not None and entry[0] == key:
                return idx
            info ^= low
        return None

    def _move_closer(self, free: int) -> int | None:
        """Move some entry into ``free`` from nearer its home; return the freed index."""
        for offset in range(HOP_RANGE - 1, 0, -1):
            candidate = free - offset
            info = self.hop_info[candidate]
            for bit in range(offset):
                if info >> bit & 1:
                    source = candidate + bit
                    self.entries[free] = self.entries[source]
                    self.entries[source] = None
                    self.hop_info[candidate] = (info & ~(1 << bit)) | (1 << offset)
                    return source
        return None

    def place(self, key: _Hashable, value: Any) -> bool:
        """Insert a key known to be absent; return False if there is no room."""
        home = self._home(key)
        size = len(self.entries)
        free, distance = home, 0
        while distance < ADD_RANGE and free < size and self.entries[free] is not None:
            free += 1
            distance += 1
        if distance >= ADD_RANGE or free >= size:
            return False
        while distance >= HOP_RANGE:
            moved = self._move_closer(free)
            if moved is None:
                return False
            distance -= free - moved
            free = moved
        self.entries[free] = (key, value)
        self.hop_info[home] |= 1 << distance
        return True

    def insert_new(self, key: _Hashable, value: Any) -> None:
        """Insert an absent key, growing the segment as often as needed."""
        for _ in range(_MAX_GROWTHS_PER_INSERT + 1):
            if self.place(key, value):
                return
            self._grow()
        raise RuntimeError("too many keys share a hash neighbourhood")

    def _grow(self) -> None:
        pairs = [entry for entry in self.entries if entry is not None]
        size = 2 * len(self.entries)
        for _ in range(_MAX_GROWTHS_PER_INSERT):
            self.entries = [None] * size
            self.hop_info = [0] * size
            if all(self.place(k, v) for k, v in pairs):
                return
            size *= 2
        raise RuntimeError("too many keys share a hash neighbourhood")

    def remove(self, idx: int, key: _Hashable) -> None:
        home = self._home(key)
        self.entries[idx] = None
        self.hop_info[home] &= ~(1 << (idx - home))


class ConcurrentHopscotchHashMap:
    """A hash map that may be shared between threads.

    Keys must support ``==`` and provide ``hash1()`` and ``hash2()``
    returning non-negative integers.
    """

    def __init__(self) -> None:
        self._segments = [_Segment(INIT_BUCKETS_PER_SEGMENT) for _ in range(NUM_SEGMENTS)]

    def _segment(self, key: _Hashable) -> _Segment:
        return self._segments[key.hash1() % NUM_SEGMENTS]

    def set(self, key: _Hashable, value: Any) -> None:
        """Store ``value`` under ``key``, inserting or replacing."""
        segment = self._segment(key)
        with segment.lock:
            idx = segment.find(key)
            if idx is not None:
                segment.entries[idx] = (key, value)
                return
            segment.insert_new(key, value)

    def get(self, key: _Hashable) -> Any:
        """Return the value stored under ``key``, or None if absent."""
        segment = self._segment(key)
        with segment.lock:
            idx = segment.find(key)
            if idx is None:
                return None
            entry = segment.entries[idx]
            return entry[1] if entry is not None else None

    def remove(self, key: _Hashable) -> None:
        """Remove ``key`` if present."""
        segment = self._segment(key)
        with segment.lock:
            idx = segment.find(key)
            if idx is not None:
                segment.remove(idx, key)

    def add(self, key: _Hashable, value: Any) -> bool:
        """Insert ``key`` only if absent; return True if it was inserted."""
        segment = self._segment(key)
        with segment.lock:
            if segment.find(key) is not None:
                return False
            segment.insert_new(key, value)
            return True