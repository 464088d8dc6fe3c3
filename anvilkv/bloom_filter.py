"""Bloom filters keyed by MurmurHash3, with a compact byte serialisation.

With ``m`` bits and ``k`` hash functions, the false positive rate after ``n``
insertions is roughly ``(1 - exp(-k n / m)) ** k``, which is minimised near
``k = (m / n) * ln 2``; the filters size their seed list accordingly.
"""

from __future__ import annotations

import math
import threading

_MASK32 = 0xFFFFFFFF
_C1 = 0xCC9E2D51
_C2 = 0x1B873593


def _rotl32(x: int, r: int) -> int:
    return ((x << r) | (x >> (32 - r))) & _MASK32


def _mix_k1(k1: int) -> int:
    k1 = (k1 * _C1) & _MASK32
    k1 = _rotl32(k1, 15)
    return (k1 * _C2) & _MASK32


def murmur_hash_3_32(key: bytes, seed: int) -> int:
    """Return the 32-bit MurmurHash3 of ``key`` with the given ``seed``."""
    key = bytes(key)
    h1 = seed & _MASK32
    n_blocks = len(key) // 4
    for block in range(n_blocks):
        k1 = int.from_bytes(key[4 * block : 4 * block + 4], "little")
        h1 ^= _mix_k1(k1)
        h1 = _rotl32(h1, 13)
        h1 = (h1 * 5 + 0xE6546B64) & _MASK32

    tail = key[4 * n_blocks :]
    h1 ^= _mix_k1(int.from_bytes(tail, "little"))

    h1 ^= min(len(key), _MASK32)
    h1 ^= h1 >> 16
    h1 = (h1 * 0x85EBCA6B) & _MASK32
    h1 ^= h1 >> 13
    h1 = (h1 * 0xC2B2AE35) & _MASK32
    h1 ^= h1 >> 16
    return h1


def _encode_varint(value: int) -> bytes:
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _decode_varint(data: bytes, offset: int, what: str) -> tuple[int, int]:
    """Decode a varint at ``offset``; return (value, new offset)."""
    value = 0
    for shift_idx, byte in enumerate(data[offset : offset + 10]):
        value |= (byte & 0x7F) << (7 * shift_idx)
        if not byte & 0x80:
            if value > 2**64 - 1:
                break
            return value, offset + shift_idx + 1
    raise ValueError(f"failed to parse bloom filter {what}")


class _BloomFilterCore:
    """Bit array plus hash seeds; shared by both filter flavours."""

    def __init__(self, allowed_bytes: int, expected_capacity: int) -> None:
        if expected_capacity <= 0:
            raise ValueError("expected_capacity must be positive")
        num_cells = 2
        while num_cells < allowed_bytes:
            num_cells *= 2
        num_cells //= 2
        num_seeds = math.ceil(8 * num_cells / expected_capacity * math.log(2))
        self._cells = bytearray(num_cells)
        self._seeds = list(range(num_seeds))

    @classmethod
    def _from_parts(cls, cells: bytes, seeds: list[int]):
        obj = cls.__new__(cls)
        obj._cells = bytearray(cells)
        obj._seeds = list(seeds)
        obj._post_init()
        return obj

    def _post_init(self) -> None:
        pass

    def _bit_positions(self, key: bytes):
        n_bits = 8 * len(self._cells)
        for seed in self._seeds:
            yield murmur_hash_3_32(key, seed) % n_bits

    def _add(self, key: bytes) -> None:
        for bit in self._bit_positions(key):
            self._cells[bit // 8] |= 1 << (bit % 8)

    def contains(self, key: bytes) -> bool:
        """Return False if ``key`` was certainly never added."""
        return all(
            self._cells[bit // 8] & (1 << (bit % 8)) for bit in self._bit_positions(key)
        )

    def __contains__(self, key: bytes) -> bool:
        return self.contains(key)

    def to_bytes(self) -> bytes:
        """Serialise the filter: length, seeds and cells."""
        num_seeds = _encode_varint(len(self._seeds))
        seed_buf = b"".join(seed.to_bytes(4, "big") for seed in self._seeds)
        cells_len = _encode_varint(len(self._cells))
        cells = bytes(self._cells)
        body = num_seeds + seed_buf + cells_len + cells
        return _encode_varint(len(body)) + body

    @classmethod
    def from_bytes(cls, data: bytes):
        """Parse a filter produced by :meth:`to_bytes`; raise ValueError if malformed."""
        data = bytes(data)
        _, offset = _decode_varint(data, 0, "offset")
        num_seeds, offset = _decode_varint(data, offset, "num_hashed")
        seeds = []
        for _ in range(num_seeds):
            if len(data) - offset < 4:
                raise ValueError("not enough room for the number of hash seeds claimed")
            seeds.append(int.from_bytes(data[offset : offset + 4], "big"))
            offset += 4
        cells_len, offset = _decode_varint(data, offset, "cells_len")
        if offset + cells_len > len(data):
            raise ValueError("not enough room for the number of cells claimed")
        return cls._from_parts(data[offset : offset + cells_len], seeds)


class BasicBloomFilter(_BloomFilterCore):
    """A Bloom filter for use from a single thread."""

    def __init__(self, allowed_bytes: int, expected_capacity: int) -> None:
        super().__init__(allowed_bytes, expected_capacity)

    def add(self, key: bytes) -> None:
        """Record ``key`` in the filter."""
        self._add(key)

    def contains(self, key: bytes) -> bool:
        """Return False if ``key`` was certainly never added."""
        return super().contains(key)

    def __contains__(self, key: bytes) -> bool:
        return self.contains(key)

    def to_bytes(self) -> bytes:
        """Serialise the filter."""
        return super().to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> "BasicBloomFilter":
        """Parse a serialised filter."""
        return super().from_bytes(data)


class ConcurrentBloomFilter(_BloomFilterCore):
    """A Bloom filter that may be added to from several threads at once."""

    def __init__(self, allowed_bytes: int, expected_capacity: int) -> None:
        super().__init__(allowed_bytes, expected_capacity)
        self._post_init()

    def _post_init(self) -> None:
        self._lock = threading.Lock()

    @classmethod
    def from_filter(cls, basic: BasicBloomFilter) -> "ConcurrentBloomFilter":
        """Copy the state of a basic filter into a new concurrent one."""
        return cls._from_parts(basic._cells, basic._seeds)

    def add(self, key: bytes) -> None:
        """Record ``key`` in the filter."""
        with self._lock:
            self._add(key)

    def contains(self, key: bytes) -> bool:
        """Return False if ``key`` was certainly never added."""
        return super().contains(key)

    def __contains__(self, key: bytes) -> bool:
        return self.contains(key)

    def to_bytes(self) -> bytes:
        """Serialise the filter."""
        with self._lock:
            return super().to_bytes()

    @classmethod
    def from_bytes(cls, data: bytes) -> "ConcurrentBloomFilter":
        """Parse a serialised filter."""
        return super().from_bytes(data)