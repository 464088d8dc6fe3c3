"""Deterministic key-value workload generator for benchmarks."""

from __future__ import annotations

PAIR_SIZE = 32
KEY_SIZE = 16

PRIMES = bytes(
    [
        2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53,
        59, 61, 67, 71, 73, 79, 83, 89, 97, 97, 101, 103, 107, 109, 113, 127,
    ]
)


def next_pair(pair: bytearray) -> tuple[bytes, bytes]:
    """Advance ``pair`` in place and return its new (key, value) halves.

    Each byte is bumped by a fixed prime, wrapping modulo 256. The first
    16 bytes form the key and the last 16 the value.
    """
    if len(pair) != PAIR_SIZE:
        raise ValueError(f"pair must be {PAIR_SIZE} bytes, got {len(pair)}")
    pair[:] = bytes((b + p) & 0xFF for b, p in zip(pair, PRIMES))
    return bytes(pair[:KEY_SIZE]), bytes(pair[KEY_SIZE:])