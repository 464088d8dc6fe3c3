"""Small helpers shared across the storage engine."""

from __future__ import annotations

import sys
from collections.abc import Iterable

U64_MAX = 2**64 - 1
USIZE_MAX = sys.maxsize * 2 + 1


class CastError(ValueError):
    """Raised when an integer does not fit the requested unsigned width."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def join_byte_arrays(arrays: Iterable[bytes]) -> bytes:
    """Concatenate byte sequences in order."""
    return b"".join(bytes(array) for array in arrays)


def cmp_key(a: bytes, b: bytes) -> int:
    """Compare two keys lexicographically by byte; return -1, 0 or 1."""
    a, b = bytes(a), bytes(b)
    if a < b:
        return -1
    if a > b:
        return 1
    return 0


def _check_unsigned(val: int, limit: int, target: str, source: str) -> int:
    if not 0 <= val <= limit:
        raise CastError(f"could not parse {target} from {source} {val}: out of range")
    return val


def try_u64(val: int) -> int:
    """Return ``val`` if it fits in an unsigned 64-bit integer, else raise CastError."""
    return _check_unsigned(val, U64_MAX, "u64", "usize")


def try_usize(val: int) -> int:
    """Return ``val`` if it fits in a platform-sized unsigned integer, else raise CastError."""
    return _check_unsigned(val, USIZE_MAX, "usize", "u64")