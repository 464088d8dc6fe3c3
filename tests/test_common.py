import pytest

from anvilkv.common import (
    USIZE_MAX,
    CastError,
    cmp_key,
    join_byte_arrays,
    try_u64,
    try_usize,
)


def test_try_usize():
    assert try_usize(0) == 0
    assert try_usize(1) == 1
    assert try_usize(USIZE_MAX) == USIZE_MAX


def test_try_u64():
    assert try_u64(0) == 0
    assert try_u64(1) == 1
    assert try_u64(2**64 - 1) == 2**64 - 1


@pytest.mark.parametrize("func", [try_u64, try_usize])
def test_negative_raises(func):
    with pytest.raises(CastError) as info:
        func(-1)
    assert "-1" in info.value.message


def test_u64_overflow_raises():
    with pytest.raises(CastError):
        try_u64(2**64)


def test_join_byte_arrays():
    assert join_byte_arrays([b"ab", b"", bytearray(b"cd"), b"e"]) == b"abcde"
    assert join_byte_arrays([]) == b""


@pytest.mark.parametrize(
    "a, b, expected",
    [
        (b"a", b"b", -1),
        (b"b", b"a", 1),
        (b"abc", b"abc", 0),
        (b"ab", b"abc", -1),
        (b"abc", b"ab", 1),
        (b"", b"", 0),
        (b"\xff", b"\x00\x00", 1),
    ],
)
def test_cmp_key(a, b, expected):
    assert cmp_key(a, b) == expected