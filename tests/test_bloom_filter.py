import threading

import pytest

from anvilkv.bloom_filter import (
    BasicBloomFilter,
    ConcurrentBloomFilter,
    murmur_hash_3_32,
)


def test_murmur_hash():
    assert murmur_hash_3_32(b"Hello, World!", 1337) == 1074930736
    assert murmur_hash_3_32(b"This is a longer string.", 42) == 3413765881


def test_murmur_hash_empty_seed_zero():
    assert murmur_hash_3_32(b"", 0) == 0


def test_bloom_filter():
    bf = ConcurrentBloomFilter(100, 1000)
    bf.add(b"hello")
    assert bf.contains(b"hello")
    assert not bf.contains(b"world")


@pytest.mark.parametrize("cls", [BasicBloomFilter, ConcurrentBloomFilter])
def test_no_false_negatives(cls):
    bf = cls(4096, 500)
    keys = [i.to_bytes(4, "big") for i in range(500)]
    for key in keys:
        bf.add(key)
    assert all(key in bf for key in keys)


@pytest.mark.parametrize("cls", [BasicBloomFilter, ConcurrentBloomFilter])
def test_round_trip(cls):
    bf = cls(1024, 100)
    for i in range(100):
        bf.add(b"key-%d" % i)
    data = bf.to_bytes()
    restored = cls.from_bytes(data)
    assert restored.to_bytes() == data
    assert all(restored.contains(b"key-%d" % i) for i in range(100))


def test_from_filter_copies_state():
    basic = BasicBloomFilter(256, 50)
    basic.add(b"alpha")
    concurrent = ConcurrentBloomFilter.from_filter(basic)
    assert concurrent.contains(b"alpha")
    assert concurrent.to_bytes() == basic.to_bytes()
    concurrent.add(b"beta")
    assert concurrent.contains(b"beta")


def test_empty_filter_rejects_keys():
    bf = BasicBloomFilter(64, 10)
    assert not bf.contains(b"anything")


def test_concurrent_adds():
    bf = ConcurrentBloomFilter(8192, 800)

    def worker(base):
        for i in range(200):
            bf.add((base + i).to_bytes(4, "big"))

    threads = [threading.Thread(target=worker, args=(t * 200,)) for t in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert all(bf.contains(i.to_bytes(4, "big")) for i in range(800))


def test_from_bytes_empty_raises():
    with pytest.raises(ValueError, match="offset"):
        BasicBloomFilter.from_bytes(b"")


def test_from_bytes_truncated_cells_raises():
    data = BasicBloomFilter(128, 10).to_bytes()
    with pytest.raises(ValueError, match="cells"):
        BasicBloomFilter.from_bytes(data[:-1])


def test_from_bytes_truncated_seeds_raises():
    with pytest.raises(ValueError, match="hash seeds"):
        ConcurrentBloomFilter.from_bytes(b"\x05\x03\x00\x00")


def test_invalid_capacity_raises():
    with pytest.raises(ValueError):
        BasicBloomFilter(100, 0)