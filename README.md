# anvilkv

Building blocks for an embedded key-value store, in pure Python with no
third-party dependencies.

## Modules

- `anvilkv.checksum.crc32(prev, buf)`: the CRC-32 used by gzip. Pass `0`
  as `prev` to start; pass a previous result to continue over more data.
- `anvilkv.common`: `cmp_key(a, b)` compares byte keys and returns -1, 0
  or 1; `join_byte_arrays(arrays)` concatenates byte sequences;
  `try_u64(val)` and `try_usize(val)` return `val` unchanged or raise
  `CastError` (a `ValueError`) when it does not fit the unsigned width.
- `anvilkv.bloom_filter`: `murmur_hash_3_32(key, seed)` and two filters,
  `BasicBloomFilter(allowed_bytes, expected_capacity)` and
  `ConcurrentBloomFilter(allowed_bytes, expected_capacity)`. Both offer
  `add`, `contains` (also `in`), `to_bytes` and the class method
  `from_bytes`, which raises `ValueError` on malformed input.
  `ConcurrentBloomFilter.from_filter(basic)` copies a basic filter and
  guards additions with a lock.
- `anvilkv.background.BackgroundExecutor`: two worker threads, one for
  write-ahead-log work (`spawn_wal_bg`) and one for compaction work
  (`spawn_compactor_bg`). Each runs its tasks one at a time in submission
  order; exceptions from tasks are logged. `close()` (or leaving a `with`
  block) stops accepting tasks, and each thread exits after its queued work.
- `anvilkv.skip_list`: `ConcurrentSkipList(pairs=None)`, a thread-safe
  ordered map with `get` (returns `None` when absent), `set`, `remove`
  (returns the removed value or `None`), `contains` / `in`, and iteration
  over `(key, value)` tuples in ascending key order. `XorShift(seed)` is the
  xorshift64 generator it uses for node levels.
- `anvilkv.skip_list_scan`: `scan(skip_list)` returns a `SkipListScanner`;
  `from_key(key)` sets an inclusive lower bound and `to(key)` an exclusive
  upper bound, both before iteration starts (afterwards they raise
  `RuntimeError`). Items are `SkipListPair(key, value)` named tuples.
- `anvilkv.hopscotch`: `ConcurrentHopscotchHashMap` with `set`, `get`
  (returns `None` when absent), `remove` and `add` (inserts only if absent
  and returns whether it did). Keys must support `==` and provide
  `hash1()` and `hash2()`; `HopscotchKey(data)` wraps a byte string for this.
- `anvilkv.workload.next_pair(pair)`: advances a 32-byte `bytearray` in
  place and returns its 16-byte key and 16-byte value halves, for
  repeatable load tests.

## Installation

```
pip install .
```

## Example

```python
from anvilkv.checksum import crc32
from anvilkv.bloom_filter import BasicBloomFilter
from anvilkv.skip_list import ConcurrentSkipList
from anvilkv.skip_list_scan import scan
from anvilkv.hopscotch import ConcurrentHopscotchHashMap, HopscotchKey

assert crc32(0, b"123456789") == 0xCBF43926

bloom = BasicBloomFilter(1024, 1000)
bloom.add(b"hello")
assert b"hello" in bloom
restored = BasicBloomFilter.from_bytes(bloom.to_bytes())
assert restored.contains(b"hello")

table = ConcurrentSkipList([(b"b", 2), (b"a", 1), (b"c", 3)])
table.set(b"d", 4)
assert table.get(b"a") == 1

for pair in scan(table).from_key(b"b").to(b"d"):
    print(pair.key, pair.value)   # b'b' 2, then b'c' 3

index = ConcurrentHopscotchHashMap()
index.set(HopscotchKey(b"k"), 7)
assert index.get(HopscotchKey(b"k")) == 7
assert index.add(HopscotchKey(b"k"), 8) is False
```

## What this package does not do

These are in-memory components only. There is no database object tying
them together, nothing is written to disk: no write-ahead log, no sorted
table files, no compaction and no recovery. There is no command-line tool
and no server.

## Running the tests

```
pip install .[test]
pytest
```