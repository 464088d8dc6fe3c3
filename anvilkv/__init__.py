"""In-memory building blocks for a key-value store: CRC-32, Bloom filters,
background workers, a concurrent skip list with range scans, a hopscotch
hash map and a workload generator."""

__version__ = "0.2.1"

__all__ = [
    "background",
    "bloom_filter",
    "checksum",
    "common",
    "hopscotch",
    "skip_list",
    "skip_list_scan",
    "workload",
]