"""CRC-32 checksums as specified for the gzip file format (RFC 1952)."""

import zlib


def crc32(prev: int, buf: bytes) -> int:
    """Continue a CRC-32 computation from ``prev`` over ``buf``.

    Pass ``0`` as ``prev`` to start a fresh checksum. The result can be fed
    back in as ``prev`` to checksum data that arrives in pieces.
    """
    return zlib.crc32(bytes(buf), prev & 0xFFFFFFFF) & 0xFFFFFFFF