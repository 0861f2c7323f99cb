"""Key-driven byte permutation and checksums used by the token format."""

from __future__ import annotations

import hashlib

CHECKSUM_LENGTH = 8


def _permutation(length: int, key: str) -> list[int]:
    key_hash = hashlib.sha256(key.encode("utf-8")).digest()
    # sorted() is stable, so equal hash bytes keep their original order.
    return sorted(range(length), key=lambda index: key_hash[index % len(key_hash)])


def pseudo_shuffle(data: bytes, key: str) -> bytes:
    """Reorder ``data`` deterministically according to ``key``."""
    data = bytes(data)
    return bytes(data[index] for index in _permutation(len(data), key))


def pseudo_unshuffle(data: bytes, key: str) -> bytes:
    """Undo :func:`pseudo_shuffle` for the same ``key``."""
    data = bytes(data)
    restored = bytearray(len(data))
    for position, index in enumerate(_permutation(len(data), key)):
        restored[index] = data[position]
    return bytes(restored)


def make_checksum(data: bytes) -> bytes:
    """Return the first eight bytes of the SHA-256 digest of ``data``."""
    return hashlib.sha256(bytes(data)).digest()[:CHECKSUM_LENGTH]