"""Key hashing used to pick a partition."""

from __future__ import annotations

_FNV_OFFSET = 0x811C9DC5
_FNV_PRIME = 0x01000193
_MASK = 0xFFFFFFFF


def fnv1a_32(data: bytes | str) -> int:
    """Return the 32-bit FNV-1a hash of ``data`` (strings are UTF-8 encoded)."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    value = _FNV_OFFSET
    for byte in data:
        value ^= byte
        value = (value * _FNV_PRIME) & _MASK
    return value


def partition_index(key: bytes | str, partition_count: int) -> int:
    """Map ``key`` onto one of ``partition_count`` partitions."""
    if partition_count <= 0:
        raise ValueError(f"partition count must be positive, got {partition_count}")
    return fnv1a_32(key) % partition_count