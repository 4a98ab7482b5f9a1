"""Conversions between byte values and raw byte strings."""

from __future__ import annotations

from typing import Iterable, List, Optional


def byte_pack(values: Iterable[int]) -> bytes:
    """Pack integers in ``range(256)`` into a byte string."""

    return bytes(values)


def byte_unpack(data: object) -> Optional[List[int]]:
    """Return the byte values of *data*, or ``None`` if it is not a byte string."""

    if not isinstance(data, (bytes, bytearray, memoryview)):
        return None
    return list(bytes(data))
