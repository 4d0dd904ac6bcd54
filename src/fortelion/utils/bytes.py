"""Helpers for slicing payload windows and decoding big-endian integers."""

from __future__ import annotations

from ..errors import DataBytesShortage


def cut_slice(data: bytes, offset: int, length: int) -> bytes:
    """Return ``data[offset:offset + length]``, refusing partial windows."""
    if len(data) < offset + length:
        raise DataBytesShortage(
            f"Out of range (offset {offset}, length {length}, "
            f"available {len(data)})"
        )
    return bytes(data[offset : offset + length])


def byte_at(data: bytes, offset: int) -> int:
    """Return the single byte at ``offset``."""
    if offset >= len(data):
        raise DataBytesShortage(
            f"Not enough data (offset {offset}, available {len(data)})"
        )
    return data[offset]


def bytes_to_u16(data: bytes) -> int:
    """Decode the first two bytes as an unsigned big-endian integer."""
    if len(data) < 2:
        raise DataBytesShortage("Too short for u16")
    return int.from_bytes(data[:2], "big")


def bytes_to_i16(data: bytes) -> int:
    """Decode the first two bytes as a signed big-endian integer."""
    if len(data) < 2:
        raise DataBytesShortage("Too short for i16")
    return int.from_bytes(data[:2], "big", signed=True)
