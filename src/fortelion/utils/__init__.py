"""Byte-level helpers: checksum and big-endian decoding."""

from .checksum import checksum
from .bytes import cut_slice, byte_at, bytes_to_u16, bytes_to_i16
