"""Tests for payload window and big-endian helpers."""

import pytest

from fortelion.errors import DataBytesShortage
from fortelion.utils.bytes import byte_at, bytes_to_i16, bytes_to_u16, cut_slice

DATA = bytes([0x01, 0x02, 0x03, 0x04, 0x05, 0x06, 0x07, 0x08, 0x09, 0x0A])


@pytest.mark.parametrize(
    "offset, length, expected",
    [
        (0, 0, b""),
        (0, 1, b"\x01"),
        (3, 2, b"\x04\x05"),
        (2, 6, b"\x03\x04\x05\x06\x07\x08"),
        (0, 10, DATA),
        (8, 2, b"\x09\x0a"),
        (9, 1, b"\x0a"),
        (10, 0, b""),
    ],
)
def test_cut_slice_in_range(offset, length, expected):
    assert cut_slice(DATA, offset, length) == expected


@pytest.mark.parametrize(
    "offset, length",
    [(0, 11), (1, 10), (10, 1), (9, 2), (5, 6), (100, 2)],
)
def test_cut_slice_out_of_range(offset, length):
    with pytest.raises(DataBytesShortage):
        cut_slice(DATA, offset, length)


def test_byte_at():
    assert byte_at(DATA, 0) == 0x01
    assert byte_at(DATA, 9) == 0x0A
    with pytest.raises(DataBytesShortage):
        byte_at(DATA, 10)


@pytest.mark.parametrize(
    "raw, unsigned, signed",
    [
        (b"\x00\x00", 0, 0),
        (b"\x01\x01", 257, 257),
        (b"\x00\x79", 121, 121),
        (b"\x65\x00", 25856, 25856),
        (b"\x2b\x35", 11061, 11061),
        (b"\x13\xf8", 5112, 5112),
        (b"\x87\x16", 34582, -30954),
        (b"\xcb\x51", 52049, -13487),
        (b"\xa1\xb7", 41399, -24137),
        (b"\xff\xff", 65535, -1),
    ],
)
def test_big_endian_decode(raw, unsigned, signed):
    assert bytes_to_u16(raw) == unsigned
    assert bytes_to_i16(raw) == signed


def test_decode_too_short():
    """A single byte cannot be decoded as a 16-bit integer."""
    with pytest.raises(DataBytesShortage):
        bytes_to_u16(b"\xe2")
    with pytest.raises(DataBytesShortage):
        bytes_to_i16(b"\xe2")
