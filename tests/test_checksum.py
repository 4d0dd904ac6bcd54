"""Tests for the frame checksum."""

from fortelion.utils.checksum import checksum


def test_checksum_empty():
    """Checksum of empty data is zero."""
    assert checksum(b"") == 0x00


def test_checksum_known_data_frame():
    """Reference capture: Current response carrying 1234 mA."""
    data = bytes([0x02, 0x01, 0x03, 0x02, 0x04, 0xD2])
    assert checksum(data) == 0xD4


def test_checksum_known_command_frame():
    """SummaryData request header."""
    assert checksum(bytes([0x05, 0x01, 0x20, 0x00])) == 0x24


def test_checksum_of_data_plus_checksum_is_zero():
    """Appending the checksum to its own input cancels it out."""
    data = bytes(range(1, 40))
    assert checksum(data + bytes([checksum(data)])) == 0


def test_checksum_single_bit_changes_result():
    """Flipping any single bit changes the checksum."""
    data = bytes([0x02, 0x01, 0x03, 0x02, 0x04, 0xD2])
    original = checksum(data)
    for index in range(len(data)):
        for bit in range(8):
            corrupted = bytearray(data)
            corrupted[index] ^= 1 << bit
            assert checksum(bytes(corrupted)) != original
