"""Tests for fault status registers and named fault lookup."""

import pytest

from fortelion.errors import DataBytesShortage
from fortelion.models.fail_status import (
    FailState,
    FailStatus1,
    FailStatus2,
    FailStatus3,
    FailStatusItem,
    fail_status,
    fail_status_values,
)
from fortelion.protocol.commands import Command
from fortelion.protocol.parser import DataFrameView

from protocol_helpers import bm_information_data, make_data_frame, summary_data


def _summary_view(fs1: int = 0, fs2: int = 0, fs3: int = 0) -> DataFrameView:
    data = summary_data(fail_status_1=fs1, fail_status_2=fs2, fail_status_3=fs3)
    return DataFrameView(make_data_frame(Command.SUMMARY_DATA, data))


def test_item_order():
    """Items are listed register by register, bit 0 first."""
    items = list(FailStatusItem)
    assert len(items) == 24
    assert [(i.register, i.bit) for i in items] == [
        (r, b) for r in (1, 2, 3) for b in range(8)
    ]
    assert items[0] is FailStatusItem.OVER_CURRENT_DISCHARGE_DETECTION_65A
    assert items[7] is FailStatusItem.OVER_CURRENT_DISCHARGE_DETECTION_200A
    assert items[15] is FailStatusItem.FET_UNCONTROL
    assert items[23] is FailStatusItem.SELF_TEST_RAM_FAIL_DF_FAIL


def test_over_current_discharge_detection_65a():
    assert FailStatus1(0x00).over_current_discharge_detection_65a() is FailState.OK
    assert FailStatus1(0xFF).over_current_discharge_detection_65a() is FailState.NG
    assert FailStatus1(0b00000001).over_current_discharge_detection_65a() is FailState.NG
    assert FailStatus1(0b11111110).over_current_discharge_detection_65a() is FailState.OK


def test_over_current_discharge_detection_200a():
    assert FailStatus1(0b10000000).over_current_discharge_detection_200a() is FailState.NG
    assert FailStatus1(0b01111111).over_current_discharge_detection_200a() is FailState.OK


def test_low_voltage_detection():
    assert FailStatus1(0b00100000).low_voltage_detection() is FailState.NG
    assert FailStatus1(0b11011111).low_voltage_detection() is FailState.OK


def test_fuse_blown():
    assert FailStatus2(0b01000000).fuse_blown() is FailState.NG
    assert FailStatus2(0b10111111).fuse_blown() is FailState.OK


def test_cell_unbalance_detection():
    assert FailStatus2(0b00001000).cell_unbalance_detection() is FailState.NG
    assert FailStatus2(0b11110111).cell_unbalance_detection() is FailState.OK


def test_self_test_rom_fail():
    assert FailStatus3(0b00000010).self_test_rom_fail() is FailState.NG
    assert FailStatus3(0b11111101).self_test_rom_fail() is FailState.OK


def test_self_test_ram_fail_df_fail():
    assert FailStatus3(0b10000000).self_test_ram_fail_df_fail() is FailState.NG
    assert FailStatus3(0x00).self_test_ram_fail_df_fail() is FailState.OK


def test_register_rejects_foreign_item():
    with pytest.raises(ValueError):
        FailStatus1(0xFF).state(FailStatusItem.FUSE_BLOWN)


def test_register_items():
    items = list(FailStatus2(0b00000011).items())
    assert len(items) == 8
    assert items[0] == (FailStatusItem.OVER_CURRENT_DISCHARGE_DETECTION_110A, FailState.NG)
    assert items[1] == (FailStatusItem.OVER_CURRENT_CHARGE_DETECTION_65A, FailState.NG)
    assert all(state is FailState.OK for _, state in items[2:])


def test_register_repr():
    assert repr(FailStatus3(0x05)) == "FailStatus3(0b00000101)"


@pytest.mark.parametrize("target", list(FailStatusItem))
def test_single_bit_is_positional(target):
    """Only the fault owning the set bit is NG."""
    registers = {1: 0, 2: 0, 3: 0}
    registers[target.register] = 1 << target.bit
    view = _summary_view(registers[1], registers[2], registers[3])

    for item, state in view.fail_status_values():
        expected = FailState.NG if item is target else FailState.OK
        assert state is expected, item


def test_all_clear():
    view = _summary_view()
    assert all(state is FailState.OK for _, state in view.fail_status_values())


def test_all_set():
    view = _summary_view(0xFF, 0xFF, 0xFF)
    assert all(state is FailState.NG for _, state in view.fail_status_values())


def test_bm_information_has_no_register_3():
    """Register 3 faults are UNKNOWN on BM information frames."""
    data = bm_information_data(fail_status_1=0xFF, fail_status_2=0x00)
    view = DataFrameView(make_data_frame(Command.BM_INFORMATION, data))

    for item, state in view.fail_status_values():
        if item.register == 1:
            assert state is FailState.NG
        elif item.register == 2:
            assert state is FailState.OK
        else:
            assert state is FailState.UNKNOWN


def test_unrelated_command_is_all_unknown():
    view = DataFrameView(make_data_frame(Command.CURRENT, b"\x04\xd2"))
    assert all(state is FailState.UNKNOWN for _, state in view.fail_status_values())


def test_dedicated_fail_status_2_frame():
    view = DataFrameView(make_data_frame(Command.FAIL_STATUS_2, b"\x10"))
    assert view.fail_status(FailStatusItem.OVER_CHARGE) is FailState.NG
    assert view.fail_status(FailStatusItem.DEEP_DISCHARGE) is FailState.OK
    assert view.fail_status(FailStatusItem.LOW_VOLTAGE_DETECTION) is FailState.UNKNOWN
    assert view.fail_status(FailStatusItem.SELF_TEST_CLOCK_FAIL) is FailState.UNKNOWN


def test_shortage_degrades_to_unknown():
    """A register that cannot be read is UNKNOWN, not an error."""

    class ShortSource:
        def fail_status_1(self):
            raise DataBytesShortage("Not enough data")

        def fail_status_2(self):
            return FailStatus2(0xFF)

        def fail_status_3(self):
            return FailStatus3(0x00)

    source = ShortSource()
    assert fail_status(source, FailStatusItem.LOW_VOLTAGE_DETECTION) is FailState.UNKNOWN
    assert fail_status(source, FailStatusItem.FUSE_BLOWN) is FailState.NG
    assert fail_status(source, FailStatusItem.SELF_TEST_ROM_FAIL) is FailState.OK


def test_values_are_restartable():
    """The sequence can be iterated repeatedly with the same result."""
    values = fail_status_values(_summary_view(0x01, 0x00, 0x80))
    first = list(values)
    second = list(values)
    assert first == second
    assert len(values) == 24
    assert [item for item, _ in first] == list(FailStatusItem)
