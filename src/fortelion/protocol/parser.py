"""Field extraction from validated data frames.

The same physical quantity sits at a different offset, and sometimes with a
different scale, depending on which command produced the frame. A module
can answer with a single narrow quantity (e.g. ``CURRENT``), the broad
``BM_INFORMATION`` block or the broad ``SUMMARY_DATA`` block, and the two
broad blocks do not share a layout. :data:`FIELD_LAYOUTS` holds every
(quantity, command) pair; offsets are relative to the start of the data
bytes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..errors import NoAppropriateData, ZeroCapacity
from ..models.fail_status import (
    FailState,
    FailStatus1,
    FailStatus2,
    FailStatus3,
    FailStatusItem,
    FailStatusValues,
    fail_status,
)
from ..utils.bytes import byte_at, bytes_to_i16, bytes_to_u16, cut_slice
from .commands import Command
from .framing import DataFrame

# All-in-one battery module
NUMBER_OF_CELLS = 8


@dataclass(frozen=True)
class Field:
    """Location and encoding of one quantity inside the data bytes."""

    offset: int
    size: int = 2
    signed: bool = False
    scale: int | float = 1


FIELD_LAYOUTS: dict[str, dict[Command, Field]] = {
    "cell_voltages": {
        Command.CELL_VOLTAGE: Field(0, size=NUMBER_OF_CELLS * 2),
        Command.BM_INFORMATION: Field(1, size=NUMBER_OF_CELLS * 2),
    },
    "current": {
        Command.CURRENT: Field(0, signed=True),
        Command.BM_INFORMATION: Field(17, signed=True, scale=10),
        Command.SUMMARY_DATA: Field(7, signed=True, scale=10),
    },
    "temperature": {
        Command.TEMPERATURE: Field(0, signed=True, scale=1.0),
        Command.BM_INFORMATION: Field(19, signed=True, scale=0.1),
        # Max temperature; the min temperature follows at offset 35.
        Command.SUMMARY_DATA: Field(32, signed=True, scale=0.1),
    },
    "remaining_capacity": {
        Command.REMAINING_CAPACITY: Field(0),
        Command.BM_INFORMATION: Field(21),
        Command.SUMMARY_DATA: Field(21, scale=10),
    },
    "full_charge_capacity": {
        Command.FULL_CHARGE_CAPACITY: Field(0),
        Command.BM_INFORMATION: Field(23),
        Command.SUMMARY_DATA: Field(19, scale=10),
    },
    "design_capacity": {
        Command.DESIGN_CAPACITY: Field(0),
        Command.BM_INFORMATION: Field(25),
        Command.SUMMARY_DATA: Field(17, scale=10),
    },
    "absolute_state_of_charge": {
        Command.SUMMARY_DATA: Field(2, size=1),
    },
    "relative_state_of_charge": {
        Command.SUMMARY_DATA: Field(3, size=1),
    },
    "state_of_health": {
        Command.STATE_OF_HEALTH: Field(0, size=1),
        Command.BM_INFORMATION: Field(28, size=1),
        Command.SUMMARY_DATA: Field(4, size=1),
    },
    "bm_voltage": {
        Command.SUMMARY_DATA: Field(11),
    },
    "fail_status_1": {
        Command.FAIL_STATUS_1: Field(0, size=1),
        Command.BM_INFORMATION: Field(0, size=1),
        Command.SUMMARY_DATA: Field(0, size=1),
    },
    "fail_status_2": {
        Command.FAIL_STATUS_2: Field(0, size=1),
        Command.BM_INFORMATION: Field(27, size=1),
        Command.SUMMARY_DATA: Field(13, size=1),
    },
    "fail_status_3": {
        Command.SUMMARY_DATA: Field(14, size=1),
    },
}

# Quantities computed from other fields rather than read from a window.
DERIVED_SOURCES: dict[str, tuple[Command, ...]] = {
    "absolute_state_of_charge": (Command.BM_INFORMATION,),
    "relative_state_of_charge": (Command.BM_INFORMATION,),
    "bm_voltage": (Command.BM_INFORMATION,),
}


def sources_of(quantity: str) -> tuple[Command, ...]:
    """Every command whose response carries ``quantity``."""
    commands = set(FIELD_LAYOUTS[quantity]) | set(DERIVED_SOURCES.get(quantity, ()))
    return tuple(sorted(commands))


def decode_field(data: bytes, field: Field) -> int | float:
    """Read a 1- or 2-byte big-endian value and apply its scale."""
    if field.size == 1:
        raw = byte_at(data, field.offset)
    else:
        window = cut_slice(data, field.offset, field.size)
        raw = bytes_to_i16(window) if field.signed else bytes_to_u16(window)
    return raw * field.scale


class DataFrameView:
    """Read-only access to the quantities in a validated :class:`DataFrame`.

    The view keeps a reference to the frame and re-reads its bytes on every
    call. The frame must not be refilled while a view over it is in use.

    Raises:
        InvalidDataFrame: From the constructor, if the frame does not
            validate.
        ZeroCapacity: From the BM information SOC accessors when the
            capacity they divide by is zero.
    """

    def __init__(self, data_frame: DataFrame) -> None:
        data_frame.validate()
        self._data_frame = data_frame

    @property
    def data_frame(self) -> DataFrame:
        return self._data_frame

    @property
    def response_command(self) -> Command:
        return self._data_frame.response_command

    def __repr__(self) -> str:
        return f"DataFrameView(command={self.response_command.name})"

    def _field(self, quantity: str) -> Field:
        field = FIELD_LAYOUTS[quantity].get(self.response_command)
        if field is None:
            raise NoAppropriateData(self.response_command, sources_of(quantity))
        return field

    def _value(self, quantity: str) -> int | float:
        return decode_field(self._data_frame.data(), self._field(quantity))

    def cell_voltages(self) -> list[int]:
        """Voltage of each cell in mV."""
        field = self._field("cell_voltages")
        window = cut_slice(self._data_frame.data(), field.offset, field.size)
        return [bytes_to_u16(window[i : i + 2]) for i in range(0, len(window), 2)]

    def current(self) -> int:
        """Current in mA; positive while charging, negative while discharging."""
        return self._value("current")

    def temperature(self) -> float:
        """Module temperature in degC."""
        return self._value("temperature")

    def remaining_capacity(self) -> int:
        """Remaining capacity in mAh."""
        return self._value("remaining_capacity")

    def full_charge_capacity(self) -> int:
        """Currently fully charged capacity in mAh."""
        return self._value("full_charge_capacity")

    def design_capacity(self) -> int:
        """Design capacity in mAh."""
        return self._value("design_capacity")

    def absolute_state_of_charge(self) -> int:
        """Remaining / design capacity in %."""
        if self.response_command is Command.BM_INFORMATION:
            remaining = self.remaining_capacity()
            design = self.design_capacity()
            if design == 0:
                raise ZeroCapacity("Design capacity is zero", rule="design capacity")
            return math.floor(100 * remaining / design + 0.5)
        return self._value("absolute_state_of_charge")

    def relative_state_of_charge(self) -> int:
        """Remaining / full charge capacity in %, truncated."""
        if self.response_command is Command.BM_INFORMATION:
            remaining = self.remaining_capacity()
            full_charge = self.full_charge_capacity()
            if full_charge == 0:
                raise ZeroCapacity(
                    "Full charge capacity is zero", rule="full charge capacity"
                )
            return 100 * remaining // full_charge
        return self._value("relative_state_of_charge")

    def state_of_health(self) -> int:
        """Full charge / design capacity in %, as reported by the module."""
        return self._value("state_of_health")

    def bm_voltage(self) -> int:
        """Voltage of the whole battery module in mV."""
        if self.response_command is Command.BM_INFORMATION:
            return sum(self.cell_voltages())
        return self._value("bm_voltage")

    def fail_status_1(self) -> FailStatus1:
        return FailStatus1(self._value("fail_status_1"))

    def fail_status_2(self) -> FailStatus2:
        return FailStatus2(self._value("fail_status_2"))

    def fail_status_3(self) -> FailStatus3:
        return FailStatus3(self._value("fail_status_3"))

    def fail_status(self, item: FailStatusItem) -> FailState:
        """State of one named fault, UNKNOWN if this frame lacks its register."""
        return fail_status(self, item)

    def fail_status_values(self) -> FailStatusValues:
        """All 24 faults with their states, in reporting order."""
        return FailStatusValues(self)
