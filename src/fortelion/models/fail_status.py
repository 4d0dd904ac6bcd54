"""Fault status registers reported by the battery module.

Three independent 8-bit registers each name eight fault conditions, one
per bit. A set bit means the condition was detected (NG).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Iterator, Protocol

from ..errors import DataBytesShortage, NoAppropriateData


class FailState(Enum):
    """State of a single fault condition."""

    OK = "ok"
    NG = "ng"
    UNKNOWN = "unknown"


class FailStatusItem(Enum):
    """The 24 named faults as ``(register, bit)``, in reporting order."""

    OVER_CURRENT_DISCHARGE_DETECTION_65A = (1, 0)
    OVER_CURRENT_DISCHARGE_DETECTION_90A = (1, 1)
    OVER_CHARGE_PROTECTION = (1, 2)
    OVER_CURRENT_CHARGE_DETECTION_45A = (1, 3)
    OVER_TEMPERATURE_DISCHARGE_DETECTION = (1, 4)
    LOW_VOLTAGE_DETECTION = (1, 5)
    FULLY_CHARGE_DETECTION = (1, 6)
    OVER_CURRENT_DISCHARGE_DETECTION_200A = (1, 7)
    OVER_CURRENT_DISCHARGE_DETECTION_110A = (2, 0)
    OVER_CURRENT_CHARGE_DETECTION_65A = (2, 1)
    OVER_TEMPERATURE_CHARGE_DETECTION = (2, 2)
    CELL_UNBALANCE_DETECTION = (2, 3)
    OVER_CHARGE = (2, 4)
    DEEP_DISCHARGE = (2, 5)
    FUSE_BLOWN = (2, 6)
    FET_UNCONTROL = (2, 7)
    SELF_TEST_CLOCK_FAIL = (3, 0)
    SELF_TEST_ROM_FAIL = (3, 1)
    SELF_TEST_REGISTER_FAIL = (3, 2)
    SELF_TEST_PSW_REGISTER_FAIL = (3, 3)
    SELF_TEST_STACK_REGISTER_FAIL = (3, 4)
    SELF_TEST_CS_REGISTER_FAIL = (3, 5)
    SELF_TEST_ES_REGISTER_FAIL = (3, 6)
    SELF_TEST_RAM_FAIL_DF_FAIL = (3, 7)

    @property
    def register(self) -> int:
        return self.value[0]

    @property
    def bit(self) -> int:
        return self.value[1]


def fail_state_from_byte_and_bit_pos(byte: int, pos: int) -> FailState:
    return FailState.OK if byte & (1 << pos) == 0 else FailState.NG


@dataclass(frozen=True)
class FailStatusRegister:
    """Base class for the three fault status registers."""

    REGISTER: ClassVar[int] = 0
    raw: int

    def state(self, item: FailStatusItem) -> FailState:
        """State of ``item``, which must belong to this register."""
        if item.register != self.REGISTER:
            raise ValueError(
                f"{item.name} belongs to fail status {item.register}, "
                f"not {self.REGISTER}"
            )
        return fail_state_from_byte_and_bit_pos(self.raw, item.bit)

    def items(self) -> Iterator[tuple[FailStatusItem, FailState]]:
        """Yield every fault of this register with its state, bit 0 first."""
        for item in FailStatusItem:
            if item.register == self.REGISTER:
                yield item, self.state(item)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(0b{self.raw:08b})"


@dataclass(frozen=True, repr=False)
class FailStatus1(FailStatusRegister):
    """Fail status 1: over-current, over-charge and voltage detections."""

    REGISTER: ClassVar[int] = 1

    def over_current_discharge_detection_65a(self) -> FailState:
        return self.state(FailStatusItem.OVER_CURRENT_DISCHARGE_DETECTION_65A)

    def over_current_discharge_detection_90a(self) -> FailState:
        return self.state(FailStatusItem.OVER_CURRENT_DISCHARGE_DETECTION_90A)

    def over_charge_protection(self) -> FailState:
        return self.state(FailStatusItem.OVER_CHARGE_PROTECTION)

    def over_current_charge_detection_45a(self) -> FailState:
        return self.state(FailStatusItem.OVER_CURRENT_CHARGE_DETECTION_45A)

    def over_temperature_discharge_detection(self) -> FailState:
        return self.state(FailStatusItem.OVER_TEMPERATURE_DISCHARGE_DETECTION)

    def low_voltage_detection(self) -> FailState:
        return self.state(FailStatusItem.LOW_VOLTAGE_DETECTION)

    def fully_charge_detection(self) -> FailState:
        return self.state(FailStatusItem.FULLY_CHARGE_DETECTION)

    def over_current_discharge_detection_200a(self) -> FailState:
        return self.state(FailStatusItem.OVER_CURRENT_DISCHARGE_DETECTION_200A)


@dataclass(frozen=True, repr=False)
class FailStatus2(FailStatusRegister):
    """Fail status 2: protection faults and hardware failures."""

    REGISTER: ClassVar[int] = 2

    def over_current_discharge_detection_110a(self) -> FailState:
        return self.state(FailStatusItem.OVER_CURRENT_DISCHARGE_DETECTION_110A)

    def over_current_charge_detection_65a(self) -> FailState:
        return self.state(FailStatusItem.OVER_CURRENT_CHARGE_DETECTION_65A)

    def over_temperature_charge_detection(self) -> FailState:
        return self.state(FailStatusItem.OVER_TEMPERATURE_CHARGE_DETECTION)

    def cell_unbalance_detection(self) -> FailState:
        return self.state(FailStatusItem.CELL_UNBALANCE_DETECTION)

    def over_charge(self) -> FailState:
        return self.state(FailStatusItem.OVER_CHARGE)

    def deep_discharge(self) -> FailState:
        return self.state(FailStatusItem.DEEP_DISCHARGE)

    def fuse_blown(self) -> FailState:
        return self.state(FailStatusItem.FUSE_BLOWN)

    def fet_uncontrol(self) -> FailState:
        return self.state(FailStatusItem.FET_UNCONTROL)


@dataclass(frozen=True, repr=False)
class FailStatus3(FailStatusRegister):
    """Fail status 3: controller self-test results."""

    REGISTER: ClassVar[int] = 3

    def self_test_clock_fail(self) -> FailState:
        return self.state(FailStatusItem.SELF_TEST_CLOCK_FAIL)

    def self_test_rom_fail(self) -> FailState:
        return self.state(FailStatusItem.SELF_TEST_ROM_FAIL)

    def self_test_register_fail(self) -> FailState:
        return self.state(FailStatusItem.SELF_TEST_REGISTER_FAIL)

    def self_test_psw_register_fail(self) -> FailState:
        return self.state(FailStatusItem.SELF_TEST_PSW_REGISTER_FAIL)

    def self_test_stack_register_fail(self) -> FailState:
        return self.state(FailStatusItem.SELF_TEST_STACK_REGISTER_FAIL)

    def self_test_cs_register_fail(self) -> FailState:
        return self.state(FailStatusItem.SELF_TEST_CS_REGISTER_FAIL)

    def self_test_es_register_fail(self) -> FailState:
        return self.state(FailStatusItem.SELF_TEST_ES_REGISTER_FAIL)

    def self_test_ram_fail_df_fail(self) -> FailState:
        return self.state(FailStatusItem.SELF_TEST_RAM_FAIL_DF_FAIL)


class FailStatusSource(Protocol):
    """Anything that can produce the three fault registers."""

    def fail_status_1(self) -> FailStatus1: ...

    def fail_status_2(self) -> FailStatus2: ...

    def fail_status_3(self) -> FailStatus3: ...


def _register_of(source: FailStatusSource, register: int) -> FailStatusRegister:
    if register == 1:
        return source.fail_status_1()
    if register == 2:
        return source.fail_status_2()
    if register == 3:
        return source.fail_status_3()
    raise ValueError(f"No fail status register {register}")


def fail_status(source: FailStatusSource, item: FailStatusItem) -> FailState:
    """State of ``item``, or UNKNOWN when its register is not available."""
    try:
        register = _register_of(source, item.register)
    except (NoAppropriateData, DataBytesShortage):
        return FailState.UNKNOWN
    return register.state(item)


class FailStatusValues:
    """Iterable of ``(item, state)`` for all 24 faults in reporting order.

    Every iteration re-reads the source, so the sequence can be walked
    more than once.
    """

    def __init__(self, source: FailStatusSource) -> None:
        self._source = source

    def __iter__(self) -> Iterator[tuple[FailStatusItem, FailState]]:
        for item in FailStatusItem:
            yield item, fail_status(self._source, item)

    def __len__(self) -> int:
        return len(FailStatusItem)


def fail_status_values(source: FailStatusSource) -> FailStatusValues:
    return FailStatusValues(source)
