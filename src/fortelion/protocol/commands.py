"""Command catalog and command frame builders.

Each command is identified by a single-byte code used both in the
host-to-module request and in the module-to-host response. The response
carries a fixed number of data bytes per command, known in advance.
"""

from __future__ import annotations

from enum import IntEnum

from .framing import CommandFrame


class Command(IntEnum):
    """Request/response command codes."""

    FAIL_STATUS_1 = 0x01
    CELL_VOLTAGE = 0x02
    CURRENT = 0x03
    TEMPERATURE = 0x04
    REMAINING_CAPACITY = 0x05
    BM_INFORMATION = 0x10
    FULL_CHARGE_CAPACITY = 0x11
    FAIL_STATUS_2 = 0x13
    STATE_OF_HEALTH = 0x14
    SUMMARY_DATA = 0x20
    VERSION_INFORMATION = 0x50
    DESIGN_CAPACITY = 0x55

    @property
    def number_of_data(self) -> int:
        """Number of data bytes in the response frame."""
        return RESPONSE_DATA_LENGTHS[self]

    @property
    def number_of_data_in_command(self) -> int:
        """Number of data bytes in the request frame."""
        return REQUEST_DATA_LENGTHS.get(self, 0)


RESPONSE_DATA_LENGTHS: dict[Command, int] = {
    Command.FAIL_STATUS_1: 1,
    Command.CELL_VOLTAGE: 16,
    Command.CURRENT: 2,
    Command.TEMPERATURE: 2,
    Command.REMAINING_CAPACITY: 2,
    Command.BM_INFORMATION: 29,
    Command.FULL_CHARGE_CAPACITY: 2,
    Command.FAIL_STATUS_2: 1,
    Command.STATE_OF_HEALTH: 1,
    Command.SUMMARY_DATA: 50,
    Command.VERSION_INFORMATION: 3,
    Command.DESIGN_CAPACITY: 2,
}

# No command takes request parameters yet.
REQUEST_DATA_LENGTHS: dict[Command, int] = {}


def command_from_name(name: str) -> Command:
    """Look up a command by its member name, case-insensitively.

    Raises:
        ValueError: If no command has that name.
    """
    try:
        return Command[name.strip().upper()]
    except KeyError:
        raise ValueError(
            f"Unknown command '{name}'. Valid: {[c.name.lower() for c in Command]}"
        ) from None


def build_command(command: Command) -> bytes:
    """Build the 5-byte request frame for ``command``."""
    return bytes(CommandFrame.new(command))
