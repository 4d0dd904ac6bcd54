"""Command frame builder and data frame buffer for the UART link.

Command frame (host -> module), always 5 bytes::

    +------------+-------+---------+----------------+----------+
    | Start Code | BM ID | Command | Number of data | Checksum |
    |    0x05    | 0x01  | 1 byte  |      0x00      |  1 byte  |
    +------------+-------+---------+----------------+----------+

Data frame (module -> host), ``6 + number_of_data`` bytes::

    +------------+-------+----------+----------------+---------+----------+----------+
    | Start Code | BM ID | Response | Number of data |  Data   | Checksum | Reserved |
    |    0x02    | 0x01  |  1 byte  |     1 byte     | n bytes |  1 byte  |   0x00   |
    +------------+-------+----------+----------------+---------+----------+----------+

- Checksum: XOR of every preceding byte in the frame
- Number of data: fixed per command, see :class:`~.commands.Command`
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..errors import InvalidDataFrame
from ..utils.checksum import checksum

if TYPE_CHECKING:
    from .commands import Command

COMMAND_FRAME_START_CODE = 0x05
DATA_FRAME_START_CODE = 0x02
LEADER_BM_ID = 0x01

START_CODE_INDEX = 0
BM_ID_INDEX = 1
RESPONSE_COMMAND_INDEX = 2
NUMBER_OF_DATA_INDEX = 3
DATA_OFFSET = 4

# Start code, BM ID, response command, number of data, checksum, reserved
NUMBER_OF_BYTES_EXCEPT_FOR_DATA = 6


@dataclass(frozen=True)
class CommandFrame:
    """An outbound request frame."""

    request_command: Command
    data: bytes

    @classmethod
    def new(cls, request_command: Command) -> CommandFrame:
        """Build the request frame for ``request_command``.

        Raises:
            ValueError: If the command requires request parameters.
        """
        number_of_data = request_command.number_of_data_in_command
        if number_of_data != 0:
            raise ValueError(
                f"{request_command.name} needs {number_of_data} request data "
                "bytes, only parameterless commands can be built"
            )
        head = bytes([
            COMMAND_FRAME_START_CODE,
            LEADER_BM_ID,
            request_command.value,
            number_of_data,
        ])
        return cls(request_command=request_command, data=head + bytes([checksum(head)]))

    def __bytes__(self) -> bytes:
        return self.data

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return (
            f"CommandFrame(command={self.request_command.name}, "
            f"bytes={self.data.hex(' ')})"
        )


class DataFrame:
    """A receive buffer sized for the response to one command.

    The buffer starts zero-filled and is filled in place by the transport.
    Call :meth:`validate` before reading :meth:`data`.
    """

    def __init__(self, response_command: Command) -> None:
        self._response_command = response_command
        self._buf = bytearray(
            response_command.number_of_data + NUMBER_OF_BYTES_EXCEPT_FOR_DATA
        )

    @property
    def response_command(self) -> Command:
        return self._response_command

    @property
    def buffer(self) -> bytearray:
        """The raw frame bytes, writable in place."""
        return self._buf

    def __len__(self) -> int:
        return len(self._buf)

    def __bytes__(self) -> bytes:
        return bytes(self._buf)

    def __repr__(self) -> str:
        return (
            f"DataFrame(command={self._response_command.name}, "
            f"bytes={self._buf.hex(' ')})"
        )

    def fill(self, data: bytes) -> None:
        """Copy a complete received frame into the buffer.

        Raises:
            ValueError: If ``data`` is not exactly the frame length.
        """
        if len(data) != len(self._buf):
            raise ValueError(
                f"{self._response_command.name} frame must be "
                f"{len(self._buf)} bytes, got {len(data)}"
            )
        self._buf[:] = data

    def data(self) -> bytes:
        """The payload between the 4-byte header and the checksum."""
        end = DATA_OFFSET + self._response_command.number_of_data
        return bytes(self._buf[DATA_OFFSET:end])

    def validate(self) -> None:
        """Check the frame structure and checksum.

        Rules are checked in a fixed order and the first failure is raised.

        Raises:
            InvalidDataFrame: Naming the failed rule with expected and
                received byte values.
        """
        buf = self._buf
        command = self._response_command
        number_of_data = command.number_of_data

        _expect(buf[START_CODE_INDEX], DATA_FRAME_START_CODE, "start code", "Invalid start code")
        _expect(buf[BM_ID_INDEX], LEADER_BM_ID, "bm id", "Invalid BM ID")
        _expect(
            buf[RESPONSE_COMMAND_INDEX],
            command.value,
            "response command",
            "Response command mismatch",
        )
        _expect(
            buf[NUMBER_OF_DATA_INDEX],
            number_of_data,
            "number of data",
            "Invalid number of data",
        )
        checksum_index = DATA_OFFSET + number_of_data
        _expect(
            buf[checksum_index],
            checksum(buf[:checksum_index]),
            "checksum",
            "Invalid checksum",
        )


def _expect(received: int, expected: int, rule: str, label: str) -> None:
    if received != expected:
        raise InvalidDataFrame(
            f"{label} (must be: 0x{expected:02X}, received 0x{received:02X})",
            rule=rule,
            expected=expected,
            received=received,
        )
