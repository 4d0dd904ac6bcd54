"""UART connection to the Fortelion battery module.

The module talks 38400 baud, 8 data bits, even parity, 1 stop bit. Every
request is answered by exactly one data frame whose length is known from
the request command, so a receive is a single fixed-length read bounded by
the acknowledgment timeout.
"""

from __future__ import annotations

import logging

import serial

from ..errors import UartFailedToOpen, UartFailedToReceive, UartFailedToSend
from ..protocol.commands import Command
from ..protocol.framing import CommandFrame, DataFrame

logger = logging.getLogger(__name__)

BAUDRATE = 38400
BYTESIZE = serial.EIGHTBITS
PARITY = serial.PARITY_EVEN
STOPBITS = serial.STOPBITS_ONE
DEFAULT_PORT = "/dev/ttyUSB0"
READ_TIMEOUT_MS = 100


class SerialConnection:
    """Manages the serial link to one battery module.

    Usage::

        with SerialConnection("/dev/ttyUSB0") as conn:
            frame = conn.send_and_receive(Command.SUMMARY_DATA)
            view = DataFrameView(frame)

    Only one request may be outstanding at a time.
    """

    def __init__(
        self,
        port: str = DEFAULT_PORT,
        timeout_ms: int = READ_TIMEOUT_MS,
    ) -> None:
        self._port = port
        self._timeout_ms = timeout_ms
        self._serial: serial.Serial | None = None

    @property
    def port(self) -> str:
        return self._port

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    @property
    def connected(self) -> bool:
        return self._serial is not None and self._serial.is_open

    def __enter__(self) -> SerialConnection:
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def open(self) -> None:
        """Open and configure the serial device.

        Raises:
            UartFailedToOpen: If the device cannot be opened.
        """
        timeout = self._timeout_ms / 1000
        try:
            self._serial = serial.Serial(
                port=self._port,
                baudrate=BAUDRATE,
                bytesize=BYTESIZE,
                parity=PARITY,
                stopbits=STOPBITS,
                timeout=timeout,
                write_timeout=timeout,
            )
        except (serial.SerialException, OSError, ValueError) as e:
            raise UartFailedToOpen(self._port, e) from e

        logger.info("Opened %s (%d 8E1, timeout %d ms)", self._port, BAUDRATE, self._timeout_ms)

    def close(self) -> None:
        """Close the serial device."""
        if self._serial is None:
            return

        try:
            self._serial.close()
        except (serial.SerialException, OSError) as e:
            logger.warning("Error closing %s: %s", self._port, e)
        finally:
            self._serial = None
            logger.info("Closed %s", self._port)

    def _require_serial(self) -> serial.Serial:
        if not self.connected:
            raise ConnectionError(f"Serial port {self._port} is not open")
        return self._serial

    def send(self, command_frame: CommandFrame | bytes) -> None:
        """Write every byte of a command frame.

        Raises:
            ConnectionError: If not connected.
            UartFailedToSend: If the write fails or is incomplete.
        """
        port = self._require_serial()
        data = bytes(command_frame)
        logger.debug("TX %s", data.hex(" "))
        try:
            written = port.write(data)
            port.flush()
        except (serial.SerialException, OSError) as e:
            raise UartFailedToSend(e) from e
        if written is not None and written != len(data):
            raise UartFailedToSend(
                IOError(f"wrote {written} of {len(data)} bytes")
            )

    def receive(self, data_frame: DataFrame) -> None:
        """Fill ``data_frame`` with exactly ``len(data_frame)`` bytes.

        The frame is not validated here.

        Raises:
            ConnectionError: If not connected.
            UartFailedToReceive: On I/O failure or if the timeout expires
                before the frame is complete.
        """
        port = self._require_serial()
        expected = len(data_frame)
        try:
            data = port.read(expected)
        except (serial.SerialException, OSError) as e:
            raise UartFailedToReceive(e) from e

        logger.debug("RX %s", data.hex(" "))
        if len(data) != expected:
            raise UartFailedToReceive(
                TimeoutError(
                    f"received {len(data)} of {expected} bytes "
                    f"within {self._timeout_ms} ms"
                )
            )
        data_frame.fill(data)

    def send_and_receive(self, command: Command) -> DataFrame:
        """Request ``command`` and return its validated response frame.

        Raises:
            UartFailedToSend: If the request cannot be written.
            UartFailedToReceive: If the response is incomplete.
            InvalidDataFrame: If the response fails validation.
        """
        port = self._require_serial()
        port.reset_input_buffer()
        self.send(CommandFrame.new(command))
        data_frame = DataFrame(command)
        self.receive(data_frame)
        data_frame.validate()
        return data_frame
