"""Exceptions raised by the Fortelion protocol layer and serial transport."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .protocol.commands import Command


class FortelionError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str) -> None:
        super().__init__(f"fortelion: {message}")


class UartFailedToOpen(FortelionError):
    """The serial device could not be opened."""

    def __init__(self, path: str, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to open: path({path!r}) Error({cause!r})")


class UartFailedToSend(FortelionError):
    """Writing a command frame to the serial device failed."""

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"Failed to send: Error({cause!r})")


class UartFailedToReceive(FortelionError):
    """Reading a data frame failed or timed out before it was complete."""

    def __init__(self, cause: BaseException) -> None:
        self.cause = cause
        super().__init__(f"Failed to receive: Error({cause!r})")


class InvalidDataFrame(FortelionError):
    """A received data frame broke a structural or checksum rule.

    ``rule`` names the check that failed; ``expected`` and ``received``
    carry the offending byte values when the rule compares bytes.
    """

    def __init__(
        self,
        description: str,
        rule: str = "",
        expected: int | None = None,
        received: int | None = None,
    ) -> None:
        self.description = description
        self.rule = rule
        self.expected = expected
        self.received = received
        super().__init__(f"Invalid data frame: {description}")


class ZeroCapacity(InvalidDataFrame):
    """A state of charge was derived from a capacity of zero."""


class NoAppropriateData(FortelionError):
    """The frame's response command does not carry the requested quantity."""

    def __init__(
        self, response_command: Command, must_be_any_of: Sequence[Command]
    ) -> None:
        self.response_command = response_command
        self.must_be_any_of = tuple(must_be_any_of)
        names = ", ".join(c.name for c in self.must_be_any_of)
        super().__init__(
            "Uart data frame has no appropriate data: "
            f"response command is {response_command.name}, "
            f"must be any of [{names}]"
        )


class DataBytesShortage(FortelionError):
    """A byte window or integer decode ran past the available payload."""

    def __init__(self, description: str) -> None:
        self.description = description
        super().__init__(f"Data bytes shortage: {description}")
