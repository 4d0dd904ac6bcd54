"""Fortelion battery module UART protocol."""

from .errors import (
    FortelionError,
    UartFailedToOpen,
    UartFailedToSend,
    UartFailedToReceive,
    InvalidDataFrame,
    ZeroCapacity,
    NoAppropriateData,
    DataBytesShortage,
)
from .protocol import Command, CommandFrame, DataFrame, DataFrameView, build_command
from .models import (
    BatteryState,
    FailState,
    FailStatusItem,
    FailStatus1,
    FailStatus2,
    FailStatus3,
)

__version__ = "0.1.0"
