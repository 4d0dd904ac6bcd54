"""Data models for fault status registers and battery readings."""

from .fail_status import (
    FailState,
    FailStatusItem,
    FailStatus1,
    FailStatus2,
    FailStatus3,
    fail_status,
    fail_status_values,
)
from .battery_state import BatteryState
