"""Snapshot of every quantity a single response frame can supply."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from ..errors import DataBytesShortage, NoAppropriateData, ZeroCapacity
from .fail_status import FailState, FailStatusItem

if TYPE_CHECKING:
    from ..protocol.parser import DataFrameView

T = TypeVar("T")

FAIL_STATUS_NAMES = [item.name.lower() for item in FailStatusItem]


def _optional(read: Callable[[], T]) -> T | None:
    try:
        return read()
    except (NoAppropriateData, DataBytesShortage, ZeroCapacity):
        return None


@dataclass
class BatteryState:
    """Battery readings decoded from one frame.

    Quantities the response command does not carry are ``None``.
    """

    command: str = ""
    cell_voltages: list[int] | None = None
    current: int | None = None
    temperature: float | None = None
    remaining_capacity: int | None = None
    full_charge_capacity: int | None = None
    design_capacity: int | None = None
    absolute_state_of_charge: int | None = None
    relative_state_of_charge: int | None = None
    state_of_health: int | None = None
    bm_voltage: int | None = None
    fail_status: dict[str, FailState] = field(default_factory=dict)

    @classmethod
    def from_view(cls, view: DataFrameView) -> BatteryState:
        return cls(
            command=view.response_command.name,
            cell_voltages=_optional(view.cell_voltages),
            current=_optional(view.current),
            temperature=_optional(view.temperature),
            remaining_capacity=_optional(view.remaining_capacity),
            full_charge_capacity=_optional(view.full_charge_capacity),
            design_capacity=_optional(view.design_capacity),
            absolute_state_of_charge=_optional(view.absolute_state_of_charge),
            relative_state_of_charge=_optional(view.relative_state_of_charge),
            state_of_health=_optional(view.state_of_health),
            bm_voltage=_optional(view.bm_voltage),
            fail_status={
                item.name.lower(): state
                for item, state in view.fail_status_values()
            },
        )

    def detected_faults(self) -> list[str]:
        """Names of faults currently reported as NG."""
        return [
            name for name, state in self.fail_status.items()
            if state is FailState.NG
        ]

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["fail_status"] = {
            name: state.value for name, state in self.fail_status.items()
        }
        if self.temperature is not None:
            d["temperature"] = round(self.temperature, 1)
        return d
