"""MCP server entry point for the Fortelion battery module.

Exposes read-only tools over the module's UART via the Model Context
Protocol, using the official Python MCP SDK with stdio transport.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from mcp.server.fastmcp import FastMCP

from .errors import FortelionError
from .models.battery_state import BatteryState, FAIL_STATUS_NAMES
from .protocol.commands import Command, command_from_name
from .protocol.parser import DataFrameView, FIELD_LAYOUTS, sources_of
from .transport.serial_connection import (
    DEFAULT_PORT,
    READ_TIMEOUT_MS,
    SerialConnection,
)

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "fortelion",
    instructions="MCP server for the Fortelion lithium-ion battery module",
)

# Global connection state
_connection: SerialConnection | None = None


def _default_port() -> str:
    return os.environ.get("FORTELION_PORT", DEFAULT_PORT)


def _get_connection() -> SerialConnection:
    """Get the open serial connection, raising if not connected."""
    if _connection is None or not _connection.connected:
        raise RuntimeError(
            "Not connected to battery module. Use the 'connect' tool first."
        )
    return _connection


def _query(command: Command) -> DataFrameView:
    frame = _get_connection().send_and_receive(command)
    return DataFrameView(frame)


# ─── CONNECTION TOOLS ─────────────────────────────────────────────────

@mcp.tool()
def connect(port: str | None = None, timeout_ms: int = READ_TIMEOUT_MS) -> dict[str, Any]:
    """Open the UART link to the battery module.

    Args:
        port: Serial device path (default: $FORTELION_PORT or /dev/ttyUSB0).
        timeout_ms: Acknowledgment timeout per request in milliseconds.
    """
    global _connection
    if _connection is not None and _connection.connected:
        return {
            "connected": True,
            "message": "Already connected",
            "port": _connection.port,
        }

    connection = SerialConnection(port or _default_port(), timeout_ms)
    try:
        connection.open()
    except FortelionError as e:
        return {"connected": False, "error": str(e)}

    _connection = connection
    return {"connected": True, "port": connection.port, "timeout_ms": timeout_ms}


@mcp.tool()
def disconnect() -> dict[str, bool]:
    """Close the UART link."""
    global _connection
    if _connection is None:
        return {"disconnected": True}
    _connection.close()
    _connection = None
    return {"disconnected": True}


# ─── READING TOOLS ────────────────────────────────────────────────────

@mcp.tool()
def get_state_of_charge() -> dict[str, Any]:
    """Read absolute and relative state of charge (SummaryData, 0x20)."""
    try:
        view = _query(Command.SUMMARY_DATA)
        return {
            "absolute_state_of_charge": view.absolute_state_of_charge(),
            "relative_state_of_charge": view.relative_state_of_charge(),
        }
    except FortelionError as e:
        return {"error": str(e)}


@mcp.tool()
def get_battery_state(command: str = "summary_data") -> dict[str, Any]:
    """Read every quantity available from one response command.

    Args:
        command: Command name, e.g. summary_data, bm_information, current.
    """
    try:
        cmd = command_from_name(command)
    except ValueError as e:
        return {"error": str(e)}

    try:
        state = BatteryState.from_view(_query(cmd))
    except FortelionError as e:
        return {"error": str(e)}
    return state.to_dict()


@mcp.tool()
def get_cell_voltages() -> dict[str, Any]:
    """Read the eight cell voltages and the module voltage (BM information, 0x10)."""
    try:
        view = _query(Command.BM_INFORMATION)
        cells = view.cell_voltages()
        return {
            "cell_voltages_mv": cells,
            "bm_voltage_mv": view.bm_voltage(),
            "spread_mv": max(cells) - min(cells),
        }
    except FortelionError as e:
        return {"error": str(e)}


@mcp.tool()
def get_fail_status(command: str = "summary_data") -> dict[str, Any]:
    """Read all 24 fault states.

    Faults whose register the chosen command does not carry are reported
    as "unknown". Only summary_data carries fail status 3.

    Args:
        command: Command name (summary_data, bm_information, fail_status_1,
                 fail_status_2).
    """
    try:
        cmd = command_from_name(command)
    except ValueError as e:
        return {"error": str(e)}

    try:
        view = _query(cmd)
    except FortelionError as e:
        return {"error": str(e)}

    states = {item.name.lower(): state.value for item, state in view.fail_status_values()}
    return {
        "command": cmd.name.lower(),
        "fail_status": states,
        "detected": [name for name, state in states.items() if state == "ng"],
    }


# ─── RESOURCES ────────────────────────────────────────────────────────

@mcp.resource("fortelion://commands")
def command_catalog() -> dict[str, Any]:
    """Supported commands with wire codes and response data lengths."""
    return {
        "commands": [
            {
                "name": c.name.lower(),
                "code": f"0x{c.value:02X}",
                "number_of_data": c.number_of_data,
                "quantities": [
                    q for q in FIELD_LAYOUTS if c in sources_of(q)
                ],
            }
            for c in Command
        ]
    }


@mcp.resource("fortelion://faults")
def fault_catalog() -> dict[str, Any]:
    """The 24 fault names in reporting order."""
    return {"faults": FAIL_STATUS_NAMES}


# ─── PROMPTS ──────────────────────────────────────────────────────────

@mcp.prompt()
def diagnose_faults() -> str:
    """Walk through reading and interpreting the module's fault registers."""
    return """Use get_fail_status with command "summary_data" to read all 24 faults.
For each fault reported as "ng", explain what it means for the module.
Then use get_battery_state with command "summary_data" and relate the faults
to the current, temperature and state of charge readings.
Consider:
- Over-current faults against the measured current
- Temperature faults against the max temperature
- Low voltage / deep discharge against state of charge
- Self-test failures (fail status 3) indicate a controller fault"""


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
