"""Protocol layer: command catalog, frame building/validation, field extraction."""

from .commands import Command, build_command
from .framing import CommandFrame, DataFrame
from .parser import DataFrameView
