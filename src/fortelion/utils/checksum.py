"""Frame checksum shared by command frames and data frames."""

from __future__ import annotations

from functools import reduce
from operator import xor


def checksum(data: bytes) -> int:
    """XOR of every byte in ``data``.

    An empty input yields ``0``.
    """
    return reduce(xor, data, 0)
