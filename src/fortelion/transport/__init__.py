"""Serial transport for the battery module UART."""

from .serial_connection import SerialConnection
