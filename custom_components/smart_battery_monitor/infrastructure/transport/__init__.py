"""Link transport implementations.

This module contains the link manager with its dispatcher and poller, and
the BLE UART implementation of the transport layer interfaces.
"""

from .ble_uart_channel import BleUartChannel
from .ble_uart_transport import BleUartTransport
from .command_dispatcher import CommandDispatcher
from .link_manager import LinkManager
from .poller import Poller

__all__ = [
    "BleUartChannel",
    "BleUartTransport",
    "CommandDispatcher",
    "LinkManager",
    "Poller",
]
