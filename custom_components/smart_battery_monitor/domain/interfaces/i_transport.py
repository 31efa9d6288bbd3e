# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""ITransport interface for transport layer implementations."""

from abc import ABC, abstractmethod
from typing import AsyncIterator

from ..value_objects import DiscoveredDevice
from .i_channel import IChannel


class ITransport(ABC):
    """Interface for transport layer implementations.

    The transport knows how bytes physically reach the controller
    (BLE UART, RFCOMM, a serial port). The link manager only sees
    discovery results and channels.

    Connection lifecycle:
        1. discover() -> stream of DiscoveredDevice
        2. connect(address) -> IChannel
        3. IChannel.close()

    Example:
        >>> async for device in transport.discover():
        ...     if device.matches("SMART_BATTERY_SYSTEM"):
        ...         channel = await transport.connect(device.address)
        ...         break
    """

    @abstractmethod
    def discover(self) -> AsyncIterator[DiscoveredDevice]:
        """Stream devices as they are discovered.

        The stream runs until the consumer stops iterating or cancels;
        implementations must release their discovery resources when that
        happens.

        Raises:
            DiscoveryFailedError: If discovery cannot be started or fails
        """

    @abstractmethod
    async def connect(self, address: str) -> IChannel:
        """Open a channel to a device.

        Args:
            address: Device address from discovery or user input

        Returns:
            An open channel

        Raises:
            ConnectFailedError: If the connection cannot be established
        """
