# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""BLE UART transport implementation for the battery controller.

This module implements the ITransport interface on top of the Home
Assistant bluetooth component, bleak and bleak-retry-connector. The
controller is reached through the Nordic UART Service, which carries the
text protocol unchanged.
"""

import asyncio
import logging
from typing import AsyncIterator, Set

from bleak import BleakClient
from bleak.exc import BleakError
from bleak_retry_connector import close_stale_connections_by_address, establish_connection
from homeassistant.components import bluetooth
from homeassistant.components.bluetooth import (
    BluetoothCallbackMatcher,
    BluetoothChange,
    BluetoothScanningMode,
    BluetoothServiceInfoBleak,
)
from homeassistant.core import HomeAssistant, callback

from ...const import (
    BLE_CONNECT_ATTEMPTS,
    BLE_CONNECTION_TIMEOUT,
    BLE_NOTIFY_SUBSCRIBE_TIMEOUT,
    NUS_RX_UUID,
)
from ...domain.exceptions import ChannelIOError, ConnectFailedError, DiscoveryFailedError
from ...domain.interfaces import ITransport
from ...domain.value_objects import DiscoveredDevice
from ..decorators import handle_link_errors
from .ble_uart_channel import BleUartChannel

_LOGGER = logging.getLogger(__name__)


class BleUartTransport(ITransport):
    """BLE UART transport for battery controller communication.

    This implementation handles:
    - Discovery through the shared Home Assistant scanner
    - Connection via bleak-retry-connector
    - Notification subscription on the NUS RX characteristic

    Example:
        >>> transport = BleUartTransport(hass)
        >>> async for device in transport.discover():
        ...     break
        >>> channel = await transport.connect(device.address)
    """

    def __init__(self, hass: HomeAssistant):
        """Initialize BLE UART transport.

        Args:
            hass: Home Assistant instance (for bluetooth component access)
        """
        self._hass = hass

    async def discover(self) -> AsyncIterator[DiscoveredDevice]:
        """Yield connectable devices, known ones first, then live ones.

        Each address is reported once per discovery run. The scanner
        callback is unregistered when iteration stops.

        Raises:
            DiscoveryFailedError: If the bluetooth component is unavailable
        """
        queue: "asyncio.Queue[DiscoveredDevice]" = asyncio.Queue()

        @callback
        def _async_discovered(
            service_info: BluetoothServiceInfoBleak, change: BluetoothChange
        ) -> None:
            queue.put_nowait(DiscoveredDevice(service_info.address, service_info.name))

        try:
            cancel = bluetooth.async_register_callback(
                self._hass,
                _async_discovered,
                BluetoothCallbackMatcher(connectable=True),
                BluetoothScanningMode.ACTIVE,
            )
            known = bluetooth.async_discovered_service_info(self._hass, connectable=True)
        except Exception as err:
            raise DiscoveryFailedError(f"Bluetooth discovery unavailable: {err}") from err

        seen: Set[str] = set()
        try:
            for service_info in known:
                queue.put_nowait(DiscoveredDevice(service_info.address, service_info.name))
            while True:
                device = await queue.get()
                if device.address in seen:
                    continue
                seen.add(device.address)
                _LOGGER.debug("Discovered %s", device)
                yield device
        finally:
            cancel()
            _LOGGER.debug("Discovery stopped after %d devices", len(seen))

    @handle_link_errors("BLE connect", reraise=True)
    async def connect(self, address: str) -> BleUartChannel:
        """Connect to a device and subscribe to its UART output.

        Args:
            address: Device BLE MAC address

        Returns:
            Open channel

        Raises:
            ConnectFailedError: If the device is unknown or the connection fails
        """
        _LOGGER.debug("Closing stale connections for %s", address)
        await close_stale_connections_by_address(address)

        def _get_ble_device():
            return bluetooth.async_ble_device_from_address(
                self._hass, address, connectable=True
            )

        ble_device = _get_ble_device()
        if ble_device is None:
            raise ConnectFailedError(f"Device {address} not found by the bluetooth scanner")

        channel = BleUartChannel(address)
        try:
            client = await asyncio.wait_for(
                establish_connection(
                    BleakClient,
                    ble_device,
                    address,
                    disconnected_callback=channel.handle_disconnect,
                    ble_device_callback=_get_ble_device,
                    max_attempts=BLE_CONNECT_ATTEMPTS,
                ),
                timeout=BLE_CONNECTION_TIMEOUT,
            )
        except (BleakError, asyncio.TimeoutError) as err:
            await _release(channel)
            raise ConnectFailedError(f"Failed to connect to {address}: {err}") from err

        # The client is live from here; any exit other than success disconnects it
        channel.attach(client)
        try:
            await asyncio.wait_for(
                client.start_notify(NUS_RX_UUID, channel.handle_notification),
                timeout=BLE_NOTIFY_SUBSCRIBE_TIMEOUT,
            )
        except (BleakError, asyncio.TimeoutError) as err:
            await _release(channel)
            raise ConnectFailedError(f"Failed to subscribe on {address}: {err}") from err
        except BaseException:
            await _release(channel)
            raise

        _LOGGER.info("BLE UART connected to %s", address)
        return channel


async def _release(channel: BleUartChannel) -> None:
    """Close a channel left over from a failed connect."""
    try:
        await channel.close()
    except ChannelIOError as err:
        _LOGGER.debug("Cleanup after failed connect: %s", err)
