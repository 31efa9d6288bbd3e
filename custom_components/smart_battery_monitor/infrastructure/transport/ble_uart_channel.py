# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""Byte-stream channel over the Nordic UART Service."""

import asyncio
import logging
from typing import AsyncIterator, Iterator, Optional

from bleak import BleakClient
from bleak.exc import BleakError

from ...const import BLE_DEFAULT_WRITE_CHUNK, BLE_DISCONNECT_TIMEOUT, NUS_RX_UUID, NUS_TX_UUID
from ...domain.exceptions import ChannelIOError
from ...domain.interfaces import IChannel

_LOGGER = logging.getLogger(__name__)


class BleUartChannel(IChannel):
    """IChannel backed by a connected BleakClient.

    Communication Pattern:
        - Inbound: notifications on NUS RX are queued as byte chunks
        - Outbound: writes to NUS TX without response, split into chunks
          no larger than the characteristic allows
        - End of stream: the bleak disconnect callback or close()

    The channel is created before the client so that its callbacks can be
    handed to establish_connection(); attach() binds the client afterwards.

    Example:
        >>> channel = BleUartChannel("AA:BB:CC:DD:EE:FF")
        >>> client = await establish_connection(
        ...     BleakClient, device, address,
        ...     disconnected_callback=channel.handle_disconnect,
        ... )
        >>> channel.attach(client)
        >>> await client.start_notify(NUS_RX_UUID, channel.handle_notification)
    """

    def __init__(self, address: str):
        """Initialize channel.

        Args:
            address: Device address, used for logging
        """
        self._address = address
        self._client: Optional[BleakClient] = None
        self._queue: "asyncio.Queue[Optional[bytes]]" = asyncio.Queue()
        self._closed = False
        self._remote_closed = False

    @property
    def address(self) -> str:
        """Device address."""
        return self._address

    @property
    def is_open(self) -> bool:
        """True while attached and neither side has closed."""
        return (
            self._client is not None
            and not self._closed
            and not self._remote_closed
            and self._client.is_connected
        )

    def attach(self, client: BleakClient) -> None:
        """Bind the connected client."""
        self._client = client

    def handle_notification(self, sender, data: bytearray) -> None:
        """Queue inbound data (bleak notification callback)."""
        if self._closed:
            return
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("Notification from %s: %r", self._address, bytes(data))
        self._queue.put_nowait(bytes(data))

    def handle_disconnect(self, client: BleakClient) -> None:
        """End the inbound stream (bleak disconnect callback)."""
        if self._remote_closed:
            return
        self._remote_closed = True
        if self._closed:
            _LOGGER.debug("Expected disconnect from %s", self._address)
        else:
            _LOGGER.warning("Device %s disconnected", self._address)
        self._queue.put_nowait(None)

    async def __aiter__(self) -> AsyncIterator[bytes]:
        while True:
            chunk = await self._queue.get()
            if chunk is None:
                return
            yield chunk

    async def write(self, data: bytes) -> None:
        """Write bytes to NUS TX.

        Raises:
            ChannelIOError: If the channel is not open or the write fails
        """
        if not self.is_open:
            raise ChannelIOError(f"Channel to {self._address} is not open")

        try:
            for chunk in self._chunks(data):
                await self._client.write_gatt_char(NUS_TX_UUID, chunk, response=False)
        except BleakError as err:
            raise ChannelIOError(f"Write to {self._address} failed: {err}") from err

    def _chunks(self, data: bytes) -> Iterator[bytes]:
        size = self._write_chunk_size()
        for start in range(0, len(data), size):
            yield data[start : start + size]

    def _write_chunk_size(self) -> int:
        """Largest write-without-response payload NUS TX accepts."""
        try:
            characteristic = self._client.services.get_characteristic(NUS_TX_UUID)
        except BleakError:
            characteristic = None
        if characteristic is None:
            return BLE_DEFAULT_WRITE_CHUNK
        return max(characteristic.max_write_without_response_size, BLE_DEFAULT_WRITE_CHUNK)

    async def close(self) -> None:
        """Stop notifications and disconnect. Idempotent.

        Raises:
            ChannelIOError: If the disconnect failed
        """
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(None)

        client = self._client
        if client is None or not client.is_connected:
            return

        try:
            await asyncio.wait_for(
                client.stop_notify(NUS_RX_UUID), timeout=BLE_DISCONNECT_TIMEOUT
            )
        except (BleakError, asyncio.TimeoutError) as err:
            _LOGGER.debug("Stop notify error (non-critical): %s", err)

        try:
            await asyncio.wait_for(client.disconnect(), timeout=BLE_DISCONNECT_TIMEOUT)
        except (BleakError, asyncio.TimeoutError) as err:
            raise ChannelIOError(f"Disconnect from {self._address} failed: {err}") from err
        _LOGGER.debug("BLE connection to %s closed", self._address)
