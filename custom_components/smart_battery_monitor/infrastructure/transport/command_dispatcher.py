# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""Command dispatcher: serialized encode + write of outbound commands."""

import asyncio
import logging
from typing import Optional

from ...domain.exceptions import LinkError, SendFailedError
from ...domain.interfaces import IChannel, IFrameCodec
from ...domain.value_objects import Command

_LOGGER = logging.getLogger(__name__)


class CommandDispatcher:
    """Send commands over the current channel, one at a time.

    Policy is reject-if-busy: while one encode+write is in flight, a second
    send() fails immediately with SendFailedError instead of queueing. The
    poller simply tries again on its next tick, so nothing piles up behind
    a slow link.

    Only the link manager attaches and detaches the channel.

    Example:
        >>> dispatcher = CommandDispatcher(TextFrameCodec(battery_count=3))
        >>> dispatcher.attach(channel)
        >>> await dispatcher.send(StatusCommand())
        >>> dispatcher.detach()
    """

    def __init__(self, codec: IFrameCodec):
        """Initialize dispatcher.

        Args:
            codec: Frame codec used to serialize commands
        """
        self._codec = codec
        self._channel: Optional[IChannel] = None
        self._lock = asyncio.Lock()

    @property
    def is_attached(self) -> bool:
        """True while a channel is attached."""
        return self._channel is not None

    @property
    def is_busy(self) -> bool:
        """True while a write is in flight."""
        return self._lock.locked()

    def attach(self, channel: IChannel) -> None:
        """Route subsequent sends to a channel."""
        self._channel = channel

    def detach(self) -> None:
        """Stop routing sends; later sends fail with SendFailedError."""
        self._channel = None

    async def send(self, command: Command) -> None:
        """Encode and write one command.

        Returns once the bytes are handed to the channel; there is no
        acknowledgement at protocol level.

        Args:
            command: Command to send

        Raises:
            SendFailedError: Not attached, busy, or the write failed
        """
        channel = self._channel
        if channel is None:
            raise SendFailedError(f"Cannot send {command}: not connected")
        if self._lock.locked():
            raise SendFailedError(f"Cannot send {command}: dispatcher busy")

        async with self._lock:
            frame = self._codec.encode(command)
            if _LOGGER.isEnabledFor(logging.DEBUG):
                _LOGGER.debug("Writing %d bytes: %r", len(frame), frame)
            try:
                await channel.write(frame)
            except LinkError as err:
                raise SendFailedError(f"Failed to send {command}: {err}") from err
            except OSError as err:
                raise SendFailedError(f"Failed to send {command}: {err}") from err
