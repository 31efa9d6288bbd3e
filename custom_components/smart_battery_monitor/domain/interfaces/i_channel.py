# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""IChannel interface for an open byte-stream connection."""

from abc import ABC, abstractmethod
from typing import AsyncIterator


class IChannel(ABC):
    """Bidirectional byte stream to the controller.

    A channel is produced by ITransport.connect() and is exclusively owned
    by the link manager for its whole lifetime.

    Input side:
        Iterating the channel yields raw byte chunks as they arrive. Chunks
        need not align with line boundaries. Iteration ends normally when
        the remote side closes the stream and raises ChannelIOError on an
        I/O failure.

    Output side:
        write() returns once the bytes are handed to the transport.

    Example:
        >>> channel = await transport.connect("AA:BB:CC:DD:EE:FF")
        >>> await channel.write(b"STATUS\\n")
        >>> async for chunk in channel:
        ...     handle(chunk)
        >>> await channel.close()
    """

    @abstractmethod
    def __aiter__(self) -> AsyncIterator[bytes]:
        """Iterate inbound byte chunks until end of stream.

        Raises:
            ChannelIOError: If the stream fails
        """

    @abstractmethod
    async def write(self, data: bytes) -> None:
        """Send raw bytes.

        Args:
            data: Bytes to send

        Raises:
            ChannelIOError: If the channel is closed or the write fails
        """

    @abstractmethod
    async def close(self) -> None:
        """Close the channel.

        Idempotent. After close the inbound iteration ends and is_open is
        False even when this method raises.

        Raises:
            ChannelIOError: If the underlying close failed
        """

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """True until the channel is closed locally or remotely."""
