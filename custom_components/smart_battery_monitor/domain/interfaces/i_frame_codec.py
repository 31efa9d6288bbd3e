# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""IFrameCodec interface for the line-oriented text protocol."""

from abc import ABC, abstractmethod
from typing import List

from ..value_objects import Command, StateEvent


class IFrameCodec(ABC):
    """Stateless encode/decode between domain objects and text frames.

    Example:
        >>> codec = TextFrameCodec(battery_count=3)
        >>> codec.encode(StatusCommand())
        b'STATUS\\n'
        >>> codec.decode("BATT1:12.60V")
        [VoltageEvent(index=0, voltage=12.6)]
    """

    @abstractmethod
    def decode(self, line: str) -> List[StateEvent]:
        """Decode one inbound line into state events.

        Must never raise: malformed fields become ParseDegradedEvent entries.

        Args:
            line: One inbound line without its terminator

        Returns:
            Events in application order, possibly empty
        """

    @abstractmethod
    def encode(self, command: Command) -> bytes:
        """Serialize a command to one newline-terminated frame.

        Args:
            command: Command to serialize

        Returns:
            Frame bytes including the trailing newline
        """
