# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""Reassemble newline-terminated frames from arbitrary byte chunks."""

import logging
from typing import List

from ...const import FRAME_TERMINATOR, LINE_BUFFER_LIMIT

_LOGGER = logging.getLogger(__name__)


class LineAssembler:
    """Split an inbound byte stream into trimmed text lines.

    Serial and BLE transports deliver data in chunks that do not respect
    line boundaries. The assembler buffers partial input until the
    terminator arrives. Carriage returns and surrounding whitespace are
    trimmed and blank lines dropped.

    The pending buffer is bounded: if more than ``limit`` bytes arrive
    without a terminator, the partial data is discarded.

    Example:
        >>> assembler = LineAssembler()
        >>> assembler.feed(b"BATT1:12.6")
        []
        >>> assembler.feed(b"0V\\r\\nBATT2")
        ['BATT1:12.60V']
    """

    def __init__(self, limit: int = LINE_BUFFER_LIMIT, terminator: bytes = FRAME_TERMINATOR):
        self._limit = limit
        self._terminator = terminator
        self._buffer = bytearray()

    @property
    def pending(self) -> int:
        """Number of buffered bytes not yet terminated."""
        return len(self._buffer)

    def feed(self, chunk: bytes) -> List[str]:
        """Add a chunk and return every line it completed.

        Args:
            chunk: Raw bytes from the channel

        Returns:
            Complete, trimmed, non-empty lines in arrival order
        """
        self._buffer.extend(chunk)
        lines: List[str] = []

        while True:
            end = self._buffer.find(self._terminator)
            if end == -1:
                break
            raw = bytes(self._buffer[:end])
            del self._buffer[: end + len(self._terminator)]
            line = raw.decode("ascii", errors="replace").strip()
            if line:
                lines.append(line)

        if len(self._buffer) > self._limit:
            _LOGGER.warning(
                "Discarding %d bytes of unterminated input (limit %d)",
                len(self._buffer),
                self._limit,
            )
            self._buffer.clear()

        return lines

    def clear(self) -> None:
        """Drop any buffered partial line."""
        self._buffer.clear()
