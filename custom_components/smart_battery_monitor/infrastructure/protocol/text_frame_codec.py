# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""Text frame codec for the battery controller protocol.

This module implements the ad hoc, newline-delimited ASCII protocol spoken
by the battery controller firmware.

Inbound frames carry any combination of these tokens, in any order and
with arbitrary text around them:

    BATT{i}:{float}V        voltage of battery i (1-based)
    MODES:{m1},{m2},...     per-battery mode words, positional
    CONN:{0|1},{0|1},...    per-battery explicit connectivity

Outbound frames are one of:

    STATUS
    MODE:AUTO | MODE:MANUAL
    RELAY{n}:ON | RELAY{n}:OFF
"""

import logging
import math
from typing import List, Optional

from ...const import (
    CMD_MODE,
    CMD_RELAY,
    CMD_STATUS,
    RELAY_OFF,
    RELAY_ON,
    TOKEN_BATTERY,
    TOKEN_CONN,
    TOKEN_CONN_ON,
    TOKEN_MODES,
    TOKEN_VOLTAGE_END,
)
from ...domain.interfaces import IFrameCodec
from ...domain.value_objects import (
    Command,
    ConnEvent,
    ModeEvent,
    ParseDegradedEvent,
    RawCommand,
    SetModeCommand,
    SetRelayCommand,
    StateEvent,
    StatusCommand,
    VoltageEvent,
)

_LOGGER = logging.getLogger(__name__)

LIST_SEPARATOR = ","
TOKEN_SEPARATOR = ":"


class TextFrameCodec(IFrameCodec):
    """Tolerant decoder and strict encoder for the text protocol.

    Decoding scans independently for each recognised token instead of
    matching the whole line, so an unknown or broken field never
    invalidates the rest of the frame.

    Event order within one frame is voltages, then modes, then explicit
    connectivity. Applying them in that order lets a CONN entry override
    the voltage-range heuristic for the same battery.

    Attributes:
        battery_count: Number of batteries (N) the controller reports

    Example:
        >>> codec = TextFrameCodec(battery_count=2)
        >>> codec.decode("BATT1:12.60V,MODES:CHARGING,STANDBY,CONN:1,0")
        [VoltageEvent(index=0, voltage=12.6), ModeEvent(index=0, mode='CHARGING'),
         ModeEvent(index=1, mode='STANDBY'), ConnEvent(index=0, connected=True),
         ConnEvent(index=1, connected=False)]
        >>> codec.encode(StatusCommand())
        b'STATUS\\n'
    """

    def __init__(self, battery_count: int):
        """Initialize codec.

        Args:
            battery_count: Number of batteries (N >= 1)
        """
        if battery_count < 1:
            raise ValueError(f"Battery count must be >= 1, got {battery_count}")
        self._battery_count = battery_count

    @property
    def battery_count(self) -> int:
        """Number of batteries decoded per frame."""
        return self._battery_count

    # ------------------------------------------------------------------
    # Decode
    # ------------------------------------------------------------------

    def decode(self, line: str) -> List[StateEvent]:
        """Decode one line into state events.

        Args:
            line: Inbound text (surrounding whitespace is ignored)

        Returns:
            Events to apply in order; empty if no token was recognised
        """
        text = line.strip()
        events: List[StateEvent] = []
        events.extend(self._decode_voltages(text))
        events.extend(self._decode_modes(text))
        events.extend(self._decode_connectivity(text))

        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("Decoded %r into %d events: %s", text, len(events), events)

        return events

    def _decode_voltages(self, text: str) -> List[StateEvent]:
        """Decode every BATT{i}:{float}V token present."""
        events: List[StateEvent] = []
        for number in range(1, self._battery_count + 1):
            field = f"{TOKEN_BATTERY}{number}"
            marker = field + TOKEN_SEPARATOR
            start = text.find(marker)
            if start == -1:
                continue

            start += len(marker)
            end = text.find(TOKEN_VOLTAGE_END, start)
            if end == -1:
                # No terminator: leave the battery untouched
                events.append(
                    ParseDegradedEvent(
                        field, text[start:], f"missing '{TOKEN_VOLTAGE_END}' terminator"
                    )
                )
                continue

            raw = text[start:end].strip()
            voltage = self._parse_voltage(raw)
            if voltage is None:
                events.append(ParseDegradedEvent(field, raw, "invalid voltage, using 0.0"))
                voltage = 0.0
            events.append(VoltageEvent(number - 1, voltage))
        return events

    @staticmethod
    def _parse_voltage(raw: str) -> Optional[float]:
        """Parse a voltage, None for non-numeric or non-finite text."""
        try:
            value = float(raw)
        except ValueError:
            return None
        if not math.isfinite(value):
            return None
        return value

    def _decode_modes(self, text: str) -> List[StateEvent]:
        """Decode MODES:{m1},{m2},... positionally."""
        values = self._split_list(text, TOKEN_MODES, skip_empty=True)
        if values is None:
            return []
        if not values:
            return [ParseDegradedEvent("MODES", "", "no mode values")]
        return [ModeEvent(index, mode) for index, mode in enumerate(values)]

    def _decode_connectivity(self, text: str) -> List[StateEvent]:
        """Decode CONN:{0|1},... positionally; only "1" means connected."""
        values = self._split_list(text, TOKEN_CONN, skip_empty=False)
        if values is None:
            return []
        if not any(values):
            return [ParseDegradedEvent("CONN", "", "no connectivity values")]
        return [
            ConnEvent(index, value == TOKEN_CONN_ON) for index, value in enumerate(values)
        ]

    def _split_list(
        self, text: str, token: str, skip_empty: bool
    ) -> Optional[List[str]]:
        """Extract up to N comma-separated values following a token.

        The list ends at the first segment that belongs to another token
        (contains ':'), e.g. the ``CONN:1`` after a mode list.

        Returns:
            Stripped values, or None if the token is absent
        """
        start = text.find(token)
        if start == -1:
            return None

        remainder = text[start + len(token):]
        values: List[str] = []
        for segment in remainder.split(LIST_SEPARATOR):
            value = segment.strip()
            if TOKEN_SEPARATOR in value:
                break
            if skip_empty and not value:
                continue
            values.append(value)
            if len(values) == self._battery_count:
                break
        return values

    # ------------------------------------------------------------------
    # Encode
    # ------------------------------------------------------------------

    def encode(self, command: Command) -> bytes:
        """Serialize a command to a newline-terminated frame.

        Args:
            command: Command to serialize

        Returns:
            Frame bytes, e.g. b"RELAY3:ON\\n"

        Raises:
            TypeError: If command is not a known command type

        Example:
            >>> relay = RelayAddress(2, battery_count=3)
            >>> codec.encode(SetRelayCommand(relay, True))
            b'RELAY3:ON\\n'
        """
        if isinstance(command, StatusCommand):
            text = CMD_STATUS
        elif isinstance(command, SetModeCommand):
            text = f"{CMD_MODE}{TOKEN_SEPARATOR}{command.mode.value}"
        elif isinstance(command, SetRelayCommand):
            number = command.relay.wire_number
            assert 1 <= number <= 2 * self._battery_count, (
                f"Relay number {number} outside 1..{2 * self._battery_count}"
            )
            state = RELAY_ON if command.on else RELAY_OFF
            text = f"{CMD_RELAY}{number}{TOKEN_SEPARATOR}{state}"
        elif isinstance(command, RawCommand):
            text = str(command)
        else:
            raise TypeError(f"Unsupported command: {command!r}")

        frame = f"{text}\n".encode("utf-8")

        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug("Encoded %s as %r", type(command).__name__, frame)

        return frame
