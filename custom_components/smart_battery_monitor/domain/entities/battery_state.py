# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""BatteryState representing one battery of the bank."""

import math
from dataclasses import dataclass, replace
from typing import Any, Dict

from ...const import VOLTAGE_CONNECTED_MAX, VOLTAGE_CONNECTED_MIN
from ..value_objects import BatteryMode

DEFAULT_MODE_TEXT = BatteryMode.STANDBY.value


def is_voltage_connected(voltage: float) -> bool:
    """Voltage-range connectivity heuristic.

    A battery counts as present when its voltage lies strictly between 0 and
    20 volts. Used only when the frame carries no explicit CONN entry.

    Example:
        >>> is_voltage_connected(12.6)
        True
        >>> is_voltage_connected(0.0), is_voltage_connected(20.0)
        (False, False)
    """
    if math.isnan(voltage):
        return False
    return VOLTAGE_CONNECTED_MIN < voltage < VOLTAGE_CONNECTED_MAX


@dataclass(frozen=True)
class BatteryState:
    """Snapshot of one battery.

    Instances are immutable; DeviceState swaps in updated copies so that
    observers can hold on to a snapshot safely.

    Attributes:
        voltage: Last reported voltage in volts
        mode_text: Mode exactly as the controller sent it
        connected: Whether the battery is considered present

    Example:
        >>> state = BatteryState().with_voltage(12.6)
        >>> state.connected
        True
        >>> state.with_mode("FLOAT").mode
        <BatteryMode.UNKNOWN: 'UNKNOWN'>
    """

    voltage: float = 0.0
    mode_text: str = DEFAULT_MODE_TEXT
    connected: bool = False

    @property
    def mode(self) -> BatteryMode:
        """Mode for derived logic; UNKNOWN for unrecognised text."""
        return BatteryMode.from_token(self.mode_text)

    def with_voltage(self, voltage: float) -> "BatteryState":
        """Apply a voltage reading and the voltage-range heuristic."""
        return replace(
            self, voltage=voltage, connected=is_voltage_connected(voltage)
        )

    def with_mode(self, mode_text: str) -> "BatteryState":
        """Apply a verbatim mode token."""
        return replace(self, mode_text=mode_text)

    def with_connected(self, connected: bool) -> "BatteryState":
        """Apply an explicit connectivity flag (overrides the heuristic)."""
        return replace(self, connected=connected)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary for service responses and logs."""
        return {
            "voltage": self.voltage,
            "mode": self.mode_text,
            "connected": self.connected,
        }
