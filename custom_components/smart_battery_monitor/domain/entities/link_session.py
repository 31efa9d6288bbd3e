# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""LinkSession entity and the read-only LinkSnapshot handed to observers."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ...const import STATUS_DISCONNECTED
from ..value_objects import ConnectionPhase, FilterMode
from .battery_state import BatteryState


@dataclass
class LinkSession:
    """Mutable session flags owned by the link manager.

    The channel itself is not stored here; only the link manager holds it.

    Attributes:
        phase: Current connection phase
        status: Human-readable status line
        manual_override: True while automatic polling is suspended
        filter: Battery filter selected by the user
        device_name: Name of the connected/connecting device
        device_address: Address of the connected/connecting device
    """

    phase: ConnectionPhase = ConnectionPhase.DISCONNECTED
    status: str = STATUS_DISCONNECTED
    manual_override: bool = False
    filter: FilterMode = FilterMode.ALL
    device_name: Optional[str] = None
    device_address: Optional[str] = None

    def reset(self, status: str = STATUS_DISCONNECTED) -> None:
        """Return to the disconnected defaults."""
        self.phase = ConnectionPhase.DISCONNECTED
        self.status = status
        self.manual_override = False
        self.filter = FilterMode.ALL
        self.device_name = None
        self.device_address = None


@dataclass(frozen=True)
class LinkSnapshot:
    """Immutable view of the whole link state at one instant."""

    phase: ConnectionPhase
    status: str
    batteries: Tuple[BatteryState, ...]
    relays: Tuple[bool, ...]
    filter: FilterMode
    manual_override: bool
    device_name: Optional[str]
    device_address: Optional[str]
    log: Tuple[str, ...]
    filtered_battery_indices: Tuple[int, ...]

    @property
    def is_connected(self) -> bool:
        """True in the CONNECTED phase."""
        return self.phase is ConnectionPhase.CONNECTED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "phase": str(self.phase),
            "status": self.status,
            "batteries": [battery.to_dict() for battery in self.batteries],
            "relays": list(self.relays),
            "filter": self.filter.value,
            "manual_override": self.manual_override,
            "device_name": self.device_name,
            "device_address": self.device_address,
            "log": list(self.log),
            "filtered_battery_indices": list(self.filtered_battery_indices),
        }
