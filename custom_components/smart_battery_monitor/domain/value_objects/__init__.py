"""Value Objects for the Smart Battery Monitor domain.

Value Objects are immutable domain primitives that:
- Have no identity (equality based on value, not reference)
- Validate their invariants at construction
- Make invalid states impossible (e.g. a relay number outside 1..2N)
"""

from .battery_mode import BatteryMode, FilterMode, OperatingMode
from .command import (
    Command,
    RawCommand,
    SetModeCommand,
    SetRelayCommand,
    StatusCommand,
)
from .connection_phase import ConnectionPhase
from .discovered_device import DiscoveredDevice
from .link_config import LinkConfig
from .relay_address import RelayAddress, RelayRole
from .state_event import (
    ConnEvent,
    ModeEvent,
    ParseDegradedEvent,
    StateEvent,
    VoltageEvent,
)

__all__ = [
    "BatteryMode",
    "FilterMode",
    "OperatingMode",
    "Command",
    "RawCommand",
    "SetModeCommand",
    "SetRelayCommand",
    "StatusCommand",
    "ConnectionPhase",
    "DiscoveredDevice",
    "LinkConfig",
    "RelayAddress",
    "RelayRole",
    "ConnEvent",
    "ModeEvent",
    "ParseDegradedEvent",
    "StateEvent",
    "VoltageEvent",
]
