"""Domain entities for the Smart Battery Monitor link.

Entities are domain objects with mutable state and a lifecycle. They are
created once at startup in their zero/disconnected form and are only ever
reset, never destroyed.
"""

from .activity_log import ActivityLog, LogEntry
from .battery_state import BatteryState, is_voltage_connected
from .device_state import DeviceState
from .link_session import LinkSession, LinkSnapshot
from .link_state_store import LinkStateStore

__all__ = [
    "ActivityLog",
    "LogEntry",
    "BatteryState",
    "is_voltage_connected",
    "DeviceState",
    "LinkSession",
    "LinkSnapshot",
    "LinkStateStore",
]
