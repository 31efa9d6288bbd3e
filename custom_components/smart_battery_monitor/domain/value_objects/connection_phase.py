# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""ConnectionPhase value object."""

from enum import Enum, auto


class ConnectionPhase(Enum):
    """Phases of the telemetry link.

    Lifecycle:
        DISCONNECTED -> SCANNING -> CONNECTING -> CONNECTED
        -> DISCONNECTING -> DISCONNECTED
    """

    DISCONNECTED = auto()
    SCANNING = auto()
    CONNECTING = auto()
    CONNECTED = auto()
    DISCONNECTING = auto()

    @property
    def owns_channel(self) -> bool:
        """True while a channel may be open."""
        return self in (ConnectionPhase.CONNECTED, ConnectionPhase.DISCONNECTING)

    @property
    def is_busy(self) -> bool:
        """True while scanning or connecting."""
        return self in (ConnectionPhase.SCANNING, ConnectionPhase.CONNECTING)

    def __str__(self) -> str:
        """Lower-case name for logs and service responses."""
        return self.name.lower()
