# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""DiscoveredDevice value object."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DiscoveredDevice:
    """A device seen during discovery.

    Attributes:
        address: Transport address (BLE MAC or RFCOMM address)
        name: Advertised name, None when the device advertises none
    """

    address: str
    name: Optional[str] = None

    def matches(self, token: str) -> bool:
        """Check whether the advertised name contains the match token.

        Example:
            >>> DiscoveredDevice("AA:BB", "SMART_BATTERY_SYSTEM_01").matches(
            ...     "SMART_BATTERY_SYSTEM"
            ... )
            True
        """
        return bool(token) and token in (self.name or "")

    def __str__(self) -> str:
        return f"{self.name or 'unknown'} ({self.address})"
