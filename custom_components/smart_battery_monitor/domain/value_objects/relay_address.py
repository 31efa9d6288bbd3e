# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""RelayAddress value object.

Represents one of the 2N relays of an N-battery bank. Encapsulates the
index <-> wire number mapping and the charge/discharge layout.
"""

from dataclasses import dataclass
from enum import Enum


class RelayRole(Enum):
    """Which side of a battery a relay switches."""

    CHARGE = "charge"
    DISCHARGE = "discharge"


@dataclass(frozen=True)
class RelayAddress:
    """Immutable, always-valid relay address.

    Layout for a bank of N batteries:
        - Charging relay of battery b:    index b
        - Discharging relay of battery b: index b + N
        - Wire protocol numbers are 1-based: wire_number = index + 1

    Attributes:
        index: 0-based relay index (0 .. 2N-1)
        battery_count: Number of batteries in the bank (N)

    Example:
        >>> relay = RelayAddress.for_battery(2, RelayRole.DISCHARGE, battery_count=5)
        >>> relay.index, relay.wire_number
        (7, 8)
        >>> relay.battery_index, relay.role
        (2, <RelayRole.DISCHARGE: 'discharge'>)

    Raises:
        ValueError: If index is outside 0 .. 2N-1 or battery_count < 1
    """

    index: int
    battery_count: int

    def __post_init__(self) -> None:
        """Validate index against the bank size."""
        if not isinstance(self.index, int) or isinstance(self.index, bool):
            raise TypeError(f"Relay index must be int, got {type(self.index).__name__}")
        if self.battery_count < 1:
            raise ValueError(f"Battery count must be >= 1, got {self.battery_count}")
        if not 0 <= self.index < self.relay_count:
            raise ValueError(
                f"Relay index must be between 0 and {self.relay_count - 1}, "
                f"got {self.index}"
            )

    @classmethod
    def for_battery(
        cls, battery_index: int, role: RelayRole, battery_count: int
    ) -> "RelayAddress":
        """Address the charge or discharge relay of a battery.

        Args:
            battery_index: 0-based battery index (0 .. N-1)
            role: CHARGE or DISCHARGE
            battery_count: Number of batteries (N)

        Raises:
            ValueError: If battery_index is outside 0 .. N-1
        """
        if not 0 <= battery_index < battery_count:
            raise ValueError(
                f"Battery index must be between 0 and {battery_count - 1}, "
                f"got {battery_index}"
            )
        offset = 0 if role is RelayRole.CHARGE else battery_count
        return cls(battery_index + offset, battery_count)

    @classmethod
    def from_wire_number(cls, number: int, battery_count: int) -> "RelayAddress":
        """Build from the 1-based number used in ``RELAY{n}`` commands.

        Example:
            >>> RelayAddress.from_wire_number(4, battery_count=3).index
            3
        """
        return cls(number - 1, battery_count)

    @property
    def relay_count(self) -> int:
        """Total relays in the bank (2N)."""
        return 2 * self.battery_count

    @property
    def wire_number(self) -> int:
        """1-based relay number used on the wire."""
        return self.index + 1

    @property
    def role(self) -> RelayRole:
        """CHARGE for the first N relays, DISCHARGE for the rest."""
        if self.index < self.battery_count:
            return RelayRole.CHARGE
        return RelayRole.DISCHARGE

    @property
    def battery_index(self) -> int:
        """0-based index of the battery this relay belongs to."""
        return self.index % self.battery_count

    def __str__(self) -> str:
        """String representation for logging.

        Example:
            >>> str(RelayAddress(0, battery_count=3))
            'RELAY1 (battery 1 charge)'
        """
        return (
            f"RELAY{self.wire_number} "
            f"(battery {self.battery_index + 1} {self.role.value})"
        )

    def __int__(self) -> int:
        """Allow casting to the 0-based index."""
        return self.index
