# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""DeviceState entity: batteries and relays of the controller."""

import logging
from typing import Iterable, List, Tuple

from ..value_objects import (
    ConnEvent,
    FilterMode,
    ModeEvent,
    ParseDegradedEvent,
    RelayAddress,
    RelayRole,
    StateEvent,
    VoltageEvent,
)
from .battery_state import BatteryState

_LOGGER = logging.getLogger(__name__)


class DeviceState:
    """Authoritative in-memory snapshot of N batteries and 2N relays.

    Battery entries are replaced, never mutated in place, so tuples handed
    out by ``batteries`` stay valid after later updates.

    Relay state is optimistic: it reflects what the client asked for, not
    anything read back from the controller.

    Example:
        >>> device = DeviceState(battery_count=2)
        >>> device.apply(VoltageEvent(0, 12.6))
        True
        >>> device.batteries[0].connected
        True
        >>> device.set_relay(device.relay_address(0), True)
        >>> device.relays
        (True, False, False, False)
    """

    def __init__(self, battery_count: int):
        """Initialize in the reset state.

        Args:
            battery_count: Number of batteries (N >= 1)

        Raises:
            ValueError: If battery_count < 1
        """
        if battery_count < 1:
            raise ValueError(f"Battery count must be >= 1, got {battery_count}")
        self._battery_count = battery_count
        self._batteries: List[BatteryState] = []
        self._relays: List[bool] = []
        self.reset()

    @property
    def battery_count(self) -> int:
        """Number of batteries (N)."""
        return self._battery_count

    @property
    def relay_count(self) -> int:
        """Number of relays (2N)."""
        return 2 * self._battery_count

    @property
    def batteries(self) -> Tuple[BatteryState, ...]:
        """Current battery states, index 0..N-1."""
        return tuple(self._batteries)

    @property
    def relays(self) -> Tuple[bool, ...]:
        """Current relay states, index 0..2N-1."""
        return tuple(self._relays)

    def apply(self, event: StateEvent) -> bool:
        """Apply one decoded event.

        Args:
            event: Event produced by the frame codec

        Returns:
            True if the event changed the state
        """
        if isinstance(event, ParseDegradedEvent):
            return False

        index = event.index
        if not 0 <= index < self._battery_count:
            _LOGGER.debug("Ignoring event for battery index %d: %s", index, event)
            return False

        current = self._batteries[index]
        if isinstance(event, VoltageEvent):
            updated = current.with_voltage(event.voltage)
        elif isinstance(event, ModeEvent):
            updated = current.with_mode(event.mode)
        elif isinstance(event, ConnEvent):
            updated = current.with_connected(event.connected)
        else:
            raise TypeError(f"Unsupported event: {event!r}")

        self._batteries[index] = updated
        return updated != current

    def apply_all(self, events: Iterable[StateEvent]) -> bool:
        """Apply events in order; True if any of them changed the state."""
        changed = False
        for event in events:
            changed = self.apply(event) or changed
        return changed

    def relay_address(self, index: int) -> RelayAddress:
        """Build a validated address for a 0-based relay index.

        Raises:
            ValueError: If index is outside 0 .. 2N-1
        """
        return RelayAddress(index, self._battery_count)

    def battery_relay(self, battery_index: int, role: RelayRole) -> RelayAddress:
        """Address of the charge or discharge relay of a battery."""
        return RelayAddress.for_battery(battery_index, role, self._battery_count)

    def relay(self, address: RelayAddress) -> bool:
        """Current state of one relay."""
        return self._relays[address.index]

    def set_relay(self, address: RelayAddress, on: bool) -> None:
        """Record the requested state of one relay."""
        if address.battery_count != self._battery_count:
            raise ValueError(
                f"Relay {address} belongs to a {address.battery_count}-battery bank"
            )
        self._relays[address.index] = on

    def filtered_indices(self, filter_mode: FilterMode) -> Tuple[int, ...]:
        """Indices of batteries passing a filter, in battery order.

        Example:
            >>> device = DeviceState(battery_count=3)
            >>> device.apply(ModeEvent(1, "CHARGING"))
            True
            >>> device.filtered_indices(FilterMode.CHARGING)
            (1,)
        """
        return tuple(
            index
            for index, battery in enumerate(self._batteries)
            if filter_mode.matches(battery.mode_text)
        )

    def reset(self) -> None:
        """Reset every battery to {0.0, STANDBY, False} and every relay off."""
        self._batteries = [BatteryState() for _ in range(self._battery_count)]
        self._relays = [False] * self.relay_count

    def __repr__(self) -> str:
        """Developer representation."""
        return (
            f"DeviceState(batteries={self._batteries!r}, relays={self._relays!r})"
        )
