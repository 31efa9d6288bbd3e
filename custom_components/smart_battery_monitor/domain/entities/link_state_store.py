# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""Observable container for session, device state and activity log."""

import logging
from typing import Callable, List

from ...const import ACTIVITY_LOG_CAPACITY
from .activity_log import ActivityLog
from .device_state import DeviceState
from .link_session import LinkSession, LinkSnapshot

_LOGGER = logging.getLogger(__name__)

SnapshotListener = Callable[[LinkSnapshot], None]


class LinkStateStore:
    """Single mutable state container behind a change-notification channel.

    The link manager is the only writer. Observers subscribe with
    ``add_listener`` and receive an immutable LinkSnapshot after every
    change the writer publishes with ``notify``.

    Attributes:
        session: Phase, status and user flags
        device: Batteries and relays
        activity: Recent activity lines

    Example:
        >>> store = LinkStateStore(battery_count=3)
        >>> unsubscribe = store.add_listener(lambda snap: print(snap.status))
        >>> store.notify()
        Disconnected
        >>> unsubscribe()
    """

    def __init__(self, battery_count: int, log_capacity: int = ACTIVITY_LOG_CAPACITY):
        self.session = LinkSession()
        self.device = DeviceState(battery_count)
        self.activity = ActivityLog(log_capacity)
        self._listeners: List[SnapshotListener] = []

    def snapshot(self) -> LinkSnapshot:
        """Build an immutable snapshot of the current state."""
        return LinkSnapshot(
            phase=self.session.phase,
            status=self.session.status,
            batteries=self.device.batteries,
            relays=self.device.relays,
            filter=self.session.filter,
            manual_override=self.session.manual_override,
            device_name=self.session.device_name,
            device_address=self.session.device_address,
            log=self.activity.lines(),
            filtered_battery_indices=self.device.filtered_indices(
                self.session.filter
            ),
        )

    def add_listener(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def remove_listener() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove_listener

    def notify(self) -> None:
        """Publish the current snapshot to every listener.

        Listener exceptions are logged and never propagate to the writer.
        """
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as err:
                _LOGGER.error("Error in state listener: %s", err, exc_info=True)

    def log(self, message: str, level: int = logging.INFO) -> None:
        """Append to the activity log and mirror to the module logger."""
        self.activity.add(message)
        _LOGGER.log(level, message)

    def reset(self, status: str) -> None:
        """Reset session and device state; the activity log is kept."""
        self.session.reset(status)
        self.device.reset()
