# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""Link state machine for explicit phase management."""

import logging
from enum import Enum, auto
from typing import Callable, Dict, List, Tuple

from ...domain.value_objects import ConnectionPhase

_LOGGER = logging.getLogger(__name__)

TransitionListener = Callable[[ConnectionPhase, ConnectionPhase, "LinkEvent"], None]


class LinkEvent(Enum):
    """Link events that trigger phase transitions."""

    START_SCAN = auto()
    DEVICE_MATCHED = auto()
    SCAN_EXPIRED = auto()
    SCAN_FAILED = auto()
    CONNECT = auto()
    CONNECT_SUCCESS = auto()
    CONNECT_FAILED = auto()
    DISCONNECT = auto()
    CHANNEL_LOST = auto()
    TEARDOWN_COMPLETE = auto()


class LinkStateMachine:
    """State machine for the telemetry link lifecycle.

    Valid transitions:
        DISCONNECTED -> SCANNING (on START_SCAN)
        DISCONNECTED -> CONNECTING (on CONNECT)
        SCANNING -> CONNECTING (on DEVICE_MATCHED or CONNECT)
        SCANNING -> DISCONNECTED (on SCAN_EXPIRED or SCAN_FAILED)
        CONNECTING -> CONNECTED (on CONNECT_SUCCESS)
        CONNECTING -> DISCONNECTED (on CONNECT_FAILED)
        SCANNING/CONNECTING/CONNECTED -> DISCONNECTING (on DISCONNECT)
        CONNECTED -> DISCONNECTING (on CHANNEL_LOST)
        DISCONNECTING -> DISCONNECTED (on TEARDOWN_COMPLETE)

    Example:
        >>> sm = LinkStateMachine()
        >>> sm.transition(LinkEvent.START_SCAN)
        True
        >>> sm.state
        <ConnectionPhase.SCANNING: 2>
        >>> sm.transition(LinkEvent.CONNECT_SUCCESS)
        False
    """

    def __init__(self):
        """Initialize state machine in DISCONNECTED phase."""
        self._state = ConnectionPhase.DISCONNECTED
        self._transition_listeners: List[TransitionListener] = []

        # Valid transitions: (current_state, event) -> new_state
        self._transitions: Dict[Tuple[ConnectionPhase, LinkEvent], ConnectionPhase] = {
            (
                ConnectionPhase.DISCONNECTED,
                LinkEvent.START_SCAN,
            ): ConnectionPhase.SCANNING,
            (
                ConnectionPhase.DISCONNECTED,
                LinkEvent.CONNECT,
            ): ConnectionPhase.CONNECTING,
            (
                ConnectionPhase.SCANNING,
                LinkEvent.DEVICE_MATCHED,
            ): ConnectionPhase.CONNECTING,
            (
                ConnectionPhase.SCANNING,
                LinkEvent.CONNECT,
            ): ConnectionPhase.CONNECTING,
            (
                ConnectionPhase.SCANNING,
                LinkEvent.SCAN_EXPIRED,
            ): ConnectionPhase.DISCONNECTED,
            (
                ConnectionPhase.SCANNING,
                LinkEvent.SCAN_FAILED,
            ): ConnectionPhase.DISCONNECTED,
            (
                ConnectionPhase.CONNECTING,
                LinkEvent.CONNECT_SUCCESS,
            ): ConnectionPhase.CONNECTED,
            (
                ConnectionPhase.CONNECTING,
                LinkEvent.CONNECT_FAILED,
            ): ConnectionPhase.DISCONNECTED,
            (
                ConnectionPhase.SCANNING,
                LinkEvent.DISCONNECT,
            ): ConnectionPhase.DISCONNECTING,
            (
                ConnectionPhase.CONNECTING,
                LinkEvent.DISCONNECT,
            ): ConnectionPhase.DISCONNECTING,
            (
                ConnectionPhase.CONNECTED,
                LinkEvent.DISCONNECT,
            ): ConnectionPhase.DISCONNECTING,
            (
                ConnectionPhase.CONNECTED,
                LinkEvent.CHANNEL_LOST,
            ): ConnectionPhase.DISCONNECTING,
            (
                ConnectionPhase.DISCONNECTING,
                LinkEvent.TEARDOWN_COMPLETE,
            ): ConnectionPhase.DISCONNECTED,
        }

    @property
    def state(self) -> ConnectionPhase:
        """Get current phase."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Check if currently connected."""
        return self._state == ConnectionPhase.CONNECTED

    @property
    def is_scanning(self) -> bool:
        """Check if discovery is running."""
        return self._state == ConnectionPhase.SCANNING

    def transition(self, event: LinkEvent) -> bool:
        """Attempt phase transition.

        Args:
            event: Event triggering transition

        Returns:
            True if transition valid and executed, False otherwise
        """
        key = (self._state, event)

        if key not in self._transitions:
            _LOGGER.debug(
                "Invalid transition: %s + %s",
                self._state.name,
                event.name,
            )
            return False

        previous, self._state = self._state, self._transitions[key]
        _LOGGER.debug(
            "Link phase: %s -> %s (event: %s)",
            previous.name,
            self._state.name,
            event.name,
        )

        for listener in list(self._transition_listeners):
            try:
                listener(previous, self._state, event)
            except Exception as err:
                _LOGGER.error("Error in transition listener: %s", err)
        return True

    def force_state(self, state: ConnectionPhase):
        """Force phase change (bypasses validation and listeners).

        Teardown uses it to land in DISCONNECTED from any phase.

        Args:
            state: Phase to force
        """
        _LOGGER.debug("Force state: %s -> %s", self._state.name, state.name)
        self._state = state

    def add_transition_listener(self, listener: TransitionListener) -> None:
        """Register a callback for every transition.

        Args:
            listener: Called with (previous, new, event)
        """
        self._transition_listeners.append(listener)

    def __str__(self) -> str:
        """String representation."""
        return f"LinkStateMachine(state={self._state.name})"

    def __repr__(self) -> str:
        """Developer representation."""
        return f"LinkStateMachine(state={self._state!r})"
