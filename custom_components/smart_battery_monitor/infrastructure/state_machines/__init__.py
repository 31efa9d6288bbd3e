"""State machines for managing complex state transitions."""

from .link_state_machine import LinkEvent, LinkStateMachine

__all__ = [
    "LinkStateMachine",
    "LinkEvent",
]
