# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""Outbound command value objects.

Commands are immutable descriptions of what to send. Serialization to
wire bytes is the frame codec's job.
"""

from dataclasses import dataclass
from typing import Union

from .battery_mode import OperatingMode
from .relay_address import RelayAddress


@dataclass(frozen=True)
class StatusCommand:
    """Request a status frame (``STATUS``)."""

    def __str__(self) -> str:
        return "STATUS"


@dataclass(frozen=True)
class SetModeCommand:
    """Switch the controller between AUTO and MANUAL (``MODE:{mode}``)."""

    mode: OperatingMode

    def __str__(self) -> str:
        return f"MODE:{self.mode.value}"


@dataclass(frozen=True)
class SetRelayCommand:
    """Switch one relay on or off (``RELAY{n}:{ON|OFF}``).

    The relay is a RelayAddress, so an out-of-range number cannot be
    expressed.
    """

    relay: RelayAddress
    on: bool

    def __str__(self) -> str:
        return f"RELAY{self.relay.wire_number}:{'ON' if self.on else 'OFF'}"


@dataclass(frozen=True)
class RawCommand:
    """Arbitrary single-line text typed by the user.

    Raises:
        ValueError: If the text is blank or spans several lines
    """

    text: str

    def __post_init__(self) -> None:
        stripped = self.text.strip()
        if not stripped:
            raise ValueError("Command text cannot be empty")
        if "\n" in stripped or "\r" in stripped:
            raise ValueError("Command text must be a single line")

    def __str__(self) -> str:
        return self.text.strip()


Command = Union[StatusCommand, SetModeCommand, SetRelayCommand, RawCommand]
