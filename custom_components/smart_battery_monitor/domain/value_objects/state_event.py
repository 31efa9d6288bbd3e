# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""Decoded inbound events.

The frame codec turns one text line into a list of these events. Device
state applies them in order; ParseDegradedEvent carries no state and only
feeds the activity log.
"""

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class VoltageEvent:
    """Battery ``index`` (0-based) reported ``voltage`` volts."""

    index: int
    voltage: float


@dataclass(frozen=True)
class ModeEvent:
    """Battery ``index`` reported mode text ``mode`` (kept verbatim)."""

    index: int
    mode: str


@dataclass(frozen=True)
class ConnEvent:
    """Explicit connectivity flag for battery ``index``."""

    index: int
    connected: bool


@dataclass(frozen=True)
class ParseDegradedEvent:
    """A field could not be decoded and fell back to a default.

    Attributes:
        field: Token being decoded (e.g. "BATT1")
        raw: Offending text, possibly empty
        reason: Human-readable explanation
    """

    field: str
    raw: str
    reason: str

    def __str__(self) -> str:
        return f"Parse {self.field} degraded: {self.reason} ({self.raw!r})"


StateEvent = Union[VoltageEvent, ModeEvent, ConnEvent, ParseDegradedEvent]
