# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""BatteryMode, OperatingMode and FilterMode value objects."""

from enum import Enum


class BatteryMode(Enum):
    """Per-battery operating mode reported in the MODES field.

    The controller sends modes as free text. Known words map to the enum
    members; anything else is UNKNOWN for derived logic (colours, filters)
    while the battery keeps the verbatim text.

    Example:
        >>> BatteryMode.from_token("CHARGING")
        <BatteryMode.CHARGING: 'CHARGING'>
        >>> BatteryMode.from_token("EQUALIZE")
        <BatteryMode.UNKNOWN: 'UNKNOWN'>
    """

    CHARGING = "CHARGING"
    DISCHARGING = "DISCHARGING"
    STANDBY = "STANDBY"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_token(cls, token: str) -> "BatteryMode":
        """Map a wire token to a mode, UNKNOWN if unrecognised.

        Args:
            token: Mode text exactly as received (case-sensitive)

        Returns:
            Corresponding BatteryMode
        """
        try:
            mode = cls(token)
        except ValueError:
            return cls.UNKNOWN
        return mode

    @property
    def is_known(self) -> bool:
        """True for CHARGING, DISCHARGING and STANDBY."""
        return self is not BatteryMode.UNKNOWN

    def get_display_name(self) -> str:
        """Get human-readable mode name.

        Example:
            >>> BatteryMode.DISCHARGING.get_display_name()
            'Discharging'
        """
        return self.name.title()


class OperatingMode(Enum):
    """Controller-wide operating mode sent with ``MODE:{mode}``."""

    AUTO = "AUTO"
    MANUAL = "MANUAL"

    @classmethod
    def parse(cls, value: str) -> "OperatingMode":
        """Parse a case-insensitive mode name.

        Raises:
            ValueError: If value is neither auto nor manual
        """
        try:
            return cls(value.strip().upper())
        except ValueError as err:
            raise ValueError(f"Unknown operating mode: {value!r}") from err


class FilterMode(Enum):
    """Which batteries an observer wants to see."""

    ALL = "ALL"
    CHARGING = "CHARGING"
    DISCHARGING = "DISCHARGING"
    STANDBY = "STANDBY"

    @classmethod
    def parse(cls, value: str) -> "FilterMode":
        """Parse a case-insensitive filter name.

        Raises:
            ValueError: If value is not a known filter
        """
        try:
            return cls(value.strip().upper())
        except ValueError as err:
            raise ValueError(f"Unknown filter: {value!r}") from err

    def matches(self, mode_text: str) -> bool:
        """Check whether a battery with this mode text passes the filter.

        Comparison is against the verbatim mode text, so batteries with
        unrecognised modes only show up under ALL.

        Example:
            >>> FilterMode.ALL.matches("ANYTHING")
            True
            >>> FilterMode.CHARGING.matches("STANDBY")
            False
        """
        if self is FilterMode.ALL:
            return True
        return mode_text == self.value
