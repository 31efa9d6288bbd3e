# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""LinkConfig value object: validated link manager settings."""

from dataclasses import dataclass

from ...const import (
    ACTIVITY_LOG_CAPACITY,
    DEFAULT_BATTERY_COUNT,
    DEVICE_NAME_TOKEN,
    MAX_BATTERY_COUNT,
    POLL_INTERVAL,
    SCAN_TIMEOUT,
)


@dataclass(frozen=True)
class LinkConfig:
    """Immutable settings for one link manager.

    Attributes:
        battery_count: Number of batteries in the bank (1..16)
        device_name_token: Substring identifying the controller by name
        poll_interval: Seconds between automatic STATUS requests
        scan_timeout: Seconds before an unsuccessful scan gives up
        log_capacity: Activity log entries kept

    Example:
        >>> LinkConfig(battery_count=5).poll_interval
        2.0
        >>> LinkConfig(battery_count=0)
        Traceback (most recent call last):
        ValueError: Battery count must be between 1 and 16, got 0
    """

    battery_count: int = DEFAULT_BATTERY_COUNT
    device_name_token: str = DEVICE_NAME_TOKEN
    poll_interval: float = POLL_INTERVAL
    scan_timeout: float = SCAN_TIMEOUT
    log_capacity: int = ACTIVITY_LOG_CAPACITY

    def __post_init__(self) -> None:
        """Validate settings."""
        if not 1 <= self.battery_count <= MAX_BATTERY_COUNT:
            raise ValueError(
                f"Battery count must be between 1 and {MAX_BATTERY_COUNT}, "
                f"got {self.battery_count}"
            )
        if not self.device_name_token:
            raise ValueError("Device name token cannot be empty")
        if self.poll_interval <= 0:
            raise ValueError(f"Poll interval must be > 0, got {self.poll_interval}")
        if self.scan_timeout <= 0:
            raise ValueError(f"Scan timeout must be > 0, got {self.scan_timeout}")
        if self.log_capacity < 1:
            raise ValueError(f"Log capacity must be >= 1, got {self.log_capacity}")
