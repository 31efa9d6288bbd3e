"""Pytest configuration and fixtures for Smart Battery Monitor tests."""

from __future__ import annotations

import sys
from pathlib import Path

# Add parent directory to Python path so we can import custom_components
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from unittest.mock import Mock

from custom_components.smart_battery_monitor.domain.value_objects import LinkConfig


@pytest.fixture
def mock_hass():
    """Create mock Home Assistant instance."""
    hass = Mock()
    hass.data = {}
    hass.services = Mock()
    hass.bus = Mock()
    return hass


@pytest.fixture
def fast_config() -> LinkConfig:
    """Link settings with short timers for lifecycle tests."""
    return LinkConfig(
        battery_count=3,
        poll_interval=0.05,
        scan_timeout=0.2,
        log_capacity=500,
    )


@pytest.fixture
def status_frame() -> str:
    """A complete status frame for a 3-battery bank."""
    return (
        "BATT1:12.60V,BATT2:0.00V,BATT3:13.10V,"
        "MODES:CHARGING,STANDBY,DISCHARGING,CONN:1,0,1"
    )
