"""Tests for BatteryState and DeviceState entities."""

import math

import pytest

from custom_components.smart_battery_monitor.domain.entities import (
    BatteryState,
    DeviceState,
    is_voltage_connected,
)
from custom_components.smart_battery_monitor.domain.value_objects import (
    BatteryMode,
    ConnEvent,
    FilterMode,
    ModeEvent,
    ParseDegradedEvent,
    RelayAddress,
    RelayRole,
    VoltageEvent,
)


class TestVoltageHeuristic:
    """Test the voltage-range connectivity heuristic."""

    @pytest.mark.parametrize("voltage", [0.01, 3.7, 12.6, 19.99])
    def test_in_range_is_connected(self, voltage):
        """Test voltages strictly inside (0, 20) count as connected."""
        assert is_voltage_connected(voltage)

    @pytest.mark.parametrize(
        "voltage", [0.0, -0.5, 20.0, 48.0, math.inf, -math.inf, math.nan]
    )
    def test_out_of_range_is_disconnected(self, voltage):
        """Test voltages outside (0, 20) never count as connected."""
        assert not is_voltage_connected(voltage)


class TestBatteryState:
    """Test BatteryState."""

    def test_reset_value(self):
        """Test default battery is {0.0, STANDBY, False}."""
        battery = BatteryState()
        assert battery.voltage == 0.0
        assert battery.mode is BatteryMode.STANDBY
        assert battery.connected is False

    def test_with_voltage_applies_heuristic(self):
        """Test voltage updates derive connectivity."""
        battery = BatteryState().with_voltage(12.6)
        assert battery.connected
        assert not battery.with_voltage(25.0).connected

    def test_unknown_mode_text_kept_verbatim(self):
        """Test unrecognised modes keep their text."""
        battery = BatteryState().with_mode("EQUALIZE")
        assert battery.mode_text == "EQUALIZE"
        assert battery.mode is BatteryMode.UNKNOWN

    def test_to_dict(self):
        """Test dictionary conversion."""
        battery = BatteryState(12.6, "CHARGING", True)
        assert battery.to_dict() == {
            "voltage": 12.6,
            "mode": "CHARGING",
            "connected": True,
        }


class TestDeviceStateApply:
    """Test applying decoded events."""

    def test_initial_state(self):
        """Test a new device is in the reset state."""
        device = DeviceState(battery_count=3)
        assert device.batteries == (BatteryState(),) * 3
        assert device.relays == (False,) * 6

    def test_invalid_battery_count(self):
        """Test battery_count < 1 raises ValueError."""
        with pytest.raises(ValueError):
            DeviceState(battery_count=0)

    def test_voltage_event(self):
        """Test voltage event updates voltage and connectivity."""
        device = DeviceState(battery_count=2)
        assert device.apply(VoltageEvent(1, 12.6))
        assert device.batteries[1] == BatteryState(12.6, "STANDBY", True)

    def test_conn_after_voltage_overrides_heuristic(self):
        """Test explicit connectivity wins over the voltage heuristic."""
        device = DeviceState(battery_count=1)
        device.apply_all([VoltageEvent(0, 12.6), ConnEvent(0, False)])
        assert device.batteries[0].connected is False

    def test_out_of_range_event_ignored(self):
        """Test events for unknown batteries are ignored."""
        device = DeviceState(battery_count=2)
        assert not device.apply(ModeEvent(5, "CHARGING"))
        assert device.batteries == (BatteryState(),) * 2

    def test_degraded_event_carries_no_state(self):
        """Test ParseDegradedEvent leaves state untouched."""
        device = DeviceState(battery_count=2)
        assert not device.apply(ParseDegradedEvent("BATT1", "", "missing 'V'"))

    def test_apply_all_reports_change(self):
        """Test apply_all returns whether anything changed."""
        device = DeviceState(battery_count=2)
        events = [VoltageEvent(0, 12.6), ModeEvent(0, "CHARGING")]
        assert device.apply_all(events)
        assert not device.apply_all(events)

    def test_idempotent(self):
        """Test re-applying identical events yields the same state."""
        device = DeviceState(battery_count=2)
        events = [VoltageEvent(0, 12.6), ModeEvent(1, "CHARGING"), ConnEvent(1, True)]
        device.apply_all(events)
        first = device.batteries
        device.apply_all(events)
        assert device.batteries == first

    def test_snapshots_are_not_mutated(self):
        """Test tuples handed out earlier stay unchanged."""
        device = DeviceState(battery_count=1)
        before = device.batteries
        device.apply(VoltageEvent(0, 12.6))
        assert before[0] == BatteryState()


class TestDeviceStateRelays:
    """Test optimistic relay state."""

    def test_set_relay(self):
        """Test recording a relay state."""
        device = DeviceState(battery_count=3)
        relay = device.battery_relay(1, RelayRole.DISCHARGE)
        device.set_relay(relay, True)
        assert device.relay(relay)
        assert device.relays == (False, False, False, False, True, False)

    def test_relay_address_validates(self):
        """Test invalid indices raise ValueError."""
        device = DeviceState(battery_count=3)
        with pytest.raises(ValueError):
            device.relay_address(6)

    def test_set_relay_rejects_foreign_bank(self):
        """Test addresses from a different bank size are rejected."""
        device = DeviceState(battery_count=3)
        with pytest.raises(ValueError):
            device.set_relay(RelayAddress(1, battery_count=5), True)


class TestDeviceStateFilterAndReset:
    """Test filtering and reset."""

    def test_filtered_indices(self):
        """Test indices passing each filter."""
        device = DeviceState(battery_count=3)
        device.apply_all(
            [ModeEvent(0, "CHARGING"), ModeEvent(1, "DISCHARGING"), ModeEvent(2, "CHARGING")]
        )
        assert device.filtered_indices(FilterMode.ALL) == (0, 1, 2)
        assert device.filtered_indices(FilterMode.CHARGING) == (0, 2)
        assert device.filtered_indices(FilterMode.STANDBY) == ()

    def test_reset(self):
        """Test reset clears batteries and relays."""
        device = DeviceState(battery_count=2)
        device.apply_all([VoltageEvent(0, 12.6), ModeEvent(0, "CHARGING")])
        device.set_relay(device.relay_address(3), True)

        device.reset()

        assert device.batteries == (BatteryState(),) * 2
        assert device.relays == (False,) * 4
