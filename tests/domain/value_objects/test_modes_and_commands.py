"""Tests for mode enums, commands, events and link settings."""

import pytest
from dataclasses import FrozenInstanceError

from custom_components.smart_battery_monitor.domain.value_objects import (
    BatteryMode,
    ConnectionPhase,
    DiscoveredDevice,
    FilterMode,
    LinkConfig,
    OperatingMode,
    ParseDegradedEvent,
    RawCommand,
    RelayAddress,
    SetModeCommand,
    SetRelayCommand,
    StatusCommand,
)


class TestBatteryMode:
    """Test BatteryMode mapping from wire tokens."""

    @pytest.mark.parametrize(
        "token,expected",
        [
            ("CHARGING", BatteryMode.CHARGING),
            ("DISCHARGING", BatteryMode.DISCHARGING),
            ("STANDBY", BatteryMode.STANDBY),
            ("EQUALIZE", BatteryMode.UNKNOWN),
            ("charging", BatteryMode.UNKNOWN),
            ("", BatteryMode.UNKNOWN),
        ],
    )
    def test_from_token(self, token, expected):
        """Test known tokens map exactly, everything else is UNKNOWN."""
        assert BatteryMode.from_token(token) is expected

    def test_is_known(self):
        """Test is_known flag."""
        assert BatteryMode.CHARGING.is_known
        assert not BatteryMode.UNKNOWN.is_known

    def test_display_name(self):
        """Test human-readable name."""
        assert BatteryMode.DISCHARGING.get_display_name() == "Discharging"


class TestOperatingMode:
    """Test OperatingMode parsing."""

    def test_parse_case_insensitive(self):
        """Test parsing ignores case and whitespace."""
        assert OperatingMode.parse(" manual ") is OperatingMode.MANUAL
        assert OperatingMode.parse("AUTO") is OperatingMode.AUTO

    def test_parse_unknown_raises(self):
        """Test unknown mode raises ValueError."""
        with pytest.raises(ValueError, match="Unknown operating mode"):
            OperatingMode.parse("turbo")


class TestFilterMode:
    """Test FilterMode parsing and matching."""

    def test_parse(self):
        """Test parsing ignores case."""
        assert FilterMode.parse("charging") is FilterMode.CHARGING

    def test_parse_unknown_raises(self):
        """Test unknown filter raises ValueError."""
        with pytest.raises(ValueError, match="Unknown filter"):
            FilterMode.parse("idle")

    def test_all_matches_everything(self):
        """Test ALL passes any mode text."""
        assert FilterMode.ALL.matches("WHATEVER")

    def test_specific_filter_matches_exact_text(self):
        """Test a specific filter compares verbatim mode text."""
        assert FilterMode.STANDBY.matches("STANDBY")
        assert not FilterMode.STANDBY.matches("CHARGING")
        assert not FilterMode.STANDBY.matches("standby")


class TestConnectionPhase:
    """Test ConnectionPhase helpers."""

    def test_str_is_lower_case(self):
        """Test string form."""
        assert str(ConnectionPhase.CONNECTED) == "connected"

    def test_owns_channel(self):
        """Test phases in which a channel may be open."""
        assert ConnectionPhase.CONNECTED.owns_channel
        assert ConnectionPhase.DISCONNECTING.owns_channel
        assert not ConnectionPhase.SCANNING.owns_channel

    def test_is_busy(self):
        """Test scanning and connecting are busy phases."""
        assert ConnectionPhase.SCANNING.is_busy
        assert ConnectionPhase.CONNECTING.is_busy
        assert not ConnectionPhase.CONNECTED.is_busy


class TestCommands:
    """Test command value objects."""

    def test_wire_text(self):
        """Test string forms match the wire text."""
        assert str(StatusCommand()) == "STATUS"
        assert str(SetModeCommand(OperatingMode.MANUAL)) == "MODE:MANUAL"
        relay = RelayAddress(2, battery_count=3)
        assert str(SetRelayCommand(relay, True)) == "RELAY3:ON"
        assert str(SetRelayCommand(relay, False)) == "RELAY3:OFF"

    def test_raw_command_strips_whitespace(self):
        """Test raw command text is trimmed."""
        assert str(RawCommand("  STATUS \r\n")) == "STATUS"

    def test_raw_command_rejects_blank(self):
        """Test blank raw command raises ValueError."""
        with pytest.raises(ValueError, match="empty"):
            RawCommand("   ")

    def test_raw_command_rejects_multiple_lines(self):
        """Test multi-line raw command raises ValueError."""
        with pytest.raises(ValueError, match="single line"):
            RawCommand("STATUS\nRELAY1:ON")

    def test_commands_are_immutable(self):
        """Test commands are frozen."""
        command = SetModeCommand(OperatingMode.AUTO)
        with pytest.raises(FrozenInstanceError):
            command.mode = OperatingMode.MANUAL


class TestDiscoveredDevice:
    """Test DiscoveredDevice name matching."""

    def test_matches_substring(self):
        """Test the token may appear anywhere in the name."""
        device = DiscoveredDevice("AA:BB", "MY_SMART_BATTERY_SYSTEM_2")
        assert device.matches("SMART_BATTERY_SYSTEM")

    def test_unnamed_device_never_matches(self):
        """Test devices without a name never match."""
        assert not DiscoveredDevice("AA:BB").matches("SMART_BATTERY_SYSTEM")

    def test_str(self):
        """Test string representation."""
        assert str(DiscoveredDevice("AA:BB")) == "unknown (AA:BB)"


class TestParseDegradedEvent:
    """Test ParseDegradedEvent formatting."""

    def test_str(self):
        """Test the diagnostic text names field and reason."""
        event = ParseDegradedEvent("BATT1", "abc", "invalid voltage, using 0.0")
        assert str(event) == "Parse BATT1 degraded: invalid voltage, using 0.0 ('abc')"


class TestLinkConfig:
    """Test LinkConfig validation."""

    def test_defaults(self):
        """Test default settings."""
        config = LinkConfig()
        assert config.battery_count == 3
        assert config.device_name_token == "SMART_BATTERY_SYSTEM"
        assert config.poll_interval == 2.0
        assert config.scan_timeout == 10.0
        assert config.log_capacity == 20

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"battery_count": 0},
            {"battery_count": 17},
            {"device_name_token": ""},
            {"poll_interval": 0},
            {"scan_timeout": -1},
            {"log_capacity": 0},
        ],
    )
    def test_invalid_settings_raise(self, kwargs):
        """Test invalid settings raise ValueError."""
        with pytest.raises(ValueError):
            LinkConfig(**kwargs)
