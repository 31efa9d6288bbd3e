"""Tests for ActivityLog, LinkSession and LinkStateStore."""

import logging
from datetime import datetime
from unittest.mock import Mock

import pytest

from custom_components.smart_battery_monitor.domain.entities import (
    ActivityLog,
    LinkSession,
    LinkStateStore,
)
from custom_components.smart_battery_monitor.domain.value_objects import (
    ConnectionPhase,
    FilterMode,
    ModeEvent,
    VoltageEvent,
)


class TestActivityLog:
    """Test bounded newest-first log."""

    def test_newest_first(self):
        """Test entries are returned newest first."""
        log = ActivityLog(capacity=5)
        log.add("one")
        log.add("two")
        assert [entry.message for entry in log] == ["two", "one"]

    def test_capacity_evicts_oldest(self):
        """Test the 21st entry evicts the oldest one."""
        log = ActivityLog()
        for number in range(21):
            log.add(f"message {number}")

        assert len(log) == 20
        assert log.capacity == 20
        messages = [entry.message for entry in log]
        assert messages[0] == "message 20"
        assert "message 0" not in messages

    def test_lines_are_timestamped(self):
        """Test formatted lines carry HH:MM:SS."""
        log = ActivityLog(clock=lambda: datetime(2026, 1, 1, 9, 5, 7))
        log.add("Connected to SMART_BATTERY_SYSTEM")
        assert log.lines() == ("[09:05:07] Connected to SMART_BATTERY_SYSTEM",)

    def test_invalid_capacity(self):
        """Test capacity < 1 raises ValueError."""
        with pytest.raises(ValueError):
            ActivityLog(capacity=0)


class TestLinkSession:
    """Test LinkSession reset."""

    def test_reset(self):
        """Test reset returns every flag to its default."""
        session = LinkSession(
            phase=ConnectionPhase.CONNECTED,
            status="Connected",
            manual_override=True,
            filter=FilterMode.CHARGING,
            device_name="SMART_BATTERY_SYSTEM",
            device_address="AA:BB",
        )

        session.reset("Connection Failed")

        assert session == LinkSession(status="Connection Failed")


class TestLinkStateStore:
    """Test the observable store."""

    def test_snapshot(self):
        """Test snapshot reflects session and device state."""
        store = LinkStateStore(battery_count=2)
        store.device.apply_all([VoltageEvent(0, 12.6), ModeEvent(0, "CHARGING")])
        store.session.filter = FilterMode.CHARGING

        snapshot = store.snapshot()

        assert snapshot.phase is ConnectionPhase.DISCONNECTED
        assert snapshot.status == "Disconnected"
        assert snapshot.batteries[0].voltage == 12.6
        assert snapshot.relays == (False,) * 4
        assert snapshot.filtered_battery_indices == (0,)
        assert not snapshot.is_connected

    def test_snapshot_to_dict(self):
        """Test JSON-friendly conversion."""
        store = LinkStateStore(battery_count=1)
        data = store.snapshot().to_dict()
        assert data["phase"] == "disconnected"
        assert data["batteries"] == [{"voltage": 0.0, "mode": "STANDBY", "connected": False}]
        assert data["filter"] == "ALL"

    def test_listener_receives_snapshot(self):
        """Test listeners are called with the current snapshot."""
        store = LinkStateStore(battery_count=1)
        listener = Mock()
        store.add_listener(listener)

        store.notify()

        listener.assert_called_once()
        assert listener.call_args[0][0].status == "Disconnected"

    def test_remove_listener(self):
        """Test the returned callable unsubscribes."""
        store = LinkStateStore(battery_count=1)
        listener = Mock()
        remove = store.add_listener(listener)

        remove()
        remove()
        store.notify()

        listener.assert_not_called()

    def test_failing_listener_does_not_break_others(self, caplog):
        """Test listener exceptions are logged and contained."""
        store = LinkStateStore(battery_count=1)
        good = Mock()
        store.add_listener(Mock(side_effect=RuntimeError("boom")))
        store.add_listener(good)

        with caplog.at_level(logging.ERROR):
            store.notify()

        good.assert_called_once()
        assert "Error in state listener" in caplog.text

    def test_log_mirrors_to_logger(self, caplog):
        """Test activity entries are mirrored to the module logger."""
        store = LinkStateStore(battery_count=1)
        with caplog.at_level(logging.INFO):
            store.log("Scanning for devices...")

        assert store.activity.lines()[0].endswith("Scanning for devices...")
        assert "Scanning for devices..." in caplog.text

    def test_reset_keeps_log(self):
        """Test reset clears state but keeps the activity log."""
        store = LinkStateStore(battery_count=1)
        store.device.apply(VoltageEvent(0, 12.6))
        store.session.manual_override = True
        store.log("Connected to X")

        store.reset("Disconnected")

        snapshot = store.snapshot()
        assert snapshot.batteries[0].voltage == 0.0
        assert not snapshot.manual_override
        assert len(snapshot.log) == 1
