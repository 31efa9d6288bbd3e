"""Tests for RelayAddress value object."""

import pytest
from dataclasses import FrozenInstanceError

from custom_components.smart_battery_monitor.domain.value_objects import (
    RelayAddress,
    RelayRole,
)


class TestRelayAddressCreation:
    """Test RelayAddress creation and validation."""

    def test_create_valid_address(self):
        """Test creating RelayAddress with valid values."""
        relay = RelayAddress(2, battery_count=3)
        assert relay.index == 2
        assert relay.relay_count == 6

    def test_create_last_relay(self):
        """Test the highest index 2N-1 is accepted."""
        relay = RelayAddress(5, battery_count=3)
        assert relay.wire_number == 6

    def test_create_with_negative_raises_error(self):
        """Test that negative index raises ValueError."""
        with pytest.raises(ValueError, match="must be between"):
            RelayAddress(-1, battery_count=3)

    def test_create_with_too_large_raises_error(self):
        """Test that index >= 2N raises ValueError."""
        with pytest.raises(ValueError, match="must be between"):
            RelayAddress(6, battery_count=3)

    def test_create_with_non_int_raises_error(self):
        """Test that non-integer raises TypeError."""
        with pytest.raises(TypeError, match="must be int"):
            RelayAddress("1", battery_count=3)

    def test_create_with_bool_raises_error(self):
        """Test that bool is not accepted as an index."""
        with pytest.raises(TypeError):
            RelayAddress(True, battery_count=3)

    def test_create_with_empty_bank_raises_error(self):
        """Test that battery_count < 1 raises ValueError."""
        with pytest.raises(ValueError, match="Battery count"):
            RelayAddress(0, battery_count=0)


class TestRelayMapping:
    """Test the charge/discharge layout and wire numbering."""

    def test_five_battery_bank_battery_two(self):
        """Test N=5, battery 2 maps to indices 2/7 and wire numbers 3/8."""
        charge = RelayAddress.for_battery(2, RelayRole.CHARGE, battery_count=5)
        discharge = RelayAddress.for_battery(2, RelayRole.DISCHARGE, battery_count=5)

        assert (charge.index, charge.wire_number) == (2, 3)
        assert (discharge.index, discharge.wire_number) == (7, 8)

    def test_three_battery_bank_battery_zero(self):
        """Test N=3, battery 0 maps to wire numbers 1/4."""
        charge = RelayAddress.for_battery(0, RelayRole.CHARGE, battery_count=3)
        discharge = RelayAddress.for_battery(0, RelayRole.DISCHARGE, battery_count=3)

        assert charge.wire_number == 1
        assert discharge.wire_number == 4

    def test_role_and_battery_index(self):
        """Test role and owning battery derived from the index."""
        relay = RelayAddress(4, battery_count=3)
        assert relay.role is RelayRole.DISCHARGE
        assert relay.battery_index == 1

        relay = RelayAddress(1, battery_count=3)
        assert relay.role is RelayRole.CHARGE
        assert relay.battery_index == 1

    def test_for_battery_rejects_unknown_battery(self):
        """Test battery index outside the bank raises ValueError."""
        with pytest.raises(ValueError, match="Battery index"):
            RelayAddress.for_battery(3, RelayRole.CHARGE, battery_count=3)

    def test_from_wire_number(self):
        """Test building from the 1-based wire number."""
        assert RelayAddress.from_wire_number(4, battery_count=3).index == 3

    def test_from_wire_number_zero_raises_error(self):
        """Test wire number 0 is rejected."""
        with pytest.raises(ValueError):
            RelayAddress.from_wire_number(0, battery_count=3)


class TestRelayAddressImmutability:
    """Test that RelayAddress is immutable."""

    def test_cannot_modify_index(self):
        """Test that index cannot be modified after creation."""
        relay = RelayAddress(0, battery_count=3)
        with pytest.raises(FrozenInstanceError):
            relay.index = 1

    def test_equality_and_hash(self):
        """Test value equality and usability as a dict key."""
        first = RelayAddress(1, battery_count=3)
        second = RelayAddress(1, battery_count=3)
        assert first == second
        assert {first: "x"}[second] == "x"


class TestRelayAddressConversion:
    """Test conversions."""

    def test_str(self):
        """Test string representation for logs."""
        assert str(RelayAddress(0, battery_count=3)) == "RELAY1 (battery 1 charge)"
        assert str(RelayAddress(5, battery_count=3)) == "RELAY6 (battery 3 discharge)"

    def test_int(self):
        """Test casting to the 0-based index."""
        assert int(RelayAddress(4, battery_count=3)) == 4
