"""Tests for domain interface definitions.

These tests verify that interfaces are properly defined and can be
implemented by concrete classes.
"""

import pytest
from abc import ABC

from custom_components.smart_battery_monitor.domain.interfaces import (
    IChannel,
    IFrameCodec,
    ITransport,
)
from custom_components.smart_battery_monitor.infrastructure.protocol import (
    TextFrameCodec,
)
from custom_components.smart_battery_monitor.infrastructure.transport import (
    BleUartChannel,
    BleUartTransport,
)
from tests.doubles import FakeChannel, FakeTransport


class TestInterfaceDefinitions:
    """Test that all interfaces are properly defined."""

    @pytest.mark.parametrize("interface", [IChannel, IFrameCodec, ITransport])
    def test_interfaces_are_abstract(self, interface):
        """Verify each interface is an abstract base class."""
        assert issubclass(interface, ABC)

        with pytest.raises(TypeError):
            interface()

    def test_partial_channel_cannot_be_instantiated(self):
        """Verify every abstract method must be implemented."""

        class WriteOnlyChannel(IChannel):
            async def write(self, data: bytes) -> None:
                pass

        with pytest.raises(TypeError):
            WriteOnlyChannel()


class TestInterfaceImplementations:
    """Test that implementations satisfy the interfaces."""

    def test_codec(self):
        """Verify the text codec implements IFrameCodec."""
        assert isinstance(TextFrameCodec(battery_count=3), IFrameCodec)

    def test_ble_uart(self):
        """Verify the BLE UART adapter implements the transport interfaces."""
        assert issubclass(BleUartTransport, ITransport)
        assert issubclass(BleUartChannel, IChannel)

    def test_fakes(self):
        """Verify test doubles implement the same contracts."""
        assert isinstance(FakeTransport(), ITransport)
        assert isinstance(FakeChannel(), IChannel)
