"""Domain interfaces for the Smart Battery Monitor link.

This module defines the contracts (interfaces) that infrastructure implementations
must fulfill. Using these interfaces enables:
- Dependency Inversion: the link manager doesn't depend on the radio
- Testability: fake transports and channels in tests
- Flexibility: swap BLE UART for RFCOMM or a serial port without touching the link
"""

from .i_channel import IChannel
from .i_frame_codec import IFrameCodec
from .i_transport import ITransport

__all__ = [
    "IChannel",
    "IFrameCodec",
    "ITransport",
]
