"""Test doubles for unit testing.

Test doubles are fake implementations of interfaces used for testing.
They're faster and more reliable than mocking, and they implement the
actual interface contracts.

We primarily use Fakes because they:
- Actually implement the interface
- Can be reused across many tests
- Provide realistic behavior (streams end, writes fail, connects hang)

Example:
    >>> from tests.doubles import FakeTransport
    >>> transport = FakeTransport()
    >>> transport.advertise("AA:BB:CC:DD:EE:FF", "SMART_BATTERY_SYSTEM")
    >>> manager = LinkManager(transport)
"""

import asyncio
from typing import Callable

from .fake_transport import FakeChannel, FakeTransport


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the event loop until ``predicate()`` holds.

    Raises:
        AssertionError: If the condition does not hold within ``timeout``
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not met within %.1fs" % timeout)
        await asyncio.sleep(0.005)


__all__ = [
    "FakeChannel",
    "FakeTransport",
    "wait_until",
]
