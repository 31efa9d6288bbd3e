# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""Custom exceptions for the Smart Battery Monitor link.

This module defines domain-specific exceptions for the expected failure
modes of the telemetry link. None of them is fatal: the link manager
recovers from each one with a phase transition plus a log line, so they
never escape the public operations.

Decode problems are not exceptions at all; the frame codec reports them as
``ParseDegradedEvent`` values alongside the regular state events.
"""


class LinkError(Exception):
    """Base class for all telemetry link failures."""


class DiscoveryFailedError(LinkError):
    """Device discovery could not be started or the discovery stream failed."""


class ConnectFailedError(LinkError):
    """Opening a channel to the controller failed.

    Raised by transports for unknown addresses, refused connections and
    failed notification subscriptions. The link manager returns to
    DISCONNECTED and does not retry on its own.

    Example:
        >>> raise ConnectFailedError("Device AA:BB:CC:DD:EE:FF not found")
    """


class SendFailedError(LinkError):
    """A command could not be handed to the channel.

    Causes:
        - No channel attached (not connected)
        - The dispatcher is already writing (reject-if-busy policy)
        - The underlying channel write failed
    """


class ChannelClosedError(LinkError):
    """The remote side closed the channel."""


class ChannelIOError(LinkError):
    """An I/O failure occurred on an open channel."""
