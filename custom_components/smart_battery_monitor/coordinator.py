# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""DataUpdateCoordinator bridging the battery link to Home Assistant.

The link manager pushes state; this coordinator never polls. Every
published snapshot is forwarded with async_set_updated_data so entities
and dashboards see connection phase, batteries, relays and activity log.
"""

from __future__ import annotations

import logging
from typing import Callable

from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from .const import DOMAIN
from .domain.entities import LinkSnapshot
from .infrastructure.transport import LinkManager

_LOGGER = logging.getLogger(__name__)


class SmartBatteryCoordinator(DataUpdateCoordinator[LinkSnapshot]):
    """Coordinator holding the latest LinkSnapshot."""

    def __init__(self, hass: HomeAssistant, link: LinkManager) -> None:
        """Initialize the coordinator.

        Args:
            hass: Home Assistant instance
            link: Link manager whose snapshots are published
        """
        super().__init__(
            hass,
            _LOGGER,
            config_entry=None,
            name=DOMAIN,
            update_interval=None,  # push-based
        )
        self.link = link
        self.data = link.snapshot
        self._remove_listener: Callable[[], None] | None = None

    @callback
    def async_start(self) -> None:
        """Start forwarding link snapshots."""
        if self._remove_listener is None:
            self._remove_listener = self.link.add_listener(self._handle_snapshot)

    @callback
    def _handle_snapshot(self, snapshot: LinkSnapshot) -> None:
        if _LOGGER.isEnabledFor(logging.DEBUG):
            _LOGGER.debug(
                "Link update: %s, %d batteries, relays=%s",
                snapshot.status,
                len(snapshot.batteries),
                snapshot.relays,
            )
        self.async_set_updated_data(snapshot)

    async def _async_update_data(self) -> LinkSnapshot:
        """Ask the controller for fresh data when connected.

        The answer arrives asynchronously and is pushed by the listener;
        the snapshot returned here is the current one.
        """
        if self.link.is_connected:
            await self.link.refresh()
        return self.link.snapshot

    async def async_shutdown(self) -> None:
        """Stop forwarding and shut the link down."""
        _LOGGER.debug("Shutting down coordinator")
        if self._remove_listener is not None:
            self._remove_listener()
            self._remove_listener = None
        await self.link.async_shutdown()
        await super().async_shutdown()
