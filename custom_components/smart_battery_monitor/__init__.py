# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""Smart Battery Monitor integration for Home Assistant.

This integration provides a Bluetooth telemetry and control link to a
multi-battery management controller speaking a line-oriented text
protocol over a BLE UART.
"""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from homeassistant.const import EVENT_HOMEASSISTANT_STOP
from homeassistant.core import Event, HomeAssistant, ServiceCall
import homeassistant.helpers.config_validation as cv
from homeassistant.helpers.typing import ConfigType

from .const import (
    ATTR_ADDRESS,
    ATTR_BATTERY,
    ATTR_COMMAND,
    ATTR_FILTER,
    ATTR_MODE,
    ATTR_ON,
    ATTR_RELAY,
    ATTR_ROLE,
    CONF_AUTO_CONNECT,
    CONF_BATTERY_COUNT,
    CONF_DEVICE_NAME,
    CONF_POLL_INTERVAL,
    CONF_SCAN_TIMEOUT,
    DEFAULT_BATTERY_COUNT,
    DEVICE_NAME_TOKEN,
    DOMAIN,
    MAX_BATTERY_COUNT,
    POLL_INTERVAL,
    SCAN_TIMEOUT,
    SERVICE_CONNECT,
    SERVICE_DISCONNECT,
    SERVICE_REFRESH,
    SERVICE_SEND_COMMAND,
    SERVICE_SET_BATTERY_RELAY,
    SERVICE_SET_FILTER,
    SERVICE_SET_MODE,
    SERVICE_START_SCAN,
    SERVICE_TOGGLE_RELAY,
)
from .coordinator import SmartBatteryCoordinator
from .domain.value_objects import FilterMode, LinkConfig, OperatingMode, RelayRole
from .infrastructure.transport import BleUartTransport, LinkManager

_LOGGER = logging.getLogger(__name__)

CONFIG_SCHEMA = vol.Schema(
    {
        DOMAIN: vol.Schema(
            {
                vol.Optional(CONF_BATTERY_COUNT, default=DEFAULT_BATTERY_COUNT): vol.All(
                    vol.Coerce(int), vol.Range(min=1, max=MAX_BATTERY_COUNT)
                ),
                vol.Optional(CONF_DEVICE_NAME, default=DEVICE_NAME_TOKEN): cv.string,
                vol.Optional(CONF_POLL_INTERVAL, default=POLL_INTERVAL): vol.All(
                    vol.Coerce(float), vol.Range(min=0.5, max=3600)
                ),
                vol.Optional(CONF_SCAN_TIMEOUT, default=SCAN_TIMEOUT): vol.All(
                    vol.Coerce(float), vol.Range(min=1, max=300)
                ),
                vol.Optional(CONF_AUTO_CONNECT, default=False): cv.boolean,
            }
        )
    },
    extra=vol.ALLOW_EXTRA,
)

# Service schemas
CONNECT_SCHEMA = vol.Schema({vol.Required(ATTR_ADDRESS): cv.string})

SEND_COMMAND_SCHEMA = vol.Schema({vol.Required(ATTR_COMMAND): cv.string})

SET_MODE_SCHEMA = vol.Schema(
    {
        vol.Required(ATTR_MODE): vol.All(
            vol.Lower, vol.In([mode.value.lower() for mode in OperatingMode])
        ),
    }
)

SET_FILTER_SCHEMA = vol.Schema(
    {
        vol.Required(ATTR_FILTER): vol.All(
            vol.Lower, vol.In([mode.value.lower() for mode in FilterMode])
        ),
    }
)


def build_relay_schemas(battery_count: int) -> tuple[vol.Schema, vol.Schema]:
    """Build relay service schemas for a bank of ``battery_count`` batteries.

    Relay and battery numbers are 1-based, as printed on the controller.

    Returns:
        (toggle_relay schema, set_battery_relay schema)
    """
    toggle_relay = vol.Schema(
        {
            vol.Required(ATTR_RELAY): vol.All(
                vol.Coerce(int), vol.Range(min=1, max=2 * battery_count)
            ),
        }
    )
    set_battery_relay = vol.Schema(
        {
            vol.Required(ATTR_BATTERY): vol.All(
                vol.Coerce(int), vol.Range(min=1, max=battery_count)
            ),
            vol.Required(ATTR_ROLE): vol.All(
                vol.Lower, vol.In([role.value for role in RelayRole])
            ),
            vol.Required(ATTR_ON): cv.boolean,
        }
    )
    return toggle_relay, set_battery_relay


def build_link_config(conf: dict[str, Any]) -> LinkConfig:
    """Convert validated YAML configuration into a LinkConfig."""
    return LinkConfig(
        battery_count=conf[CONF_BATTERY_COUNT],
        device_name_token=conf[CONF_DEVICE_NAME],
        poll_interval=conf[CONF_POLL_INTERVAL],
        scan_timeout=conf[CONF_SCAN_TIMEOUT],
    )


async def async_setup(hass: HomeAssistant, config: ConfigType) -> bool:
    """Set up Smart Battery Monitor from YAML configuration."""
    conf = config.get(DOMAIN)
    if conf is None:
        return True

    link_config = build_link_config(conf)
    _LOGGER.debug(
        "Setting up Smart Battery Monitor for %d batteries (match %r)",
        link_config.battery_count,
        link_config.device_name_token,
    )

    link = LinkManager(BleUartTransport(hass), link_config)
    coordinator = SmartBatteryCoordinator(hass, link)
    coordinator.async_start()

    hass.data[DOMAIN] = {
        "link": link,
        "coordinator": coordinator,
        "config": link_config,
    }

    async_register_services(hass, link)

    async def _async_stop(event: Event) -> None:
        """Shut the link down with Home Assistant."""
        await coordinator.async_shutdown()

    hass.bus.async_listen_once(EVENT_HOMEASSISTANT_STOP, _async_stop)

    if conf[CONF_AUTO_CONNECT]:
        _LOGGER.info("Auto-connect enabled, scanning for battery controller")
        hass.async_create_task(link.start_scanning())

    _LOGGER.info("Smart Battery Monitor setup complete")
    return True


def async_register_services(hass: HomeAssistant, link: LinkManager) -> None:
    """Register the link services."""
    toggle_relay_schema, set_battery_relay_schema = build_relay_schemas(
        link.config.battery_count
    )

    async def handle_start_scan(call: ServiceCall) -> None:
        """Handle start scan service call."""
        await link.start_scanning()

    async def handle_connect(call: ServiceCall) -> None:
        """Handle connect service call."""
        await link.connect_to_device(call.data[ATTR_ADDRESS])

    async def handle_disconnect(call: ServiceCall) -> None:
        """Handle disconnect service call."""
        await link.disconnect()

    async def handle_refresh(call: ServiceCall) -> None:
        """Handle refresh service call."""
        await link.refresh()

    async def handle_send_command(call: ServiceCall) -> None:
        """Handle raw command service call."""
        await link.send_command(call.data[ATTR_COMMAND])

    async def handle_set_mode(call: ServiceCall) -> None:
        """Handle set mode service call."""
        await link.set_mode(call.data[ATTR_MODE])

    async def handle_toggle_relay(call: ServiceCall) -> None:
        """Handle toggle relay service call (1-based relay number)."""
        await link.toggle_relay(call.data[ATTR_RELAY] - 1)

    async def handle_set_battery_relay(call: ServiceCall) -> None:
        """Handle per-battery relay service call (1-based battery number)."""
        await link.set_battery_relay(
            call.data[ATTR_BATTERY] - 1, call.data[ATTR_ROLE], call.data[ATTR_ON]
        )

    async def handle_set_filter(call: ServiceCall) -> None:
        """Handle battery filter service call."""
        await link.set_filter(call.data[ATTR_FILTER])

    hass.services.async_register(DOMAIN, SERVICE_START_SCAN, handle_start_scan)
    hass.services.async_register(
        DOMAIN, SERVICE_CONNECT, handle_connect, schema=CONNECT_SCHEMA
    )
    hass.services.async_register(DOMAIN, SERVICE_DISCONNECT, handle_disconnect)
    hass.services.async_register(DOMAIN, SERVICE_REFRESH, handle_refresh)
    hass.services.async_register(
        DOMAIN, SERVICE_SEND_COMMAND, handle_send_command, schema=SEND_COMMAND_SCHEMA
    )
    hass.services.async_register(
        DOMAIN, SERVICE_SET_MODE, handle_set_mode, schema=SET_MODE_SCHEMA
    )
    hass.services.async_register(
        DOMAIN, SERVICE_TOGGLE_RELAY, handle_toggle_relay, schema=toggle_relay_schema
    )
    hass.services.async_register(
        DOMAIN,
        SERVICE_SET_BATTERY_RELAY,
        handle_set_battery_relay,
        schema=set_battery_relay_schema,
    )
    hass.services.async_register(
        DOMAIN, SERVICE_SET_FILTER, handle_set_filter, schema=SET_FILTER_SCHEMA
    )
