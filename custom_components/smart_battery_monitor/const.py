# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""Constants for the Smart Battery Monitor integration.

This file contains the protocol vocabulary, link timing defaults and the
BLE UART characteristics used to reach the battery controller.
"""

from __future__ import annotations

# Domain and basic constants
DOMAIN = "smart_battery_monitor"
MANUFACTURER = "Smart Battery System"
DEFAULT_NAME = "Smart Battery Monitor"

# Discovery: advertised names containing this token are the controller
DEVICE_NAME_TOKEN = "SMART_BATTERY_SYSTEM"

# Battery bank layout (two relays per battery: charge + discharge)
DEFAULT_BATTERY_COUNT = 3
MAX_BATTERY_COUNT = 16

# Link timing (seconds)
POLL_INTERVAL = 2.0
SCAN_TIMEOUT = 10.0

# Voltage-range heuristic for batteries without an explicit CONN entry
VOLTAGE_CONNECTED_MIN = 0.0  # exclusive
VOLTAGE_CONNECTED_MAX = 20.0  # exclusive

# Observability
ACTIVITY_LOG_CAPACITY = 20

# Inbound framing
FRAME_TERMINATOR = b"\n"
LINE_BUFFER_LIMIT = 1024  # bytes of unterminated input kept before discarding

# Wire protocol tokens (case-sensitive)
TOKEN_BATTERY = "BATT"
TOKEN_VOLTAGE_END = "V"
TOKEN_MODES = "MODES:"
TOKEN_CONN = "CONN:"
TOKEN_CONN_ON = "1"
CMD_STATUS = "STATUS"
CMD_MODE = "MODE"
CMD_RELAY = "RELAY"
RELAY_ON = "ON"
RELAY_OFF = "OFF"

# Status messages shown to observers
STATUS_DISCONNECTED = "Disconnected"
STATUS_SCANNING = "Scanning..."
STATUS_CONNECTING = "Connecting..."
STATUS_CONNECTED = "Connected"
STATUS_DISCONNECTING = "Disconnecting..."
STATUS_CONNECTION_FAILED = "Connection Failed"
STATUS_SCAN_FAILED = "Scan Failed"
STATUS_NO_DEVICE = "No device found"

# BLE UART (Nordic UART Service) characteristics
NUS_SERVICE_UUID = "6e400001-b5a3-f393-e0a9-e50e24dcca9e"
NUS_TX_UUID = "6e400002-b5a3-f393-e0a9-e50e24dcca9e"  # writes to device
NUS_RX_UUID = "6e400003-b5a3-f393-e0a9-e50e24dcca9e"  # notifications from device

# BLE safety timeouts (seconds)
BLE_CONNECTION_TIMEOUT = 30.0
BLE_NOTIFY_SUBSCRIBE_TIMEOUT = 5.0
BLE_DISCONNECT_TIMEOUT = 5.0
BLE_DEFAULT_WRITE_CHUNK = 20  # minimum ATT payload when MTU is unknown
BLE_CONNECT_ATTEMPTS = 2

# Configuration keys
CONF_BATTERY_COUNT = "battery_count"
CONF_DEVICE_NAME = "device_name"
CONF_POLL_INTERVAL = "poll_interval"
CONF_SCAN_TIMEOUT = "scan_timeout"
CONF_AUTO_CONNECT = "auto_connect"

# Service names
SERVICE_START_SCAN = "start_scan"
SERVICE_CONNECT = "connect"
SERVICE_DISCONNECT = "disconnect"
SERVICE_REFRESH = "refresh"
SERVICE_SEND_COMMAND = "send_command"
SERVICE_SET_MODE = "set_mode"
SERVICE_TOGGLE_RELAY = "toggle_relay"
SERVICE_SET_BATTERY_RELAY = "set_battery_relay"
SERVICE_SET_FILTER = "set_filter"

# Service fields
ATTR_ADDRESS = "address"
ATTR_COMMAND = "command"
ATTR_MODE = "mode"
ATTR_RELAY = "relay"
ATTR_BATTERY = "battery"
ATTR_ROLE = "role"
ATTR_ON = "on"
ATTR_FILTER = "filter"
