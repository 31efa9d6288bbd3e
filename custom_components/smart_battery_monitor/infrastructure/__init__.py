"""Infrastructure layer for the Smart Battery Monitor link.

This layer contains concrete implementations of domain interfaces:
- Protocol: text frame codec and line framing
- State machines: link phase transitions
- Transport: BLE UART transport, command dispatcher, poller, link manager
- Decorators: error handling and connection guards
"""
