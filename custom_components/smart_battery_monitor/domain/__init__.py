"""Domain layer for the Smart Battery Monitor integration.

This layer contains:
- Interfaces: transport, channel and codec contracts
- Value Objects: commands, decoded events, relay addresses, modes
- Entities: battery/device state, session, activity log, observable store
- Exceptions: the link failure taxonomy

The domain layer has ZERO dependencies on external libraries (except Python stdlib).
All external dependencies are abstracted behind interfaces.
"""
