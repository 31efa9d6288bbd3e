# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""Error handling decorator for link coroutines."""

import asyncio
import logging
from functools import wraps
from typing import Callable

from bleak import BleakError

from ...domain.exceptions import LinkError


def _log_failure(log: logging.Logger, operation_name: str, err: Exception) -> None:
    if isinstance(err, LinkError):
        log.error("%s failed: %s", operation_name, err)
    elif isinstance(err, ValueError):
        # Bad mode, filter or relay name from a caller
        log.warning("%s rejected: %s", operation_name, err)
    elif isinstance(err, BleakError):
        log.error("%s BLE error: %s", operation_name, err)
    else:
        log.error("%s unexpected error: %s", operation_name, err, exc_info=err)


def handle_link_errors(
    operation_name: str,
    logger: logging.Logger = None,
    reraise: bool = True,
):
    """Decorator for standardized link error handling.

    Link failures and rejected arguments are logged without a stack trace;
    anything else is logged with one. Cancellation always propagates.

    Args:
        operation_name: Human-readable operation name for logging
        logger: Logger to use (defaults to function's module logger)
        reraise: Whether to re-raise after logging; when False the
            coroutine returns None

    Example:
        @handle_link_errors("Toggle relay", reraise=False)
        async def toggle_relay(self, index: int) -> None:
            await self._submit(self._do_toggle_relay, index)
    """

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except asyncio.CancelledError:
                raise
            except Exception as err:
                _log_failure(
                    logger or logging.getLogger(func.__module__), operation_name, err
                )
                if reraise:
                    raise
                return None

        return wrapper

    return decorator
