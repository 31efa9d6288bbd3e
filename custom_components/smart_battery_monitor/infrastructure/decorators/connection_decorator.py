# Copyright (c) 2026 Smart Battery Monitor Contributors
# Licensed under the MIT License
# See LICENSE file for full license text
#
# WARNING: This software controls electrical equipment
# Improper use may cause damage or injury
# USE AT YOUR OWN RISK

"""Connection management decorators."""

import logging
from functools import wraps
from typing import Callable


def require_connection(action: str):
    """Decorator to skip a link operation unless the link is connected.

    The decorated coroutine must be a method of an object exposing
    ``is_connected`` and a ``_log(message, level)`` method. When the link
    is not connected the call is a no-op that records "Not connected" in
    the activity log and returns None.

    Args:
        action: Short description used in the log line

    Example:
        @require_connection("toggle relay")
        async def _do_toggle_relay(self, index: int) -> None:
            # Connection is guaranteed - just do work
            ...
    """

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(self, *args, **kwargs):
            if not self.is_connected:
                self._log(f"Not connected: cannot {action}", logging.WARNING)
                return None
            return await func(self, *args, **kwargs)

        return wrapper

    return decorator
