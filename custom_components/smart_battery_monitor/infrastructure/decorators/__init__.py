"""Infrastructure layer decorators."""

from .connection_decorator import require_connection
from .error_handler import handle_link_errors

__all__ = [
    "handle_link_errors",
    "require_connection",
]
