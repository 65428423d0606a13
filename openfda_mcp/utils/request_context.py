"""Request context management for tracing tool calls through the system.

Every MCP tool call (and every CLI invocation) gets a short request ID that is
stored in a context variable, so log lines emitted anywhere during the call
can be correlated without passing the ID around explicitly.
"""

import secrets
from contextvars import ContextVar
from typing import Optional

# Thread-safe and async-safe
REQUEST_ID_CONTEXT: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def generate_request_id() -> str:
    """Generate a unique 6-digit hex request ID with req_ prefix.

    Returns:
        str: Request ID in format 'req_a1b2c3'

    Examples:
        >>> request_id = generate_request_id()
        >>> request_id.startswith('req_')
        True
        >>> len(request_id) == 10
        True
    """
    return f"req_{secrets.token_hex(3)}"


def get_request_id() -> Optional[str]:
    """Get the current request ID from context, or None if unset."""
    return REQUEST_ID_CONTEXT.get()


def set_request_id(request_id: str) -> None:
    """Set the request ID in the current context.

    Args:
        request_id: Request ID to set (e.g., 'req_a1b2c3')
    """
    REQUEST_ID_CONTEXT.set(request_id)


def format_request_id(request_id: Optional[str]) -> str:
    """Format request ID for logging and display.

    Examples:
        >>> format_request_id('req_a1b2c3')
        'req_a1b2c3'
        >>> format_request_id(None)
        'req_unknown'
    """
    return request_id or "req_unknown"
