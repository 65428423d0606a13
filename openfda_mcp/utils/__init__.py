"""Shared utilities for the openFDA MCP server."""

from .request_context import (
    generate_request_id,
    get_request_id,
    set_request_id,
    format_request_id,
)

__all__ = [
    "generate_request_id",
    "get_request_id",
    "set_request_id",
    "format_request_id",
]
