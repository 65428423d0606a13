"""MCP Server implementation for openFDA drug label lookups."""

from .server import OpenFDAMCPServer

from .utils import (
    MCPJSONEncoder,
    safe_json_dumps,
    sanitize_error
)

from .config import (
    ALL_TOOL_SCHEMAS,
    TOOL_CATEGORIES,
    validate_tool_definitions
)

__all__ = [
    "OpenFDAMCPServer",
    "MCPJSONEncoder",
    "safe_json_dumps",
    "sanitize_error",
    "ALL_TOOL_SCHEMAS",
    "TOOL_CATEGORIES",
    "validate_tool_definitions",
]
