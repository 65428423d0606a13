"""
MCP Server Utilities Package

Modules:
    serialization: JSON serialization utilities including MCPJSONEncoder
    errors: Error message sanitization
"""

from .serialization import MCPJSONEncoder, safe_json_dumps
from .errors import sanitize_error

__all__ = [
    "MCPJSONEncoder",
    "safe_json_dumps",
    "sanitize_error"
]
