"""
MCP Server Validation Package

Argument validation for tool calls: JSON-string decoding, per-tool pydantic
models and field-level error reporting.
"""

from .arguments import (
    ARGUMENT_MODELS,
    ArgumentParseError,
    ToolArgumentError,
    ToolValidationError,
    UnknownToolError,
    parse_arguments,
    validate_tool_arguments,
)

__all__ = [
    "ARGUMENT_MODELS",
    "ArgumentParseError",
    "ToolArgumentError",
    "ToolValidationError",
    "UnknownToolError",
    "parse_arguments",
    "validate_tool_arguments",
]
