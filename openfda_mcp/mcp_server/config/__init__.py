"""
MCP Server Configuration Package

Modules:
    tool_definitions: Tool schema definitions, categories and selection guidance
"""

from .tool_definitions import (
    ALL_TOOL_SCHEMAS,
    TOOL_CATEGORIES,
    TOOL_SELECTION_GUIDANCE,
    SEARCH_TOOLS_SCHEMAS,
    LOOKUP_TOOLS_SCHEMAS,
    DIAGNOSTIC_TOOLS_SCHEMAS,
    validate_tool_definitions,
)

__all__ = [
    "ALL_TOOL_SCHEMAS",
    "TOOL_CATEGORIES",
    "TOOL_SELECTION_GUIDANCE",
    "SEARCH_TOOLS_SCHEMAS",
    "LOOKUP_TOOLS_SCHEMAS",
    "DIAGNOSTIC_TOOLS_SCHEMAS",
    "validate_tool_definitions",
]
