"""
MCP Server Handlers Package

Modules:
    registry: Tool registration, catalog listing and call dispatch
"""

from .registry import ToolRegistry, to_text_content

__all__ = ["ToolRegistry", "to_text_content"]
