"""Tool registry for MCP server - manages tool registration, discovery and dispatch."""

import logging
from typing import Dict, List, Callable, Awaitable, Any, Optional, Union

from mcp.types import Tool, TextContent
from mcp.server import Server

from ...utils.request_context import (
    generate_request_id,
    set_request_id,
)
from ..utils.errors import sanitize_error
from ..utils.serialization import safe_json_dumps
from ..validation import ToolValidationError, UnknownToolError, validate_tool_arguments

logger = logging.getLogger(__name__)


def to_text_content(payload: Any) -> List[TextContent]:
    """Wrap a tool payload as a single text content block.

    Strings are passed through unchanged; everything else is rendered as
    pretty-printed JSON.
    """
    text = payload if isinstance(payload, str) else safe_json_dumps(payload)
    return [TextContent(type="text", text=text)]


class ToolRegistry:
    """
    Manages tool registration, discovery, and metadata for the MCP server.

    This class centralizes all tool management functionality, providing:
    - Tool registration system
    - Tool discovery and enumeration
    - Argument validation and handler dispatch
    - Wiring of the MCP list_tools / call_tool handlers
    """

    def __init__(self):
        """Initialize the tool registry."""
        self._tools: Dict[str, Tool] = {}
        self._tool_handlers: Dict[str, Callable[..., Awaitable[Any]]] = {}
        self._tool_metadata: Dict[str, Dict[str, Any]] = {}

    def register_tool(self, name: str, tool: Tool, handler: Callable[..., Awaitable[Any]], metadata: Optional[Dict[str, Any]] = None) -> None:
        """
        Register a tool with its handler and optional metadata.

        Args:
            name: Tool name/identifier
            tool: MCP Tool definition
            handler: Async function to handle tool calls
            metadata: Optional metadata for the tool (category, source, etc.)
        """
        if name in self._tools:
            logger.warning(f"Tool '{name}' is already registered, overwriting")

        self._tools[name] = tool
        self._tool_handlers[name] = handler
        self._tool_metadata[name] = metadata or {}

        logger.debug(f"Registered tool: {name}")

    def get_tool_handler(self, name: str) -> Optional[Callable[..., Awaitable[Any]]]:
        return self._tool_handlers.get(name)

    def get_tool_definition(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def get_tool_metadata(self, name: str) -> Dict[str, Any]:
        return self._tool_metadata.get(name, {})

    def list_tools(self) -> List[Tool]:
        """
        Get all registered tool definitions.

        Returns:
            List[Tool]: List of all registered MCP tools
        """
        return list(self._tools.values())

    def list_tool_names(self) -> List[str]:
        return list(self._tools.keys())

    def get_tools_by_category(self, category: str) -> List[str]:
        """
        Get tool names by category from metadata.

        Args:
            category: Category to filter by

        Returns:
            List[str]: List of tool names in the category
        """
        return [
            name for name, metadata in self._tool_metadata.items()
            if metadata.get('category') == category
        ]

    def get_tool_count(self) -> int:
        return len(self._tools)

    def has_tool(self, name: str) -> bool:
        return name in self._tools

    async def dispatch(self, name: str, arguments: Union[str, bytes, Dict[str, Any], None]) -> List[TextContent]:
        """
        Validate arguments, run the tool handler and wrap its payload.

        Args:
            name: Tool name
            arguments: Raw arguments, either a mapping or a JSON-encoded object

        Returns:
            List[TextContent]: A single text content block

        Raises:
            UnknownToolError: If no tool is registered under ``name``
            ArgumentParseError: If string arguments are not a JSON object
            ToolArgumentError: If arguments fail the tool's declared shape
            OpenFDAAPIError: If the upstream call fails
        """
        handler = self.get_tool_handler(name)
        if handler is None:
            raise UnknownToolError(name)

        validated = validate_tool_arguments(name, arguments)
        payload = await handler(**validated)
        return to_text_content(payload)

    def register_mcp_handlers(self, server: Server) -> None:
        """
        Register MCP protocol handlers with the server.

        Errors raised here are turned into error results by the MCP server,
        so a failed call is never reported as a successful tool result.

        Args:
            server: MCP server instance
        """

        @server.list_tools()
        async def list_tools() -> List[Tool]:
            """List all available MCP tools."""
            return self.list_tools()

        @server.call_tool()
        async def call_tool(name: str, arguments: dict) -> List[TextContent]:
            """Handle MCP tool calls with request ID tracking."""
            request_id = generate_request_id()
            set_request_id(request_id)

            logger.info(
                f"[{request_id}] MCP tool call: {name} with arguments: {arguments}"
            )

            try:
                content = await self.dispatch(name, arguments)
            except ToolValidationError as e:
                logger.warning(f"[{request_id}] Rejected call to {name}: {e}")
                raise
            except Exception as e:
                logger.exception(f"[{request_id}] Error calling tool {name}")
                raise RuntimeError(sanitize_error(e)) from e

            logger.info(f"[{request_id}] MCP tool '{name}' completed successfully")
            return content

    def clear_registry(self) -> None:
        """Clear all registered tools."""
        self._tools.clear()
        self._tool_handlers.clear()
        self._tool_metadata.clear()
        logger.debug("Cleared tool registry")
