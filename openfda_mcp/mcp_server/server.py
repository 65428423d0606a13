"""openFDA drug label MCP server.

Orchestrates the openFDA client, the query builder, the tool categories and
the tool registry, and runs the MCP server over stdio.
"""

import asyncio
import logging
from typing import Dict, Any, Optional

from mcp.server import Server
from mcp.server.models import InitializationOptions
from mcp.server.lowlevel.server import NotificationOptions

from .. import __version__
from ..config import AppConfig
from ..api_client import OpenFDAClient
from ..async_api_client import AsyncOpenFDAClient
from ..query_builder import QueryBuilder
from .config.tool_definitions import TOOL_SELECTION_GUIDANCE
from .handlers.registry import ToolRegistry
from .tools.labels import LabelTools
from .tools.health import HealthTools

logger = logging.getLogger(__name__)

SERVER_NAME = "mcp-openfda-drug-label"


def build_instructions() -> str:
    """Render the tool selection guidance as server instructions."""
    lines = [
        "Tools for looking up FDA drug labeling (package inserts) via the openFDA drug label API.",
        "",
        "Typical workflows:",
    ]
    for patterns in TOOL_SELECTION_GUIDANCE["workflow_patterns"].values():
        lines.extend(f"- {pattern}" for pattern in patterns)
    lines.append("")
    lines.append("Keep in mind:")
    lines.extend(f"- {hint}" for hint in TOOL_SELECTION_GUIDANCE["common_mistakes"].values())
    return "\n".join(lines)


class OpenFDAMCPServer:
    """openFDA drug label MCP server.

    Components:
    - openFDA client (sync transport wrapped for async use)
    - Query builder carrying the optional API key
    - Tool categories (label lookups, health probe)
    - Tool registry for catalog listing and dispatch
    """

    def __init__(self, config: AppConfig):
        """Initialize the MCP server.

        Args:
            config: Application configuration
        """
        self.config = config
        self.server: Server = Server(SERVER_NAME)
        self.tool_registry = ToolRegistry()

        self.sync_client: Optional[OpenFDAClient] = None
        self.client: Optional[AsyncOpenFDAClient] = None
        self.query_builder = QueryBuilder(api_key=config.openfda.api_key)

        self._tool_categories: Dict[str, Any] = {}
        self._initialized = False

    async def initialize(self) -> None:
        """Create the client, register all tools and the MCP handlers."""
        if self._initialized:
            return

        try:
            self.sync_client = OpenFDAClient(self.config.openfda)
            self.client = AsyncOpenFDAClient(self.sync_client)

            self._tool_categories['labels'] = LabelTools(self.client, self.query_builder)
            self._tool_categories['health'] = HealthTools(self.client, self.query_builder)

            self._register_all_tools()
            self.tool_registry.register_mcp_handlers(self.server)

            self._initialized = True

            logger.info(
                f"openFDA MCP server initialized with {self.tool_registry.get_tool_count()} tools "
                f"(api key {'configured' if self.config.openfda.api_key else 'not configured'})"
            )

        except Exception as e:
            logger.exception("Failed to initialize MCP server")
            raise RuntimeError(f"Initialization failed: {str(e)}")

    def _register_all_tools(self) -> None:
        """Register all tools from all categories."""
        for category_name, category_instance in self._tool_categories.items():
            category_instance.register_tools()

            tools = category_instance.get_tools()
            handlers = category_instance.get_handlers()

            for tool_name, tool in tools.items():
                if tool_name in handlers:
                    metadata = {
                        'category': category_name,
                        'source': f'{category_instance.__class__.__module__}.{category_instance.__class__.__name__}'
                    }
                    self.tool_registry.register_tool(tool_name, tool, handlers[tool_name], metadata)
                else:
                    logger.warning(f"No handler found for tool '{tool_name}' in category '{category_name}'")

        logger.info(f"Registered {self.tool_registry.get_tool_count()} tools across all categories")

    def _initialization_options(self) -> InitializationOptions:
        return InitializationOptions(
            server_name=SERVER_NAME,
            server_version=__version__,
            capabilities=self.server.get_capabilities(
                notification_options=NotificationOptions(),
                experimental_capabilities={},
            ),
            instructions=build_instructions(),
        )

    async def run(self, transport_type: str = "stdio", shutdown_event: Optional[asyncio.Event] = None) -> None:
        """Run the MCP server with the specified transport.

        Args:
            transport_type: Transport type to use (default: "stdio")
            shutdown_event: When set, the transport is closed and run returns
        """
        if not self._initialized:
            await self.initialize()

        if transport_type != "stdio":
            raise ValueError(f"Unsupported transport type: {transport_type}")

        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            server_task = asyncio.create_task(
                self.server.run(read_stream, write_stream, self._initialization_options())
            )
            if shutdown_event is None:
                await server_task
                return

            shutdown_task = asyncio.create_task(shutdown_event.wait())
            done, pending = await asyncio.wait(
                {server_task, shutdown_task}, return_when=asyncio.FIRST_COMPLETED
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

            if server_task in done:
                server_task.result()
            else:
                logger.info("Shutdown requested, transport closed")

    async def shutdown(self) -> None:
        """Shutdown the server and cleanup resources."""
        if self.client:
            self.client.close()
            self.client = None
            self.sync_client = None

        self.tool_registry.clear_registry()
        self._tool_categories.clear()
        self._initialized = False

        logger.info("MCP server shutdown completed")

    def get_server_info(self) -> Dict[str, Any]:
        """Get server information and statistics."""
        return {
            'initialized': self._initialized,
            'tool_count': self.tool_registry.get_tool_count() if self._initialized else 0,
            'tool_categories': list(self._tool_categories.keys()) if self._initialized else [],
            'server_name': SERVER_NAME,
            'server_version': __version__,
        }
