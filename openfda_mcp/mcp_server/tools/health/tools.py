"""Connectivity probe tool for the openFDA MCP server."""

import logging
from typing import Any, Dict, TYPE_CHECKING

from mcp.types import Tool

from ...config.tool_definitions import ALL_TOOL_SCHEMAS
from ....api_client import OpenFDAAPIError
from ....response_shaper import shape

if TYPE_CHECKING:
    from ....async_api_client import AsyncOpenFDAClient
    from ....query_builder import QueryBuilder

logger = logging.getLogger(__name__)


class HealthTools:
    """openFDA connectivity probe.

    The probe reports upstream failures in its text result instead of raising,
    so a host can always tell "unreachable" apart from "tool call failed".
    """

    def __init__(self, client: "AsyncOpenFDAClient", query_builder: "QueryBuilder"):
        self.client = client
        self.query_builder = query_builder
        self._tool_handlers: Dict[str, Any] = {}
        self._tools: Dict[str, Tool] = {}

    def get_tools(self) -> Dict[str, Tool]:
        return self._tools.copy()

    def get_handlers(self) -> Dict[str, Any]:
        return self._tool_handlers.copy()

    def register_tools(self) -> None:
        """Register the health tool and handler."""
        self._tools["health"] = Tool(**ALL_TOOL_SCHEMAS["health"])

        async def health():
            query = self.query_builder.build("health", {})
            try:
                raw = await self.client.fetch(query)
            except OpenFDAAPIError as e:
                logger.warning(f"openFDA health probe failed: {e}")
                return f"error: {e}"
            except Exception as e:
                logger.exception("openFDA health probe raised an unexpected error")
                return f"error: {e}"
            return shape("health", raw)

        self._tool_handlers["health"] = health
