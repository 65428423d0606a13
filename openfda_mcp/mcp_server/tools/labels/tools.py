"""Drug label tools for the openFDA MCP server.

Every handler follows the same path: build the openFDA query from the
validated arguments, fetch it, then shape the raw response into the tool's
output contract. Upstream failures propagate to the registry, which reports
them to the host as tool errors.
"""

import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from mcp.types import Tool

from ...config.tool_definitions import ALL_TOOL_SCHEMAS, LIMIT_DEFAULT, COUNT_LIMIT_DEFAULT
from ....api_client import OpenFDAAPIError
from ....response_shaper import shape

if TYPE_CHECKING:
    from ....async_api_client import AsyncOpenFDAClient
    from ....query_builder import QueryBuilder

logger = logging.getLogger(__name__)


class LabelTools:
    """Drug label search and lookup tools for MCP server."""

    def __init__(self, client: "AsyncOpenFDAClient", query_builder: "QueryBuilder"):
        """Initialize label tools.

        Args:
            client: Async openFDA client used to fetch label data
            query_builder: Builder for openFDA queries
        """
        self.client = client
        self.query_builder = query_builder
        self._tool_handlers: Dict[str, Any] = {}
        self._tools: Dict[str, Tool] = {}

    def get_tools(self) -> Dict[str, Tool]:
        """Get all label tool definitions."""
        return self._tools.copy()

    def get_handlers(self) -> Dict[str, Any]:
        """Get all label tool handlers."""
        return self._tool_handlers.copy()

    async def _fetch_and_shape(self, tool_name: str, args: Dict[str, Any], not_found_ok: bool = False) -> Any:
        query = self.query_builder.build(tool_name, args)
        try:
            raw = await self.client.fetch(query)
        except OpenFDAAPIError as e:
            # openFDA answers 404 when a search matches nothing
            if not (not_found_ok and e.status_code == 404):
                raise
            raw = {"results": []}
        payload = shape(tool_name, raw, args)
        if isinstance(payload, dict) and "results_count" in payload:
            logger.info(f"{tool_name} returned {payload['results_count']} results")
        return payload

    def _add_tool(self, name: str, handler) -> None:
        self._tools[name] = Tool(**ALL_TOOL_SCHEMAS[name])
        self._tool_handlers[name] = handler

    def register_tools(self) -> None:
        """Register all label tools and handlers."""

        async def search_labels(
            query: str,
            limit: int = LIMIT_DEFAULT,
            skip: int = 0,
            fields: Optional[str] = None,
            sort: Optional[str] = None,
        ):
            return await self._fetch_and_shape(
                "search_labels",
                {"query": query, "limit": limit, "skip": skip, "fields": fields, "sort": sort},
            )

        self._add_tool("search_labels", search_labels)

        async def search_labels_summary(
            query: str, limit: int = LIMIT_DEFAULT, skip: int = 0, sort: Optional[str] = None
        ):
            return await self._fetch_and_shape(
                "search_labels_summary",
                {"query": query, "limit": limit, "skip": skip, "sort": sort},
            )

        self._add_tool("search_labels_summary", search_labels_summary)

        async def count_labels(
            field: str, query: Optional[str] = None, limit: int = COUNT_LIMIT_DEFAULT
        ):
            return await self._fetch_and_shape(
                "count_labels", {"field": field, "query": query, "limit": limit}
            )

        self._add_tool("count_labels", count_labels)

        async def get_label_by_set_id(set_id: str, fields: Optional[List[str]] = None):
            payload = await self._fetch_and_shape(
                "get_label_by_set_id", {"set_id": set_id, "fields": fields}, not_found_ok=True
            )
            if not payload.get("found"):
                logger.info(f"No label found for set_id {set_id}")
            return payload

        self._add_tool("get_label_by_set_id", get_label_by_set_id)

        async def get_label_by_ndc(ndc: str, limit: int = LIMIT_DEFAULT, skip: int = 0):
            return await self._fetch_and_shape(
                "get_label_by_ndc", {"ndc": ndc, "limit": limit, "skip": skip}
            )

        self._add_tool("get_label_by_ndc", get_label_by_ndc)

        async def get_label_by_drug_name(
            name: str,
            limit: int = LIMIT_DEFAULT,
            skip: int = 0,
            include_substance_name: bool = False,
        ):
            return await self._fetch_and_shape(
                "get_label_by_drug_name",
                {
                    "name": name,
                    "limit": limit,
                    "skip": skip,
                    "include_substance_name": include_substance_name,
                },
            )

        self._add_tool("get_label_by_drug_name", get_label_by_drug_name)
