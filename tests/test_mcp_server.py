"""Tests for the openFDA MCP server orchestration."""

import asyncio

import pytest
from unittest.mock import AsyncMock, patch

from openfda_mcp import __version__
from openfda_mcp.config import AppConfig, OpenFDAConfig
from openfda_mcp.mcp_server.config import ALL_TOOL_SCHEMAS
from openfda_mcp.mcp_server.server import SERVER_NAME, OpenFDAMCPServer, build_instructions


@pytest.fixture
def config():
    return AppConfig(openfda=OpenFDAConfig(api_key="test-key"))


class TestOpenFDAMCPServer:
    """Test cases for server initialization and lifecycle."""

    def test_query_builder_carries_api_key(self, config):
        server = OpenFDAMCPServer(config)

        assert server.query_builder.api_key == "test-key"

    @pytest.mark.asyncio
    async def test_initialize_registers_catalog(self, config):
        server = OpenFDAMCPServer(config)

        await server.initialize()

        assert set(server.tool_registry.list_tool_names()) == set(ALL_TOOL_SCHEMAS)
        assert server.tool_registry.get_tools_by_category("health") == ["health"]
        assert len(server.tool_registry.get_tools_by_category("labels")) == 6
        assert server.tool_registry.get_tool_metadata("health")["source"].endswith("HealthTools")

        await server.shutdown()

    @pytest.mark.asyncio
    async def test_initialize_is_idempotent(self, config):
        server = OpenFDAMCPServer(config)

        await server.initialize()
        client = server.client
        await server.initialize()

        assert server.client is client
        await server.shutdown()

    @pytest.mark.asyncio
    async def test_initialize_failure(self, config):
        server = OpenFDAMCPServer(config)

        with patch("openfda_mcp.mcp_server.server.OpenFDAClient", side_effect=OSError("no sockets")):
            with pytest.raises(RuntimeError, match="Initialization failed: no sockets"):
                await server.initialize()

    @pytest.mark.asyncio
    async def test_server_info(self, config):
        server = OpenFDAMCPServer(config)
        assert server.get_server_info()["tool_count"] == 0

        await server.initialize()
        info = server.get_server_info()

        assert info == {
            "initialized": True,
            "tool_count": 7,
            "tool_categories": ["labels", "health"],
            "server_name": SERVER_NAME,
            "server_version": __version__,
        }
        await server.shutdown()

    @pytest.mark.asyncio
    async def test_shutdown_closes_client(self, config):
        server = OpenFDAMCPServer(config)
        await server.initialize()
        session = server.sync_client.session

        with patch.object(session, "close") as mock_close:
            await server.shutdown()

        mock_close.assert_called_once()
        assert server.client is None
        assert server.tool_registry.get_tool_count() == 0
        assert server.get_server_info()["initialized"] is False

    @pytest.mark.asyncio
    async def test_unsupported_transport(self, config):
        server = OpenFDAMCPServer(config)

        with pytest.raises(ValueError, match="Unsupported transport type: sse"):
            await server.run(transport_type="sse")

        await server.shutdown()

    @pytest.mark.asyncio
    async def test_run_returns_on_shutdown_event(self, config):
        """Test setting the shutdown event cancels the server loop."""
        server = OpenFDAMCPServer(config)
        await server.initialize()
        shutdown_event = asyncio.Event()
        shutdown_event.set()

        async def never_finishes(*args):
            await asyncio.Event().wait()

        stdio = AsyncMock()
        stdio.__aenter__.return_value = ("read", "write")

        with patch("mcp.server.stdio.stdio_server", return_value=stdio), \
                patch.object(server.server, "run", never_finishes):
            await asyncio.wait_for(server.run(shutdown_event=shutdown_event), timeout=5)

        await server.shutdown()


class TestInstructions:
    def test_instructions_mention_workflows(self):
        instructions = build_instructions()

        assert "get_label_by_drug_name" in instructions
        assert "get_label_by_set_id" in instructions
        assert "Keep in mind:" in instructions
