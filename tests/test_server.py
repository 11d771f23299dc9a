"""Tests for the MCP server adapter and the command-line entry point."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import mcp.types as types
import pytest

from coingecko_mcp import (
    CoinCache,
    CoinGeckoClient,
    InvalidArgumentsError,
    UpstreamError,
    tool_definitions,
)
from coingecko_mcp.server import CoinGeckoMCPServer, main

if TYPE_CHECKING:
    from conftest import FakeCoinGecko


@pytest.fixture
def app(client: CoinGeckoClient, cache: CoinCache) -> CoinGeckoMCPServer:
    return CoinGeckoMCPServer(client, cache=cache)


class TestCoinGeckoMCPServer:
    """Tests for tool listing and invocation."""

    @pytest.mark.asyncio
    async def test_list_tools_uses_registry(self, app: CoinGeckoMCPServer) -> None:
        """Listed tools are the registry's tool definitions."""
        tools = await app.list_tools()

        assert all(isinstance(tool, types.Tool) for tool in tools)
        assert [
            {
                "name": tool.name,
                "description": tool.description,
                "inputSchema": tool.inputSchema,
            }
            for tool in tools
        ] == tool_definitions()

    @pytest.mark.asyncio
    async def test_call_tool_returns_text(self, app: CoinGeckoMCPServer) -> None:
        """Results come back as a single text block holding JSON."""
        await app.initialize()

        content = await app.call_tool("find-coin-ids", {"coins": ["sol"]})

        assert len(content) == 1
        assert content[0].type == "text"
        assert json.loads(content[0].text) == [{"name": "sol", "id": "solana"}]

    @pytest.mark.asyncio
    async def test_call_tool_propagates_validation_errors(
        self, app: CoinGeckoMCPServer
    ) -> None:
        """Errors are raised for the SDK to report as tool errors."""
        with pytest.raises(InvalidArgumentsError):
            await app.call_tool("get-coins", {"pageSize": 5000})

    @pytest.mark.asyncio
    async def test_initialize_failure_is_reported(
        self, app: CoinGeckoMCPServer, fake_api: FakeCoinGecko
    ) -> None:
        """A failed initial load surfaces to the caller instead of exiting."""
        fake_api.status = 500
        with pytest.raises(UpstreamError):
            await app.initialize()
        assert app.cache.last_updated is None

    @pytest.mark.asyncio
    async def test_serves_tools_list_request(self, app: CoinGeckoMCPServer) -> None:
        """A tools/list request routed through the SDK server returns the registry."""
        handler = app.server.request_handlers[types.ListToolsRequest]

        response = await handler(types.ListToolsRequest(method="tools/list"))

        assert isinstance(response.root, types.ListToolsResult)
        assert [tool.name for tool in response.root.tools] == [
            definition["name"] for definition in tool_definitions()
        ]

    @pytest.mark.asyncio
    async def test_serves_tools_call_request(self, app: CoinGeckoMCPServer) -> None:
        """A tools/call request routed through the SDK server reaches the dispatcher."""
        await app.initialize()
        handler = app.server.request_handlers[types.CallToolRequest]

        response = await handler(
            types.CallToolRequest(
                method="tools/call",
                params=types.CallToolRequestParams(
                    name="find-coin-ids", arguments={"coins": ["eth"]}
                ),
            )
        )

        assert isinstance(response.root, types.CallToolResult)
        assert not response.root.isError
        assert json.loads(response.root.content[0].text) == [
            {"name": "eth", "id": "ethereum"}
        ]

    @pytest.mark.asyncio
    async def test_tools_call_reports_errors_as_tool_errors(
        self, app: CoinGeckoMCPServer
    ) -> None:
        """Dispatcher errors become an isError result carrying the message."""
        handler = app.server.request_handlers[types.CallToolRequest]

        response = await handler(
            types.CallToolRequest(
                method="tools/call",
                params=types.CallToolRequestParams(
                    name="get-coins", arguments={"pageSize": 5000}
                ),
            )
        )

        assert response.root.isError
        assert "Invalid arguments" in response.root.content[0].text

    def test_default_cache_is_per_instance(self, client: CoinGeckoClient) -> None:
        """Each server builds its own cache."""
        first = CoinGeckoMCPServer(client)
        second = CoinGeckoMCPServer(client)
        assert first.cache is not second.cache


class TestMain:
    """Tests for the command-line entry point."""

    def test_list_functions(self, capsys: pytest.CaptureFixture[str]) -> None:
        """--list-functions prints the function-calling definitions."""
        main(["--list-functions"])

        printed = json.loads(capsys.readouterr().out)
        assert [f["name"] for f in printed] == [
            "get_coins",
            "find_coin_ids",
            "refresh_cache",
            "get_historical_data",
            "get_ohlc_data",
        ]

    def test_missing_api_key_exits(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path
    ) -> None:
        """Without COINGECKO_API_KEY the process exits with status 1."""
        monkeypatch.delenv("COINGECKO_API_KEY", raising=False)
        monkeypatch.chdir(tmp_path)

        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1

    def test_invalid_log_level_exits(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path
    ) -> None:
        """A bad COINGECKO_LOG_LEVEL is reported as a configuration error."""
        monkeypatch.setenv("COINGECKO_API_KEY", "CG-secret")
        monkeypatch.setenv("COINGECKO_LOG_LEVEL", "verbose")
        monkeypatch.chdir(tmp_path)

        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 1
