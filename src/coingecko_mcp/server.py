#!/usr/bin/env python3
"""CoinGecko MCP Server - CoinGecko market data over the Model Context Protocol.

Tools:
- get-coins: Paginated list of every coin in the cached catalog
- find-coin-ids: Resolve coin names or symbols to CoinGecko ids
- refresh-cache: Re-fetch the coin catalog
- get-historical-data: Price, market cap and volume series for a time range
- get-ohlc-data: Candlesticks for a time range

Usage:
    # Run with stdio (for Zed/Claude Desktop)
    COINGECKO_API_KEY=... coingecko-mcp

    # Print the LLM function-calling definitions
    coingecko-mcp --list-functions

Claude Desktop Configuration:
    "mcpServers": {
        "coingecko": {
            "command": "coingecko-mcp",
            "env": {"COINGECKO_API_KEY": "CG-..."}
        }
    }
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from coingecko_mcp import __version__
from coingecko_mcp.cache import CoinCache
from coingecko_mcp.client import CoinGeckoClient
from coingecko_mcp.config import (
    LOG_LEVELS,
    Settings,
    configure_logging,
    load_settings,
)
from coingecko_mcp.dispatcher import Dispatcher
from coingecko_mcp.errors import CoinGeckoMCPError
from coingecko_mcp.schemas import function_definitions, tool_definitions

logger = logging.getLogger(__name__)

SERVER_NAME = "coingecko"


class CoinGeckoMCPServer:
    """Binds a Dispatcher to the MCP SDK's low-level server."""

    def __init__(self, client: CoinGeckoClient, cache: CoinCache | None = None) -> None:
        self.cache = cache or CoinCache(client)
        self.dispatcher = Dispatcher(self.cache, client)
        self.server: Server = Server(SERVER_NAME, version=__version__)
        self._register_handlers()

    def _register_handlers(self) -> None:
        self.server.list_tools()(self.list_tools)
        # The dispatcher owns argument validation and its error messages.
        self.server.call_tool(validate_input=False)(self.call_tool)

    async def list_tools(self) -> list[types.Tool]:
        return [types.Tool(**definition) for definition in tool_definitions()]

    async def call_tool(
        self, name: str, arguments: dict[str, Any] | None
    ) -> list[types.TextContent]:
        text = await self.dispatcher.dispatch(name, arguments)
        return [types.TextContent(type="text", text=text)]

    async def initialize(self) -> None:
        """Populate the coin cache; errors propagate to the caller."""
        await self.cache.refresh()

    async def run_stdio(self) -> None:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("CoinGecko MCP Server running on stdio")
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


async def serve(settings: Settings) -> None:
    """Build the server, load the catalog and serve until stdin closes."""
    async with CoinGeckoClient(
        settings.api_key,
        base_url=settings.base_url,
        timeout=settings.request_timeout,
    ) as client:
        app = CoinGeckoMCPServer(client)
        await app.initialize()
        await app.run_stdio()


# =============================================================================
# Main Entry Point
# =============================================================================


def main(argv: list[str] | None = None) -> None:
    """Run the MCP server."""
    parser = argparse.ArgumentParser(description="CoinGecko MCP Server")
    parser.add_argument(
        "--list-functions",
        action="store_true",
        help="Print LLM function-calling definitions as JSON and exit",
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default=None,
        help="Override COINGECKO_LOG_LEVEL (default: INFO)",
    )
    args = parser.parse_args(argv)

    if args.list_functions:
        print(json.dumps(function_definitions(), indent=2))
        return

    configure_logging(args.log_level or "INFO")
    try:
        settings = load_settings()
        if args.log_level is None:
            configure_logging(settings.log_level)
        asyncio.run(serve(settings))
    except CoinGeckoMCPError as e:
        logger.error(f"Fatal error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
