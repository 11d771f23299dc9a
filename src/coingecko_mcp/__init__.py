"""coingecko-mcp: CoinGecko market data for MCP hosts and LLM function calling.

This package provides:
- An in-memory coin catalog cache with pagination and name/symbol lookup
- An async client for CoinGecko's coin list, market chart and OHLC endpoints
- A dispatcher that validates tool arguments and returns JSON payloads
- Tool schemas for both MCP tool listing and OpenAI-style function calling
"""

__version__ = "0.1.0"

from coingecko_mcp.cache import CoinCache
from coingecko_mcp.client import CoinGeckoClient
from coingecko_mcp.dispatcher import Dispatcher
from coingecko_mcp.errors import (
    CoinGeckoMCPError,
    ConfigurationError,
    InvalidArgumentsError,
    UnknownOperationError,
    UpstreamError,
)
from coingecko_mcp.models import (
    CacheSnapshot,
    CacheState,
    CoinIdMatch,
    CoinRecord,
    HistoricalSeries,
    OHLCBar,
)
from coingecko_mcp.schemas import OPERATIONS, function_definitions, tool_definitions

__all__ = [
    "OPERATIONS",
    "CacheSnapshot",
    "CacheState",
    "CoinCache",
    "CoinGeckoClient",
    "CoinGeckoMCPError",
    "CoinIdMatch",
    "CoinRecord",
    "ConfigurationError",
    "Dispatcher",
    "HistoricalSeries",
    "InvalidArgumentsError",
    "OHLCBar",
    "UnknownOperationError",
    "UpstreamError",
    "__version__",
    "function_definitions",
    "tool_definitions",
]
