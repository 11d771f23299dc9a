"""Tool descriptors, rendered for MCP tool listing and LLM function calling.

``OPERATIONS`` is the single source of truth. ``tool_definitions`` and
``function_definitions`` only differ in the envelope around the same JSON
schema, and in the tool name (hyphenated for MCP, snake_case for function
calling).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from coingecko_mcp.models import MAX_PAGE_SIZE, MAX_UNIX_SECONDS

GET_COINS = "get-coins"
FIND_COIN_IDS = "find-coin-ids"
REFRESH_CACHE = "refresh-cache"
GET_HISTORICAL_DATA = "get-historical-data"
GET_OHLC_DATA = "get-ohlc-data"


@dataclass(frozen=True)
class FieldSpec:
    """One input property of an operation."""

    name: str
    type: str
    description: str
    required: bool = False
    enum: tuple[str, ...] | None = None
    minimum: int | None = None
    maximum: int | None = None
    items: str | None = None
    min_items: int | None = None

    def to_json_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": self.type}
        if self.items is not None:
            schema["items"] = {"type": self.items}
        if self.min_items is not None:
            schema["minItems"] = self.min_items
        if self.enum is not None:
            schema["enum"] = list(self.enum)
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.maximum is not None:
            schema["maximum"] = self.maximum
        schema["description"] = self.description
        return schema


@dataclass(frozen=True)
class OperationDescriptor:
    name: str
    description: str
    fields: tuple[FieldSpec, ...] = ()

    @property
    def function_name(self) -> str:
        return self.name.replace("-", "_")

    @property
    def required(self) -> list[str]:
        return [spec.name for spec in self.fields if spec.required]

    def input_schema(self) -> dict[str, Any]:
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {spec.name: spec.to_json_schema() for spec in self.fields},
        }
        if self.required:
            schema["required"] = self.required
        return schema


_RANGE_FIELDS = (
    FieldSpec("id", "string", "CoinGecko coin ID", required=True),
    FieldSpec(
        "vs_currency", "string", "Target currency (e.g., 'usd', 'eur')", required=True
    ),
    FieldSpec(
        "from",
        "integer",
        "Start timestamp (UNIX seconds)",
        required=True,
        minimum=0,
        maximum=MAX_UNIX_SECONDS,
    ),
    FieldSpec(
        "to",
        "integer",
        "End timestamp (UNIX seconds)",
        required=True,
        minimum=0,
        maximum=MAX_UNIX_SECONDS,
    ),
)

OPERATIONS: tuple[OperationDescriptor, ...] = (
    OperationDescriptor(
        name=GET_COINS,
        description="Get a paginated list of all supported coins on CoinGecko",
        fields=(
            FieldSpec("page", "integer", "Page number (starts from 1)", minimum=1),
            FieldSpec(
                "pageSize",
                "integer",
                f"Number of items per page (max {MAX_PAGE_SIZE})",
                minimum=1,
                maximum=MAX_PAGE_SIZE,
            ),
        ),
    ),
    OperationDescriptor(
        name=FIND_COIN_IDS,
        description="Find CoinGecko IDs for a list of coin names or symbols",
        fields=(
            FieldSpec(
                "coins",
                "array",
                "Array of coin names or symbols to look up",
                required=True,
                items="string",
                min_items=1,
            ),
        ),
    ),
    OperationDescriptor(
        name=REFRESH_CACHE,
        description="Refresh the cached list of coins from CoinGecko",
    ),
    OperationDescriptor(
        name=GET_HISTORICAL_DATA,
        description=(
            "Get historical price, market cap, and volume data for a specific coin"
        ),
        fields=_RANGE_FIELDS
        + (
            FieldSpec(
                "interval",
                "string",
                "Data interval (optional)",
                enum=("5m", "hourly", "daily"),
            ),
        ),
    ),
    OperationDescriptor(
        name=GET_OHLC_DATA,
        description=(
            "Get OHLC (Open, High, Low, Close) candlestick data for a specific "
            "coin within a time range"
        ),
        fields=_RANGE_FIELDS
        + (
            FieldSpec(
                "interval",
                "string",
                "Data interval - daily (up to 180 days) or hourly (up to 31 days)",
                required=True,
                enum=("daily", "hourly"),
            ),
        ),
    ),
)


def get_operation(name: str) -> OperationDescriptor | None:
    """Look up a descriptor by MCP or function-calling name."""
    for operation in OPERATIONS:
        if name in (operation.name, operation.function_name):
            return operation
    return None


def tool_definitions() -> list[dict[str, Any]]:
    """Descriptors in MCP ``tools/list`` form."""
    return [
        {
            "name": operation.name,
            "description": operation.description,
            "inputSchema": operation.input_schema(),
        }
        for operation in OPERATIONS
    ]


def function_definitions() -> list[dict[str, Any]]:
    """Descriptors in OpenAI-style function-calling form."""
    return [
        {
            "name": operation.function_name,
            "description": operation.description,
            "parameters": operation.input_schema(),
        }
        for operation in OPERATIONS
    ]
