"""Routes tool calls to the coin cache or the CoinGecko client.

Every successful call returns a JSON document as text. Argument validation
happens here, before the cache or the network is touched.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ValidationError

from coingecko_mcp.cache import CoinCache
from coingecko_mcp.client import CoinGeckoClient
from coingecko_mcp.errors import InvalidArgumentsError, UnknownOperationError
from coingecko_mcp.models import (
    FindCoinIdsArguments,
    GetCoinsArguments,
    GetHistoricalDataArguments,
    GetOHLCDataArguments,
    Pagination,
    RefreshCacheArguments,
)
from coingecko_mcp.schemas import (
    FIND_COIN_IDS,
    GET_COINS,
    GET_HISTORICAL_DATA,
    GET_OHLC_DATA,
    REFRESH_CACHE,
    get_operation,
)

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Awaitable[Any]]


def to_iso(value: datetime | int | None) -> str | None:
    """Render a datetime or UNIX-second timestamp as ``YYYY-MM-DDTHH:MM:SS.sssZ``."""
    if value is None:
        return None
    if not isinstance(value, datetime):
        value = datetime.fromtimestamp(value, tz=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _to_text(payload: Any) -> str:
    return json.dumps(payload, indent=2)


def _invalid_arguments(error: ValidationError) -> InvalidArgumentsError:
    issues = [
        (".".join(str(part) for part in detail["loc"]) or "arguments", detail["msg"])
        for detail in error.errors()
    ]
    return InvalidArgumentsError(issues)


class Dispatcher:
    """Validates arguments and invokes the matching operation.

    Tool names are accepted in both MCP form (``get-coins``) and
    function-calling form (``get_coins``).
    """

    def __init__(self, cache: CoinCache, client: CoinGeckoClient) -> None:
        self.cache = cache
        self.client = client
        self._routes: dict[str, tuple[type[BaseModel], Handler]] = {
            GET_COINS: (GetCoinsArguments, self._get_coins),
            FIND_COIN_IDS: (FindCoinIdsArguments, self._find_coin_ids),
            REFRESH_CACHE: (RefreshCacheArguments, self._refresh_cache),
            GET_HISTORICAL_DATA: (GetHistoricalDataArguments, self._historical_data),
            GET_OHLC_DATA: (GetOHLCDataArguments, self._ohlc_data),
        }

    @property
    def argument_models(self) -> dict[str, type[BaseModel]]:
        return {name: model for name, (model, _) in self._routes.items()}

    async def dispatch(self, name: str, arguments: dict[str, Any] | None = None) -> str:
        """Run one tool call and return its JSON payload.

        Raises:
            UnknownOperationError: ``name`` is not a registered tool.
            InvalidArgumentsError: ``arguments`` failed validation.
            UpstreamError: The CoinGecko request failed.
        """
        operation = get_operation(name)
        if operation is None or operation.name not in self._routes:
            logger.warning(f"Rejected call to unknown tool {name!r}")
            raise UnknownOperationError(name)

        model, handler = self._routes[operation.name]
        try:
            args = model.model_validate(arguments or {})
        except ValidationError as e:
            error = _invalid_arguments(e)
            logger.info(f"{operation.name}: {error}")
            raise error from e

        logger.debug(f"Dispatching {operation.name} with {args!r}")
        return _to_text(await handler(args))

    async def _get_coins(self, args: GetCoinsArguments) -> dict[str, Any]:
        coins = self.cache.get_page(args.page, args.page_size)
        pagination = Pagination(
            current_page=args.page,
            total_pages=self.cache.total_pages(args.page_size),
            page_size=args.page_size,
        )
        return {
            "coins": [coin.model_dump(mode="json", exclude_none=True) for coin in coins],
            "pagination": pagination.model_dump(by_alias=True),
            "lastUpdated": to_iso(self.cache.last_updated),
        }

    async def _find_coin_ids(self, args: FindCoinIdsArguments) -> list[dict[str, Any]]:
        matches = self.cache.find_by_name_or_symbol(args.coins)
        return [match.model_dump() for match in matches]

    async def _refresh_cache(self, args: RefreshCacheArguments) -> dict[str, Any]:
        snapshot = await self.cache.refresh()
        return {
            "message": "Cache refreshed successfully",
            "lastUpdated": to_iso(snapshot.fetched_at),
            "totalCoins": len(snapshot.coins),
        }

    async def _historical_data(self, args: GetHistoricalDataArguments) -> dict[str, Any]:
        series = await self.client.fetch_historical_range(
            args.id, args.vs_currency, args.from_, args.to, args.interval
        )
        return {
            "timeRange": {"from": to_iso(args.from_), "to": to_iso(args.to)},
            "interval": args.interval or "auto",
            "data": series.model_dump(mode="json"),
        }

    async def _ohlc_data(self, args: GetOHLCDataArguments) -> dict[str, Any]:
        bars = await self.client.fetch_ohlc_range(
            args.id, args.vs_currency, args.from_, args.to, args.interval
        )
        return {
            "timeRange": {"from": to_iso(args.from_), "to": to_iso(args.to)},
            "interval": args.interval,
            "data": [bar.model_dump() for bar in bars],
        }
