"""Async client for the three CoinGecko Pro endpoints this server needs."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from coingecko_mcp.config import DEFAULT_BASE_URL
from coingecko_mcp.errors import UpstreamError
from coingecko_mcp.models import (
    CoinRecord,
    HistoricalInterval,
    HistoricalSeries,
    OHLCBar,
    OHLCInterval,
)

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-cg-pro-api-key"

_catalog_adapter = TypeAdapter(list[CoinRecord])


class CoinGeckoClient:
    """Issues one authenticated GET per call and parses the JSON body.

    There is no retry or backoff: every failure surfaces as ``UpstreamError``.
    An ``httpx.AsyncClient`` may be injected (tests use ``httpx.MockTransport``);
    the client only closes connections it opened itself.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._headers = {API_KEY_HEADER: api_key, "accept": "application/json"}
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> CoinGeckoClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug(f"Making request to: {url} params={params}")
        try:
            response = await self._http.get(url, params=params, headers=self._headers)
        except httpx.HTTPError as e:
            logger.error(f"Request to {url} failed: {e!s}")
            raise UpstreamError(f"{type(e).__name__}: {e!s}") from e

        if not response.is_success:
            logger.error(
                f"API response status {response.status_code} "
                f"{response.reason_phrase} for {url}: {response.text}"
            )
            raise UpstreamError(
                f"{response.status_code} {response.reason_phrase} - {response.text}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Malformed JSON body from {url}: {e!s}")
            raise UpstreamError(
                f"malformed response body: {e!s}", status_code=response.status_code
            ) from e

    async def fetch_catalog(self) -> list[CoinRecord]:
        """Fetch every listed coin, including on-chain platform addresses."""
        body = await self._get("/coins/list", {"include_platform": "true"})
        try:
            return _catalog_adapter.validate_python(body)
        except ValidationError as e:
            raise UpstreamError(f"unexpected coin list shape: {e!s}") from e

    async def fetch_historical_range(
        self,
        coin_id: str,
        vs_currency: str,
        from_: int,
        to: int,
        interval: HistoricalInterval | None = None,
    ) -> HistoricalSeries:
        """Fetch prices, market caps and volumes for a UNIX-second range.

        Without ``interval`` CoinGecko picks the granularity from the range width.
        """
        params: dict[str, Any] = {"vs_currency": vs_currency, "from": from_, "to": to}
        if interval:
            params["interval"] = interval
        body = await self._get(f"/coins/{coin_id}/market_chart/range", params)
        try:
            return HistoricalSeries.model_validate(body)
        except ValidationError as e:
            raise UpstreamError(f"unexpected market chart shape: {e!s}") from e

    async def fetch_ohlc_range(
        self,
        coin_id: str,
        vs_currency: str,
        from_: int,
        to: int,
        interval: OHLCInterval,
    ) -> list[OHLCBar]:
        """Fetch candlesticks for a UNIX-second range.

        CoinGecko limits hourly bars to 31 days and daily bars to 180 days;
        requests outside those bounds fail upstream.
        """
        params = {"vs_currency": vs_currency, "from": from_, "to": to, "interval": interval}
        body = await self._get(f"/coins/{coin_id}/ohlc/range", params)
        if not isinstance(body, list):
            raise UpstreamError("unexpected OHLC shape: expected a list of rows")
        try:
            return [OHLCBar.from_row(row) for row in body]
        except (TypeError, ValueError) as e:
            raise UpstreamError(f"unexpected OHLC row: {e!s}") from e
