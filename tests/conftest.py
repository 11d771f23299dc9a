"""Pytest configuration and fixtures for coingecko-mcp tests."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from coingecko_mcp import CoinCache, CoinGeckoClient, Dispatcher

API_PREFIX = "/api/v3"


class FakeCoinGecko:
    """Stand-in for the CoinGecko Pro API, served through httpx.MockTransport.

    Set ``status`` to make every endpoint fail, or replace ``catalog`` to
    change what the next refresh returns. Every request is recorded.
    """

    def __init__(self, catalog: list[dict[str, Any]]) -> None:
        self.catalog = catalog
        self.status = 200
        self.market_chart: dict[str, Any] = {
            "prices": [[1711296000000, 65000.5], [1711299600000, 65100.25]],
            "market_caps": [[1711296000000, 1.28e12], [1711299600000, 1.29e12]],
            "total_volumes": [[1711296000000, 3.1e10], [1711299600000, 3.2e10]],
        }
        self.ohlc: list[list[float | int]] = [
            [1711296000, 65000, 65500, 64800, 65200],
            [1711299600, 65200, 65900, 65100, 65750],
        ]
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status != 200:
            return httpx.Response(self.status, text="upstream exploded")

        path = request.url.path.removeprefix(API_PREFIX)
        if path == "/coins/list":
            return httpx.Response(200, json=self.catalog)
        if path.endswith("/market_chart/range"):
            return httpx.Response(200, json=self.market_chart)
        if path.endswith("/ohlc/range"):
            return httpx.Response(200, json=self.ohlc)
        return httpx.Response(404, json={"error": "coin not found"})


@pytest.fixture
def sample_catalog() -> list[dict[str, Any]]:
    """Small catalog with a symbol shared by two coins."""
    return [
        {"id": "bitcoin", "symbol": "btc", "name": "Bitcoin", "platforms": {}},
        {
            "id": "ethereum",
            "symbol": "eth",
            "name": "Ethereum",
            "platforms": {},
        },
        {
            "id": "usd-coin",
            "symbol": "usdc",
            "name": "USDC",
            "platforms": {
                "ethereum": "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48",
            },
        },
        {"id": "batcoin", "symbol": "btc", "name": "Batcoin"},
        {"id": "solana", "symbol": "sol", "name": "Solana", "platforms": {}},
    ]


@pytest.fixture
def fake_api(sample_catalog: list[dict[str, Any]]) -> FakeCoinGecko:
    """Fake upstream serving the sample catalog."""
    return FakeCoinGecko(sample_catalog)


@pytest.fixture
def client(fake_api: FakeCoinGecko) -> CoinGeckoClient:
    """Client wired to the fake upstream."""
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))
    return CoinGeckoClient("test-api-key", http_client=http_client)


@pytest.fixture
def cache(client: CoinGeckoClient) -> CoinCache:
    """Empty coin cache backed by the fake upstream."""
    return CoinCache(client)


@pytest.fixture
def dispatcher(cache: CoinCache, client: CoinGeckoClient) -> Dispatcher:
    """Dispatcher over an empty cache."""
    return Dispatcher(cache, client)
