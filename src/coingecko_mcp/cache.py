"""In-memory cache of the CoinGecko coin catalog.

The cache holds a single immutable ``CacheSnapshot``. A refresh builds a new
snapshot and swaps the reference in one assignment, so concurrent readers see
either the old catalog or the new one, never a mix. A failed refresh leaves
the previous snapshot in place.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from coingecko_mcp.models import (
    DEFAULT_PAGE_SIZE,
    CacheSnapshot,
    CacheState,
    CoinIdMatch,
    CoinRecord,
)

if TYPE_CHECKING:
    from coingecko_mcp.client import CoinGeckoClient

logger = logging.getLogger(__name__)


class CoinCache:
    """Catalog snapshot with pagination and name/symbol lookup.

    Example:
        ```python
        cache = CoinCache(client)
        await cache.refresh()
        cache.get_page(page=2, page_size=50)
        cache.find_by_name_or_symbol(["BTC", "ethereum"])
        ```
    """

    def __init__(self, client: CoinGeckoClient) -> None:
        self._client = client
        self._snapshot = CacheSnapshot()

    def __len__(self) -> int:
        return len(self._snapshot.coins)

    @property
    def snapshot(self) -> CacheSnapshot:
        return self._snapshot

    @property
    def state(self) -> CacheState:
        return self._snapshot.state

    @property
    def last_updated(self) -> datetime | None:
        """Time of the last successful refresh, or None if never populated."""
        return self._snapshot.fetched_at

    async def refresh(self) -> CacheSnapshot:
        """Replace the snapshot with a fresh catalog.

        Raises:
            UpstreamError: The fetch failed; the previous snapshot is kept.
        """
        try:
            coins = await self._client.fetch_catalog()
        except Exception as e:
            logger.error(f"Error refreshing coin cache: {e!s}")
            raise

        snapshot = CacheSnapshot(
            coins=tuple(coins), fetched_at=datetime.now(timezone.utc)
        )
        self._snapshot = snapshot
        logger.info(
            f"Coin cache refreshed with {len(snapshot.coins)} coins "
            f"at {snapshot.fetched_at.isoformat()}"
        )
        return snapshot

    def get_page(
        self, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
    ) -> list[CoinRecord]:
        """Return the 1-indexed page; pages past the end are empty."""
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        start = (page - 1) * page_size
        return list(self._snapshot.coins[start : start + page_size])

    def total_pages(self, page_size: int = DEFAULT_PAGE_SIZE) -> int:
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        return math.ceil(len(self._snapshot.coins) / page_size)

    def find_by_name_or_symbol(self, names: Iterable[str]) -> list[CoinIdMatch]:
        """Resolve each name or symbol to a coin id.

        Matching is exact after lowercasing, against both ``name`` and
        ``symbol``. When several coins match, the first one in catalog order
        wins.
        """
        coins = self._snapshot.coins
        results = []
        for name in names:
            needle = name.lower()
            match = next(
                (
                    coin
                    for coin in coins
                    if coin.name.lower() == needle or coin.symbol.lower() == needle
                ),
                None,
            )
            results.append(CoinIdMatch(name=name, id=match.id if match else None))
        return results
