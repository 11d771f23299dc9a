"""Pydantic models for CoinGecko records and tool arguments.

Records mirror the shapes CoinGecko returns. Argument models define the
validation rules for each tool; they run in strict mode so that a string is
never silently coerced into a number.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

# Numbers pass through untouched: ints stay ints, floats stay floats.
Number = Union[int, float]

HistoricalInterval = Literal["5m", "hourly", "daily"]
OHLCInterval = Literal["daily", "hourly"]

MAX_PAGE_SIZE = 1000
DEFAULT_PAGE_SIZE = 100
# 9999-12-31T23:59:59Z, the last second datetime can render.
MAX_UNIX_SECONDS = 253402300799


# =============================================================================
# Records
# =============================================================================


class CoinRecord(BaseModel):
    """One asset from the CoinGecko catalog."""

    id: str = Field(description="Stable CoinGecko identifier")
    symbol: str = Field(description="Ticker symbol, not unique")
    name: str = Field(description="Display name, not unique")
    platforms: dict[str, str | None] | None = Field(
        default=None,
        description="Contract address per chain, for tokens only",
    )

    model_config = ConfigDict(frozen=True)


class CacheState(str, Enum):
    """Lifecycle state of the coin cache."""

    EMPTY = "empty"  # No successful refresh yet
    POPULATED = "populated"  # Snapshot present, possibly stale


class CacheSnapshot(BaseModel):
    """Immutable copy of the catalog at a point in time."""

    coins: tuple[CoinRecord, ...] = ()
    fetched_at: datetime | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def state(self) -> CacheState:
        if self.fetched_at is None:
            return CacheState.EMPTY
        return CacheState.POPULATED


class HistoricalSeries(BaseModel):
    """Price, market cap and volume series, each a list of (timestamp, value)."""

    prices: list[tuple[Number, Number | None]] = Field(default_factory=list)
    market_caps: list[tuple[Number, Number | None]] = Field(default_factory=list)
    total_volumes: list[tuple[Number, Number | None]] = Field(default_factory=list)


class OHLCBar(BaseModel):
    """One candlestick."""

    timestamp: Number
    open: Number
    high: Number
    low: Number
    close: Number

    @classmethod
    def from_row(cls, row: list[Number]) -> OHLCBar:
        """Build a bar from CoinGecko's positional ``[t, o, h, l, c]`` row."""
        timestamp, open_, high, low, close = row
        return cls(timestamp=timestamp, open=open_, high=high, low=low, close=close)


class CoinIdMatch(BaseModel):
    """Result of resolving one name or symbol to a coin id."""

    name: str
    id: str | None


class Pagination(BaseModel):
    """Pagination metadata for a page of coins."""

    current_page: int = Field(serialization_alias="currentPage")
    total_pages: int = Field(serialization_alias="totalPages")
    page_size: int = Field(serialization_alias="pageSize")


# =============================================================================
# Tool arguments
# =============================================================================


class _Arguments(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True)


class GetCoinsArguments(_Arguments):
    page: int = Field(default=1, ge=1, description="Page number (starts from 1)")
    page_size: int = Field(
        default=DEFAULT_PAGE_SIZE,
        ge=1,
        le=MAX_PAGE_SIZE,
        alias="pageSize",
        description="Number of items per page (max 1000)",
    )


class FindCoinIdsArguments(_Arguments):
    coins: list[str] = Field(
        min_length=1, description="Array of coin names or symbols to look up"
    )


class RefreshCacheArguments(_Arguments):
    pass


class _RangeArguments(_Arguments):
    id: str = Field(description="CoinGecko coin ID")
    vs_currency: str = Field(description="Target currency (e.g., 'usd', 'eur')")
    from_: int = Field(
        alias="from",
        ge=0,
        le=MAX_UNIX_SECONDS,
        description="Start timestamp (UNIX)",
    )
    to: int = Field(ge=0, le=MAX_UNIX_SECONDS, description="End timestamp (UNIX)")


class GetHistoricalDataArguments(_RangeArguments):
    interval: HistoricalInterval | None = Field(
        default=None, description="Data interval (optional)"
    )


class GetOHLCDataArguments(_RangeArguments):
    interval: OHLCInterval = Field(
        description="Data interval - daily (up to 180 days) or hourly (up to 31 days)"
    )
