"""Pydantic models for CoinGecko coin-by-contract responses.

Only the fields PriceLens reads are modeled; everything else is ignored.

API Documentation: https://docs.coingecko.com/reference/coins-contract-address
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class CoinImage(BaseModel):
    """Image URLs in several sizes."""

    thumb: str | None = None
    small: str | None = None
    large: str | None = None


class CoinMarketData(BaseModel):
    """Market data block; ``current_price`` maps currency -> price."""

    current_price: dict[str, Any] = Field(default_factory=dict)


class CoinTickerMarket(BaseModel):
    """Market (venue) a ticker trades on."""

    name: str = ""
    identifier: str | None = None


class CoinTicker(BaseModel):
    """One market listing of the coin.

    ``is_anomaly`` and ``is_stale`` stay None when CoinGecko omits them so
    the caller can tell "not flagged" from "unknown".
    """

    base: str | None = None
    target: str | None = None
    market: CoinTickerMarket = Field(default_factory=CoinTickerMarket)
    converted_last: dict[str, Any] = Field(default_factory=dict)
    converted_volume: dict[str, Any] = Field(default_factory=dict)
    is_anomaly: bool | None = None
    is_stale: bool | None = None

    @field_validator("market", "converted_last", "converted_volume", mode="before")
    @classmethod
    def default_missing_block(cls, v: Any) -> Any:
        return {} if v is None else v


class CoinResponse(BaseModel):
    """Response of ``/coins/{platform}/contract/{address}``.

    Tickers are parsed one by one by the client so a single malformed
    listing does not discard the coin.
    """

    id: str = ""
    name: str = ""
    symbol: str = ""
    image: CoinImage | None = None
    market_data: CoinMarketData | None = None

    @field_validator("id", "name", "symbol", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        return "" if v is None else str(v)
