"""Pydantic models for DexScreener API responses.

This module defines data models for parsing DexScreener API responses.
Numbers arrive either as JSON numbers or strings; fields that fail to
parse are treated as missing rather than rejecting the pair.

API Documentation: https://docs.dexscreener.com/api/reference
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pricelens.services.parsing import parse_float


class PairTokenInfo(BaseModel):
    """Token information within a trading pair.

    Attributes:
        address: Token contract/mint address.
        name: Token name.
        symbol: Token ticker symbol.
    """

    address: str = ""
    name: str | None = None
    symbol: str | None = None


class WindowedNumbers(BaseModel):
    """Values reported per rolling window (volume, price change)."""

    h24: float | None = None
    h6: float | None = None
    h1: float | None = None
    m5: float | None = None

    @field_validator("h24", "h6", "h1", "m5", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> float | None:
        return parse_float(v)


class TxnCounts(BaseModel):
    """Buy and sell counts for one window."""

    buys: int = 0
    sells: int = 0

    @field_validator("buys", "sells", mode="before")
    @classmethod
    def coerce_count(cls, v: Any) -> int:
        number = parse_float(v)
        return int(number) if number is not None else 0


class TxnWindows(BaseModel):
    """Transaction counts per rolling window."""

    h24: TxnCounts = Field(default_factory=TxnCounts)


class LiquidityInfo(BaseModel):
    """Liquidity information.

    Attributes:
        usd: Total liquidity in USD.
        base: Liquidity in base token.
        quote: Liquidity in quote token.
    """

    usd: float | None = None
    base: float | None = None
    quote: float | None = None

    @field_validator("usd", "base", "quote", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> float | None:
        return parse_float(v)


class TokenPair(BaseModel):
    """Trading pair information from token lookup or search.

    Attributes:
        chain_id: Blockchain identifier (e.g. "ethereum", "solana").
        dex_id: DEX identifier (e.g. "uniswap", "raydium").
        pair_address: Trading pair contract address.
        url: DexScreener page for the pair.
        base_token: Base token information.
        quote_token: Quote token information.
        price_usd: Current price in USD.
        pair_created_at: Pair creation timestamp (Unix milliseconds).
    """

    model_config = ConfigDict(populate_by_name=True)

    chain_id: str = Field(alias="chainId")
    dex_id: str = Field(default="", alias="dexId")
    pair_address: str = Field(default="", alias="pairAddress")
    url: str | None = None
    base_token: PairTokenInfo = Field(default_factory=PairTokenInfo, alias="baseToken")
    quote_token: PairTokenInfo = Field(default_factory=PairTokenInfo, alias="quoteToken")
    price_usd: float | None = Field(default=None, alias="priceUsd")
    txns: TxnWindows = Field(default_factory=TxnWindows)
    volume: WindowedNumbers = Field(default_factory=WindowedNumbers)
    price_change: WindowedNumbers = Field(
        default_factory=WindowedNumbers, alias="priceChange"
    )
    liquidity: LiquidityInfo = Field(default_factory=LiquidityInfo)
    fdv: float | None = None
    market_cap: float | None = Field(default=None, alias="marketCap")
    pair_created_at: int | None = Field(default=None, alias="pairCreatedAt")

    @field_validator("price_usd", "fdv", "market_cap", mode="before")
    @classmethod
    def coerce_number(cls, v: Any) -> float | None:
        return parse_float(v)

    @field_validator("pair_created_at", mode="before")
    @classmethod
    def coerce_timestamp(cls, v: Any) -> int | None:
        number = parse_float(v)
        return int(number) if number else None

    @field_validator("txns", "volume", "price_change", "liquidity", mode="before")
    @classmethod
    def default_missing_block(cls, v: Any) -> Any:
        return {} if v is None else v
