"""Per-venue price quotes for centralized exchanges and DEX pools."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from pricelens.models.token import Chain

Tier = Literal[1, 2, 3]


class QuoteSource(str, Enum):
    """Where a CEX quote came from."""

    DIRECT = "direct"  # exchange ticker endpoint
    METADATA = "metadata"  # metadata service market listing


class CexQuote(BaseModel):
    """Price of the token on one centralized exchange.

    Attributes:
        exchange_name: Display name, e.g. "Gate.io".
        exchange_key: Normalized identifier used for tiers and dedup.
        spread_percent: (ask - bid) / bid * 100 when the book is known.
        tier: Static trust tier of the exchange.
        trust_score: 0-100 blend of volume, tier and spread.
    """

    exchange_name: str
    exchange_key: str
    price_usd: float | None = None
    volume_24h_usd: float | None = None
    bid: float | None = None
    ask: float | None = None
    spread_percent: float | None = None
    price_change_24h_percent: float | None = None
    tier: Tier = 3
    trust_score: float = Field(default=0.0, ge=0.0, le=100.0)
    trade_url: str | None = None
    source: QuoteSource = QuoteSource.DIRECT


class PriceChange(BaseModel):
    """Percent price change over rolling windows."""

    h1: float | None = None
    h6: float | None = None
    h24: float | None = None


class TransactionCounts(BaseModel):
    """Swap counts over the last 24 hours."""

    buys: int = 0
    sells: int = 0
    total: int = 0


class PoolToken(BaseModel):
    """One side of a trading pair."""

    address: str = ""
    symbol: str = ""
    name: str = ""


class DexPoolQuote(BaseModel):
    """Price and activity of one on-chain liquidity pool.

    ``pool_age_hours`` is computed against the wall clock when the quote is
    built, so it differs between requests.
    """

    chain: Chain
    dex_identifier: str
    dex_display_name: str
    pair_address: str
    pair_url: str | None = None
    price_usd: float | None = None
    liquidity_usd: float | None = None
    volume_24h: float | None = None
    price_change: PriceChange = Field(default_factory=PriceChange)
    transactions_24h: TransactionCounts = Field(default_factory=TransactionCounts)
    pool_created_at: datetime | None = None
    pool_age_hours: float | None = None
    fully_diluted_valuation: float | None = None
    base_token: PoolToken = Field(default_factory=PoolToken)
    quote_token: PoolToken = Field(default_factory=PoolToken)
    tier: Tier = 3
    score: float = Field(default=0.0, ge=0.0, le=100.0)
