"""Cross-venue pricing models: venues, arbitrage and price impact."""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

from pricelens.models.quotes import CexQuote, DexPoolQuote, Tier
from pricelens.models.security import PoolRiskAssessment, TokenSecurityReport
from pricelens.models.token import Chain, TokenDisplay


class VenueType(str, Enum):
    """Kind of trading venue."""

    DEX = "dex"
    CEX = "cex"


class TradeDirection(str, Enum):
    """Side of a hypothetical trade."""

    BUY = "buy"
    SELL = "sell"


class VenueRef(BaseModel):
    """Reference to the venue on one leg of a trade."""

    source_name: str
    venue_type: VenueType
    price: float
    chain: Chain | None = None
    url: str | None = None


class ArbitrageOpportunity(BaseModel):
    """Buy-low / sell-high pair with its estimated execution cost."""

    buy_from: VenueRef
    sell_to: VenueRef
    spread_percent: float
    estimated_fee_cost_usd: float | None = None
    net_profit_percent: float | None = None
    is_viable: bool = False


class BestPrices(BaseModel):
    """Cheapest and most expensive eligible venue."""

    best_buy: VenueRef | None = None
    best_sell: VenueRef | None = None
    spread_percent: float | None = None


class PriceImpactEstimate(BaseModel):
    """Estimated execution of a notional trade on one venue.

    ``output_amount`` is tokens received for a buy and proceeds for a sell.
    """

    venue_name: str
    venue_type: VenueType
    tier: Tier
    price: float
    liquidity_usd: float | None = None
    price_impact_percent: float
    effective_price: float
    output_amount: float
    url: str | None = None


class PriceImpactReport(BaseModel):
    """Venues ranked by trade output for one amount and direction."""

    direction: TradeDirection
    amount: float
    estimates: list[PriceImpactEstimate] = Field(default_factory=list)
    best: PriceImpactEstimate | None = None
    worst: PriceImpactEstimate | None = None
    efficiency_gap_percent: float | None = None


class AggregatedPriceView(BaseModel):
    """Everything known about one token's price across venues.

    Assembled once per request and cached wholesale; never partially updated.
    """

    token: TokenDisplay
    reference_price_usd: float | None = None
    dex_pools: list[DexPoolQuote] = Field(default_factory=list)
    cex_prices: list[CexQuote] = Field(default_factory=list)
    security: TokenSecurityReport | None = None
    primary_pool_risk: PoolRiskAssessment | None = None
    arbitrage: list[ArbitrageOpportunity] = Field(default_factory=list)
    best_buy: VenueRef | None = None
    best_sell: VenueRef | None = None
    price_spread_percent: float | None = None
    updated_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
