"""Best-price and arbitrage detection across DEX pools and CEX quotes.

Prices are compared in USD. Ties are broken by venue identity so results
never depend on provider completion order.
"""

from collections import defaultdict
from dataclasses import dataclass

from pricelens.constants.chains import DEFAULT_GAS_COST_USD, ESTIMATED_GAS_COST_USD
from pricelens.constants.pricing import (
    ARBITRAGE_NOTIONAL_USD,
    BRIDGE_FEE_USD,
    CEX_WITHDRAWAL_FEE_USD,
    MIN_ARBITRAGE_LIQUIDITY_USD,
    MIN_BEST_PRICE_LIQUIDITY_USD,
    MIN_SPREAD_THRESHOLD_PERCENT,
    MIN_VIABLE_PROFIT_PERCENT,
    SAME_CHAIN_INCLUSION_FACTOR,
)
from pricelens.models.pricing import ArbitrageOpportunity, BestPrices, VenueRef, VenueType
from pricelens.models.quotes import CexQuote, DexPoolQuote
from pricelens.models.token import Chain
from pricelens.services.parsing import is_positive_price


@dataclass(frozen=True)
class PricedVenue:
    """A venue with a usable price plus a stable identity for tie-breaks."""

    ref: VenueRef
    identity: str

    @property
    def price(self) -> float:
        return self.ref.price

    def sort_key(self) -> tuple[float, str, str]:
        return (self.ref.price, self.ref.venue_type.value, self.identity)


def dex_venue(pool: DexPoolQuote) -> PricedVenue:
    return PricedVenue(
        ref=VenueRef(
            source_name=f"{pool.dex_display_name} ({pool.chain.value})",
            venue_type=VenueType.DEX,
            price=pool.price_usd,
            chain=pool.chain,
            url=pool.pair_url,
        ),
        identity=f"{pool.chain.value}:{pool.pair_address}",
    )


def cex_venue(quote: CexQuote) -> PricedVenue:
    return PricedVenue(
        ref=VenueRef(
            source_name=quote.exchange_name,
            venue_type=VenueType.CEX,
            price=quote.price_usd,
            url=quote.trade_url,
        ),
        identity=quote.exchange_key,
    )


def collect_venues(
    dex_pools: list[DexPoolQuote],
    cex_quotes: list[CexQuote],
    min_dex_liquidity: float,
) -> list[PricedVenue]:
    """Priced venues sorted by price, DEX pools filtered by liquidity."""
    venues = [
        dex_venue(pool)
        for pool in dex_pools
        if is_positive_price(pool.price_usd)
        and pool.liquidity_usd is not None
        and pool.liquidity_usd >= min_dex_liquidity
    ]
    venues.extend(cex_venue(quote) for quote in cex_quotes if is_positive_price(quote.price_usd))
    return sorted(venues, key=PricedVenue.sort_key)


def spread_percent(buy_price: float, sell_price: float) -> float:
    """Relative gap of the sell price over the buy price, in percent."""
    return (sell_price - buy_price) * 100 / buy_price


def gas_cost(chain: Chain | None) -> float:
    """Estimated USD gas cost of one swap on a chain."""
    if chain is None:
        return DEFAULT_GAS_COST_USD
    return ESTIMATED_GAS_COST_USD.get(chain.value, DEFAULT_GAS_COST_USD)


def estimate_fee_cost(buy: VenueRef, sell: VenueRef) -> float:
    """Execution cost of a round trip between two venues.

    Gas is charged per DEX leg, a bridge fee when the legs sit on different
    chains and a withdrawal fee when either leg is a CEX.
    """
    cost = 0.0
    for leg in (buy, sell):
        if leg.venue_type == VenueType.DEX:
            cost += gas_cost(leg.chain)
    if buy.chain is not None and sell.chain is not None and buy.chain != sell.chain:
        cost += BRIDGE_FEE_USD
    if VenueType.CEX in (buy.venue_type, sell.venue_type):
        cost += CEX_WITHDRAWAL_FEE_USD
    return cost


def net_profit_percent(buy_price: float, sell_price: float, fee_cost: float) -> float:
    """Net profit of a fixed-notional round trip after fees, in percent."""
    proceeds = ARBITRAGE_NOTIONAL_USD / buy_price * sell_price
    net_profit = proceeds - ARBITRAGE_NOTIONAL_USD - fee_cost
    return net_profit / ARBITRAGE_NOTIONAL_USD * 100


def is_viable_profit(net_percent: float) -> bool:
    return net_percent >= MIN_VIABLE_PROFIT_PERCENT


def build_opportunity(buy: PricedVenue, sell: PricedVenue, fee_cost: float) -> ArbitrageOpportunity:
    net = net_profit_percent(buy.price, sell.price, fee_cost)
    return ArbitrageOpportunity(
        buy_from=buy.ref,
        sell_to=sell.ref,
        spread_percent=spread_percent(buy.price, sell.price),
        estimated_fee_cost_usd=fee_cost,
        net_profit_percent=net,
        is_viable=is_viable_profit(net),
    )


def calculate_best_prices(
    dex_pools: list[DexPoolQuote], cex_quotes: list[CexQuote]
) -> BestPrices:
    """Cheapest and most expensive venue with the spread between them.

    Returns an empty result when fewer than two venues qualify.
    """
    venues = collect_venues(dex_pools, cex_quotes, MIN_BEST_PRICE_LIQUIDITY_USD)
    if len(venues) < 2:
        return BestPrices()

    best_buy, best_sell = venues[0], venues[-1]
    return BestPrices(
        best_buy=best_buy.ref,
        best_sell=best_sell.ref,
        spread_percent=spread_percent(best_buy.price, best_sell.price),
    )


def find_arbitrage_opportunities(
    dex_pools: list[DexPoolQuote], cex_quotes: list[CexQuote]
) -> list[ArbitrageOpportunity]:
    """Detect cross-venue and same-chain arbitrage.

    The global pass pairs the cheapest and most expensive venue overall. The
    same-chain pass pairs the extreme pools of each chain, is included at half
    the viability threshold and still reports viability against the full one.

    Returns:
        Opportunities, viable first, then by net profit descending.
    """
    opportunities: list[ArbitrageOpportunity] = []

    venues = collect_venues(dex_pools, cex_quotes, MIN_ARBITRAGE_LIQUIDITY_USD)
    if len(venues) < 2:
        return opportunities

    low, high = venues[0], venues[-1]
    if spread_percent(low.price, high.price) < MIN_SPREAD_THRESHOLD_PERCENT:
        return opportunities

    opportunities.append(build_opportunity(low, high, estimate_fee_cost(low.ref, high.ref)))

    by_chain: dict[Chain, list[PricedVenue]] = defaultdict(list)
    for venue in venues:
        if venue.ref.venue_type == VenueType.DEX and venue.ref.chain is not None:
            by_chain[venue.ref.chain].append(venue)

    inclusion_threshold = MIN_VIABLE_PROFIT_PERCENT * SAME_CHAIN_INCLUSION_FACTOR
    for chain in sorted(by_chain, key=lambda c: c.value):
        pools = by_chain[chain]
        if len(pools) < 2:
            continue
        chain_low, chain_high = pools[0], pools[-1]
        if spread_percent(chain_low.price, chain_high.price) < MIN_SPREAD_THRESHOLD_PERCENT:
            continue
        if chain_low.identity == low.identity and chain_high.identity == high.identity:
            continue

        opportunity = build_opportunity(chain_low, chain_high, gas_cost(chain) * 2)
        if opportunity.net_profit_percent >= inclusion_threshold:
            opportunities.append(opportunity)

    opportunities.sort(key=lambda o: (not o.is_viable, -(o.net_profit_percent or 0.0)))
    return opportunities
