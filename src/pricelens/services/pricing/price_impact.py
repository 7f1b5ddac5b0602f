"""Simplified price-impact model for a notional trade across venues.

DEX impact follows a constant-product approximation against half of the
pool liquidity. CEX order books are not modeled: impact is zero up to a
notional threshold and grows linearly above it.
"""

from pricelens.constants.pricing import (
    CEX_IMPACT_DIVISOR,
    CEX_IMPACT_FREE_NOTIONAL_USD,
    EMPTY_POOL_PRICE_IMPACT_PERCENT,
    MAX_DEX_PRICE_IMPACT_PERCENT,
)
from pricelens.models.pricing import (
    PriceImpactEstimate,
    PriceImpactReport,
    TradeDirection,
    VenueType,
)
from pricelens.models.quotes import CexQuote, DexPoolQuote
from pricelens.services.parsing import is_positive_price


def dex_price_impact(amount: float, liquidity_usd: float) -> float:
    """Impact percent of a trade against a pool, capped at 50."""
    if liquidity_usd <= 0:
        return EMPTY_POOL_PRICE_IMPACT_PERCENT
    impact = amount / (liquidity_usd / 2) * 100
    return min(impact, MAX_DEX_PRICE_IMPACT_PERCENT)


def cex_price_impact(amount: float) -> float:
    """Impact percent on a centralized exchange."""
    if amount <= CEX_IMPACT_FREE_NOTIONAL_USD:
        return 0.0
    return amount / CEX_IMPACT_DIVISOR


def effective_price(price: float, impact_percent: float, direction: TradeDirection) -> float:
    if direction == TradeDirection.BUY:
        return price * (1 + impact_percent / 100)
    return price * (1 - impact_percent / 100)


def trade_output(amount: float, price: float, direction: TradeDirection) -> float:
    """Tokens received for a buy, proceeds for a sell."""
    if direction == TradeDirection.BUY:
        return amount / price if price > 0 else 0.0
    return amount * price


def _estimate(
    *,
    venue_name: str,
    venue_type: VenueType,
    tier: int,
    price: float,
    liquidity_usd: float | None,
    impact: float,
    amount: float,
    direction: TradeDirection,
    url: str | None,
) -> PriceImpactEstimate:
    executed = effective_price(price, impact, direction)
    return PriceImpactEstimate(
        venue_name=venue_name,
        venue_type=venue_type,
        tier=tier,
        price=price,
        liquidity_usd=liquidity_usd,
        price_impact_percent=impact,
        effective_price=executed,
        output_amount=trade_output(amount, executed, direction),
        url=url,
    )


def estimate_price_impact(
    amount: float,
    direction: TradeDirection,
    dex_pools: list[DexPoolQuote],
    cex_quotes: list[CexQuote],
) -> PriceImpactReport:
    """Estimate execution of ``amount`` on every priced venue.

    Args:
        amount: Trade size (USD for buys, tokens for sells).
        direction: Buy or sell.
        dex_pools: Pools; those without price or positive liquidity are skipped.
        cex_quotes: CEX quotes; those without a price are skipped.

    Returns:
        Report with venues ranked by output descending, plus best, worst and
        the efficiency gap between them.
    """
    report = PriceImpactReport(direction=direction, amount=amount)
    if amount <= 0:
        return report

    estimates = []
    for pool in dex_pools:
        if not is_positive_price(pool.price_usd) or not pool.liquidity_usd or pool.liquidity_usd <= 0:
            continue
        estimates.append(
            _estimate(
                venue_name=pool.dex_display_name,
                venue_type=VenueType.DEX,
                tier=pool.tier,
                price=pool.price_usd,
                liquidity_usd=pool.liquidity_usd,
                impact=dex_price_impact(amount, pool.liquidity_usd),
                amount=amount,
                direction=direction,
                url=pool.pair_url,
            )
        )

    for quote in cex_quotes:
        if not is_positive_price(quote.price_usd):
            continue
        estimates.append(
            _estimate(
                venue_name=quote.exchange_name,
                venue_type=VenueType.CEX,
                tier=quote.tier,
                price=quote.price_usd,
                liquidity_usd=quote.volume_24h_usd,
                impact=cex_price_impact(amount),
                amount=amount,
                direction=direction,
                url=quote.trade_url,
            )
        )

    estimates.sort(key=lambda e: (-e.output_amount, e.venue_type.value, e.venue_name))
    report.estimates = estimates
    if not estimates:
        return report

    report.best = estimates[0]
    report.worst = estimates[-1]
    if len(estimates) >= 2 and report.worst.output_amount > 0:
        report.efficiency_gap_percent = (
            (report.best.output_amount - report.worst.output_amount)
            / report.worst.output_amount
            * 100
        )
    return report
