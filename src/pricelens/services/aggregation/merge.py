"""Merging of metadata-service market listings with direct venue data."""

from pricelens.constants.pricing import MIN_POOL_LIQUIDITY_USD
from pricelens.constants.scoring import METADATA_POOL_TIER
from pricelens.models.quotes import CexQuote, DexPoolQuote, QuoteSource
from pricelens.models.token import Chain, MarketTicker
from pricelens.services.cex.aggregator import calculate_trust_score, sort_cex_quotes
from pricelens.services.cex.registry import build_trade_url, get_cex_info, normalize_exchange_key
from pricelens.services.dex.pools import calculate_pool_score, sort_pools
from pricelens.services.parsing import is_positive_price

METADATA_DEX_IDENTIFIER = "coingecko"


def metadata_cex_quote(ticker: MarketTicker, symbol: str) -> CexQuote:
    """CEX quote from a metadata market listing (no order book)."""
    tier, name = get_cex_info(ticker.market_name)
    return CexQuote(
        exchange_name=name,
        exchange_key=normalize_exchange_key(ticker.market_name),
        price_usd=ticker.price_usd,
        volume_24h_usd=ticker.volume_usd,
        tier=tier,
        trust_score=calculate_trust_score(ticker.volume_usd, tier, None),
        trade_url=build_trade_url(ticker.market_name, symbol),
        source=QuoteSource.METADATA,
    )


def merge_cex_quotes(
    direct_quotes: list[CexQuote],
    tickers: list[MarketTicker],
    symbol: str,
) -> list[CexQuote]:
    """Deduplicate CEX quotes by normalized exchange key.

    Among metadata listings for the same exchange the higher volume wins.
    A direct exchange quote always replaces a metadata one.

    Returns:
        Merged quotes sorted by tier, trust score and exchange key.
    """
    merged: dict[str, CexQuote] = {}

    for ticker in tickers:
        if not ticker.is_cex or not is_positive_price(ticker.price_usd):
            continue
        quote = metadata_cex_quote(ticker, symbol)
        existing = merged.get(quote.exchange_key)
        if existing is None or (quote.volume_24h_usd or 0.0) > (existing.volume_24h_usd or 0.0):
            merged[quote.exchange_key] = quote

    for quote in direct_quotes:
        key = normalize_exchange_key(quote.exchange_key)
        existing = merged.get(key)
        if (
            existing is not None
            and existing.source == QuoteSource.DIRECT
            and (existing.volume_24h_usd or 0.0) >= (quote.volume_24h_usd or 0.0)
        ):
            continue
        merged[key] = quote

    return sort_cex_quotes(list(merged.values()))


def metadata_pool_quote(ticker: MarketTicker, chain: Chain) -> DexPoolQuote:
    """Pool quote from a metadata DEX listing; volume stands in for liquidity."""
    score = calculate_pool_score(ticker.volume_usd, ticker.volume_usd, METADATA_POOL_TIER, None, 0)
    return DexPoolQuote(
        chain=chain,
        dex_identifier=METADATA_DEX_IDENTIFIER,
        dex_display_name=f"{ticker.market_name} (CG)",
        pair_address=ticker.target_pair_id,
        price_usd=ticker.price_usd,
        liquidity_usd=ticker.volume_usd,
        volume_24h=ticker.volume_usd,
        tier=METADATA_POOL_TIER,
        score=score,
    )


def metadata_pools(tickers: list[MarketTicker], chain: Chain) -> list[DexPoolQuote]:
    return [
        metadata_pool_quote(ticker, chain)
        for ticker in tickers
        if not ticker.is_cex and is_positive_price(ticker.price_usd)
    ]


def merge_dex_pools(
    provider_pools: list[DexPoolQuote], listed_pools: list[DexPoolQuote]
) -> list[DexPoolQuote]:
    """Combine pools, keeping those with at least $100 liquidity."""
    pools = [
        pool
        for pool in [*provider_pools, *listed_pools]
        if pool.liquidity_usd is not None and pool.liquidity_usd >= MIN_POOL_LIQUIDITY_USD
    ]
    return sort_pools(pools)
