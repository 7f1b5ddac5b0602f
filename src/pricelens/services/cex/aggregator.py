"""CEX aggregator: concurrent ticker fan-out, trust scoring and ranking."""

import asyncio
from collections.abc import Sequence

import structlog

from pricelens.config import get_settings
from pricelens.constants.scoring import (
    CEX_SPREAD_PENALTY_FACTOR,
    CEX_SPREAD_WEIGHT,
    CEX_TIER_WEIGHT,
    CEX_UNKNOWN_SPREAD_SCORE,
    CEX_VOLUME_DIVISOR_USD,
    CEX_VOLUME_WEIGHT,
    MAX_COMPONENT_SCORE,
    TIER_SCORES,
)
from pricelens.models.quotes import CexQuote, QuoteSource
from pricelens.services.cex.exchanges import CexTickerClient, default_exchange_clients
from pricelens.services.cex.models import RawCexTicker
from pricelens.services.cex.registry import build_trade_url, get_cex_info
from pricelens.services.parsing import is_positive_price

log = structlog.get_logger(__name__)


def calculate_trust_score(
    volume_24h_usd: float | None,
    tier: int,
    spread_percent: float | None,
) -> float:
    """Blend volume, tier and spread into a 0-100 trust score.

    Volume saturates at $1B/24h; spread costs 1 point per 0.001% and an
    unknown spread scores neutral 50.
    """
    volume_score = min((volume_24h_usd or 0.0) / CEX_VOLUME_DIVISOR_USD, MAX_COMPONENT_SCORE)
    volume_score = max(volume_score, 0.0)
    tier_score = TIER_SCORES.get(tier, TIER_SCORES[3])
    if spread_percent is not None:
        spread_score = min(
            max(0.0, MAX_COMPONENT_SCORE - spread_percent * CEX_SPREAD_PENALTY_FACTOR),
            MAX_COMPONENT_SCORE,
        )
    else:
        spread_score = CEX_UNKNOWN_SPREAD_SCORE

    score = (
        volume_score * CEX_VOLUME_WEIGHT
        + tier_score * CEX_TIER_WEIGHT
        + spread_score * CEX_SPREAD_WEIGHT
    )
    return min(score, MAX_COMPONENT_SCORE)


def build_cex_quote(exchange: str, ticker: RawCexTicker, symbol: str) -> CexQuote:
    """Turn a direct exchange ticker into a scored quote."""
    tier, name = get_cex_info(exchange)
    spread = ticker.spread_percent
    return CexQuote(
        exchange_name=name,
        exchange_key=exchange,
        price_usd=ticker.last_price,
        volume_24h_usd=ticker.quote_volume_24h,
        bid=ticker.bid,
        ask=ticker.ask,
        spread_percent=spread,
        price_change_24h_percent=ticker.price_change_24h_percent,
        tier=tier,
        trust_score=calculate_trust_score(ticker.quote_volume_24h, tier, spread),
        trade_url=build_trade_url(exchange, symbol),
        source=QuoteSource.DIRECT,
    )


def sort_cex_quotes(quotes: Sequence[CexQuote]) -> list[CexQuote]:
    """Order by tier, then trust score descending, then exchange key."""
    return sorted(quotes, key=lambda q: (q.tier, -q.trust_score, q.exchange_key))


class CexAggregator:
    """Fetches a symbol from every configured exchange concurrently.

    Each exchange call is bounded by its own timeout and a failure of one
    exchange never affects the others.
    """

    def __init__(
        self,
        clients: Sequence[CexTickerClient] | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize aggregator.

        Args:
            clients: Exchange clients; defaults to all supported exchanges.
            timeout: Per-exchange timeout in seconds; defaults to settings.
        """
        self.clients = list(clients) if clients is not None else default_exchange_clients()
        self.timeout = timeout or get_settings().provider_timeout_seconds

    async def fetch_quotes(self, symbol: str) -> list[CexQuote]:
        """Fetch, score and rank CEX quotes for a trading symbol.

        Args:
            symbol: Base asset symbol, e.g. "PEPE" (quote is USDT).

        Returns:
            Quotes with a positive finite price, sorted by tier then trust score.
        """
        if not symbol.strip():
            return []

        results = await asyncio.gather(
            *(self._fetch_one(client, symbol) for client in self.clients),
            return_exceptions=True,
        )

        quotes = []
        for client, result in zip(self.clients, results, strict=True):
            if isinstance(result, BaseException):
                log.warning(
                    "cex_fetch_failed",
                    exchange=client.exchange_key,
                    error=str(result) or type(result).__name__,
                )
                continue
            if result is None or not is_positive_price(result.last_price):
                continue
            quotes.append(build_cex_quote(client.exchange_key, result, symbol))

        log.info(
            "cex_quotes_fetched",
            symbol=symbol,
            exchanges=len(self.clients),
            quotes=len(quotes),
        )
        return sort_cex_quotes(quotes)

    async def _fetch_one(self, client: CexTickerClient, symbol: str) -> RawCexTicker | None:
        try:
            return await asyncio.wait_for(client.fetch_ticker(symbol), timeout=self.timeout)
        except TimeoutError:
            log.warning("cex_fetch_timeout", exchange=client.exchange_key, timeout=self.timeout)
            return None

    async def close(self) -> None:
        """Close all exchange clients."""
        for client in self.clients:
            await client.close()
