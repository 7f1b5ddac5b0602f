"""Price aggregation orchestrator.

One request runs in two fan-out stages:

1. metadata, DEX pools and the security scan, concurrently
2. CEX tickers, only once the metadata stage resolved a trading symbol

Provider failures degrade to absent data and never abort siblings. The
assembled view is cached wholesale for a short TTL.
"""

import asyncio
import math
from collections.abc import Awaitable
from typing import Any

import structlog

from pricelens.config import Settings, get_settings
from pricelens.core.exceptions import TokenNotFoundError, ValidationError
from pricelens.models.pricing import AggregatedPriceView, PriceImpactReport, TradeDirection
from pricelens.models.quotes import CexQuote, DexPoolQuote
from pricelens.models.security import TokenSecurityReport
from pricelens.models.token import TokenDisplay, TokenIdentity, TokenMetadata
from pricelens.services.aggregation.cache import ResultCache
from pricelens.services.aggregation.merge import merge_cex_quotes, merge_dex_pools, metadata_pools
from pricelens.services.cex.aggregator import CexAggregator
from pricelens.services.coingecko.client import CoinGeckoClient
from pricelens.services.dex.pools import DexPoolAggregator
from pricelens.services.pricing.arbitrage import calculate_best_prices, find_arbitrage_opportunities
from pricelens.services.pricing.price_impact import estimate_price_impact
from pricelens.services.security.assessor import SecurityAssessor, assess_pool_risk

log = structlog.get_logger(__name__)

PRICE_CACHE_PREFIX = "price"
UNKNOWN_TOKEN_NAME = "Unknown token"


def _settled(result: Any, source: str, default: Any) -> Any:
    """Unwrap a gather result, logging and defaulting failures."""
    if isinstance(result, BaseException):
        log.warning("provider_failed", source=source, error=str(result) or type(result).__name__)
        return default
    return result


class PriceAggregator:
    """Builds the aggregated price view of one token."""

    def __init__(
        self,
        metadata_client: CoinGeckoClient | None = None,
        dex_aggregator: DexPoolAggregator | None = None,
        security_assessor: SecurityAssessor | None = None,
        cex_aggregator: CexAggregator | None = None,
        cache: ResultCache | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.metadata_client = metadata_client or CoinGeckoClient()
        self.dex_aggregator = dex_aggregator or DexPoolAggregator()
        self.security_assessor = security_assessor or SecurityAssessor()
        self.cex_aggregator = cex_aggregator or CexAggregator()
        self.cache = cache or ResultCache(max_size=self.settings.result_cache_max_size)

    async def aggregate(self, chain: str | None, address: str | None) -> AggregatedPriceView:
        """Aggregate price, venue and risk data for a token.

        Args:
            chain: Chain identifier, one of the supported chains.
            address: Contract address.

        Returns:
            Aggregated view, possibly served from the short-TTL cache.

        Raises:
            ValidationError: Invalid address or chain (no provider is called).
            TokenNotFoundError: No provider returned any data.
        """
        identity = TokenIdentity.parse(chain, address)
        cache_key = identity.cache_key(PRICE_CACHE_PREFIX)

        cached = await self.cache.get(cache_key)
        if cached is not None:
            log.debug("price_cache_hit", key=cache_key)
            return cached

        view = await self._build_view(identity)
        await self.cache.set(cache_key, view, self.settings.price_cache_ttl_ms)
        return view

    def _bounded(self, call: Awaitable[Any]) -> Awaitable[Any]:
        """Bound a whole provider call by the provider timeout."""
        return asyncio.wait_for(call, timeout=self.settings.provider_timeout_seconds)

    async def _build_view(self, identity: TokenIdentity) -> AggregatedPriceView:
        metadata_result, pools_result, security_result = await asyncio.gather(
            self._bounded(
                self.metadata_client.fetch_token_metadata(identity.chain, identity.contract_address)
            ),
            self._bounded(
                self.dex_aggregator.fetch_pools(identity.contract_address, identity.chain)
            ),
            self._bounded(self.security_assessor.assess(identity)),
            return_exceptions=True,
        )
        metadata: TokenMetadata | None = _settled(metadata_result, "metadata", None)
        provider_pools: list[DexPoolQuote] = _settled(pools_result, "dex_pools", [])
        security: TokenSecurityReport | None = _settled(security_result, "security", None)

        symbol = metadata.symbol if metadata and metadata.symbol else ""
        direct_quotes: list[CexQuote] = []
        if symbol:
            (cex_result,) = await asyncio.gather(
                self.cex_aggregator.fetch_quotes(symbol), return_exceptions=True
            )
            direct_quotes = _settled(cex_result, "cex", [])

        tickers = metadata.tickers if metadata else []
        cex_prices = merge_cex_quotes(direct_quotes, tickers, symbol)
        dex_pools = merge_dex_pools(provider_pools, metadata_pools(tickers, identity.chain))

        if metadata is None and not dex_pools and not cex_prices:
            log.info(
                "token_not_found",
                chain=identity.chain.value,
                address=identity.contract_address,
            )
            raise TokenNotFoundError(identity.chain.value, identity.contract_address)

        best = calculate_best_prices(dex_pools, cex_prices)
        arbitrage = find_arbitrage_opportunities(dex_pools, cex_prices)
        primary_pool_risk = assess_pool_risk(dex_pools[0]) if dex_pools else None

        view = AggregatedPriceView(
            token=self._display(identity, metadata, dex_pools),
            reference_price_usd=metadata.price_usd if metadata else None,
            dex_pools=dex_pools,
            cex_prices=cex_prices,
            security=security,
            primary_pool_risk=primary_pool_risk,
            arbitrage=arbitrage,
            best_buy=best.best_buy,
            best_sell=best.best_sell,
            price_spread_percent=best.spread_percent,
        )
        log.info(
            "price_aggregated",
            chain=identity.chain.value,
            address=identity.contract_address,
            dex_pools=len(dex_pools),
            cex_prices=len(cex_prices),
            arbitrage=len(arbitrage),
            has_security=security is not None,
        )
        return view

    @staticmethod
    def _display(
        identity: TokenIdentity,
        metadata: TokenMetadata | None,
        dex_pools: list[DexPoolQuote],
    ) -> TokenDisplay:
        if metadata is not None:
            name, symbol, image_url = metadata.name, metadata.symbol, metadata.image_url
        elif dex_pools:
            base = dex_pools[0].base_token
            name, symbol, image_url = base.name or UNKNOWN_TOKEN_NAME, base.symbol, None
        else:
            name, symbol, image_url = UNKNOWN_TOKEN_NAME, "", None
        return TokenDisplay(
            name=name,
            symbol=symbol,
            chain=identity.chain,
            address=identity.contract_address,
            image_url=image_url,
        )

    async def estimate_price_impact(
        self,
        chain: str | None,
        address: str | None,
        amount: float,
        direction: TradeDirection,
    ) -> PriceImpactReport:
        """Estimate a trade's execution on every venue of the token.

        Raises:
            ValidationError: Invalid token input or non-positive amount.
            TokenNotFoundError: No provider returned any data.
        """
        if not math.isfinite(amount) or amount <= 0:
            raise ValidationError("Amount must be a positive number.")
        view = await self.aggregate(chain, address)
        return estimate_price_impact(amount, direction, view.dex_pools, view.cex_prices)

    async def close(self) -> None:
        """Close all provider clients."""
        await self.metadata_client.close()
        await self.dex_aggregator.close()
        await self.security_assessor.close()
        await self.cex_aggregator.close()
