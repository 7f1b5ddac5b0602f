"""FastAPI dependencies for dependency injection."""

from typing import Annotated

import structlog
from fastapi import Depends

from pricelens.config.settings import Settings, get_settings
from pricelens.services.aggregation.cache import ResultCache
from pricelens.services.aggregation.orchestrator import PriceAggregator
from pricelens.services.aggregation.search import TokenSearchService
from pricelens.services.coingecko.client import CoinGeckoClient
from pricelens.services.dex.pools import DexPoolAggregator

log = structlog.get_logger(__name__)

# Process-wide singletons
_cache: ResultCache | None = None
_aggregator: PriceAggregator | None = None
_search_service: TokenSearchService | None = None


def get_result_cache() -> ResultCache:
    """Get or create the shared result cache."""
    global _cache
    if _cache is None:
        _cache = ResultCache(max_size=get_settings().result_cache_max_size)
    return _cache


def get_price_aggregator() -> PriceAggregator:
    """Get or create the price aggregator singleton."""
    global _aggregator
    if _aggregator is None:
        _aggregator = PriceAggregator(cache=get_result_cache())
    return _aggregator


def get_search_service() -> TokenSearchService:
    """Get or create the token search service singleton."""
    global _search_service
    if _search_service is None:
        _search_service = TokenSearchService(
            metadata_client=CoinGeckoClient(),
            dex_aggregator=DexPoolAggregator(),
            cache=get_result_cache(),
        )
    return _search_service


async def close_services() -> None:
    """Close provider clients held by the singletons."""
    global _aggregator, _search_service
    if _aggregator is not None:
        await _aggregator.close()
        _aggregator = None
    if _search_service is not None:
        await _search_service.close()
        _search_service = None
    log.info("services_closed")


def reset_services() -> None:
    """Drop all singletons (for testing)."""
    global _cache, _aggregator, _search_service
    _cache = None
    _aggregator = None
    _search_service = None


SettingsDep = Annotated[Settings, Depends(get_settings)]
AggregatorDep = Annotated[PriceAggregator, Depends(get_price_aggregator)]
SearchServiceDep = Annotated[TokenSearchService, Depends(get_search_service)]
