"""Token lookup by contract address and free-text search."""

import structlog

from pricelens.config import Settings, get_settings
from pricelens.constants.chains import SUPPORTED_CHAINS
from pricelens.core.exceptions import TokenNotFoundError
from pricelens.models.token import Chain, DexTokenMatch, TokenIdentity, TokenSearchResult
from pricelens.services.aggregation.cache import ResultCache
from pricelens.services.coingecko.client import CoinGeckoClient
from pricelens.services.dex.pools import DexPoolAggregator
from pricelens.services.dexscreener.client import DexScreenerClient

log = structlog.get_logger(__name__)

SEARCH_CACHE_PREFIX = "search"
MAX_TEXT_RESULTS = 20
MIN_QUERY_LENGTH = 2


class TokenSearchService:
    """Resolves tokens, preferring metadata and falling back to DEX pools."""

    def __init__(
        self,
        metadata_client: CoinGeckoClient | None = None,
        dex_aggregator: DexPoolAggregator | None = None,
        pair_client: DexScreenerClient | None = None,
        cache: ResultCache | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.metadata_client = metadata_client or CoinGeckoClient()
        self.dex_aggregator = dex_aggregator or DexPoolAggregator()
        self.pair_client = pair_client or self.dex_aggregator.client
        self.cache = cache or ResultCache(max_size=self.settings.result_cache_max_size)

    async def search(self, chain: str | None, address: str | None) -> TokenSearchResult:
        """Resolve a token by chain and contract address.

        Args:
            chain: Chain identifier.
            address: Contract address.

        Returns:
            Search result, possibly served from cache.

        Raises:
            ValidationError: Invalid address or chain.
            TokenNotFoundError: Neither metadata nor any pool knows the token.
        """
        identity = TokenIdentity.parse(chain, address)
        cache_key = identity.cache_key(SEARCH_CACHE_PREFIX)

        cached = await self.cache.get(cache_key)
        if cached is not None:
            return cached

        result = await self._resolve(identity)
        await self.cache.set(cache_key, result, self.settings.search_cache_ttl_ms)
        return result

    async def _resolve(self, identity: TokenIdentity) -> TokenSearchResult:
        metadata = await self.metadata_client.fetch_token_metadata(
            identity.chain, identity.contract_address
        )
        if metadata is not None:
            return TokenSearchResult(
                id=metadata.id,
                name=metadata.name,
                symbol=metadata.symbol,
                chain=identity.chain,
                address=identity.contract_address,
                image_url=metadata.image_url,
                price_usd=metadata.price_usd,
            )

        pools = await self.dex_aggregator.fetch_pools(identity.contract_address, identity.chain)
        if not pools:
            log.info(
                "token_search_not_found",
                chain=identity.chain.value,
                address=identity.contract_address,
            )
            raise TokenNotFoundError(identity.chain.value, identity.contract_address)

        top = pools[0]
        log.debug("token_search_pool_fallback", pair_address=top.pair_address)
        return TokenSearchResult(
            id=f"dex-{top.base_token.address}",
            name=top.base_token.name or "Unknown",
            symbol=top.base_token.symbol or "???",
            chain=identity.chain,
            address=identity.contract_address,
            price_usd=top.price_usd,
        )

    async def search_text(self, query: str) -> list[DexTokenMatch]:
        """Find tokens by name or symbol across supported chains.

        Args:
            query: Free-text query; shorter than two characters yields nothing.

        Returns:
            Up to 20 distinct tokens in provider relevance order.
        """
        query = query.strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []

        pairs = await self.pair_client.search_pairs(query)

        matches: list[DexTokenMatch] = []
        seen: set[str] = set()
        for pair in pairs:
            if pair.chain_id not in SUPPORTED_CHAINS or not pair.base_token.address:
                continue
            address = pair.base_token.address.lower()
            key = f"{pair.chain_id}:{address}"
            if key in seen:
                continue
            seen.add(key)
            matches.append(
                DexTokenMatch(
                    address=address,
                    chain=Chain(pair.chain_id),
                    name=pair.base_token.name or "",
                    symbol=pair.base_token.symbol or "",
                    price_usd=pair.price_usd,
                )
            )
            if len(matches) >= MAX_TEXT_RESULTS:
                break

        log.debug("token_text_search", query=query, pairs=len(pairs), matches=len(matches))
        return matches

    async def close(self) -> None:
        await self.metadata_client.close()
        await self.dex_aggregator.close()
        if self.pair_client is not self.dex_aggregator.client:
            await self.pair_client.close()
