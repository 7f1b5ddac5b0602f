"""DEX pool aggregator: tiers, pool age and composite pool scores."""

import re
from collections.abc import Callable
from datetime import UTC, datetime

import structlog

from pricelens.constants.chains import SUPPORTED_CHAINS
from pricelens.constants.exchanges import DEFAULT_TIER, DEX_TIERS
from pricelens.constants.scoring import (
    DEX_ACTIVITY_DIVISOR_TXNS,
    DEX_ACTIVITY_WEIGHT,
    DEX_AGE_DIVISOR_HOURS,
    DEX_AGE_WEIGHT,
    DEX_LIQUIDITY_DIVISOR_USD,
    DEX_LIQUIDITY_WEIGHT,
    DEX_TIER_WEIGHT,
    DEX_UNKNOWN_AGE_SCORE,
    DEX_VOLUME_DIVISOR_USD,
    DEX_VOLUME_WEIGHT,
    MAX_COMPONENT_SCORE,
    TIER_SCORES,
)
from pricelens.models.quotes import (
    DexPoolQuote,
    PoolToken,
    PriceChange,
    TransactionCounts,
)
from pricelens.models.token import Chain
from pricelens.services.dexscreener.client import DexScreenerClient
from pricelens.services.dexscreener.models import TokenPair

log = structlog.get_logger(__name__)

_DEX_ID_SEPARATORS = re.compile(r"[-\s]")


def get_dex_tier(dex_id: str) -> int:
    """Tier of a DEX identifier; unknown DEXes are tier 3."""
    normalized = _DEX_ID_SEPARATORS.sub("_", dex_id.strip().lower())
    return DEX_TIERS.get(normalized, DEFAULT_TIER)


def _capped(value: float) -> float:
    return min(max(value, 0.0), MAX_COMPONENT_SCORE)


def calculate_pool_score(
    liquidity_usd: float | None,
    volume_24h: float | None,
    tier: int,
    pool_age_hours: float | None,
    total_txns_24h: int,
) -> float:
    """Composite 0-100 pool score.

    Liquidity saturates at $100M, volume at $50M/24h, age at 72,000 hours
    and activity at 10,000 swaps/24h. Unknown age scores neutral 50.
    """
    liquidity_score = _capped((liquidity_usd or 0.0) / DEX_LIQUIDITY_DIVISOR_USD)
    volume_score = _capped((volume_24h or 0.0) / DEX_VOLUME_DIVISOR_USD)
    tier_score = TIER_SCORES.get(tier, TIER_SCORES[DEFAULT_TIER])
    if pool_age_hours is not None:
        age_score = _capped(pool_age_hours / DEX_AGE_DIVISOR_HOURS)
    else:
        age_score = DEX_UNKNOWN_AGE_SCORE
    activity_score = _capped(total_txns_24h / DEX_ACTIVITY_DIVISOR_TXNS)

    score = (
        liquidity_score * DEX_LIQUIDITY_WEIGHT
        + volume_score * DEX_VOLUME_WEIGHT
        + tier_score * DEX_TIER_WEIGHT
        + age_score * DEX_AGE_WEIGHT
        + activity_score * DEX_ACTIVITY_WEIGHT
    )
    return min(score, MAX_COMPONENT_SCORE)


def calculate_pool_age_hours(created_at: datetime | None, now: datetime) -> float | None:
    """Hours since pool creation, None when the creation time is unknown."""
    if created_at is None:
        return None
    return (now - created_at).total_seconds() / 3600


def sort_pools(pools: list[DexPoolQuote]) -> list[DexPoolQuote]:
    """Order by score descending, then chain and pair address."""
    return sorted(pools, key=lambda p: (-p.score, p.chain.value, p.pair_address))


def parse_pool_created_at(created_at_ms: int | None) -> datetime | None:
    """Pool creation time from a millisecond epoch, None when absent or out of range."""
    if not created_at_ms:
        return None
    try:
        return datetime.fromtimestamp(created_at_ms / 1000, tz=UTC)
    except (OverflowError, OSError, ValueError):
        log.debug("pool_created_at_out_of_range", pair_created_at=created_at_ms)
        return None


def build_pool_quote(pair: TokenPair, chain: Chain, now: datetime) -> DexPoolQuote:
    """Normalize a DexScreener pair into a tiered, scored pool quote."""
    created_at = parse_pool_created_at(pair.pair_created_at)
    age_hours = calculate_pool_age_hours(created_at, now)
    tier = get_dex_tier(pair.dex_id)
    txns = pair.txns.h24
    transactions = TransactionCounts(
        buys=txns.buys, sells=txns.sells, total=txns.buys + txns.sells
    )

    return DexPoolQuote(
        chain=chain,
        dex_identifier=pair.dex_id,
        dex_display_name=pair.dex_id.replace("_", " "),
        pair_address=pair.pair_address,
        pair_url=pair.url,
        price_usd=pair.price_usd,
        liquidity_usd=pair.liquidity.usd,
        volume_24h=pair.volume.h24,
        price_change=PriceChange(
            h1=pair.price_change.h1,
            h6=pair.price_change.h6,
            h24=pair.price_change.h24,
        ),
        transactions_24h=transactions,
        pool_created_at=created_at,
        pool_age_hours=age_hours,
        fully_diluted_valuation=pair.fdv,
        base_token=PoolToken(
            address=pair.base_token.address,
            symbol=pair.base_token.symbol or "",
            name=pair.base_token.name or "",
        ),
        quote_token=PoolToken(
            address=pair.quote_token.address,
            symbol=pair.quote_token.symbol or "",
            name=pair.quote_token.name or "",
        ),
        tier=tier,
        score=calculate_pool_score(
            pair.liquidity.usd, pair.volume.h24, tier, age_hours, transactions.total
        ),
    )


class DexPoolAggregator:
    """Fetches every pool of a token and scores it."""

    def __init__(
        self,
        client: DexScreenerClient | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize aggregator.

        Args:
            client: Pool data provider client.
            clock: Returns the current UTC time; injectable for tests.
        """
        self.client = client or DexScreenerClient()
        self.clock = clock or (lambda: datetime.now(UTC))

    async def fetch_pools(
        self, address: str, chain: Chain | None = None
    ) -> list[DexPoolQuote]:
        """Fetch pools on supported chains, optionally restricted to one chain.

        Args:
            address: Token contract address.
            chain: Only keep pools on this chain when given.

        Returns:
            Scored pools sorted by score descending; empty when unavailable.
        """
        pairs = await self.client.fetch_token_pairs(address.strip().lower())
        now = self.clock()

        pools = []
        for pair in pairs:
            if pair.chain_id not in SUPPORTED_CHAINS:
                continue
            pair_chain = Chain(pair.chain_id)
            if chain is not None and pair_chain != chain:
                continue
            pools.append(build_pool_quote(pair, pair_chain, now))

        log.info(
            "dex_pools_fetched",
            address=address,
            chain=chain.value if chain else None,
            pairs=len(pairs),
            pools=len(pools),
        )
        return sort_pools(pools)

    async def close(self) -> None:
        await self.client.close()
