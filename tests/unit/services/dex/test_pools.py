"""Unit tests for the DEX pool aggregator."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from pricelens.models.token import Chain
from pricelens.services.dex.pools import (
    DexPoolAggregator,
    build_pool_quote,
    calculate_pool_age_hours,
    calculate_pool_score,
    get_dex_tier,
    parse_pool_created_at,
)
from pricelens.services.dexscreener.models import TokenPair
from tests.fixtures.provider_payloads import HOUR_MS, NOW_MS, PEPE_ADDRESS, dexscreener_pair


def _aggregator(pairs: list[dict], clock) -> tuple[DexPoolAggregator, MagicMock]:
    client = MagicMock()
    client.fetch_token_pairs = AsyncMock(
        return_value=[TokenPair.model_validate(p) for p in pairs]
    )
    client.close = AsyncMock()
    return DexPoolAggregator(client=client, clock=clock), client


class TestDexTier:
    """Tests for DEX identifier tiers."""

    @pytest.mark.parametrize(
        ("dex_id", "tier"),
        [
            ("uniswap", 1),
            ("Uniswap-V3", 1),
            ("trader joe", 1),
            ("quickswap", 2),
            ("meteora", 2),
            ("some-new-dex", 3),
            ("", 3),
        ],
    )
    def test_get_dex_tier(self, dex_id: str, tier: int) -> None:
        assert get_dex_tier(dex_id) == tier


class TestPoolScore:
    """Tests for the composite pool score."""

    def test_formula_components(self) -> None:
        # liquidity 20M -> 20, volume 2.5M -> 5, tier 1 -> 100, age 720h -> 1, txns 1000 -> 10
        score = calculate_pool_score(20_000_000, 2_500_000, 1, 720, 1000)
        assert score == pytest.approx(20 * 0.35 + 5 * 0.25 + 100 * 0.2 + 1 * 0.1 + 10 * 0.1)

    def test_unknown_age_scores_neutral(self) -> None:
        score = calculate_pool_score(None, None, 3, None, 0)
        assert score == pytest.approx(30 * 0.2 + 50 * 0.1)

    @pytest.mark.parametrize(
        ("liquidity", "volume", "tier", "age", "txns"),
        [
            (1e15, 1e15, 1, 1e9, 10**9),
            (0, 0, 3, 0, 0),
            (None, None, 2, None, 0),
            (-100, -5, 1, -3, 0),
        ],
    )
    def test_score_bounded(self, liquidity, volume, tier, age, txns) -> None:
        assert 0 <= calculate_pool_score(liquidity, volume, tier, age, txns) <= 100


class TestPoolAge:
    """Tests for pool age calculation."""

    def test_age_in_hours(self, fixed_clock) -> None:
        created = datetime.fromtimestamp((NOW_MS - 36 * HOUR_MS) / 1000, tz=UTC)
        assert calculate_pool_age_hours(created, fixed_clock()) == pytest.approx(36.0)

    def test_unknown_creation_time(self, fixed_clock) -> None:
        assert calculate_pool_age_hours(None, fixed_clock()) is None

    @pytest.mark.parametrize("created_at_ms", [None, 0, 10**20, -(10**20)])
    def test_missing_or_out_of_range_creation_time(self, created_at_ms) -> None:
        assert parse_pool_created_at(created_at_ms) is None

    def test_creation_time_from_milliseconds(self) -> None:
        assert parse_pool_created_at(NOW_MS) == datetime.fromtimestamp(NOW_MS / 1000, tz=UTC)

    def test_build_pool_quote(self, fixed_clock) -> None:
        pair = TokenPair.model_validate(
            dexscreener_pair(dexId="uniswap_v3", pairCreatedAt=NOW_MS - 2 * HOUR_MS)
        )

        pool = build_pool_quote(pair, Chain.ETHEREUM, fixed_clock())

        assert pool.dex_display_name == "uniswap v3"
        assert pool.tier == 1
        assert pool.pool_age_hours == pytest.approx(2.0)
        assert pool.transactions_24h.total == 1000
        assert pool.base_token.symbol == "PEPE"
        assert pool.price_change.h24 == 3.4


class TestDexPoolAggregator:
    """Tests for fetching, filtering and ordering pools."""

    @pytest.mark.asyncio
    async def test_filters_unsupported_chains(self, fixed_clock) -> None:
        aggregator, _ = _aggregator(
            [
                dexscreener_pair(),
                dexscreener_pair(chainId="tron", pairAddress="TXabc"),
                dexscreener_pair(chainId="bsc", dexId="pancakeswap", pairAddress="0xbsc"),
            ],
            fixed_clock,
        )

        pools = await aggregator.fetch_pools(PEPE_ADDRESS)

        assert {p.chain for p in pools} == {Chain.ETHEREUM, Chain.BSC}

    @pytest.mark.asyncio
    async def test_chain_filter(self, fixed_clock) -> None:
        aggregator, client = _aggregator(
            [
                dexscreener_pair(),
                dexscreener_pair(chainId="bsc", dexId="pancakeswap", pairAddress="0xbsc"),
            ],
            fixed_clock,
        )

        pools = await aggregator.fetch_pools(PEPE_ADDRESS.upper().replace("0X", "0x"), Chain.BSC)

        assert [p.pair_address for p in pools] == ["0xbsc"]
        client.fetch_token_pairs.assert_awaited_once_with(PEPE_ADDRESS)

    @pytest.mark.asyncio
    async def test_sorted_by_score_then_pair_address(self, fixed_clock) -> None:
        aggregator, _ = _aggregator(
            [
                dexscreener_pair(pairAddress="0xbbb", liquidity={"usd": 1000}),
                dexscreener_pair(pairAddress="0xccc"),
                dexscreener_pair(pairAddress="0xaaa"),
            ],
            fixed_clock,
        )

        pools = await aggregator.fetch_pools(PEPE_ADDRESS)

        assert [p.pair_address for p in pools] == ["0xaaa", "0xccc", "0xbbb"]
        assert pools[0].score >= pools[-1].score

    @pytest.mark.asyncio
    async def test_bad_timestamp_does_not_drop_other_pools(self, fixed_clock) -> None:
        """
        Given: One valid pair and one pair with an out-of-range creation time
        When: Pools are fetched
        Then: Both pools are returned and the bad one has an unknown age
        """
        aggregator, _ = _aggregator(
            [
                dexscreener_pair(pairAddress="0xgood", pairCreatedAt=1_700_000_000_000),
                dexscreener_pair(pairAddress="0xbad", pairCreatedAt=10**20),
            ],
            fixed_clock,
        )

        pools = await aggregator.fetch_pools(PEPE_ADDRESS)

        by_address = {p.pair_address: p for p in pools}
        assert set(by_address) == {"0xgood", "0xbad"}
        assert by_address["0xgood"].pool_age_hours is not None
        assert by_address["0xbad"].pool_created_at is None
        assert by_address["0xbad"].pool_age_hours is None

    @pytest.mark.asyncio
    async def test_empty_when_provider_has_nothing(self, fixed_clock) -> None:
        aggregator, _ = _aggregator([], fixed_clock)
        assert await aggregator.fetch_pools(PEPE_ADDRESS) == []
