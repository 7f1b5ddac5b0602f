"""Unit tests for best-price and arbitrage detection."""

import pytest

from pricelens.models.pricing import VenueRef, VenueType
from pricelens.models.token import Chain
from pricelens.services.pricing.arbitrage import (
    calculate_best_prices,
    estimate_fee_cost,
    find_arbitrage_opportunities,
    is_viable_profit,
    net_profit_percent,
    spread_percent,
)


class TestSpreadAndProfit:
    """Tests for the spread and net-profit arithmetic."""

    def test_spread_percent(self) -> None:
        assert spread_percent(100.0, 105.0) == 5.0

    def test_net_profit_after_fees(self) -> None:
        # 1000 USD buys 1000 tokens sold for 1050, minus 20 in fees
        assert net_profit_percent(1.0, 1.05, 20.0) == pytest.approx(3.0)

    def test_viability_threshold_is_inclusive(self) -> None:
        assert is_viable_profit(1.0) is True
        assert is_viable_profit(0.999) is False


class TestFeeCost:
    """Tests for the execution cost model."""

    def _dex(self, chain: Chain) -> VenueRef:
        return VenueRef(source_name="pool", venue_type=VenueType.DEX, price=1.0, chain=chain)

    def _cex(self) -> VenueRef:
        return VenueRef(source_name="Binance", venue_type=VenueType.CEX, price=1.0)

    def test_same_chain_dex_legs_pay_gas_twice(self) -> None:
        assert estimate_fee_cost(self._dex(Chain.BSC), self._dex(Chain.BSC)) == pytest.approx(0.6)

    def test_cross_chain_adds_bridge_fee(self) -> None:
        cost = estimate_fee_cost(self._dex(Chain.ETHEREUM), self._dex(Chain.BSC))
        assert cost == pytest.approx(15.0 + 0.3 + 10.0)

    def test_cex_leg_adds_withdrawal_fee_without_bridge(self) -> None:
        assert estimate_fee_cost(self._dex(Chain.ETHEREUM), self._cex()) == pytest.approx(20.0)

    def test_cex_to_cex(self) -> None:
        assert estimate_fee_cost(self._cex(), self._cex()) == pytest.approx(5.0)


class TestBestPrices:
    """Tests for best buy and best sell selection."""

    def test_cheapest_and_most_expensive(self, dex_pool_factory, cex_quote_factory) -> None:
        pools = [dex_pool_factory(price_usd=1.02), dex_pool_factory(price_usd=0.98)]
        quotes = [cex_quote_factory(exchange_key="okx", exchange_name="OKX", price_usd=1.05)]

        best = calculate_best_prices(pools, quotes)

        assert best.best_buy.price == 0.98
        assert best.best_buy.venue_type == VenueType.DEX
        assert best.best_sell.source_name == "OKX"
        assert best.spread_percent == pytest.approx((1.05 - 0.98) * 100 / 0.98)

    def test_fewer_than_two_venues(self, dex_pool_factory) -> None:
        best = calculate_best_prices([dex_pool_factory()], [])

        assert best.best_buy is None
        assert best.best_sell is None
        assert best.spread_percent is None

    def test_thin_and_unpriced_pools_ignored(self, dex_pool_factory, cex_quote_factory) -> None:
        pools = [
            dex_pool_factory(price_usd=0.5, liquidity_usd=499.0),
            dex_pool_factory(price_usd=None),
            dex_pool_factory(price_usd=0.0),
        ]
        quotes = [cex_quote_factory(price_usd=1.0), cex_quote_factory(price_usd=None)]

        assert calculate_best_prices(pools, quotes).best_buy is None

    def test_ties_resolved_by_venue_identity(self, dex_pool_factory, cex_quote_factory) -> None:
        pool = dex_pool_factory(price_usd=1.0)
        cheap = cex_quote_factory(exchange_key="okx", price_usd=1.0)
        dear = cex_quote_factory(exchange_key="kraken", price_usd=1.1)

        forward = calculate_best_prices([pool], [cheap, dear])
        backward = calculate_best_prices([pool], [dear, cheap])

        assert forward == backward
        assert forward.best_buy.venue_type == VenueType.CEX


class TestArbitrage:
    """Tests for opportunity detection."""

    def test_dex_to_cex_opportunity(self, dex_pool_factory, cex_quote_factory) -> None:
        pools = [dex_pool_factory(price_usd=1.0)]
        quotes = [cex_quote_factory(price_usd=1.05)]

        [opportunity] = find_arbitrage_opportunities(pools, quotes)

        assert opportunity.buy_from.venue_type == VenueType.DEX
        assert opportunity.sell_to.venue_type == VenueType.CEX
        assert opportunity.spread_percent == pytest.approx(5.0)
        assert opportunity.estimated_fee_cost_usd == pytest.approx(20.0)
        assert opportunity.net_profit_percent == pytest.approx(3.0)
        assert opportunity.is_viable is True

    def test_fewer_than_two_venues(self, dex_pool_factory) -> None:
        assert find_arbitrage_opportunities([dex_pool_factory()], []) == []

    def test_spread_below_threshold(self, dex_pool_factory, cex_quote_factory) -> None:
        pools = [dex_pool_factory(price_usd=1.0)]
        quotes = [cex_quote_factory(price_usd=1.004)]

        assert find_arbitrage_opportunities(pools, quotes) == []

    def test_pools_under_liquidity_floor_ignored(self, dex_pool_factory, cex_quote_factory) -> None:
        pools = [dex_pool_factory(price_usd=0.5, liquidity_usd=900.0)]
        quotes = [
            cex_quote_factory(price_usd=1.0),
            cex_quote_factory(exchange_key="okx", price_usd=1.0),
        ]

        assert find_arbitrage_opportunities(pools, quotes) == []

    def test_unprofitable_spread_reported_not_viable(self, dex_pool_factory) -> None:
        pools = [
            dex_pool_factory(price_usd=1.0),
            dex_pool_factory(chain=Chain.ARBITRUM, price_usd=1.01),
        ]

        [opportunity] = find_arbitrage_opportunities(pools, [])

        # 10 of gross profit against 25.5 of gas and bridge fees
        assert opportunity.net_profit_percent == pytest.approx(-1.55)
        assert opportunity.is_viable is False

    def test_same_chain_pass_adds_chain_local_pair(
        self, dex_pool_factory, cex_quote_factory
    ) -> None:
        pools = [
            dex_pool_factory(chain=Chain.BSC, pair_address="0xlow", price_usd=1.0),
            dex_pool_factory(chain=Chain.BSC, pair_address="0xhigh", price_usd=1.03),
        ]
        quotes = [cex_quote_factory(price_usd=1.10)]

        opportunities = find_arbitrage_opportunities(pools, quotes)

        assert len(opportunities) == 2
        cross, local = opportunities
        assert cross.sell_to.venue_type == VenueType.CEX
        assert cross.net_profit_percent == pytest.approx(9.47)
        assert local.buy_from.chain == local.sell_to.chain == Chain.BSC
        assert local.estimated_fee_cost_usd == pytest.approx(0.6)
        assert local.net_profit_percent == pytest.approx(2.94)

    def test_same_chain_pair_equal_to_global_pair_not_repeated(self, dex_pool_factory) -> None:
        pools = [
            dex_pool_factory(chain=Chain.BSC, price_usd=1.0),
            dex_pool_factory(chain=Chain.BSC, price_usd=1.03),
        ]

        opportunities = find_arbitrage_opportunities(pools, [])

        assert len(opportunities) == 1
        assert opportunities[0].estimated_fee_cost_usd == pytest.approx(0.6)

    def test_same_chain_pair_below_inclusion_threshold(
        self, dex_pool_factory, cex_quote_factory
    ) -> None:
        pools = [
            dex_pool_factory(price_usd=1.0),
            dex_pool_factory(price_usd=1.006),
        ]
        quotes = [cex_quote_factory(price_usd=1.10)]

        opportunities = find_arbitrage_opportunities(pools, quotes)

        assert len(opportunities) == 1
        assert opportunities[0].sell_to.venue_type == VenueType.CEX

    def test_viable_opportunities_listed_first(self, dex_pool_factory) -> None:
        pools = [
            dex_pool_factory(chain=Chain.BSC, price_usd=1.0),
            dex_pool_factory(chain=Chain.BSC, price_usd=1.008),
            dex_pool_factory(chain=Chain.ETHEREUM, price_usd=1.2),
        ]
        opportunities = find_arbitrage_opportunities(pools, [])

        # global bsc -> ethereum pair nets 17.47%, the bsc-local pair 0.74%
        assert [o.is_viable for o in opportunities] == [True, False]
