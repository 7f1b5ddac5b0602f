"""Unit tests for the price impact estimator."""

import pytest

from pricelens.models.pricing import TradeDirection, VenueType
from pricelens.services.pricing.price_impact import (
    cex_price_impact,
    dex_price_impact,
    effective_price,
    estimate_price_impact,
)


class TestImpactModel:
    """Tests for per-venue impact formulas."""

    def test_dex_impact_against_half_liquidity(self) -> None:
        assert dex_price_impact(1_000, 100_000) == pytest.approx(2.0)

    def test_dex_impact_capped(self) -> None:
        assert dex_price_impact(1_000_000, 100_000) == 50.0

    def test_empty_pool(self) -> None:
        assert dex_price_impact(1_000, 0) == 100.0

    @pytest.mark.parametrize(
        ("amount", "impact"),
        [(1_000, 0.0), (100_000, 0.0), (200_000, 0.2), (5_000_000, 5.0)],
    )
    def test_cex_impact(self, amount: float, impact: float) -> None:
        assert cex_price_impact(amount) == pytest.approx(impact)

    def test_effective_price_direction(self) -> None:
        assert effective_price(1.0, 2.0, TradeDirection.BUY) == pytest.approx(1.02)
        assert effective_price(1.0, 2.0, TradeDirection.SELL) == pytest.approx(0.98)


class TestEstimatePriceImpact:
    """Tests for venue ranking and the efficiency gap."""

    def test_buy_ranks_by_tokens_received(self, dex_pool_factory, cex_quote_factory) -> None:
        pools = [dex_pool_factory(dex_display_name="uniswap", price_usd=1.0, liquidity_usd=100_000)]
        quotes = [cex_quote_factory(exchange_name="Binance", price_usd=1.01)]

        report = estimate_price_impact(1_000, TradeDirection.BUY, pools, quotes)

        assert [e.venue_name for e in report.estimates] == ["Binance", "uniswap"]
        assert report.best.venue_type == VenueType.CEX
        assert report.best.output_amount == pytest.approx(1_000 / 1.01)
        assert report.worst.price_impact_percent == pytest.approx(2.0)
        assert report.worst.output_amount == pytest.approx(1_000 / 1.02)
        assert report.efficiency_gap_percent == pytest.approx(
            (1_000 / 1.01 - 1_000 / 1.02) / (1_000 / 1.02) * 100
        )

    def test_sell_ranks_by_proceeds(self, dex_pool_factory, cex_quote_factory) -> None:
        pools = [dex_pool_factory(price_usd=1.0, liquidity_usd=100_000)]
        quotes = [cex_quote_factory(price_usd=1.01)]

        report = estimate_price_impact(1_000, TradeDirection.SELL, pools, quotes)

        assert report.best.output_amount == pytest.approx(1_010.0)
        assert report.worst.output_amount == pytest.approx(980.0)
        assert report.direction == TradeDirection.SELL

    def test_unusable_venues_skipped(self, dex_pool_factory, cex_quote_factory) -> None:
        pools = [
            dex_pool_factory(price_usd=None),
            dex_pool_factory(liquidity_usd=0.0),
            dex_pool_factory(liquidity_usd=None),
        ]
        quotes = [cex_quote_factory(price_usd=None)]

        report = estimate_price_impact(1_000, TradeDirection.BUY, pools, quotes)

        assert report.estimates == []
        assert report.best is None
        assert report.efficiency_gap_percent is None

    def test_single_venue_has_no_gap(self, cex_quote_factory) -> None:
        report = estimate_price_impact(1_000, TradeDirection.BUY, [], [cex_quote_factory()])

        assert report.best == report.worst
        assert report.efficiency_gap_percent is None

    def test_non_positive_amount_gives_empty_report(self, cex_quote_factory) -> None:
        report = estimate_price_impact(0, TradeDirection.BUY, [], [cex_quote_factory()])

        assert report.estimates == []
        assert report.amount == 0

    def test_equal_outputs_ordered_by_venue(self, cex_quote_factory) -> None:
        quotes = [
            cex_quote_factory(exchange_key="okx", exchange_name="OKX"),
            cex_quote_factory(exchange_key="bybit", exchange_name="Bybit"),
        ]

        report = estimate_price_impact(1_000, TradeDirection.BUY, [], quotes)

        assert [e.venue_name for e in report.estimates] == ["Bybit", "OKX"]
        assert report.efficiency_gap_percent == 0.0
