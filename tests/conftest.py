"""Shared pytest fixtures for PriceLens tests.

This module provides fixtures for:
- Test environment configuration
- Settings and singleton reset between tests
- Test data factories
- A fixed clock for pool age calculations

Usage:
    def test_something(dex_pool_factory):
        pool = dex_pool_factory(price_usd=1.05)
        assert pool.score >= 0
"""

import os
from collections.abc import Callable, Generator
from datetime import UTC, datetime

import pytest

from tests.factories.quotes import CexQuoteFactory, DexPoolQuoteFactory
from tests.fixtures.provider_payloads import NOW_MS

# =============================================================================
# Environment Configuration
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> Generator[None, None, None]:
    """Set up test environment variables.

    Provider URLs point at the public defaults so respx routes match; the
    CoinGecko key stays empty so no auth header is sent.
    """
    original_env = os.environ.copy()

    os.environ.setdefault("LOG_LEVEL", "WARNING")
    os.environ["COINGECKO_API_KEY"] = ""
    os.environ["PROVIDER_MAX_ATTEMPTS"] = "1"
    os.environ["PRICE_CACHE_TTL_MS"] = "10000"

    yield

    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Clear cached settings and service singletons around each test."""
    from pricelens.api.dependencies import reset_services
    from pricelens.config.settings import get_settings

    get_settings.cache_clear()
    reset_services()
    yield
    get_settings.cache_clear()
    reset_services()


# =============================================================================
# Factories and Helpers
# =============================================================================


@pytest.fixture
def cex_quote_factory() -> type[CexQuoteFactory]:
    """CEX quote factory."""
    return CexQuoteFactory


@pytest.fixture
def dex_pool_factory() -> type[DexPoolQuoteFactory]:
    """DEX pool quote factory."""
    return DexPoolQuoteFactory


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock frozen at 2024-01-01T00:00:00Z."""
    now = datetime.fromtimestamp(NOW_MS / 1000, tz=UTC)
    return lambda: now
