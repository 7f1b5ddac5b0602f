"""Arbitrage, best-price and price-impact constants."""

from typing import Final

# Liquidity floors (USD) per downstream computation
MIN_POOL_LIQUIDITY_USD: Final[float] = 100.0  # final assembly
MIN_BEST_PRICE_LIQUIDITY_USD: Final[float] = 500.0
MIN_ARBITRAGE_LIQUIDITY_USD: Final[float] = 1000.0

# Arbitrage thresholds (percent)
MIN_SPREAD_THRESHOLD_PERCENT: Final[float] = 0.5
MIN_VIABLE_PROFIT_PERCENT: Final[float] = 1.0
SAME_CHAIN_INCLUSION_FACTOR: Final[float] = 0.5

# Execution cost model (USD)
ARBITRAGE_NOTIONAL_USD: Final[float] = 1000.0
BRIDGE_FEE_USD: Final[float] = 10.0
CEX_WITHDRAWAL_FEE_USD: Final[float] = 5.0

# Price impact model
MAX_DEX_PRICE_IMPACT_PERCENT: Final[float] = 50.0
EMPTY_POOL_PRICE_IMPACT_PERCENT: Final[float] = 100.0
CEX_IMPACT_FREE_NOTIONAL_USD: Final[float] = 100_000.0
CEX_IMPACT_DIVISOR: Final[float] = 1_000_000.0
