"""Composite score weights and normalization divisors.

All composite scores land in [0, 100]; each component is capped at 100
before weighting and the weights of a score sum to 1.0.
"""

from typing import Final

# Tier -> component score, shared by CEX and DEX scoring
TIER_SCORES: Final[dict[int, float]] = {1: 100.0, 2: 60.0, 3: 30.0}
MAX_COMPONENT_SCORE: Final[float] = 100.0

# =============================================================================
# CEX trust score
# =============================================================================

CEX_VOLUME_WEIGHT: Final[float] = 0.40
CEX_TIER_WEIGHT: Final[float] = 0.40
CEX_SPREAD_WEIGHT: Final[float] = 0.20

CEX_VOLUME_DIVISOR_USD: Final[float] = 10_000_000.0
CEX_SPREAD_PENALTY_FACTOR: Final[float] = 1000.0
CEX_UNKNOWN_SPREAD_SCORE: Final[float] = 50.0

# =============================================================================
# DEX pool score
# =============================================================================

DEX_LIQUIDITY_WEIGHT: Final[float] = 0.35
DEX_VOLUME_WEIGHT: Final[float] = 0.25
DEX_TIER_WEIGHT: Final[float] = 0.20
DEX_AGE_WEIGHT: Final[float] = 0.10
DEX_ACTIVITY_WEIGHT: Final[float] = 0.10

DEX_LIQUIDITY_DIVISOR_USD: Final[float] = 1_000_000.0
DEX_VOLUME_DIVISOR_USD: Final[float] = 500_000.0
DEX_AGE_DIVISOR_HOURS: Final[float] = 720.0
DEX_UNKNOWN_AGE_SCORE: Final[float] = 50.0
DEX_ACTIVITY_DIVISOR_TXNS: Final[float] = 100.0

# Tickers taken from the metadata service are second-tier evidence
METADATA_POOL_TIER: Final[int] = 2
