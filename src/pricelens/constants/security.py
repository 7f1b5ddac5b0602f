"""Contract risk scoring constants."""

from typing import Final

# GoPlus flag -> risk points, for flags reported as "1"
RISK_FLAG_POINTS: Final[dict[str, int]] = {
    "is_honeypot": 40,
    "cannot_sell_all": 35,
    "cannot_buy": 35,
    "transfer_pausable": 20,
    "trading_cooldown": 15,
    "is_proxy": 15,
    "is_mintable": 15,
    "can_take_back_ownership": 20,
    "owner_change_balance": 25,
    "hidden_owner": 20,
    "selfdestruct": 25,
    "external_call": 10,
}

# Flags that lower the score when reported as "1"
RISK_FLAG_DISCOUNTS: Final[dict[str, int]] = {
    "is_open_source": 10,
    "is_in_dex": 5,
}

# Tax surcharge: (tax - threshold) * multiplier, capped
TAX_SURCHARGE_THRESHOLD_PERCENT: Final[float] = 10.0
TAX_SURCHARGE_MULTIPLIER: Final[float] = 2.0
TAX_SURCHARGE_CAP: Final[float] = 30.0
TAX_WARNING_THRESHOLD_PERCENT: Final[float] = 5.0

MIN_RISK_SCORE: Final[int] = 0
MAX_RISK_SCORE: Final[int] = 100

# Risk level lower bounds
CRITICAL_RISK_SCORE: Final[int] = 70
HIGH_RISK_SCORE: Final[int] = 40
MEDIUM_RISK_SCORE: Final[int] = 20

# Informational thresholds
LOW_HOLDER_COUNT: Final[int] = 100
LOW_LP_HOLDER_COUNT: Final[int] = 5

# Pool risk thresholds: (upper bound, risk boost)
POOL_LIQUIDITY_RISK_BANDS: Final[tuple[tuple[float, int], ...]] = (
    (1_000.0, 30),
    (10_000.0, 15),
    (50_000.0, 5),
)
POOL_AGE_RISK_BANDS: Final[tuple[tuple[float, int], ...]] = (
    (1.0, 25),
    (24.0, 15),
    (72.0, 5),
)
POOL_LOW_ACTIVITY_TXNS: Final[int] = 10
POOL_LOW_ACTIVITY_BOOST: Final[int] = 10
