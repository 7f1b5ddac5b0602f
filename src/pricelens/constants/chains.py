"""Per-chain provider identifiers and cost constants."""

from typing import Final

# Fixed set of chains the aggregator serves
SUPPORTED_CHAINS: Final[tuple[str, ...]] = (
    "ethereum",
    "bsc",
    "polygon",
    "arbitrum",
    "optimism",
    "base",
    "solana",
    "avalanche",
    "fantom",
    "zksync",
)

# CoinGecko asset platform per chain
COINGECKO_PLATFORM_BY_CHAIN: Final[dict[str, str]] = {
    "ethereum": "ethereum",
    "bsc": "binance-smart-chain",
    "polygon": "polygon-pos",
    "arbitrum": "arbitrum-one",
    "optimism": "optimistic-ethereum",
    "base": "base",
    "solana": "solana",
    "avalanche": "avalanche",
    "fantom": "fantom",
    "zksync": "zksync",
}

# GoPlus numeric chain ids; solana and zksync have no coverage
GOPLUS_CHAIN_IDS: Final[dict[str, str]] = {
    "ethereum": "1",
    "bsc": "56",
    "polygon": "137",
    "arbitrum": "42161",
    "optimism": "10",
    "base": "8453",
    "avalanche": "43114",
    "fantom": "250",
}

# Estimated USD gas cost of a single swap
ESTIMATED_GAS_COST_USD: Final[dict[str, float]] = {
    "ethereum": 15.0,
    "bsc": 0.3,
    "polygon": 0.05,
    "arbitrum": 0.5,
    "optimism": 0.3,
    "base": 0.1,
    "solana": 0.01,
    "avalanche": 0.5,
    "fantom": 0.05,
    "zksync": 0.2,
}
DEFAULT_GAS_COST_USD: Final[float] = 1.0
