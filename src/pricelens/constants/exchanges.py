"""Static venue classification tables.

Tier 1 = most trusted, tier 3 = least. Unknown venues always fall back to
tier 3; lookups never raise.
"""

from typing import Final

DEFAULT_TIER: Final[int] = 3

# =============================================================================
# Centralized exchanges
# =============================================================================

# Normalized exchange key -> (tier, display name)
CEX_TIERS: Final[dict[str, tuple[int, str]]] = {
    # Tier 1: top volume, regulated
    "binance": (1, "Binance"),
    "coinbase": (1, "Coinbase"),
    "kraken": (1, "Kraken"),
    "okx": (1, "OKX"),
    "bybit": (1, "Bybit"),
    # Tier 2: large exchanges with good reputation
    "kucoin": (2, "KuCoin"),
    "gateio": (2, "Gate.io"),
    "htx": (2, "HTX"),
    "bitfinex": (2, "Bitfinex"),
    "cryptocom": (2, "Crypto.com"),
    "bitstamp": (2, "Bitstamp"),
    "gemini": (2, "Gemini"),
    # Tier 3: smaller exchanges
    "mexc": (3, "MEXC"),
    "bitget": (3, "Bitget"),
    "lbank": (3, "LBank"),
    "bingx": (3, "BingX"),
    "phemex": (3, "Phemex"),
}

# Alternative market names that refer to the same exchange
CEX_KEY_ALIASES: Final[dict[str, str]] = {
    "huobi": "htx",
    "huobiglobal": "htx",
    "gate": "gateio",
    "okex": "okx",
    "coinbasepro": "coinbase",
    "mexcglobal": "mexc",
}

# Suffixes dropped when normalizing exchange names
CEX_NAME_SUFFIXES: Final[tuple[str, ...]] = ("exchange", "international", "global")

# Spot trade page per exchange; {sym}/{quote} upper-case, {sym_l}/{quote_l} lower-case
CEX_TRADE_URL_TEMPLATES: Final[dict[str, str]] = {
    "binance": "https://www.binance.com/en/trade/{sym}_{quote}?type=spot",
    "okx": "https://www.okx.com/trade-spot/{sym_l}-{quote_l}",
    "bybit": "https://www.bybit.com/trade/spot/{sym}/{quote}",
    "kucoin": "https://www.kucoin.com/trade/{sym}-{quote}",
    "gateio": "https://www.gate.io/trade/{sym}_{quote}",
    "htx": "https://www.htx.com/trade/{sym_l}_{quote_l}",
    "mexc": "https://www.mexc.com/exchange/{sym}_{quote}",
    "bitget": "https://www.bitget.com/spot/{sym}{quote}",
    "kraken": "https://pro.kraken.com/app/trade/{sym_l}-{quote_l}",
    "coinbase": "https://www.coinbase.com/advanced-trade/spot/{sym}-{quote}",
    "cryptocom": "https://crypto.com/exchange/trade/{sym}_{quote}",
    "bitstamp": "https://www.bitstamp.net/markets/{sym_l}/{quote_l}/",
    "gemini": "https://exchange.gemini.com/trade/{sym}{quote}",
    "bitfinex": "https://trading.bitfinex.com/t/{sym}:{quote}",
    "lbank": "https://www.lbank.com/trade/{sym_l}_{quote_l}",
    "bingx": "https://bingx.com/en-us/spot/{sym}{quote}/",
    "phemex": "https://phemex.com/spot/trade/{sym}{quote}",
}
GENERIC_TRADE_URL_TEMPLATE: Final[str] = "https://www.coingecko.com/en/coins/{sym_l}"
DEFAULT_QUOTE_SYMBOL: Final[str] = "USDT"

# =============================================================================
# Decentralized exchanges
# =============================================================================

# Normalized DexScreener dex id -> tier
DEX_TIERS: Final[dict[str, int]] = {
    # Tier 1: established, audited, high TVL
    "uniswap": 1,
    "uniswap_v2": 1,
    "uniswap_v3": 1,
    "pancakeswap": 1,
    "pancakeswap_v2": 1,
    "pancakeswap_v3": 1,
    "sushiswap": 1,
    "sushiswap_v3": 1,
    "curve": 1,
    "balancer": 1,
    "balancer_v2": 1,
    "raydium": 1,
    "orca": 1,
    "trader_joe": 1,
    "trader_joe_v2": 1,
    "camelot": 1,
    "velodrome": 1,
    "aerodrome": 1,
    # Tier 2: known, moderate trust
    "quickswap": 2,
    "quickswap_v3": 2,
    "spookyswap": 2,
    "spiritswap": 2,
    "baseswap": 2,
    "maverick": 2,
    "thena": 2,
    "syncswap": 2,
    "mute": 2,
    "zkswap": 2,
    "jupiter": 2,
    "meteora": 2,
}

# Market-name fragments that mark a CoinGecko ticker as a DEX market
DEX_MARKET_MARKERS: Final[tuple[str, ...]] = (
    "Uniswap",
    "PancakeSwap",
    "Raydium",
    "Sushiswap",
    "Curve",
    "Balancer",
    "Orca",
    "Jupiter",
)
