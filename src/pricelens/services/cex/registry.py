"""Exchange identity lookups: normalization, tiers and trade links."""

import re

from pricelens.constants.exchanges import (
    CEX_KEY_ALIASES,
    CEX_NAME_SUFFIXES,
    CEX_TIERS,
    CEX_TRADE_URL_TEMPLATES,
    DEFAULT_QUOTE_SYMBOL,
    DEFAULT_TIER,
    GENERIC_TRADE_URL_TEMPLATE,
)

_SEPARATORS = re.compile(r"[\s._\-]+")


def normalize_exchange_key(name: str) -> str:
    """Normalize an exchange name for tier lookups and dedup.

    Case, whitespace and punctuation are ignored and trailing
    "exchange"/"international"/"global" is dropped, so "Binance Exchange",
    " binance " and "BINANCE" all map to "binance".
    """
    key = _SEPARATORS.sub("", name.strip().lower())
    for suffix in CEX_NAME_SUFFIXES:
        if key.endswith(suffix) and len(key) > len(suffix):
            key = key[: -len(suffix)]
            break
    return CEX_KEY_ALIASES.get(key, key)


def get_cex_info(name: str) -> tuple[int, str]:
    """Tier and display name of an exchange.

    Unknown exchanges are tier 3 and keep their raw display name.
    """
    return CEX_TIERS.get(normalize_exchange_key(name), (DEFAULT_TIER, name.strip()))


def build_trade_url(exchange: str, symbol: str, quote_symbol: str = DEFAULT_QUOTE_SYMBOL) -> str:
    """Spot trade page for ``symbol/quote`` on an exchange.

    Falls back to a generic coin page for exchanges without a template.
    """
    sym = symbol.strip().upper()
    quote = quote_symbol.strip().upper()
    template = CEX_TRADE_URL_TEMPLATES.get(
        normalize_exchange_key(exchange), GENERIC_TRADE_URL_TEMPLATE
    )
    return template.format(sym=sym, quote=quote, sym_l=sym.lower(), quote_l=quote.lower())
