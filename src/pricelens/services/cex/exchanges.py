"""Spot ticker clients for centralized exchanges.

Each client queries one exchange's public market-data API for the
``SYMBOL/USDT`` pair and normalizes the response to ``RawCexTicker``.
All endpoints are public and need no API key.

``fetch_ticker`` never raises: network errors, non-2xx responses, unknown
pairs and payloads without a usable last price all yield None.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import Any, ClassVar

import structlog

from pricelens.config import get_settings
from pricelens.core.exceptions import ExternalServiceError
from pricelens.services.base import BaseAPIClient
from pricelens.services.cex.models import RawCexTicker
from pricelens.services.parsing import parse_float, parse_positive, percent_change

log = structlog.get_logger(__name__)


def _first(items: Any) -> dict[str, Any] | None:
    """First element of a list payload if it is an object."""
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0]
    return None


def _nth_of(values: Any, index: int) -> Any:
    """Element of a positional array field (Kraken, HTX), or None."""
    if isinstance(values, list) and len(values) > index:
        return values[index]
    return None


def _first_of(values: Any) -> Any:
    return _nth_of(values, 0)


class CexTickerClient(BaseAPIClient, ABC):
    """Base class for exchange ticker clients.

    Subclasses set ``exchange_key`` and ``BASE_URL`` and implement
    ``_fetch`` for the exchange's payload shape.
    """

    exchange_key: ClassVar[str]
    BASE_URL: ClassVar[str]
    QUOTE_SYMBOL: ClassVar[str] = "USDT"

    def __init__(self, timeout: float | None = None) -> None:
        settings = get_settings()
        super().__init__(
            service=self.exchange_key,
            base_url=self.BASE_URL,
            timeout=timeout or settings.provider_timeout_seconds,
            max_attempts=settings.provider_max_attempts,
        )

    async def fetch_ticker(self, symbol: str) -> RawCexTicker | None:
        """Fetch the ``symbol/USDT`` spot ticker.

        Args:
            symbol: Base asset symbol, e.g. "PEPE".

        Returns:
            Normalized ticker, or None when unavailable.
        """
        symbol = symbol.strip().upper()
        try:
            ticker = await self._fetch(symbol)
        except ExternalServiceError as e:
            log.debug(
                "cex_ticker_unavailable",
                exchange=self.exchange_key,
                symbol=symbol,
                status_code=e.status_code,
            )
            return None
        except Exception as e:
            log.warning(
                "cex_ticker_parse_error",
                exchange=self.exchange_key,
                symbol=symbol,
                error=str(e),
            )
            return None

        if ticker is None:
            log.debug("cex_ticker_missing", exchange=self.exchange_key, symbol=symbol)
        return ticker

    @abstractmethod
    async def _fetch(self, symbol: str) -> RawCexTicker | None:
        """Request and normalize one ticker; None when the pair is not listed."""


# =============================================================================
# Tier 1
# =============================================================================


class BinanceClient(CexTickerClient):
    """Binance: 24h ticker plus book ticker, fetched concurrently."""

    exchange_key = "binance"
    BASE_URL = "https://api.binance.com"

    async def _fetch(self, symbol: str) -> RawCexTicker | None:
        params = {"symbol": f"{symbol}{self.QUOTE_SYMBOL}"}
        ticker, book = await asyncio.gather(
            self.get_json("/api/v3/ticker/24hr", params=params),
            self.get_json("/api/v3/ticker/bookTicker", params=params),
            return_exceptions=True,
        )
        if isinstance(ticker, BaseException):
            raise ticker
        if not isinstance(ticker, dict):
            return None

        price = parse_positive(ticker.get("lastPrice"))
        if price is None:
            return None

        # The book ticker is optional; a failed call only drops bid/ask
        book = book if isinstance(book, dict) else {}
        return RawCexTicker(
            last_price=price,
            quote_volume_24h=parse_float(ticker.get("quoteVolume")),
            price_change_24h_percent=parse_float(ticker.get("priceChangePercent")),
            bid=parse_positive(book.get("bidPrice")),
            ask=parse_positive(book.get("askPrice")),
        )


class OKXClient(CexTickerClient):
    exchange_key = "okx"
    BASE_URL = "https://www.okx.com"

    async def _fetch(self, symbol: str) -> RawCexTicker | None:
        data = await self.get_json(
            "/api/v5/market/ticker", params={"instId": f"{symbol}-{self.QUOTE_SYMBOL}"}
        )
        ticker = _first(data.get("data")) if isinstance(data, dict) else None
        if ticker is None:
            return None

        price = parse_positive(ticker.get("last"))
        if price is None:
            return None

        return RawCexTicker(
            last_price=price,
            quote_volume_24h=parse_float(ticker.get("volCcy24h")),
            price_change_24h_percent=percent_change(price, parse_float(ticker.get("open24h"))),
            bid=parse_positive(ticker.get("bidPx")),
            ask=parse_positive(ticker.get("askPx")),
        )


class BybitClient(CexTickerClient):
    exchange_key = "bybit"
    BASE_URL = "https://api.bybit.com"

    async def _fetch(self, symbol: str) -> RawCexTicker | None:
        data = await self.get_json(
            "/v5/market/tickers",
            params={"category": "spot", "symbol": f"{symbol}{self.QUOTE_SYMBOL}"},
        )
        result = data.get("result") if isinstance(data, dict) else None
        ticker = _first(result.get("list")) if isinstance(result, dict) else None
        if ticker is None:
            return None

        price = parse_positive(ticker.get("lastPrice"))
        if price is None:
            return None

        change = parse_float(ticker.get("price24hPcnt"))
        return RawCexTicker(
            last_price=price,
            quote_volume_24h=parse_float(ticker.get("turnover24h")),
            price_change_24h_percent=change * 100 if change is not None else None,
            bid=parse_positive(ticker.get("bid1Price")),
            ask=parse_positive(ticker.get("ask1Price")),
        )


class KrakenClient(CexTickerClient):
    """Kraken: volume is reported in base units and BTC is called XBT."""

    exchange_key = "kraken"
    BASE_URL = "https://api.kraken.com"

    async def _fetch(self, symbol: str) -> RawCexTicker | None:
        kraken_symbol = "XBT" if symbol == "BTC" else symbol
        data = await self.get_json(
            "/0/public/Ticker", params={"pair": f"{kraken_symbol}{self.QUOTE_SYMBOL}"}
        )
        if not isinstance(data, dict) or data.get("error"):
            return None
        result = data.get("result")
        if not isinstance(result, dict) or not result:
            return None
        ticker = next(iter(result.values()))
        if not isinstance(ticker, dict):
            return None

        price = parse_positive(_first_of(ticker.get("c")))
        if price is None:
            return None

        base_volume = parse_float(_nth_of(ticker.get("v"), 1))
        return RawCexTicker(
            last_price=price,
            quote_volume_24h=base_volume * price if base_volume is not None else None,
            price_change_24h_percent=percent_change(price, parse_float(ticker.get("o"))),
            bid=parse_positive(_first_of(ticker.get("b"))),
            ask=parse_positive(_first_of(ticker.get("a"))),
        )


# =============================================================================
# Tier 2
# =============================================================================


class KuCoinClient(CexTickerClient):
    exchange_key = "kucoin"
    BASE_URL = "https://api.kucoin.com"

    async def _fetch(self, symbol: str) -> RawCexTicker | None:
        data = await self.get_json(
            "/api/v1/market/stats", params={"symbol": f"{symbol}-{self.QUOTE_SYMBOL}"}
        )
        ticker = data.get("data") if isinstance(data, dict) else None
        if not isinstance(ticker, dict):
            return None

        price = parse_positive(ticker.get("last"))
        if price is None:
            return None

        change = parse_float(ticker.get("changeRate"))
        return RawCexTicker(
            last_price=price,
            quote_volume_24h=parse_float(ticker.get("volValue")),
            price_change_24h_percent=change * 100 if change is not None else None,
            bid=parse_positive(ticker.get("buy")),
            ask=parse_positive(ticker.get("sell")),
        )


class GateioClient(CexTickerClient):
    exchange_key = "gateio"
    BASE_URL = "https://api.gateio.ws"

    async def _fetch(self, symbol: str) -> RawCexTicker | None:
        data = await self.get_json(
            "/api/v4/spot/tickers",
            params={"currency_pair": f"{symbol}_{self.QUOTE_SYMBOL}"},
        )
        ticker = _first(data)
        if ticker is None:
            return None

        price = parse_positive(ticker.get("last"))
        if price is None:
            return None

        return RawCexTicker(
            last_price=price,
            quote_volume_24h=parse_float(ticker.get("quote_volume")),
            price_change_24h_percent=parse_float(ticker.get("change_percentage")),
            bid=parse_positive(ticker.get("highest_bid")),
            ask=parse_positive(ticker.get("lowest_ask")),
        )


class HTXClient(CexTickerClient):
    """HTX (formerly Huobi): lower-case symbols, base volume in ``amount``."""

    exchange_key = "htx"
    BASE_URL = "https://api.huobi.pro"

    async def _fetch(self, symbol: str) -> RawCexTicker | None:
        data = await self.get_json(
            "/market/detail/merged",
            params={"symbol": f"{symbol}{self.QUOTE_SYMBOL}".lower()},
        )
        if not isinstance(data, dict) or data.get("status") != "ok":
            return None
        ticker = data.get("tick")
        if not isinstance(ticker, dict):
            return None

        price = parse_positive(ticker.get("close"))
        if price is None:
            return None

        base_volume = parse_float(ticker.get("amount"))
        return RawCexTicker(
            last_price=price,
            quote_volume_24h=base_volume * price if base_volume is not None else None,
            price_change_24h_percent=percent_change(price, parse_float(ticker.get("open"))),
            bid=parse_positive(_first_of(ticker.get("bid"))),
            ask=parse_positive(_first_of(ticker.get("ask"))),
        )


# =============================================================================
# Tier 3
# =============================================================================


class MEXCClient(CexTickerClient):
    exchange_key = "mexc"
    BASE_URL = "https://api.mexc.com"

    async def _fetch(self, symbol: str) -> RawCexTicker | None:
        ticker = await self.get_json(
            "/api/v3/ticker/24hr", params={"symbol": f"{symbol}{self.QUOTE_SYMBOL}"}
        )
        if not isinstance(ticker, dict):
            return None

        price = parse_positive(ticker.get("lastPrice"))
        if price is None:
            return None

        return RawCexTicker(
            last_price=price,
            quote_volume_24h=parse_float(ticker.get("quoteVolume")),
            price_change_24h_percent=parse_float(ticker.get("priceChangePercent")),
            bid=parse_positive(ticker.get("bidPrice")),
            ask=parse_positive(ticker.get("askPrice")),
        )


class BitgetClient(CexTickerClient):
    exchange_key = "bitget"
    BASE_URL = "https://api.bitget.com"

    async def _fetch(self, symbol: str) -> RawCexTicker | None:
        data = await self.get_json(
            "/api/v2/spot/market/tickers",
            params={"symbol": f"{symbol}{self.QUOTE_SYMBOL}"},
        )
        ticker = _first(data.get("data")) if isinstance(data, dict) else None
        if ticker is None:
            return None

        price = parse_positive(ticker.get("lastPr"))
        if price is None:
            return None

        return RawCexTicker(
            last_price=price,
            quote_volume_24h=parse_float(ticker.get("quoteVolume")),
            price_change_24h_percent=percent_change(price, parse_float(ticker.get("open"))),
            bid=parse_positive(ticker.get("bidPr")),
            ask=parse_positive(ticker.get("askPr")),
        )


class BingXClient(CexTickerClient):
    exchange_key = "bingx"
    BASE_URL = "https://open-api.bingx.com"

    async def _fetch(self, symbol: str) -> RawCexTicker | None:
        data = await self.get_json(
            "/openApi/spot/v1/ticker/24hr",
            params={"symbol": f"{symbol}-{self.QUOTE_SYMBOL}"},
        )
        payload = data.get("data") if isinstance(data, dict) else None
        # Newer API versions wrap the ticker in a list
        ticker = _first(payload) if isinstance(payload, list) else payload
        if not isinstance(ticker, dict):
            return None

        price = parse_positive(ticker.get("lastPrice"))
        if price is None:
            return None

        return RawCexTicker(
            last_price=price,
            quote_volume_24h=parse_float(ticker.get("quoteVolume")),
            price_change_24h_percent=parse_float(ticker.get("priceChangePercent")),
            bid=parse_positive(ticker.get("bidPrice")),
            ask=parse_positive(ticker.get("askPrice")),
        )


def default_exchange_clients() -> list[CexTickerClient]:
    """One client per supported exchange, tier 1 first."""
    return [
        BinanceClient(),
        OKXClient(),
        BybitClient(),
        KrakenClient(),
        KuCoinClient(),
        GateioClient(),
        HTXClient(),
        MEXCClient(),
        BitgetClient(),
        BingXClient(),
    ]
