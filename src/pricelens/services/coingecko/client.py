"""CoinGecko API client for token metadata and market listings.

Resolves a contract address to the coin's name, symbol, image, reference
price and the markets it is listed on. Markets are classified as CEX or DEX
from their name and CoinGecko's anomaly/staleness flags.

API Documentation: https://docs.coingecko.com/reference/introduction
Rate Limits: ~30 requests/minute on the public/demo plan
"""

from typing import Any

import structlog

from pricelens.config import get_settings
from pricelens.constants.chains import COINGECKO_PLATFORM_BY_CHAIN
from pricelens.constants.exchanges import DEX_MARKET_MARKERS
from pricelens.core.exceptions import ExternalServiceError
from pricelens.models.token import Chain, MarketTicker, TokenMetadata
from pricelens.services.base import BaseAPIClient
from pricelens.services.coingecko.models import CoinResponse, CoinTicker
from pricelens.services.parsing import parse_float

log = structlog.get_logger(__name__)


def is_dex_market(market_name: str) -> bool:
    """True when the market name contains a known DEX marker."""
    return any(marker in market_name for marker in DEX_MARKET_MARKERS)


def _usd(block: dict[str, Any]) -> float | None:
    value = block.get("usd")
    if isinstance(value, bool) or not isinstance(value, int | float):
        return None
    return parse_float(value)


def to_market_ticker(ticker: CoinTicker) -> MarketTicker:
    """Normalize a CoinGecko ticker.

    A ticker counts as CEX only when its market is not a known DEX and
    CoinGecko explicitly reports it as neither anomalous nor stale.
    """
    market_name = ticker.market.name
    is_cex = (
        not is_dex_market(market_name)
        and ticker.is_anomaly is False
        and ticker.is_stale is False
    )
    return MarketTicker(
        market_name=market_name,
        target_pair_id=ticker.target or "",
        price_usd=_usd(ticker.converted_last),
        volume_usd=_usd(ticker.converted_volume),
        is_cex=is_cex,
    )


class CoinGeckoClient(BaseAPIClient):
    """CoinGecko API client.

    Endpoints used:
        - GET /coins/{platform}/contract/{address} - Coin by contract

    Example:
        client = CoinGeckoClient()
        try:
            metadata = await client.fetch_token_metadata(Chain.ETHEREUM, "0x6982...")
        finally:
            await client.close()
    """

    API_KEY_HEADER = "x-cg-demo-api-key"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        api_key: str | None = None,
    ) -> None:
        """Initialize CoinGecko client, sending the demo key when configured."""
        settings = get_settings()
        key = api_key if api_key is not None else settings.coingecko_api_key.get_secret_value()
        super().__init__(
            service="coingecko",
            base_url=base_url or settings.coingecko_base_url,
            timeout=timeout or settings.provider_timeout_seconds,
            headers={self.API_KEY_HEADER: key} if key else None,
            max_attempts=settings.provider_max_attempts,
        )

    async def fetch_token_metadata(self, chain: Chain, address: str) -> TokenMetadata | None:
        """Fetch coin metadata and market listings for a contract.

        Args:
            chain: Chain the contract lives on.
            address: Contract address (lowercased).

        Returns:
            TokenMetadata, or None when CoinGecko does not know the token
            or the request fails.
        """
        platform = COINGECKO_PLATFORM_BY_CHAIN[chain.value]

        try:
            data = await self.get_json(f"/coins/{platform}/contract/{address}")
        except ExternalServiceError as e:
            if e.status_code == 404:
                log.debug("coingecko_token_unknown", chain=chain.value, address=address)
            else:
                log.warning(
                    "fetch_token_metadata_failed",
                    chain=chain.value,
                    address=address,
                    error=str(e),
                )
            return None

        if not isinstance(data, dict):
            log.warning("coingecko_unexpected_format", data_type=type(data).__name__)
            return None

        raw_tickers = data.pop("tickers", None)
        try:
            coin = CoinResponse.model_validate(data)
        except Exception as e:
            log.warning("coingecko_parse_error", address=address, error=str(e))
            return None

        tickers = []
        for item in raw_tickers if isinstance(raw_tickers, list) else []:
            try:
                tickers.append(to_market_ticker(CoinTicker.model_validate(item)))
            except Exception as e:
                log.debug("coingecko_ticker_parse_error", error=str(e))

        image = coin.image
        price = coin.market_data.current_price if coin.market_data else {}
        metadata = TokenMetadata(
            id=coin.id,
            name=coin.name,
            symbol=coin.symbol.upper(),
            image_url=(image.small or image.thumb) if image else None,
            price_usd=_usd(price),
            tickers=tickers,
        )
        log.debug(
            "token_metadata_fetched",
            coin_id=metadata.id,
            symbol=metadata.symbol,
            tickers=len(tickers),
        )
        return metadata
