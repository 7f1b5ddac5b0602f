"""DexScreener API client for pool data.

This module provides a client for interacting with the DexScreener API
to fetch every trading pair of a token and to search pairs by text.

API Documentation: https://docs.dexscreener.com/api/reference
Rate Limits: ~300 requests/minute (no auth required)
"""

from typing import Any

import structlog

from pricelens.config import get_settings
from pricelens.core.exceptions import ExternalServiceError
from pricelens.services.base import BaseAPIClient
from pricelens.services.dexscreener.models import TokenPair

log = structlog.get_logger(__name__)


class DexScreenerClient(BaseAPIClient):
    """DexScreener API client for pool discovery.

    Endpoints used:
        - GET /latest/dex/tokens/{address} - All pairs of a token
        - GET /latest/dex/search?q={query} - Free-text pair search

    Both methods return an empty list on any failure so a dead pool
    provider only removes DEX data from the aggregate.

    Example:
        client = DexScreenerClient()
        try:
            pairs = await client.fetch_token_pairs("0x6982...")
        finally:
            await client.close()
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        """Initialize DexScreener client from settings."""
        settings = get_settings()
        super().__init__(
            service="dexscreener",
            base_url=base_url or settings.dexscreener_base_url,
            timeout=timeout or settings.provider_timeout_seconds,
            max_attempts=settings.provider_max_attempts,
        )

    async def fetch_token_pairs(self, address: str) -> list[TokenPair]:
        """Fetch raw pair data for a token address on every chain.

        Args:
            address: Token contract address (lowercased).

        Returns:
            Parsed pairs; empty on error or when no pair exists.
        """
        log.debug("fetching_token_pairs", address=address)

        try:
            data = await self.get_json(f"/latest/dex/tokens/{address}")
        except ExternalServiceError as e:
            log.warning("fetch_token_pairs_failed", address=address, error=str(e))
            return []

        pairs = self._parse_pairs(data)
        log.debug("token_pairs_fetched", address=address, count=len(pairs))
        return pairs

    async def search_pairs(self, query: str) -> list[TokenPair]:
        """Search pairs by token name, symbol or address.

        Args:
            query: Free-text query.

        Returns:
            Parsed pairs in DexScreener relevance order; empty on error.
        """
        try:
            data = await self.get_json("/latest/dex/search", params={"q": query})
        except ExternalServiceError as e:
            log.warning("search_pairs_failed", query=query, error=str(e))
            return []

        return self._parse_pairs(data)

    def _parse_pairs(self, data: Any) -> list[TokenPair]:
        """Parse pairs one by one, skipping malformed entries."""
        if not isinstance(data, dict) or not isinstance(data.get("pairs"), list):
            return []

        pairs = []
        for item in data["pairs"]:
            try:
                pairs.append(TokenPair.model_validate(item))
            except Exception as e:
                log.warning("token_pair_parse_error", error=str(e))
        return pairs
