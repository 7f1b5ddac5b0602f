"""GoPlus Security API client for contract risk scans.

API Documentation: https://docs.gopluslabs.io/reference/token-security
"""

import structlog

from pricelens.config import get_settings
from pricelens.core.exceptions import ExternalServiceError
from pricelens.services.base import BaseAPIClient
from pricelens.services.goplus.models import GoPlusTokenSecurity

log = structlog.get_logger(__name__)


class GoPlusClient(BaseAPIClient):
    """GoPlus token security client.

    Endpoints used:
        - GET /api/v1/token_security/{chain_id}?contract_addresses={address}
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = None) -> None:
        """Initialize GoPlus client from settings."""
        settings = get_settings()
        super().__init__(
            service="goplus",
            base_url=base_url or settings.goplus_base_url,
            timeout=timeout or settings.provider_timeout_seconds,
            max_attempts=settings.provider_max_attempts,
        )

    async def fetch_token_security(
        self, chain_id: str, address: str
    ) -> GoPlusTokenSecurity | None:
        """Fetch the raw security record for a contract.

        Args:
            chain_id: GoPlus numeric chain id, e.g. "1".
            address: Contract address (lowercased).

        Returns:
            Parsed record, or None when GoPlus has no record or fails.
        """
        try:
            data = await self.get_json(
                f"/api/v1/token_security/{chain_id}",
                params={"contract_addresses": address},
            )
        except ExternalServiceError as e:
            log.warning("fetch_token_security_failed", chain_id=chain_id, error=str(e))
            return None

        result = data.get("result") if isinstance(data, dict) else None
        record = result.get(address) if isinstance(result, dict) else None
        if not isinstance(record, dict):
            log.debug("token_security_missing", chain_id=chain_id, address=address)
            return None

        try:
            return GoPlusTokenSecurity.model_validate(record)
        except Exception as e:
            log.warning("token_security_parse_error", address=address, error=str(e))
            return None
