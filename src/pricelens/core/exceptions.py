"""PriceLens exception hierarchy.

This module defines the base exception class and specialized exceptions
for the error categories that cross the aggregation boundary.
"""


class PriceLensError(Exception):
    """Base exception for all PriceLens errors.

    All custom exceptions in PriceLens should inherit from this class
    to enable consistent error handling and logging.
    """

    pass


class ValidationError(PriceLensError):
    """Raised when request input is invalid.

    Use this for malformed contract addresses, unsupported chains or
    out-of-range trade parameters. Raised before any provider call.

    Example:
        raise ValidationError("Unsupported or missing chain.")
    """

    pass


class ExternalServiceError(PriceLensError):
    """Raised when an external service call fails.

    Use this for API errors from CoinGecko, DexScreener, GoPlus or any of
    the exchange ticker endpoints. Provider clients catch it and degrade
    to an absent result.

    Attributes:
        service: Name of the external service that failed.
        status_code: HTTP status code if available, None otherwise.

    Example:
        raise ExternalServiceError(service="binance", message="Rate limited", status_code=429)
    """

    def __init__(
        self,
        service: str,
        message: str,
        status_code: int | None = None,
    ) -> None:
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service}: {message}")


class TokenNotFoundError(PriceLensError):
    """Raised when no provider returned any data for a token.

    Attributes:
        chain: Chain the lookup was made on.
        address: Normalized contract address.
    """

    def __init__(self, chain: str, address: str) -> None:
        self.chain = chain
        self.address = address
        super().__init__(f"No price data available for {address} on {chain}")
