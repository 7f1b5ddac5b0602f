"""Token identity and metadata models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pricelens.core.exceptions import ValidationError

EVM_ADDRESS_PREFIX = "0x"
MIN_EVM_ADDRESS_LENGTH = 10
MIN_SOLANA_ADDRESS_LENGTH = 32
MAX_SOLANA_ADDRESS_LENGTH = 44


class Chain(str, Enum):
    """Chains served by the aggregator."""

    ETHEREUM = "ethereum"
    BSC = "bsc"
    POLYGON = "polygon"
    ARBITRUM = "arbitrum"
    OPTIMISM = "optimism"
    BASE = "base"
    SOLANA = "solana"
    AVALANCHE = "avalanche"
    FANTOM = "fantom"
    ZKSYNC = "zksync"


def is_valid_contract_address(address: str) -> bool:
    """Check EVM (0x-prefixed) or Solana-style (base58 length) address shape."""
    if address.startswith(EVM_ADDRESS_PREFIX):
        return len(address) >= MIN_EVM_ADDRESS_LENGTH
    return MIN_SOLANA_ADDRESS_LENGTH <= len(address) <= MAX_SOLANA_ADDRESS_LENGTH


class TokenIdentity(BaseModel):
    """Aggregation key: chain plus lowercased contract address."""

    model_config = ConfigDict(frozen=True)

    chain: Chain
    contract_address: str

    @field_validator("contract_address")
    @classmethod
    def normalize_address(cls, v: str) -> str:
        """Trim and lowercase the address, rejecting malformed ones."""
        address = v.strip()
        if not address or not is_valid_contract_address(address):
            raise ValueError("Provide a valid contract address.")
        return address.lower()

    @classmethod
    def parse(cls, chain: str | Chain | None, address: str | None) -> "TokenIdentity":
        """Build an identity from raw request input.

        Args:
            chain: Chain identifier, e.g. "ethereum".
            address: Contract address as entered.

        Returns:
            Validated TokenIdentity.

        Raises:
            ValidationError: If the address is malformed or the chain unsupported.
        """
        address = (address or "").strip()
        if not address or not is_valid_contract_address(address):
            raise ValidationError("Provide a valid contract address.")

        try:
            parsed_chain = Chain(chain)
        except ValueError as e:
            raise ValidationError("Unsupported or missing chain.") from e

        return cls(chain=parsed_chain, contract_address=address)

    def cache_key(self, prefix: str) -> str:
        """Cache key such as ``price:ethereum:0xabc...``."""
        return f"{prefix}:{self.chain.value}:{self.contract_address}"


class MarketTicker(BaseModel):
    """One market listing reported by the metadata service."""

    market_name: str
    target_pair_id: str = ""
    price_usd: float | None = None
    volume_usd: float | None = None
    is_cex: bool = False


class TokenMetadata(BaseModel):
    """Normalized token metadata with the markets it trades on."""

    id: str
    name: str
    symbol: str
    image_url: str | None = None
    price_usd: float | None = None
    tickers: list[MarketTicker] = Field(default_factory=list)


class TokenDisplay(BaseModel):
    """Token header shown alongside an aggregated view."""

    name: str
    symbol: str
    chain: Chain
    address: str
    image_url: str | None = None


class TokenSearchResult(BaseModel):
    """Resolved token for an address lookup."""

    id: str
    name: str
    symbol: str
    chain: Chain
    address: str
    image_url: str | None = None
    price_usd: float | None = None


class DexTokenMatch(BaseModel):
    """Token found by free-text search over DEX pairs."""

    address: str
    chain: Chain
    name: str
    symbol: str
    price_usd: float | None = None
