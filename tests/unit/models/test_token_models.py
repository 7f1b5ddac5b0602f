"""Unit tests for token identity and address validation."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from pricelens.core.exceptions import ValidationError
from pricelens.models.token import Chain, TokenIdentity, is_valid_contract_address
from tests.fixtures.provider_payloads import BONK_MINT, PEPE_ADDRESS, PEPE_ADDRESS_MIXED_CASE


class TestAddressValidation:
    """Tests for contract address shape checks."""

    @pytest.mark.parametrize(
        ("address", "expected"),
        [
            (PEPE_ADDRESS, True),
            ("0x12345678", True),  # shortest accepted EVM form
            ("0x1234567", False),
            (BONK_MINT, True),
            ("1" * 32, True),
            ("1" * 44, True),
            ("1" * 31, False),
            ("1" * 45, False),
            ("", False),
        ],
    )
    def test_is_valid_contract_address(self, address: str, expected: bool) -> None:
        assert is_valid_contract_address(address) is expected


class TestTokenIdentity:
    """Tests for TokenIdentity.parse and normalization."""

    def test_parse_lowercases_and_trims_address(self) -> None:
        identity = TokenIdentity.parse("ethereum", f"  {PEPE_ADDRESS_MIXED_CASE} ")

        assert identity.chain == Chain.ETHEREUM
        assert identity.contract_address == PEPE_ADDRESS

    def test_parse_lowercases_solana_mint(self) -> None:
        identity = TokenIdentity.parse("solana", BONK_MINT)

        assert identity.contract_address == BONK_MINT.lower()

    def test_parse_rejects_malformed_address(self) -> None:
        with pytest.raises(ValidationError, match="valid contract address"):
            TokenIdentity.parse("ethereum", "0xabc")

    def test_parse_rejects_missing_address(self) -> None:
        with pytest.raises(ValidationError, match="valid contract address"):
            TokenIdentity.parse("ethereum", None)

    @pytest.mark.parametrize("chain", ["tron", "", None, "ETH"])
    def test_parse_rejects_unsupported_chain(self, chain: str | None) -> None:
        with pytest.raises(ValidationError, match="Unsupported or missing chain"):
            TokenIdentity.parse(chain, PEPE_ADDRESS)

    def test_address_checked_before_chain(self) -> None:
        """Both invalid: the address error wins."""
        with pytest.raises(ValidationError, match="valid contract address"):
            TokenIdentity.parse("tron", "bad")

    def test_direct_construction_validates(self) -> None:
        with pytest.raises(PydanticValidationError):
            TokenIdentity(chain=Chain.BSC, contract_address="0x12")

    def test_identity_is_frozen(self) -> None:
        identity = TokenIdentity.parse("bsc", PEPE_ADDRESS)
        with pytest.raises(PydanticValidationError):
            identity.contract_address = "0x0000000000"  # type: ignore[misc]

    def test_cache_key(self) -> None:
        identity = TokenIdentity.parse("base", PEPE_ADDRESS_MIXED_CASE)

        assert identity.cache_key("price") == f"price:base:{PEPE_ADDRESS}"
        assert identity.cache_key("search") == f"search:base:{PEPE_ADDRESS}"

    def test_supported_chain_set_is_fixed(self) -> None:
        assert {c.value for c in Chain} == {
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
        }
