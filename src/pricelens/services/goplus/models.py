"""Pydantic model for GoPlus token security records.

GoPlus reports every flag as the string "1" or "0" (or omits it) and taxes
as decimal fractions ("0.05" = 5%).

API Documentation: https://docs.gopluslabs.io/reference/token-security
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

FLAG_SET = "1"
FLAG_CLEAR = "0"


class GoPlusTokenSecurity(BaseModel):
    """Raw security record for one contract."""

    model_config = ConfigDict(extra="ignore")

    is_honeypot: str | None = None
    honeypot_with_same_creator: str | None = None
    cannot_sell_all: str | None = None
    cannot_buy: str | None = None
    transfer_pausable: str | None = None
    trading_cooldown: str | None = None
    is_proxy: str | None = None
    is_mintable: str | None = None
    can_take_back_ownership: str | None = None
    owner_change_balance: str | None = None
    hidden_owner: str | None = None
    selfdestruct: str | None = None
    external_call: str | None = None
    is_open_source: str | None = None
    is_in_dex: str | None = None
    buy_tax: str | None = None
    sell_tax: str | None = None
    owner_address: str | None = None
    creator_address: str | None = None
    holder_count: str | None = None
    lp_holder_count: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        if v is None:
            return None
        return str(v)

    def flag(self, name: str) -> bool:
        """True when the named flag is set."""
        return getattr(self, name, None) == FLAG_SET

    def tri_state(self, name: str) -> bool | None:
        """True/False for "1"/"0", None when unknown."""
        value = getattr(self, name, None)
        if value == FLAG_SET:
            return True
        if value == FLAG_CLEAR:
            return False
        return None
