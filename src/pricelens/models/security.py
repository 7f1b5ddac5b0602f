"""Contract and pool risk models."""

from enum import Enum

from pydantic import BaseModel, Field


class RiskLevel(str, Enum):
    """Coarse risk classification derived from the risk score."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class TokenSecurityReport(BaseModel):
    """Contract risk report derived from one upstream security scan.

    Warnings are ordered most severe first.
    """

    is_honeypot: bool | None = None
    honeypot_reason: str | None = None
    buy_tax_percent: float | None = None
    sell_tax_percent: float | None = None
    is_open_source: bool | None = None
    is_proxy: bool | None = None
    is_mintable: bool | None = None
    can_take_back_ownership: bool | None = None
    owner_address: str | None = None
    creator_address: str | None = None
    holder_count: int | None = None
    lp_holder_count: int | None = None
    risk_level: RiskLevel = RiskLevel.LOW
    risk_score: float = Field(default=0.0, ge=0, le=100)
    warnings: list[str] = Field(default_factory=list)


class PoolRiskAssessment(BaseModel):
    """Liquidity, age and activity warnings for a single pool."""

    pair_address: str
    warnings: list[str] = Field(default_factory=list)
    risk_boost: int = Field(default=0, ge=0)
