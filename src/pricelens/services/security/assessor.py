"""Contract and pool risk assessment.

Turns a raw GoPlus flag record into a 0-100 risk score, a risk level and an
ordered list of warnings. Warnings are grouped most severe first:

1. honeypot-class flags (critical)
2. structural contract risks (high)
3. buy/sell taxes above 5%
4. informational notes (unverified source, few holders)
"""

import structlog

from pricelens.constants.chains import GOPLUS_CHAIN_IDS
from pricelens.constants.security import (
    CRITICAL_RISK_SCORE,
    HIGH_RISK_SCORE,
    LOW_HOLDER_COUNT,
    LOW_LP_HOLDER_COUNT,
    MAX_RISK_SCORE,
    MEDIUM_RISK_SCORE,
    MIN_RISK_SCORE,
    POOL_AGE_RISK_BANDS,
    POOL_LIQUIDITY_RISK_BANDS,
    POOL_LOW_ACTIVITY_BOOST,
    POOL_LOW_ACTIVITY_TXNS,
    RISK_FLAG_DISCOUNTS,
    RISK_FLAG_POINTS,
    TAX_SURCHARGE_CAP,
    TAX_SURCHARGE_MULTIPLIER,
    TAX_SURCHARGE_THRESHOLD_PERCENT,
    TAX_WARNING_THRESHOLD_PERCENT,
)
from pricelens.models.quotes import DexPoolQuote
from pricelens.models.security import PoolRiskAssessment, RiskLevel, TokenSecurityReport
from pricelens.models.token import TokenIdentity
from pricelens.services.goplus.client import GoPlusClient
from pricelens.services.goplus.models import GoPlusTokenSecurity
from pricelens.services.parsing import parse_float, parse_int

log = structlog.get_logger(__name__)

HONEYPOT_CREATOR_REASON = "Creator has made honeypot tokens before"

CRITICAL_FLAG_WARNINGS: tuple[tuple[str, str], ...] = (
    ("is_honeypot", "HONEYPOT DETECTED - Cannot sell tokens!"),
    ("cannot_sell_all", "Cannot sell all tokens - Potential honeypot"),
    ("cannot_buy", "Cannot buy - Token is not tradeable"),
)

HIGH_FLAG_WARNINGS: tuple[tuple[str, str], ...] = (
    ("is_proxy", "Proxy contract - Code can be changed"),
    ("is_mintable", "Mintable - New tokens can be created"),
    ("can_take_back_ownership", "Ownership can be reclaimed"),
    ("owner_change_balance", "Owner can modify balances"),
    ("hidden_owner", "Hidden owner detected"),
    ("selfdestruct", "Contract can self-destruct"),
    ("transfer_pausable", "Transfers can be paused"),
    ("trading_cooldown", "Trading cooldown enabled"),
)


def tax_percent(raw: str | None) -> float | None:
    """Convert a GoPlus tax fraction ("0.05") to percent (5.0)."""
    fraction = parse_float(raw)
    return fraction * 100 if fraction is not None else None


def tax_surcharge(tax: float | None) -> float:
    """Extra risk points for a tax above the surcharge threshold."""
    if tax is None or tax <= TAX_SURCHARGE_THRESHOLD_PERCENT:
        return 0.0
    return min(
        (tax - TAX_SURCHARGE_THRESHOLD_PERCENT) * TAX_SURCHARGE_MULTIPLIER,
        TAX_SURCHARGE_CAP,
    )


def risk_level_for(score: float) -> RiskLevel:
    """Map a risk score to its level."""
    if score >= CRITICAL_RISK_SCORE:
        return RiskLevel.CRITICAL
    if score >= HIGH_RISK_SCORE:
        return RiskLevel.HIGH
    if score >= MEDIUM_RISK_SCORE:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


def calculate_risk_score(record: GoPlusTokenSecurity) -> float:
    """Additive risk score clamped to [0, 100].

    A confirmed honeypot never scores below the critical threshold.
    """
    score = float(sum(points for flag, points in RISK_FLAG_POINTS.items() if record.flag(flag)))
    score += tax_surcharge(tax_percent(record.buy_tax))
    score += tax_surcharge(tax_percent(record.sell_tax))
    score -= sum(points for flag, points in RISK_FLAG_DISCOUNTS.items() if record.flag(flag))

    score = max(MIN_RISK_SCORE, min(MAX_RISK_SCORE, score))
    if record.flag("is_honeypot"):
        score = max(score, CRITICAL_RISK_SCORE)
    return float(score)


def generate_warnings(record: GoPlusTokenSecurity) -> list[str]:
    """Human-readable warnings, most severe first."""
    warnings = [text for flag, text in CRITICAL_FLAG_WARNINGS if record.flag(flag)]
    warnings.extend(text for flag, text in HIGH_FLAG_WARNINGS if record.flag(flag))

    buy_tax = tax_percent(record.buy_tax)
    sell_tax = tax_percent(record.sell_tax)
    if buy_tax is not None and buy_tax > TAX_WARNING_THRESHOLD_PERCENT:
        warnings.append(f"Buy tax: {buy_tax:.1f}%")
    if sell_tax is not None and sell_tax > TAX_WARNING_THRESHOLD_PERCENT:
        warnings.append(f"Sell tax: {sell_tax:.1f}%")

    if not record.flag("is_open_source"):
        warnings.append("Contract is not verified/open source")

    holder_count = parse_int(record.holder_count)
    if holder_count is not None and holder_count < LOW_HOLDER_COUNT:
        warnings.append(f"Low holder count: {holder_count}")

    lp_holder_count = parse_int(record.lp_holder_count)
    if lp_holder_count is not None and lp_holder_count < LOW_LP_HOLDER_COUNT:
        warnings.append(f"Very few LP holders: {lp_holder_count}")

    return warnings


def build_security_report(record: GoPlusTokenSecurity) -> TokenSecurityReport:
    """Derive the full report from one raw record."""
    score = calculate_risk_score(record)
    return TokenSecurityReport(
        is_honeypot=record.tri_state("is_honeypot"),
        honeypot_reason=(
            HONEYPOT_CREATOR_REASON if record.flag("honeypot_with_same_creator") else None
        ),
        buy_tax_percent=tax_percent(record.buy_tax),
        sell_tax_percent=tax_percent(record.sell_tax),
        is_open_source=record.tri_state("is_open_source"),
        is_proxy=record.tri_state("is_proxy"),
        is_mintable=record.tri_state("is_mintable"),
        can_take_back_ownership=record.tri_state("can_take_back_ownership"),
        owner_address=record.owner_address or None,
        creator_address=record.creator_address or None,
        holder_count=parse_int(record.holder_count),
        lp_holder_count=parse_int(record.lp_holder_count),
        risk_level=risk_level_for(score),
        risk_score=score,
        warnings=generate_warnings(record),
    )


def assess_pool_risk(pool: DexPoolQuote) -> PoolRiskAssessment:
    """Liquidity, age and activity warnings for one pool."""
    warnings: list[str] = []
    boost = 0

    liquidity_warnings = (
        "Extremely low liquidity (<$1K) - High slippage risk",
        "Low liquidity (<$10K) - Significant slippage expected",
        "Moderate liquidity (<$50K)",
    )
    if pool.liquidity_usd is not None:
        for (bound, points), text in zip(POOL_LIQUIDITY_RISK_BANDS, liquidity_warnings, strict=True):
            if pool.liquidity_usd < bound:
                warnings.append(text)
                boost += points
                break

    age_warnings = (
        "Pool created less than 1 hour ago - Extreme caution!",
        "Pool is less than 24 hours old",
        "Pool is less than 3 days old",
    )
    if pool.pool_age_hours is not None:
        for (bound, points), text in zip(POOL_AGE_RISK_BANDS, age_warnings, strict=True):
            if pool.pool_age_hours < bound:
                warnings.append(text)
                boost += points
                break

    if pool.transactions_24h.total < POOL_LOW_ACTIVITY_TXNS:
        warnings.append(f"Very low trading activity (<{POOL_LOW_ACTIVITY_TXNS} txns/day)")
        boost += POOL_LOW_ACTIVITY_BOOST

    return PoolRiskAssessment(pair_address=pool.pair_address, warnings=warnings, risk_boost=boost)


class SecurityAssessor:
    """Fetches and scores contract security reports."""

    def __init__(self, client: GoPlusClient | None = None) -> None:
        self.client = client or GoPlusClient()

    async def assess(self, identity: TokenIdentity) -> TokenSecurityReport | None:
        """Assess a contract.

        Args:
            identity: Validated chain and address.

        Returns:
            Report, or None when the chain is not covered or no record exists.
        """
        chain_id = GOPLUS_CHAIN_IDS.get(identity.chain.value)
        if chain_id is None:
            log.debug("security_chain_unsupported", chain=identity.chain.value)
            return None

        record = await self.client.fetch_token_security(chain_id, identity.contract_address)
        if record is None:
            return None

        report = build_security_report(record)
        log.info(
            "security_assessed",
            chain=identity.chain.value,
            address=identity.contract_address,
            risk_score=report.risk_score,
            risk_level=report.risk_level.value,
        )
        return report

    async def close(self) -> None:
        await self.client.close()
