"""Aggregated price and price-impact routes."""

from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from pricelens.api.dependencies import AggregatorDep
from pricelens.models.pricing import AggregatedPriceView, PriceImpactReport, TradeDirection

router = APIRouter(tags=["price"])


class PriceImpactRequest(BaseModel):
    """API request to estimate the price impact of a trade."""

    address: str = ""
    chain: str = ""
    amount: float = Field(default=1000.0, gt=0)
    direction: TradeDirection = TradeDirection.BUY


@router.get("/price", response_model=AggregatedPriceView)
async def get_price(
    aggregator: AggregatorDep,
    address: Annotated[str, Query()] = "",
    chain: Annotated[str, Query()] = "",
) -> AggregatedPriceView:
    """Aggregate DEX, CEX and security data for one token."""
    return await aggregator.aggregate(chain, address)


@router.post("/price-impact", response_model=PriceImpactReport)
async def get_price_impact(
    request: PriceImpactRequest,
    aggregator: AggregatorDep,
) -> PriceImpactReport:
    """Estimate execution of a notional trade on every venue."""
    return await aggregator.estimate_price_impact(
        request.chain, request.address, request.amount, request.direction
    )
