"""Token search routes."""

from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel

from pricelens.api.dependencies import SearchServiceDep
from pricelens.models.token import DexTokenMatch, TokenSearchResult

router = APIRouter(prefix="/search", tags=["search"])


class SearchRequest(BaseModel):
    """API request to resolve a token by contract address."""

    address: str = ""
    chain: str = ""


@router.post("", response_model=TokenSearchResult)
async def search_token(
    request: SearchRequest,
    service: SearchServiceDep,
) -> TokenSearchResult:
    """Resolve a token by chain and contract address."""
    return await service.search(request.chain, request.address)


@router.get("/tokens", response_model=list[DexTokenMatch])
async def search_tokens(
    service: SearchServiceDep,
    q: Annotated[str, Query(max_length=100)] = "",
) -> list[DexTokenMatch]:
    """Find tokens by name or symbol."""
    return await service.search_text(q)
