"""Health check endpoint."""

from typing import Any

from fastapi import APIRouter

from pricelens.api.dependencies import SettingsDep, get_result_cache

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(settings: SettingsDep) -> dict[str, Any]:
    """
    Health check endpoint.

    Returns:
        dict with status, version and result cache statistics.
    """
    return {
        "status": "ok",
        "version": settings.app_version,
        "cache": get_result_cache().get_stats(),
    }
