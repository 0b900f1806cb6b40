from __future__ import annotations

from fastapi import APIRouter

from app.core.dependencies import SettingsDep, StateDep

router = APIRouter(tags=["health"])

@router.get("/health", summary="Health check")
async def healthcheck(settings: SettingsDep, state: StateDep) -> dict[str, str | int]:
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "version": settings.VERSION,
        "environment": settings.ENVIRONMENT,
        "cached_reports": len(state.cache),
        "tracked_clients": len(state.rate_limiter),
    }


__all__ = ["router"]
