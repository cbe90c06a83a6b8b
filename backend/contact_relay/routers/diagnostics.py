# contact_relay/routers/diagnostics.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from contact_relay.core.settings import Settings
from contact_relay.dependencies import get_settings


def build_router(path: str) -> APIRouter:
    """Config presence report, mounted at a deployment-chosen path."""
    router = APIRouter(tags=["diagnostics"])

    @router.get(path, include_in_schema=False)
    async def diagnostics(settings: Settings = Depends(get_settings)):
        return {
            "ok": True,
            "path": path,
            "envs": settings.config_presence(),
            "cors_origins": settings.allowed_origins,
            "time": datetime.now(timezone.utc).isoformat(),
        }

    return router
