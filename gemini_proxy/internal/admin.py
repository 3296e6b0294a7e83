from __future__ import annotations

from fastapi import APIRouter, Depends

from gemini_proxy.core.config import ProxySettings
from gemini_proxy.dependencies import get_settings

router = APIRouter(prefix="/internal", tags=["internal"])


@router.get("/healthz")
async def healthz(settings: ProxySettings = Depends(get_settings)) -> dict[str, object]:
    return {
        "status": "ok",
        "credential_configured": settings.api_key is not None,
        "default_model": settings.default_model,
    }
