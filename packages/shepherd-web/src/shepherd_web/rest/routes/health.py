"""Liveness and readiness probes."""

from fastapi import APIRouter

from shepherd_web.auth.deps import SettingsDep

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
async def ready(settings: SettingsDep) -> dict[str, str]:
    """Ready once settings are loaded; reports which backend requests are relayed to."""
    return {"status": "ready", "backend": settings.backend_url}
