"""Session relay endpoints: backend user sync and sign-out."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse

from shepherd.api import ApiError
from shepherd.api.schemas import SyncUserRequest
from shepherd_web.auth.deps import SettingsDep, SignedInDep, UsersApiDep

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth")


@router.post("/sync")
async def sync_user(body: SyncUserRequest, session: SignedInDep, users: UsersApiDep) -> dict:
    """Forward the caller's identity to the backend with the caller's own token."""
    try:
        user = await users.sync(body)
    except ApiError as exc:
        if exc.status_code is None or exc.status_code < 400:
            log.error("sync_relay_unreachable", external_id=session.identity, error=str(exc))
            raise HTTPException(status_code=500, detail="Internal Server Error") from exc
        log.error("sync_relay_rejected", external_id=session.identity, status=exc.status_code, detail=exc.detail)
        raise HTTPException(status_code=exc.status_code, detail="Failed to sync with backend") from exc
    return user.to_wire()


@router.post("/signout")
async def sign_out(settings: SettingsDep) -> JSONResponse:
    response = JSONResponse({"success": True, "redirectUrl": settings.sign_in_url})
    response.set_cookie(
        settings.session_cookie,
        "",
        max_age=0,
        path="/",
        httponly=True,
        secure=settings.secure_cookies,
        samesite="lax",
    )
    return response
