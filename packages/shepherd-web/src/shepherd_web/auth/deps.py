"""FastAPI dependencies for the caller's identity-provider session."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

import jwt
import structlog
from fastapi import Depends, HTTPException, Request

from shepherd.api import ApiClient, UsersApi
from shepherd.auth.session import Session
from shepherd_web.auth.tokens import decode_session_token, session_from_claims
from shepherd_web.settings import WebSettings

log = structlog.get_logger(__name__)


def get_settings(request: Request) -> WebSettings:
    return request.app.state.settings


SettingsDep = Annotated[WebSettings, Depends(get_settings)]


def session_token(request: Request, settings: WebSettings) -> str | None:
    """Bearer token from the Authorization header, else the session cookie."""
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header.removeprefix("Bearer ").strip() or None
    return request.cookies.get(settings.session_cookie) or None


def resolve_session(request: Request, settings: WebSettings) -> Session:
    token = session_token(request, settings)
    if token is None:
        return Session.signed_out()
    try:
        claims = decode_session_token(token, settings)
    except jwt.PyJWTError as exc:
        log.debug("session_token_rejected", error=str(exc))
        return Session.signed_out()
    return session_from_claims(claims)


def get_session(request: Request, settings: SettingsDep) -> Session:
    return resolve_session(request, settings)


SessionDep = Annotated[Session, Depends(get_session)]


def require_signed_in(session: SessionDep) -> Session:
    if session.identity is None:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return session


SignedInDep = Annotated[Session, Depends(require_signed_in)]


def get_session_token(request: Request, settings: SettingsDep) -> str | None:
    return session_token(request, settings)


async def get_users_api(
    request: Request,
    settings: SettingsDep,
    token: Annotated[str | None, Depends(get_session_token)],
) -> AsyncIterator[UsersApi]:
    """Backend users client that forwards the caller's own bearer token."""

    async def _token() -> str | None:
        return token

    async with ApiClient(
        settings.backend_url,
        token_provider=_token,
        timeout=settings.backend_timeout,
        transport=request.app.state.backend_transport,
    ) as client:
        yield UsersApi(client)


UsersApiDep = Annotated[UsersApi, Depends(get_users_api)]
