"""Identity-provider session token decoding."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from shepherd.auth.session import Session
from shepherd_web.settings import WebSettings


def decode_session_token(token: str, settings: WebSettings) -> dict[str, Any]:
    """Decode and verify a session JWT. Raises jwt.PyJWTError on failure."""
    return jwt.decode(token, settings.session_key, algorithms=[settings.session_algorithm])


def session_from_claims(claims: dict[str, Any]) -> Session:
    subject = claims.get("sub")
    if not subject:
        return Session.signed_out()
    return Session.signed_in(
        external_id=str(subject),
        primary_email=claims.get("email", ""),
        first_name=claims.get("first_name") or claims.get("given_name", ""),
        last_name=claims.get("last_name") or claims.get("family_name", ""),
    )


def create_session_token(
    external_id: str,
    settings: WebSettings,
    email: str = "",
    first_name: str = "",
    last_name: str = "",
    expires_delta: timedelta = timedelta(minutes=60),
) -> str:
    """Mint a session token in the provider's format (local development and tests)."""
    now = datetime.now(UTC)
    payload = {
        "sub": external_id,
        "email": email,
        "first_name": first_name,
        "last_name": last_name,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, settings.session_key, algorithm=settings.session_algorithm)
