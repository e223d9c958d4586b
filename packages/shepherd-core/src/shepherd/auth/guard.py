"""Protected-route matching and gate decisions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlencode

from shepherd.auth.session import Session

PROTECTED_PREFIXES: tuple[str, ...] = (
    "/dashboard",
    "/members",
    "/attendance",
    "/tithes",
    "/events",
    "/reports",
    "/settings",
    "/profile",
)

DEFAULT_SIGN_IN_URL = "/sign-in"

_STATIC_ASSET = re.compile(
    r"\.(?:html?|css|js(?!on)|jpe?g|webp|png|gif|svg|ttf|woff2?|ico|csv|docx?|xlsx?|zip|webmanifest)$",
    re.IGNORECASE,
)
_ALWAYS_MATCHED = ("/api", "/trpc")


def _under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def is_protected(path: str) -> bool:
    """Plain prefix match: ``/members`` also covers ``/membership``."""
    return path.startswith(PROTECTED_PREFIXES)


def is_gated_path(path: str) -> bool:
    """Whether the request should pass through the gate at all.

    Framework internals and static assets skip it; API routes never do.
    """
    if any(_under(path, prefix) for prefix in _ALWAYS_MATCHED):
        return True
    if _under(path, "/_next"):
        return False
    return _STATIC_ASSET.search(path) is None


class GateDecision(str, Enum):
    ALLOW = "allow"
    LOADING = "loading"  # neutral placeholder, never protected content
    REDIRECT = "redirect"


@dataclass(frozen=True)
class GateResult:
    decision: GateDecision
    redirect_to: str | None = None


def sign_in_redirect(path: str, sign_in_url: str = DEFAULT_SIGN_IN_URL) -> str:
    """Sign-in URL that returns the user to ``path`` after login."""
    return f"{sign_in_url}?{urlencode({'redirect_url': path})}"


def gate(path: str, session: Session, sign_in_url: str = DEFAULT_SIGN_IN_URL) -> GateResult:
    if not is_protected(path):
        return GateResult(GateDecision.ALLOW)
    if not session.is_loaded:
        return GateResult(GateDecision.LOADING)
    if not session.is_signed_in:
        return GateResult(GateDecision.REDIRECT, redirect_to=sign_in_redirect(path, sign_in_url))
    return GateResult(GateDecision.ALLOW)
