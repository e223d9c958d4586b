"""Route gate applied to every console request."""

from __future__ import annotations

import structlog
from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from shepherd.auth.guard import GateDecision, gate, is_gated_path
from shepherd_web.auth.deps import resolve_session
from shepherd_web.settings import WebSettings

log = structlog.get_logger(__name__)

PATHNAME_HEADER = "x-pathname"


class RouteGateMiddleware(BaseHTTPMiddleware):
    """Redirects signed-out callers away from protected sections.

    Static assets and framework internals bypass the gate. Every gated request
    is forwarded with its path in the ``x-pathname`` header, replacing any
    value the caller supplied.
    """

    def __init__(self, app: ASGIApp, settings: WebSettings) -> None:
        super().__init__(app)
        self.settings = settings

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        header = PATHNAME_HEADER.encode("latin-1")
        # the header is only ever set here; drop any copy the caller sent
        headers = [(name, value) for name, value in request.scope["headers"] if name.lower() != header]
        request.scope["headers"] = headers
        if not is_gated_path(path):
            return await call_next(request)

        session = resolve_session(request, self.settings)
        result = gate(path, session, self.settings.sign_in_url)
        if result.decision is GateDecision.REDIRECT:
            log.info("gate_redirect", path=path)
            return RedirectResponse(result.redirect_to, status_code=307)
        # resolve_session always yields a loaded session, so LOADING never reaches here

        request.scope["headers"] = [*headers, (header, path.encode("latin-1", errors="replace"))]
        return await call_next(request)
