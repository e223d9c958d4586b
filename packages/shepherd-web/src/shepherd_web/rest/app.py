"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shepherd_web.rest.middleware import RouteGateMiddleware
from shepherd_web.rest.routes.auth import router as auth_router
from shepherd_web.rest.routes.health import router as health_router
from shepherd_web.rest.routes.sections import router as sections_router
from shepherd_web.settings import WebSettings

log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    log.info("console_started", backend_url=app.state.settings.backend_url)
    yield
    log.info("console_stopped")


def create_app(
    settings: WebSettings | None = None,
    backend_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    settings = settings or WebSettings()
    app = FastAPI(
        title="Shepherd Console",
        description="Route gating and session relay for the church management console",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.backend_transport = backend_transport

    app.add_middleware(RouteGateMiddleware, settings=settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Public routes
    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router, prefix="/api", tags=["auth"])

    # Protected sections (gated by RouteGateMiddleware)
    app.include_router(sections_router, tags=["sections"])

    return app
