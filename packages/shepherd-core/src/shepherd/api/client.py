"""Shared HTTP client: base URL, JSON headers, and bearer token injection."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import httpx
import structlog

log = structlog.get_logger(__name__)

TokenProvider = Callable[[], Awaitable[str | None]]


class ApiError(Exception):
    """A backend call failed.

    ``status_code`` is ``None`` when no response was received.
    """

    def __init__(self, message: str, status_code: int | None = None, detail: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class ApiClient:
    """Thin async wrapper over ``httpx.AsyncClient`` for the backend API.

    Every outgoing request asks ``token_provider`` for a bearer token and
    attaches it as ``Authorization: Bearer <token>`` when one is returned.
    Error responses are logged before being raised as :class:`ApiError`.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token_provider = token_provider
        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
            event_hooks={"request": [self._inject_token], "response": [self._log_error_response]},
        )

    async def _inject_token(self, request: httpx.Request) -> None:
        if self._token_provider is None:
            return
        try:
            token = await self._token_provider()
        except Exception as exc:
            log.error("api_token_unavailable", method=request.method, url=str(request.url), error=str(exc))
            raise ApiError(f"Could not obtain a bearer token: {exc}") from exc
        if token:
            request.headers["Authorization"] = f"Bearer {token}"

    async def _log_error_response(self, response: httpx.Response) -> None:
        if response.is_success:
            return
        await response.aread()
        log.error(
            "api_error_response",
            status=response.status_code,
            method=response.request.method,
            url=str(response.request.url),
            body=response.text[:500],
        )

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Send a request and return the decoded JSON body (``None`` when empty)."""
        try:
            resp = await self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            log.error("api_request_error", method=method, path=path, error=str(exc))
            raise ApiError(f"{method} {path} failed: {exc}") from exc

        if resp.is_error:
            try:
                detail: Any = resp.json()
            except ValueError:
                detail = resp.text
            raise ApiError(
                f"{method} {path} returned {resp.status_code}",
                status_code=resp.status_code,
                detail=detail,
            )

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as exc:
            log.error(
                "api_undecodable_response",
                method=method,
                path=path,
                status=resp.status_code,
                body=resp.text[:200],
            )
            raise ApiError(
                f"{method} {path} returned a non-JSON body",
                status_code=resp.status_code,
                detail=resp.text,
            ) from exc

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()
