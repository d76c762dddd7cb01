"""HTTP factories: build the shared httpx client and per-exchange request handles from settings."""
from __future__ import annotations

import httpx

from transport_adapter.app.config.settings import Settings
from transport_adapter.app.domain.origin import OriginChecker
from transport_adapter.app.infrastructure.http.httpx_handle import HttpxRequestHandle
from transport_adapter.app.ports.request_handle import RequestHandle, RequestHandleFactory


def create_http_client(
    settings: Settings,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Build the client handles run on. Timeouts are enforced per handle, not here."""
    headers: dict[str, str] = {}
    if settings.user_agent:
        headers["User-Agent"] = settings.user_agent
    return httpx.AsyncClient(headers=headers, timeout=None, transport=transport)


def create_handle_factory(
    client: httpx.AsyncClient,
    settings: Settings,
    origin_checker: OriginChecker,
) -> RequestHandleFactory:
    """Return a callable producing a fresh HttpxRequestHandle per exchange."""

    def _new_handle() -> RequestHandle:
        return HttpxRequestHandle(
            client,
            is_same_origin=origin_checker.is_same_origin,
            follow_redirects=settings.follow_redirects,
        )

    return _new_handle
