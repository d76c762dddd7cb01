"""Composition root: build and lifecycle-manage concrete dependencies.

Composition may: import concrete classes, call factories, store interface types,
manage high-level lifecycle.
"""
from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from transport_adapter.app.application.transport_adapter import TransportAdapter
from transport_adapter.app.config.settings import Settings
from transport_adapter.app.core import SERVICE_NAME
from transport_adapter.app.domain.cookies import JarCookieReader
from transport_adapter.app.domain.models import RequestConfig
from transport_adapter.app.domain.origin import OriginChecker
from transport_adapter.app.infrastructure.http.factory import (
    create_handle_factory,
    create_http_client,
)


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class TransportDependencies:
    """Holds the wired adapter and the http client it runs on."""

    def __init__(
        self,
        *,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None
        self._adapter: TransportAdapter | None = None
        self._connected = False

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            raise RuntimeError("http_client is not initialized")
        return self._http_client

    @property
    def adapter(self) -> TransportAdapter:
        if self._adapter is None:
            raise RuntimeError("adapter is not initialized")
        return self._adapter

    async def connect(self) -> None:
        self._http_client = create_http_client(self._settings, transport=self._transport)
        origin_checker = OriginChecker(self._settings.current_origin or None)
        self._adapter = TransportAdapter(
            create_handle_factory(self._http_client, self._settings, origin_checker),
            origin_checker=origin_checker,
            cookie_reader=JarCookieReader(self._http_client.cookies),
        )
        self._connected = True
        _log("transport_ready", current_origin=origin_checker.current_origin)

    async def close(self) -> None:
        if self._http_client is not None:
            try:
                await self._http_client.aclose()
            except Exception as exc:
                logger.warning("http client close failed: {}", exc)
            self._http_client = None

        self._adapter = None
        self._connected = False

    async def __aenter__(self) -> "TransportDependencies":
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def new_config(self, url: str, **overrides: Any) -> RequestConfig:
        """RequestConfig carrying the configured XSRF names and default timeout."""
        values: dict[str, Any] = {
            "xsrf_cookie_name": self._settings.xsrf_cookie_name or None,
            "xsrf_header_name": self._settings.xsrf_header_name or None,
            "timeout": self._settings.default_timeout_ms or None,
        }
        values.update(overrides)
        return RequestConfig(url=url, **values)


def create_transport_dependencies(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> TransportDependencies:
    return TransportDependencies(settings=settings or Settings(), transport=transport)
