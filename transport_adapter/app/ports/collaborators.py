"""Ports for the pure collaborators the adapter calls but does not own."""
from __future__ import annotations

from typing import Any, Protocol

from transport_adapter.app.domain.errors import TransportError
from transport_adapter.app.domain.models import RequestConfig, Response


class HeaderParser(Protocol):
    def __call__(self, raw: str | None) -> dict[str, str]: ...


class OriginCheck(Protocol):
    def is_same_origin(self, url: str) -> bool: ...


class CookieReader(Protocol):
    def read(self, name: str) -> str | None: ...


class ErrorFactory(Protocol):
    def __call__(
        self,
        message: str,
        config: RequestConfig,
        code: str | None = None,
        request: Any = None,
        response: Response | None = None,
        *,
        error_cls: type[TransportError] = TransportError,
    ) -> TransportError: ...
