"""Classified transport failures and the factory that builds them."""
from __future__ import annotations

from typing import Any

from transport_adapter.app.domain.models import RequestConfig, Response


class TransportError(Exception):
    """Base for failures produced by the adapter (network, timeout, HTTP status)."""

    def __init__(
        self,
        message: str,
        config: RequestConfig,
        code: str | None = None,
        request: Any = None,
        response: Response | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.config = config
        self.code = code
        self.request = request
        self.response = response

    def to_dict(self) -> dict[str, Any]:
        """Serialisable summary; the raw handle is left out."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "code": self.code,
            "method": self.config.method.upper(),
            "url": self.config.url,
            "status": self.response.status if self.response is not None else None,
        }


class NetworkError(TransportError):
    """Transport-level failure (DNS, connection refused, reset...)."""


class RequestTimeoutError(TransportError):
    """The configured timeout elapsed before the exchange completed."""


class HTTPStatusError(TransportError):
    """Terminal completion with a status outside [200, 300); carries the response."""


def create_error(
    message: str,
    config: RequestConfig,
    code: str | None = None,
    request: Any = None,
    response: Response | None = None,
    *,
    error_cls: type[TransportError] = TransportError,
) -> TransportError:
    return error_cls(message, config, code, request, response)
