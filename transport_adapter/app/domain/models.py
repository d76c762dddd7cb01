"""Domain models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from transport_adapter.app.domain.cancel import CancelToken


@dataclass
class RequestConfig:
    """Fully-resolved description of one request.

    Read-only for the duration of an exchange except for ``headers``, which the
    adapter rewrites in place before sending (XSRF header, dropped content-type).
    """

    url: str
    method: str = "GET"
    data: str | bytes | None = None
    headers: dict[str, str] = field(default_factory=dict)
    response_type: str | None = None
    timeout: int | None = None
    cancel_token: CancelToken | None = None
    with_credentials: bool = False
    xsrf_cookie_name: str | None = None
    xsrf_header_name: str | None = None


@dataclass
class Response:
    """Normalized response built once the handle reaches its terminal state."""

    data: Any
    status: int
    status_text: str
    headers: dict[str, str]
    config: RequestConfig
    request: Any = field(repr=False, default=None)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300
