"""Request handle port: the host's native asynchronous HTTP primitive.

One handle per exchange. It is configured, opened, given headers, sent, and
reports progress through three callbacks. The adapter depends on this port;
infrastructure (e.g. httpx) implements it.
"""
from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, runtime_checkable

Listener = Optional[Callable[[], None]]


@runtime_checkable
class RequestHandle(Protocol):
    """XMLHttpRequest-shaped handle.

    ``on_ready_state_change`` fires on every ready-state transition,
    ``on_error`` on transport failure and ``on_timeout`` when ``timeout``
    (milliseconds) elapses. A transition to DONE with ``status == 0`` means the
    exchange ended without a response; unless caused by ``abort()`` it must be
    followed by exactly one ``on_error`` or ``on_timeout``.
    """

    response_type: str
    timeout: int
    with_credentials: bool

    on_ready_state_change: Listener
    on_error: Listener
    on_timeout: Listener

    @property
    def ready_state(self) -> int: ...

    @property
    def status(self) -> int: ...

    @property
    def status_text(self) -> str: ...

    @property
    def response(self) -> Any:
        """Body in the form selected by ``response_type``."""
        ...

    @property
    def response_text(self) -> str: ...

    def get_all_response_headers(self) -> str:
        """Raw CRLF-separated response header block."""
        ...

    def open(self, method: str, url: str, async_: bool = True) -> None: ...

    def set_request_header(self, name: str, value: str) -> None: ...

    def send(self, body: str | bytes | None = None) -> None: ...

    def abort(self) -> None: ...


RequestHandleFactory = Callable[[], RequestHandle]
