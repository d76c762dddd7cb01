"""Request handle implementation driven by httpx.AsyncClient.

Behaves like a browser XMLHttpRequest: ready-state transitions are announced
through ``on_ready_state_change`` and failures end in DONE with status 0,
followed by exactly one of ``on_error`` or ``on_timeout`` (``abort`` announces
nothing beyond the DONE transition).
"""
from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, Optional

import httpx
from loguru import logger

from transport_adapter.app.constants import READY_STATE, RESPONSE_TYPE
from transport_adapter.app.core import SERVICE_NAME
from transport_adapter.app.ports.request_handle import Listener

_TEXT_TYPES = (RESPONSE_TYPE.DEFAULT, RESPONSE_TYPE.TEXT, RESPONSE_TYPE.DOCUMENT)


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class HttpxRequestHandle:
    """Single-use request handle; implements the RequestHandle port."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        is_same_origin: Optional[Callable[[str], bool]] = None,
        follow_redirects: bool = True,
    ) -> None:
        self._client = client
        self._is_same_origin = is_same_origin
        self._follow_redirects = follow_redirects

        self.response_type: str = RESPONSE_TYPE.DEFAULT
        self.timeout: int = 0
        self.with_credentials: bool = False

        self.on_ready_state_change: Listener = None
        self.on_error: Listener = None
        self.on_timeout: Listener = None

        self._ready_state = READY_STATE.UNSENT
        self._method = ""
        self._url = ""
        self._headers: list[tuple[str, str]] = []
        self._sent = False
        self._task: asyncio.Task[None] | None = None
        self._timer: asyncio.TimerHandle | None = None
        self._reset_response()

    @property
    def ready_state(self) -> int:
        return self._ready_state

    @property
    def status(self) -> int:
        return self._status

    @property
    def status_text(self) -> str:
        return self._status_text

    @property
    def response_text(self) -> str:
        return self._body.decode(self._encoding or "utf-8", errors="replace")

    @property
    def response(self) -> Any:
        if self.response_type in _TEXT_TYPES:
            return self.response_text
        if self._ready_state != READY_STATE.DONE:
            return None
        if self.response_type == RESPONSE_TYPE.JSON:
            try:
                return json.loads(self.response_text)
            except ValueError:
                return None
        return self._body

    def get_all_response_headers(self) -> str:
        return "".join(f"{name}: {value}\r\n" for name, value in self._raw_headers)

    def open(self, method: str, url: str, async_: bool = True) -> None:
        if not async_:
            raise ValueError("synchronous requests are not supported")
        if self._sent:
            raise RuntimeError("request handle is single-use")
        self._method = method
        self._url = url
        self._headers = []
        self._set_ready_state(READY_STATE.OPENED)

    def set_request_header(self, name: str, value: str) -> None:
        if self._ready_state != READY_STATE.OPENED or self._sent:
            raise RuntimeError("headers can only be set after open() and before send()")
        self._headers.append((name, value))

    def send(self, body: str | bytes | None = None) -> None:
        if self._ready_state != READY_STATE.OPENED or self._sent:
            raise RuntimeError("send() requires an opened, unsent request")
        self._sent = True
        loop = asyncio.get_running_loop()
        if self.timeout and self.timeout > 0:
            self._timer = loop.call_later(self.timeout / 1000, self._on_timer)
        self._task = loop.create_task(self._run(body))

    def abort(self) -> None:
        in_flight = self._task is not None and not self._task.done()
        self._stop()
        if in_flight and self._ready_state != READY_STATE.DONE:
            self._reset_response()
            self._set_ready_state(READY_STATE.DONE)
        self._ready_state = READY_STATE.UNSENT

    async def _run(self, body: str | bytes | None) -> None:
        try:
            request = self._client.build_request(
                self._method,
                self._url,
                headers=self._headers,
                content=body,
                timeout=httpx.Timeout(None),
            )
            response = await self._send_following_redirects(request)
            try:
                self._status = response.status_code
                self._status_text = response.reason_phrase
                self._raw_headers = [
                    (name.decode("latin-1"), value.decode("latin-1"))
                    for name, value in response.headers.raw
                ]
                self._set_ready_state(READY_STATE.HEADERS_RECEIVED)
                self._set_ready_state(READY_STATE.LOADING)
                self._body = await response.aread()
                self._encoding = response.encoding
            finally:
                await response.aclose()
        except httpx.TimeoutException as exc:
            _log("request_timed_out", method=self._method, url=self._url, error=str(exc))
            self._fail(self.on_timeout)
            return
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            _log("request_failed", method=self._method, url=self._url, error=str(exc))
            self._fail(self.on_error)
            return
        except Exception as exc:
            # e.g. UnicodeEncodeError from a non-ascii header value
            _log("request_failed", method=self._method, url=self._url, error=repr(exc))
            self._fail(self.on_error)
            return

        self._cancel_timer()
        self._set_ready_state(READY_STATE.DONE)

    async def _send_following_redirects(self, request: httpx.Request) -> httpx.Response:
        """Send ``request``, following redirects one hop at a time.

        The cookie header is decided per hop so a redirect to another origin
        does not pick the client jar back up.
        """
        hops = 0
        while True:
            if not self._sends_credentials(str(request.url)):
                request.headers.pop("cookie", None)
            response = await self._client.send(request, stream=True, follow_redirects=False)
            if not self._follow_redirects or response.next_request is None:
                return response
            await response.aclose()
            hops += 1
            if hops > self._client.max_redirects:
                raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=request)
            request = response.next_request

    def _sends_credentials(self, url: str) -> bool:
        if self.with_credentials or self._is_same_origin is None:
            return True
        return self._is_same_origin(url)

    def _on_timer(self) -> None:
        self._timer = None
        if self._task is None or self._task.done():
            return
        self._task.cancel()
        _log("request_timed_out", method=self._method, url=self._url, timeout_ms=self.timeout)
        self._fail(self.on_timeout)

    def _fail(self, listener: Listener) -> None:
        self._cancel_timer()
        self._reset_response()
        self._set_ready_state(READY_STATE.DONE)
        if listener is not None:
            listener()

    def _stop(self) -> None:
        self._cancel_timer()
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _reset_response(self) -> None:
        self._status = 0
        self._status_text = ""
        self._raw_headers: list[tuple[str, str]] = []
        self._body = b""
        self._encoding: str | None = None

    def _set_ready_state(self, state: int) -> None:
        self._ready_state = state
        if self.on_ready_state_change is not None:
            self.on_ready_state_change()
