"""Shared fixtures and test doubles for the request handle and the injected collaborators."""
from __future__ import annotations

import json
from typing import Any

import pytest

from transport_adapter.app.application.transport_adapter import TransportAdapter
from transport_adapter.app.constants import READY_STATE


class FakeRequestHandle:
    """Implements RequestHandle for tests; the test decides which notifications fire and when."""

    def __init__(
        self,
        *,
        status: int = 200,
        status_text: str = "OK",
        body: str = "",
        raw_headers: str = "",
    ) -> None:
        self.response_type = ""
        self.timeout = 0
        self.with_credentials = False
        self.on_ready_state_change = None
        self.on_error = None
        self.on_timeout = None

        self.ready_state = READY_STATE.UNSENT
        self.status = 0
        self.status_text = ""
        self._scripted = (status, status_text, body, raw_headers)
        self._body = ""
        self._raw_headers = ""

        self.opened: tuple[str, str, bool] | None = None
        self.request_headers: dict[str, str] = {}
        self.sent = False
        self.sent_body: Any = None
        self.abort_calls = 0

    @property
    def response_text(self) -> str:
        return self._body

    @property
    def response(self) -> Any:
        if self.response_type == "json":
            return json.loads(self._body) if self._body else None
        return self._body

    def get_all_response_headers(self) -> str:
        return self._raw_headers

    def open(self, method: str, url: str, async_: bool = True) -> None:
        self.opened = (method, url, async_)
        self._set_state(READY_STATE.OPENED)

    def set_request_header(self, name: str, value: str) -> None:
        self.request_headers[name] = value

    def send(self, body: Any = None) -> None:
        self.sent = True
        self.sent_body = body

    def abort(self) -> None:
        self.abort_calls += 1
        self._end_without_response()

    # notification drivers

    def complete(self, status: int | None = None) -> None:
        scripted_status, status_text, body, raw_headers = self._scripted
        self.status = scripted_status if status is None else status
        self.status_text = status_text
        self._raw_headers = raw_headers
        self._set_state(READY_STATE.HEADERS_RECEIVED)
        self._body = body
        self._set_state(READY_STATE.LOADING)
        self._set_state(READY_STATE.DONE)

    def fail(self) -> None:
        self._end_without_response()
        if self.on_error is not None:
            self.on_error()

    def time_out(self) -> None:
        self._end_without_response()
        if self.on_timeout is not None:
            self.on_timeout()

    def _end_without_response(self) -> None:
        self.status = 0
        self.status_text = ""
        self._set_state(READY_STATE.DONE)

    def _set_state(self, state: int) -> None:
        self.ready_state = state
        if self.on_ready_state_change is not None:
            self.on_ready_state_change()


class FakeCookieReader:
    """Implements CookieReader over a plain dict and records lookups."""

    def __init__(self, cookies: dict[str, str] | None = None) -> None:
        self.cookies = cookies or {}
        self.reads: list[str] = []

    def read(self, name: str) -> str | None:
        self.reads.append(name)
        return self.cookies.get(name)


class FakeOriginChecker:
    def __init__(self, same_origin: bool = False) -> None:
        self.same_origin = same_origin
        self.checked: list[str] = []

    def is_same_origin(self, url: str) -> bool:
        self.checked.append(url)
        return self.same_origin


class HandleRecorder:
    """Handle factory that hands out a prepared FakeRequestHandle and keeps every one it built."""

    def __init__(self, **handle_kwargs: Any) -> None:
        self.handle_kwargs = handle_kwargs
        self.handles: list[FakeRequestHandle] = []

    def __call__(self) -> FakeRequestHandle:
        handle = FakeRequestHandle(**self.handle_kwargs)
        self.handles.append(handle)
        return handle

    @property
    def last(self) -> FakeRequestHandle:
        return self.handles[-1]


@pytest.fixture()
def cookie_reader() -> FakeCookieReader:
    return FakeCookieReader()


@pytest.fixture()
def origin_checker() -> FakeOriginChecker:
    return FakeOriginChecker()


@pytest.fixture()
def handles() -> HandleRecorder:
    return HandleRecorder(
        status=200,
        status_text="OK",
        body="ok",
        raw_headers="content-type: text/plain\r\n",
    )


@pytest.fixture()
def adapter(
    handles: HandleRecorder,
    origin_checker: FakeOriginChecker,
    cookie_reader: FakeCookieReader,
) -> TransportAdapter:
    return TransportAdapter(
        handles,
        origin_checker=origin_checker,
        cookie_reader=cookie_reader,
    )
