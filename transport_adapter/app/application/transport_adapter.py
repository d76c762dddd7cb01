"""Transport adapter: drives one request handle to exactly one outcome.

Four sources race to finish an exchange: terminal completion, transport error,
timeout and external cancellation. Each of them goes through a single
``Settlement``; whichever fires first decides the outcome and the others are
ignored. The adapter never suspends: ``execute`` wires callbacks, sends, and
returns the pending outcome future.
"""
from __future__ import annotations

import asyncio
from typing import Any

from loguru import logger

from transport_adapter.app.constants import (
    NETWORK_ERROR_MESSAGE,
    READY_STATE,
    RESPONSE_TYPE,
    TIMEOUT_ERROR_CODE,
)
from transport_adapter.app.core import SERVICE_NAME
from transport_adapter.app.domain.errors import (
    HTTPStatusError,
    NetworkError,
    RequestTimeoutError,
    TransportError,
    create_error,
)
from transport_adapter.app.domain.headers import parse_headers, prepare_headers
from transport_adapter.app.domain.models import RequestConfig, Response
from transport_adapter.app.domain.settlement import Settlement
from transport_adapter.app.ports.collaborators import (
    CookieReader,
    ErrorFactory,
    HeaderParser,
    OriginCheck,
)
from transport_adapter.app.ports.request_handle import RequestHandle, RequestHandleFactory


def _log(event: str, **kwargs: Any) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


class _Exchange:
    """State of one in-flight exchange: its handle, its settlement, its abort flag."""

    def __init__(
        self,
        config: RequestConfig,
        handle: RequestHandle,
        settlement: Settlement[Response],
        *,
        header_parser: HeaderParser,
        error_factory: ErrorFactory,
    ) -> None:
        self.config = config
        self.handle = handle
        self.settlement = settlement
        self._header_parser = header_parser
        self._error_factory = error_factory
        self._aborted = False

    def abort(self) -> None:
        if self._aborted:
            return
        self._aborted = True
        self.handle.abort()

    def on_ready_state_change(self) -> None:
        handle = self.handle
        if handle.ready_state != READY_STATE.DONE:
            return
        if handle.status == 0:
            # aborted or failed; reported through cancel/error/timeout instead
            logger.debug("ignoring status 0 completion for {} {}", self.config.method, self.config.url)
            return
        if self.settlement.settled:
            return

        if self.config.response_type == RESPONSE_TYPE.TEXT:
            data = handle.response_text
        else:
            data = handle.response
        response = Response(
            data=data,
            status=handle.status,
            status_text=handle.status_text,
            headers=self._header_parser(handle.get_all_response_headers()),
            config=self.config,
            request=handle,
        )
        if response.ok:
            if self.settlement.resolve(response):
                _log(
                    "exchange_resolved",
                    method=self.config.method.upper(),
                    url=self.config.url,
                    status=response.status,
                )
            return
        self._reject(
            self._error_factory(
                f"Request failed with status code {response.status}",
                self.config,
                None,
                handle,
                response,
                error_cls=HTTPStatusError,
            )
        )

    def on_error(self) -> None:
        self._reject(
            self._error_factory(
                NETWORK_ERROR_MESSAGE,
                self.config,
                None,
                self.handle,
                error_cls=NetworkError,
            )
        )

    def on_timeout(self) -> None:
        timeout = self.config.timeout
        message = f"Timeout of {timeout} ms exceeded" if timeout and timeout > 0 else "Timeout exceeded"
        self._reject(
            self._error_factory(
                message,
                self.config,
                TIMEOUT_ERROR_CODE,
                self.handle,
                error_cls=RequestTimeoutError,
            )
        )

    def on_cancel(self, reason: BaseException) -> None:
        if self.settlement.settled:
            return
        self.settlement.reject(reason)
        self.abort()
        _log(
            "exchange_cancelled",
            method=self.config.method.upper(),
            url=self.config.url,
            reason=str(reason),
        )

    def on_settled(self) -> None:
        if self.settlement.cancelled_by_caller:
            self.abort()
            _log(
                "exchange_cancelled",
                method=self.config.method.upper(),
                url=self.config.url,
                reason="outcome future cancelled",
            )

    def _reject(self, error: TransportError) -> None:
        if self.settlement.reject(error):
            _log(
                "exchange_rejected",
                method=self.config.method.upper(),
                url=self.config.url,
                error=type(error).__name__,
                code=error.code,
                message=error.message,
            )


class TransportAdapter:
    """Executes fully-resolved requests on fresh request handles.

    Collaborators are injected so the state machine can run without a network
    or browsing context: ``handle_factory`` builds one handle per exchange,
    ``origin_checker`` and ``cookie_reader`` feed the XSRF rule.
    """

    def __init__(
        self,
        handle_factory: RequestHandleFactory,
        *,
        origin_checker: OriginCheck,
        cookie_reader: CookieReader,
        header_parser: HeaderParser = parse_headers,
        error_factory: ErrorFactory = create_error,
    ) -> None:
        self._handle_factory = handle_factory
        self._origin_checker = origin_checker
        self._cookie_reader = cookie_reader
        self._header_parser = header_parser
        self._error_factory = error_factory

    def execute(self, config: RequestConfig) -> asyncio.Future[Response]:
        """Start the exchange and return its pending outcome.

        The future resolves with a ``Response`` for a 2xx status and is
        rejected with a ``TransportError`` subclass or with the cancellation
        reason, verbatim. Must be called from a running event loop.
        """
        settlement: Settlement[Response] = Settlement()
        handle = self._handle_factory()
        exchange = _Exchange(
            config,
            handle,
            settlement,
            header_parser=self._header_parser,
            error_factory=self._error_factory,
        )
        settlement.on_settled(exchange.on_settled)

        try:
            if config.response_type:
                handle.response_type = config.response_type
            if config.timeout and config.timeout > 0:
                handle.timeout = config.timeout

            if config.cancel_token is not None:
                settlement.on_settled(config.cancel_token.subscribe(exchange.on_cancel))

            if config.with_credentials:
                handle.with_credentials = True

            xsrf_header = self._xsrf_header(config)

            handle.open(config.method.upper(), config.url, True)
            handle.on_ready_state_change = exchange.on_ready_state_change
            handle.on_error = exchange.on_error
            handle.on_timeout = exchange.on_timeout

            headers = prepare_headers(
                config.headers,
                has_body=config.data is not None,
                xsrf_header=xsrf_header,
            )
            config.headers.clear()
            config.headers.update(headers)
            for name, value in headers.items():
                handle.set_request_header(name, value)

            _log(
                "exchange_started",
                method=config.method.upper(),
                url=config.url,
                timeout=config.timeout,
                with_credentials=config.with_credentials,
            )
            handle.send(config.data)
        except BaseException:
            settlement.future.cancel()
            raise

        return settlement.future

    def _xsrf_header(self, config: RequestConfig) -> tuple[str, str] | None:
        if not config.xsrf_cookie_name:
            return None
        if not (config.with_credentials or self._origin_checker.is_same_origin(config.url)):
            return None
        value = self._cookie_reader.read(config.xsrf_cookie_name)
        if not value or not config.xsrf_header_name:
            return None
        _log("xsrf_header_injected", url=config.url, header=config.xsrf_header_name)
        return (config.xsrf_header_name, value)
