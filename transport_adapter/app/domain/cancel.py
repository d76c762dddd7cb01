"""Cancellation tokens: single-fire futures carrying an opaque reason.

The adapter only subscribes to a token; whoever owns the token decides when and
why to cancel. The reason reaches the caller unchanged.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Callable

from transport_adapter.app.constants import DEFAULT_CANCEL_MESSAGE


class Cancel(Exception):
    """Default cancellation reason produced by ``CancelToken`` owners."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or DEFAULT_CANCEL_MESSAGE)
        self.message = message or DEFAULT_CANCEL_MESSAGE

    def __repr__(self) -> str:
        return f"Cancel({self.message!r})"


def is_cancel(value: Any) -> bool:
    return isinstance(value, Cancel)


class CancelToken:
    """Wraps an ``asyncio.Future`` that settles at most once with a reason.

    ``executor`` receives the ``cancel`` callable, mirroring the usual
    "token + trigger" split. Tokens must be created inside a running loop
    unless an explicit ``loop`` is given.
    """

    def __init__(
        self,
        executor: Callable[[Callable[[str | None], None]], None] | None = None,
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self.future: asyncio.Future[BaseException] = self._loop.create_future()
        if executor is not None:
            executor(self.cancel)

    @classmethod
    def source(cls) -> "CancelTokenSource":
        token = cls()
        return CancelTokenSource(token=token, cancel=token.cancel)

    @property
    def requested(self) -> bool:
        return self.future.done() and not self.future.cancelled()

    @property
    def reason(self) -> BaseException | None:
        if not self.requested:
            return None
        return self.future.result()

    def cancel(self, message: str | None = None) -> None:
        """Request cancellation with a ``Cancel`` reason. Repeated calls are ignored."""
        self.cancel_with(Cancel(message))

    def cancel_with(self, reason: BaseException) -> None:
        """Request cancellation with an arbitrary reason object."""
        if self.future.done():
            return
        self.future.set_result(reason)

    def throw_if_requested(self) -> None:
        reason = self.reason
        if reason is not None:
            raise reason

    def subscribe(self, callback: Callable[[BaseException], None]) -> Callable[[], None]:
        """Call ``callback(reason)`` once the token fires; returns an unsubscribe function."""

        def _on_done(fut: asyncio.Future[BaseException]) -> None:
            if fut.cancelled():
                return
            callback(fut.result())

        self.future.add_done_callback(_on_done)

        def _unsubscribe() -> None:
            self.future.remove_done_callback(_on_done)

        return _unsubscribe


@dataclass(frozen=True)
class CancelTokenSource:
    """A token together with the callable that fires it."""

    token: CancelToken
    cancel: Callable[..., None]
