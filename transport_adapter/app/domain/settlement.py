"""Settle-once guard around the outcome future of one exchange."""
from __future__ import annotations

import asyncio
from typing import Callable, Generic, TypeVar

T = TypeVar("T")


class Settlement(Generic[T]):
    """Owns the outcome future; the first ``resolve``/``reject`` wins.

    Every completion source of an exchange goes through this object. Later
    attempts return ``False`` and leave the outcome untouched. ``on_settled``
    callbacks run exactly once: synchronously after the winning call, or from
    the loop when the caller cancels the future first.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self.future: asyncio.Future[T] = self._loop.create_future()
        self._settled = False
        self._callbacks: list[Callable[[], None]] = []
        self.future.add_done_callback(self._on_future_done)

    @property
    def settled(self) -> bool:
        # a caller cancelling the future also ends the exchange
        return self._settled or self.future.done()

    @property
    def cancelled_by_caller(self) -> bool:
        return self.future.cancelled()

    def on_settled(self, callback: Callable[[], None]) -> None:
        self._callbacks.append(callback)

    def resolve(self, value: T) -> bool:
        if self.settled:
            return False
        self._settled = True
        self.future.set_result(value)
        self._fire()
        return True

    def reject(self, exc: BaseException) -> bool:
        if self.settled:
            return False
        self._settled = True
        self.future.set_exception(exc)
        self._fire()
        return True

    def _on_future_done(self, fut: asyncio.Future[T]) -> None:
        if fut.cancelled() and not self._settled:
            self._settled = True
            self._fire()

    def _fire(self) -> None:
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()
