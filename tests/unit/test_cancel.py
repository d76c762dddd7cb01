"""Unit tests for CancelToken and its source."""
from __future__ import annotations

import asyncio

import pytest

from transport_adapter.app.domain.cancel import Cancel, CancelToken, is_cancel


@pytest.mark.asyncio
async def test_source_cancel_sets_reason_once():
    source = CancelToken.source()
    assert source.token.requested is False
    assert source.token.reason is None

    source.cancel("first")
    source.cancel("second")

    assert source.token.requested is True
    assert isinstance(source.token.reason, Cancel)
    assert source.token.reason.message == "first"


@pytest.mark.asyncio
async def test_default_message():
    token = CancelToken()
    token.cancel()

    assert str(token.reason) == "Request canceled"


@pytest.mark.asyncio
async def test_executor_receives_cancel_callable():
    captured = []
    token = CancelToken(lambda cancel: captured.append(cancel))

    captured[0]("from executor")

    assert token.reason.message == "from executor"


@pytest.mark.asyncio
async def test_throw_if_requested():
    token = CancelToken()
    token.throw_if_requested()

    token.cancel("stop")
    with pytest.raises(Cancel, match="stop"):
        token.throw_if_requested()


@pytest.mark.asyncio
async def test_subscribe_and_unsubscribe():
    token = CancelToken()
    seen: list[BaseException] = []
    unsubscribe_first = token.subscribe(seen.append)
    token.subscribe(seen.append)

    unsubscribe_first()
    token.cancel("go")
    await asyncio.sleep(0)

    assert seen == [token.reason]


@pytest.mark.asyncio
async def test_subscriber_ignores_cancelled_future():
    token = CancelToken()
    seen: list[BaseException] = []
    token.subscribe(seen.append)

    token.future.cancel()
    await asyncio.sleep(0)

    assert seen == []
    assert token.requested is False


def test_is_cancel():
    assert is_cancel(Cancel("x")) is True
    assert is_cancel(ValueError("x")) is False
    assert is_cancel(None) is False


def test_token_with_explicit_loop():
    loop = asyncio.new_event_loop()
    try:
        token = CancelToken(loop=loop)
        token.cancel("offline")
        assert token.reason.message == "offline"
    finally:
        loop.close()
