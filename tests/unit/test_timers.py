r"""Unit tests for the asyncio scheduler."""

from __future__ import annotations

import asyncio
from unittest.mock import Mock, patch

import pytest

from aretrier.timers import AsyncioScheduler
from tests.helpers import drain


def test_asyncio_scheduler_now_is_in_milliseconds() -> None:
    with patch("aretrier.timers.time.monotonic", return_value=1.5):
        assert AsyncioScheduler().now() == 1500.0


def test_asyncio_scheduler_uses_given_loop() -> None:
    loop = Mock(spec=asyncio.AbstractEventLoop)
    callback = Mock()
    AsyncioScheduler(loop).call_later(250, callback)
    loop.call_later.assert_called_once_with(0.25, callback)


def test_asyncio_scheduler_requires_running_loop() -> None:
    with pytest.raises(RuntimeError):
        AsyncioScheduler().call_later(0, Mock())


@pytest.mark.asyncio
async def test_asyncio_scheduler_zero_delay_is_not_synchronous() -> None:
    callback = Mock()
    AsyncioScheduler().call_later(0, callback)
    callback.assert_not_called()
    await drain()
    callback.assert_called_once_with()


@pytest.mark.asyncio
async def test_asyncio_scheduler_cancel() -> None:
    callback = Mock()
    handle = AsyncioScheduler().call_later(0, callback)
    handle.cancel()
    await drain()
    callback.assert_not_called()


@pytest.mark.asyncio
async def test_asyncio_scheduler_negative_delay() -> None:
    loop = asyncio.get_running_loop()
    with patch.object(loop, "call_later", wraps=loop.call_later) as mock_call_later:
        AsyncioScheduler().call_later(-5, Mock())
    mock_call_later.assert_called_once()
    assert mock_call_later.call_args.args[0] == 0
