r"""Timer scheduling used by ``Backoff`` and ``Retrier``.

Both components only need two things from the outside world: the
current time and a way to run a callback after a delay. They are
expressed by the ``Scheduler`` interface so that the default asyncio
implementation can be swapped for a manual clock.

All times and delays are in milliseconds.
"""

from __future__ import annotations

__all__ = ["AsyncioScheduler", "Scheduler", "TimerHandle"]

import asyncio
import time
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable


class TimerHandle(Protocol):
    """A scheduled callback that can be cancelled.

    Cancelling must be synchronous: once ``cancel`` returns, the callback
    is never run.
    """

    def cancel(self) -> None: ...


class Scheduler(ABC):
    """Abstract source of time and delayed callbacks."""

    @abstractmethod
    def now(self) -> float:
        """Return the current time in milliseconds.

        Only differences between two values are meaningful.
        """

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        """Schedule a callback.

        A delay of 0 runs the callback on a later iteration, never
        synchronously.

        Args:
            delay: The delay in milliseconds.
            callback: The function to call once the delay elapsed.

        Returns:
            A handle that cancels the callback.
        """


class AsyncioScheduler(Scheduler):
    r"""Scheduler backed by an asyncio event loop.

    Args:
        loop: The loop used to schedule callbacks. If ``None``, the loop
            running at scheduling time is used.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aretrier.timers import AsyncioScheduler
        >>> async def main():
        ...     scheduler = AsyncioScheduler()
        ...     fired = asyncio.Event()
        ...     scheduler.call_later(5, fired.set)
        ...     await fired.wait()
        ...     return fired.is_set()
        ...
        >>> asyncio.run(main())
        True

        ```
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is not None:
            return self._loop
        return asyncio.get_running_loop()

    def now(self) -> float:
        return time.monotonic() * 1000.0

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self._get_loop().call_later(max(delay, 0) / 1000.0, callback)
