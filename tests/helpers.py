r"""Shared test helpers for timer-driven components.

This module provides a manual clock implementing the ``Scheduler``
interface, so tests advance time explicitly instead of waiting for real
timers.
"""

from __future__ import annotations

__all__ = ["FakeScheduler", "FakeTimer", "drain"]

import asyncio
import itertools
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from aretrier.timers import Scheduler

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass
class FakeTimer:
    """A callback scheduled on a ``FakeScheduler``."""

    when: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler(Scheduler):
    """Scheduler with a manual clock.

    Callbacks only run from ``tick``, in due time order, and callbacks
    due at the same time run in scheduling order.

    Args:
        start: The initial time in milliseconds.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._timers: list[FakeTimer] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> FakeTimer:
        timer = FakeTimer(when=self._now + max(delay, 0), seq=next(self._seq), callback=callback)
        self._timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        """The timers that are neither cancelled nor fired."""
        return [timer for timer in self._timers if not timer.cancelled]

    def advance(self, ms: float) -> None:
        """Move the clock forward without running any callback."""
        self._now += ms

    def tick(self, ms: float = 0) -> None:
        """Move the clock forward, running every callback that falls due.

        Args:
            ms: The number of milliseconds to advance.
        """
        target = self._now + ms
        while True:
            due = [t for t in self._timers if not t.cancelled and t.when <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.when, t.seq))
            self._timers.remove(timer)
            self._now = timer.when
            timer.callback()
        self._now = target


async def drain(iterations: int = 10) -> None:
    """Let pending tasks and callbacks of the running loop run."""
    for _ in range(iterations):
        await asyncio.sleep(0)
