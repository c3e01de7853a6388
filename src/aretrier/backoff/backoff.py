r"""Event-driven backoff cycles.

A ``Backoff`` wraps a backoff strategy and drives one cycle at a time:
``backoff()`` schedules a timer for the next delay and notifies the
``backoff`` listeners, then the ``ready`` listeners are notified when
the timer fires. An optional fail limit turns the next ``backoff()``
call into a ``fail`` notification.

Example:
    ```pycon
    >>> import asyncio
    >>> from aretrier.backoff import Backoff
    >>> async def main():
    ...     backoff = Backoff.exponential(initial_delay=10, max_delay=1000)
    ...     done = asyncio.Event()
    ...     _ = backoff.on("ready", lambda number, delay: done.set())
    ...     backoff.backoff()
    ...     await done.wait()
    ...     return backoff.backoff_number
    ...
    >>> asyncio.run(main())
    1

    ```
"""

from __future__ import annotations

__all__ = ["BACKOFF_EVENTS", "Backoff"]

import logging
from typing import TYPE_CHECKING, Any

from aretrier.backoff.base import DEFAULT_INITIAL_DELAY, DEFAULT_MAX_DELAY
from aretrier.backoff.exponential import DEFAULT_FACTOR, ExponentialBackoffStrategy
from aretrier.backoff.fibonacci import FibonacciBackoffStrategy
from aretrier.core.validation import validate_fail_after
from aretrier.events import EventEmitter
from aretrier.timers import AsyncioScheduler

if TYPE_CHECKING:
    from aretrier.backoff.base import BaseBackoffStrategy
    from aretrier.timers import Scheduler, TimerHandle

logger: logging.Logger = logging.getLogger(__name__)

BACKOFF_EVENTS = ("backoff", "ready", "fail")


class Backoff(EventEmitter):
    r"""Stateful backoff publishing ``backoff``, ``ready`` and ``fail``
    notifications.

    Notifications:
        - ``backoff(number, delay)``: a cycle started, emitted
          synchronously from ``backoff()``.
        - ``ready(number, delay)``: the delay of the cycle elapsed.
        - ``fail(err)``: the fail limit was reached; ``err`` is the value
          passed to ``backoff()``. The instance is reset afterwards.

    ``number`` counts completed cycles since the last reset, starting at
    0. It is independent of the strategy cursor, which is advanced both
    by ``backoff()`` and by ``next()``.

    Args:
        strategy: The strategy computing the delays.
        scheduler: The scheduler running the timers. Defaults to an
            ``AsyncioScheduler`` bound to the running loop.
    """

    def __init__(self, strategy: BaseBackoffStrategy, *, scheduler: Scheduler | None = None) -> None:
        super().__init__(events=BACKOFF_EVENTS)
        self._strategy = strategy
        self._scheduler: Scheduler = scheduler if scheduler is not None else AsyncioScheduler()
        self._backoff_number = 0
        self._backoff_delay: float = 0
        self._fail_limit: int | None = None
        self._in_progress = False
        self._timer: TimerHandle | None = None

    @classmethod
    def exponential(
        cls,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        factor: float = DEFAULT_FACTOR,
        randomisation_factor: float = 0.0,
        *,
        scheduler: Scheduler | None = None,
    ) -> Backoff:
        """Create a backoff with exponentially growing delays.

        Args:
            initial_delay: The first delay in milliseconds. Must be >= 1.
            max_delay: The delay cap in milliseconds. Must be >= 1 and
                greater than ``initial_delay``.
            factor: Growth multiplier per step.
            randomisation_factor: Fraction of jitter in [0, 1].
            scheduler: Optional scheduler running the timers.

        Returns:
            The backoff.

        Raises:
            BackoffConfigError: If the policy bounds are invalid.

        Example:
            ```pycon
            >>> from aretrier.backoff import Backoff
            >>> backoff = Backoff.exponential(initial_delay=10, max_delay=1000)
            >>> [backoff.next() for _ in range(4)]
            [10, 20, 40, 80]

            ```
        """
        strategy = ExponentialBackoffStrategy(
            initial_delay=initial_delay,
            max_delay=max_delay,
            factor=factor,
            randomisation_factor=randomisation_factor,
        )
        return cls(strategy, scheduler=scheduler)

    @classmethod
    def fibonacci(
        cls,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        randomisation_factor: float = 0.0,
        *,
        scheduler: Scheduler | None = None,
    ) -> Backoff:
        """Create a backoff with delays following the Fibonacci sequence.

        Args:
            initial_delay: The first delay in milliseconds. Must be >= 1.
            max_delay: The delay cap in milliseconds. Must be >= 1 and
                greater than ``initial_delay``.
            randomisation_factor: Fraction of jitter in [0, 1].
            scheduler: Optional scheduler running the timers.

        Returns:
            The backoff.

        Raises:
            BackoffConfigError: If the policy bounds are invalid.
        """
        strategy = FibonacciBackoffStrategy(
            initial_delay=initial_delay,
            max_delay=max_delay,
            randomisation_factor=randomisation_factor,
        )
        return cls(strategy, scheduler=scheduler)

    @property
    def strategy(self) -> BaseBackoffStrategy:
        return self._strategy

    @property
    def backoff_number(self) -> int:
        """The number of completed cycles since the last reset."""
        return self._backoff_number

    @property
    def fail_limit(self) -> int | None:
        return self._fail_limit

    @property
    def in_progress(self) -> bool:
        """Whether a cycle is waiting for its timer."""
        return self._in_progress

    def next(self) -> float:
        """Return the next delay of the sequence and advance the cursor.

        No timer is scheduled and no notification is emitted.

        Returns:
            The delay in milliseconds.
        """
        return self._strategy.next()

    def fail_after(self, max_number_of_retry: int) -> None:
        """Set the number of cycles after which ``backoff()`` fails.

        Args:
            max_number_of_retry: The fail limit. Must be > 0.

        Raises:
            BackoffConfigError: If ``max_number_of_retry`` is not positive.
        """
        validate_fail_after(max_number_of_retry)
        self._fail_limit = max_number_of_retry

    def backoff(self, err: Any = None) -> None:
        """Start a backoff cycle.

        Does nothing if a cycle is already in progress. If the fail limit
        is reached, the ``fail`` listeners are notified with ``err`` and
        the instance is reset instead of starting a cycle.

        Args:
            err: Optional value forwarded to the ``fail`` listeners.
        """
        if self._in_progress:
            logger.debug("Backoff already in progress, ignoring backoff()")
            return

        if self._fail_limit is not None and self._backoff_number >= self._fail_limit:
            logger.debug(f"Backoff fail limit reached ({self._fail_limit} cycles)")
            self.emit("fail", err)
            self.reset()
            return

        self._backoff_delay = self._strategy.next()
        self._in_progress = True
        self._timer = self._scheduler.call_later(self._backoff_delay, self._on_ready)
        logger.debug(f"Backoff #{self._backoff_number} started, waiting {self._backoff_delay}ms")
        self.emit("backoff", self._backoff_number, self._backoff_delay)

    def _on_ready(self) -> None:
        if not self._in_progress:
            return
        self._timer = None
        self._in_progress = False
        number = self._backoff_number
        self._backoff_number += 1
        self.emit("ready", number, self._backoff_delay)

    def reset(self) -> None:
        """Cancel any cycle in progress and restart from the first delay."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._in_progress = False
        self._backoff_number = 0
        self._strategy.reset()
