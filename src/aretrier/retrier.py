r"""Timer-driven retry orchestration.

This module provides the ``Retrier`` class, a state machine that issues
attempts of a caller-defined action on a schedule until the caller
reports a success, the run is cancelled, or a ceiling is reached.

The event interface and the future-based interface share the same state
machine: ``run`` only registers an ``attempt`` listener that invokes the
action and reports its outcome.

Example:
    ```pycon
    >>> import asyncio
    >>> from aretrier import Retrier
    >>> async def main():
    ...     calls = []
    ...
    ...     async def flaky():
    ...         calls.append(1)
    ...         if len(calls) < 3:
    ...             raise ConnectionError("unavailable")
    ...         return "OK"
    ...
    ...     retrier = Retrier(min_delay=1, max_delay=10)
    ...     return await retrier.run(flaky), len(calls)
    ...
    >>> asyncio.run(main())
    ('OK', 3)

    ```
"""

from __future__ import annotations

__all__ = ["RETRIER_EVENTS", "Retrier", "RetrierState"]

import asyncio
import inspect
import logging
from enum import Enum
from typing import TYPE_CHECKING, Any

from aretrier.backoff.exponential import ExponentialBackoffStrategy
from aretrier.core.config import RetrierConfig
from aretrier.events import EventEmitter
from aretrier.exceptions import (
    MaxAttemptsCountError,
    MaxAttemptsTimeError,
    RetrierCancelledError,
    as_exception,
)
from aretrier.timers import AsyncioScheduler

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretrier.timers import Scheduler, TimerHandle

logger: logging.Logger = logging.getLogger(__name__)

RETRIER_EVENTS = ("attempt", "succeeded", "failed", "cancelled")


class RetrierState(Enum):
    """Retrier states.

    Attributes:
        IDLE: ``start`` was not called yet.
        SCHEDULED: A timer is pending for the next attempt.
        ATTEMPTING: An attempt was issued and its outcome is awaited.
        SETTLED: The run succeeded, failed or was cancelled.
    """

    IDLE = "idle"
    SCHEDULED = "scheduled"
    ATTEMPTING = "attempting"
    SETTLED = "settled"


def _retrieve_exception(future: asyncio.Future[Any]) -> None:
    # The failure is also published to the "failed"/"cancelled" listeners,
    # callers using only the event interface never await the future.
    if not future.cancelled():
        future.exception()


class Retrier(EventEmitter):
    r"""Retry scheduler with an event interface and a future interface.

    Notifications:
        - ``attempt()``: an attempt must be performed. The listener is
          expected to report the outcome through ``succeeded`` or
          ``failed``.
        - ``succeeded(result)``: the run succeeded.
        - ``failed(error)``: the run failed because a ceiling was reached.
        - ``cancelled()``: the run was cancelled.

    A retrier is single-use: ``start`` (or ``run``) drives one run.

    Args:
        config: Optional retry policy. If ``None``, it is built from
            ``options``. If both are given, ``options`` override the
            values of ``config``.
        scheduler: The scheduler running the timers. Defaults to an
            ``AsyncioScheduler`` bound to the running loop.
        **options: Keyword arguments accepted by ``RetrierConfig``.

    Raises:
        RetrierConfigError: If the policy is invalid.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aretrier import Retrier
        >>> async def main():
        ...     retrier = Retrier(min_delay=10, max_delay=1000)
        ...     _ = retrier.on("attempt", lambda: retrier.succeeded({"code": 200}))
        ...     return await retrier.start()
        ...
        >>> asyncio.run(main())
        {'code': 200}

        ```
    """

    def __init__(
        self,
        config: RetrierConfig | None = None,
        *,
        scheduler: Scheduler | None = None,
        **options: Any,
    ) -> None:
        super().__init__(events=RETRIER_EVENTS)
        if config is None:
            config = RetrierConfig(**options)
        elif options:
            config = config.merge(**options)
        self._config = config
        self._strategy = ExponentialBackoffStrategy(
            initial_delay=config.min_delay,
            max_delay=config.max_delay,
            factor=config.factor,
            randomisation_factor=config.randomisation_factor,
        )
        self._scheduler: Scheduler = scheduler if scheduler is not None else AsyncioScheduler()

        self._state = RetrierState.IDLE
        self._attempt_number = 0
        self._started_at: float | None = None
        self._future: asyncio.Future[Any] | None = None
        self._timer: TimerHandle | None = None
        self._action_tasks: set[asyncio.Future[Any]] = set()

    @property
    def config(self) -> RetrierConfig:
        return self._config

    @property
    def state(self) -> RetrierState:
        return self._state

    @property
    def attempt_number(self) -> int:
        """The number of attempts issued so far."""
        return self._attempt_number

    @property
    def elapsed(self) -> float:
        """The time in milliseconds since ``start`` was called, or 0.0 if
        the run has not started."""
        if self._started_at is None:
            return 0.0
        return self._scheduler.now() - self._started_at

    def start(self) -> asyncio.Future[Any]:
        """Start the run.

        The first attempt is issued after ``initial_delay``. With the
        default delay of 0 it is issued on a later loop iteration, never
        synchronously. Must be called with a running event loop.

        Returns:
            The outcome future. It resolves with the result reported to
            ``succeeded``, or is rejected with the error of a terminal
            failure or with ``RetrierCancelledError``.
        """
        if self._future is not None:
            logger.warning("Retrier already started, start() ignored")
            return self._future

        self._future = asyncio.get_running_loop().create_future()
        self._future.add_done_callback(_retrieve_exception)
        if self._state is RetrierState.SETTLED:
            # Cancelled before start
            self._future.set_exception(RetrierCancelledError())
            return self._future

        self._started_at = self._scheduler.now()
        logger.debug(f"Retrier started, first attempt in {self._config.initial_delay}ms")
        self._schedule(self._config.initial_delay)
        return self._future

    def succeeded(self, result: Any = None) -> None:
        """Report the success of the current attempt.

        Settles the run, notifies the ``succeeded`` listeners and resolves
        the outcome future with ``result``. Ignored once the run is
        settled.

        Args:
            result: The value the outcome future resolves with.
        """
        if self._state in (RetrierState.IDLE, RetrierState.SETTLED):
            logger.debug(f"succeeded() ignored in state {self._state.value}")
            return

        logger.debug(f"Attempt {self._attempt_number} succeeded")
        self._settle()
        self.emit("succeeded", result)
        if not self._future.done():
            self._future.set_result(result)

    def failed(self, error: Any = None, delay_override: float | None = None) -> None:
        """Report the failure of the current attempt.

        The ceilings are checked before the next attempt is scheduled:

        1. If ``max_attempts_count`` attempts were issued, the run fails
           with ``error`` (or ``MaxAttemptsCountError`` if ``error`` is
           ``None``).
        2. If the elapsed time plus the next delay exceeds
           ``max_attempts_time``, the run fails with
           ``MaxAttemptsTimeError``.
        3. Otherwise the next attempt is scheduled.

        Args:
            error: The error of the attempt. It is opaque to the retrier.
            delay_override: Optional delay in milliseconds used instead of
                the backoff growth for this step only.
        """
        if self._state is not RetrierState.ATTEMPTING:
            logger.debug(f"failed() ignored in state {self._state.value}")
            return

        max_attempts_count = self._config.max_attempts_count
        if max_attempts_count is not None and self._attempt_number >= max_attempts_count:
            logger.debug(f"Maximum attempts count reached ({max_attempts_count})")
            self._fail(error if error is not None else MaxAttemptsCountError())
            return

        if delay_override is not None:
            delay = delay_override
        else:
            delay = self._strategy.calculate(self._attempt_number - 1)

        max_attempts_time = self._config.max_attempts_time
        if max_attempts_time is not None and self.elapsed + delay > max_attempts_time:
            logger.debug(
                f"Maximum attempt time limit reached (elapsed={self.elapsed}ms, "
                f"next delay={delay}ms, limit={max_attempts_time}ms)"
            )
            self._fail(MaxAttemptsTimeError())
            return

        logger.debug(f"Attempt {self._attempt_number} failed, retrying in {delay}ms")
        self._schedule(delay)

    def cancel(self) -> None:
        """Cancel the run.

        Cancels any pending attempt, notifies the ``cancelled`` listeners
        and rejects the outcome future with ``RetrierCancelledError``. An
        action already running is not interrupted; its outcome is ignored.
        Ignored once the run is settled.
        """
        if self._state is RetrierState.SETTLED:
            logger.debug("cancel() ignored, retrier already settled")
            return

        logger.debug(f"Retrier cancelled after {self._attempt_number} attempt(s)")
        self._settle()
        self.emit("cancelled")
        if self._future is not None and not self._future.done():
            self._future.set_exception(RetrierCancelledError())

    def run(
        self,
        action: Callable[[], Any],
        *,
        delay_override: Callable[[BaseException], float | None] | None = None,
    ) -> asyncio.Future[Any]:
        """Start the run, invoking ``action`` on every attempt.

        ``action`` is usually an ``async def`` function. Its result is
        reported to ``succeeded`` and any exception it raises to
        ``failed``. Plain functions are supported too. Calling ``run`` on a
        started retrier returns its outcome future without registering
        ``action``.

        Args:
            action: The function called on every attempt.
            delay_override: Optional function mapping the exception of a
                failed attempt to a delay override in milliseconds, or to
                ``None`` to use the backoff growth. If the hook
                raises, the backoff growth is used as well.

        Returns:
            The outcome future.

        Example:
            ```pycon
            >>> import asyncio
            >>> from aretrier import Retrier
            >>> async def main():
            ...     async def action():
            ...         return 42
            ...
            ...     return await Retrier(min_delay=10, max_delay=1000).run(action)
            ...
            >>> asyncio.run(main())
            42

            ```
        """

        def report_failure(exc: BaseException) -> None:
            override = None
            if delay_override is not None:
                try:
                    override = delay_override(exc)
                except Exception as hook_exc:  # noqa: BLE001
                    logger.warning(
                        f"delay_override hook raised {hook_exc!r}, using the backoff delay"
                    )
            self.failed(exc, override)

        def report(task: asyncio.Future[Any]) -> None:
            self._action_tasks.discard(task)
            if task.cancelled():
                self.cancel()
            elif task.exception() is not None:
                report_failure(task.exception())
            else:
                self.succeeded(task.result())

        def on_attempt() -> None:
            try:
                result = action()
            except Exception as exc:  # noqa: BLE001
                report_failure(exc)
                return
            if not inspect.isawaitable(result):
                self.succeeded(result)
                return
            task = asyncio.ensure_future(result)
            self._action_tasks.add(task)
            task.add_done_callback(report)

        if self._future is not None:
            logger.warning("Retrier already started, run() ignored")
            return self._future
        self.on("attempt", on_attempt)
        return self.start()

    def _schedule(self, delay: float) -> None:
        self._state = RetrierState.SCHEDULED
        self._timer = self._scheduler.call_later(delay, self._on_timer)

    def _on_timer(self) -> None:
        if self._state is not RetrierState.SCHEDULED:
            return
        self._timer = None
        self._state = RetrierState.ATTEMPTING
        self._attempt_number += 1
        logger.debug(f"Issuing attempt {self._attempt_number}")
        self.emit("attempt")

    def _settle(self) -> None:
        self._state = RetrierState.SETTLED
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fail(self, error: Any) -> None:
        self._settle()
        self.emit("failed", error)
        if not self._future.done():
            self._future.set_exception(as_exception(error))
