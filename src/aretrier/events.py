r"""Event notification support for the retry orchestration components.

This module provides a small listener registry used by ``Backoff`` and
``Retrier`` to publish their lifecycle notifications. Each emitter
declares the event names it can publish, and registering a listener for
any other name is rejected.

Example:
    ```pycon
    >>> from aretrier.events import EventEmitter
    >>> emitter = EventEmitter(events=("ready",))
    >>> def on_ready(number, delay):
    ...     print(f"ready #{number} after {delay}ms")
    ...
    >>> _ = emitter.on("ready", on_ready)
    >>> emitter.emit("ready", 0, 10)
    ready #0 after 10ms
    True

    ```
"""

from __future__ import annotations

__all__ = ["EventEmitter"]

import asyncio
import inspect
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger: logging.Logger = logging.getLogger(__name__)


class EventEmitter:
    """Registry of listeners keyed by event name.

    Listeners are called synchronously, in registration order, with the
    arguments passed to ``emit``. A listener that raises does not prevent
    the remaining listeners from being called; the error is logged. A
    listener that returns an awaitable (for example an ``async def``
    function) has it scheduled as a task on the running loop.

    Args:
        events: The names of the events this emitter can publish.
    """

    def __init__(self, events: Iterable[str]) -> None:
        self._listeners: dict[str, list[tuple[Callable[..., Any], bool]]] = {
            event: [] for event in events
        }
        self._tasks: set[asyncio.Future[Any]] = set()

    @property
    def event_names(self) -> tuple[str, ...]:
        """The names of the events this emitter can publish."""
        return tuple(self._listeners)

    def _check_event(self, event: str) -> None:
        if event not in self._listeners:
            msg = f"Unknown event {event!r}, expected one of {self.event_names}"
            raise ValueError(msg)

    def on(self, event: str, listener: Callable[..., Any]) -> Callable[..., Any]:
        """Register a listener for an event.

        Args:
            event: The event name.
            listener: The callable invoked on each emission.

        Returns:
            The listener, so that it can be removed later with ``off``.

        Raises:
            ValueError: If the event name is unknown.
        """
        self._check_event(event)
        self._listeners[event].append((listener, False))
        return listener

    def once(self, event: str, listener: Callable[..., Any]) -> Callable[..., Any]:
        """Register a listener that is removed after its first call.

        Args:
            event: The event name.
            listener: The callable invoked on the next emission.

        Returns:
            The listener.

        Raises:
            ValueError: If the event name is unknown.
        """
        self._check_event(event)
        self._listeners[event].append((listener, True))
        return listener

    def off(self, event: str, listener: Callable[..., Any]) -> None:
        """Remove every registration of a listener for an event.

        Args:
            event: The event name.
            listener: The callable to remove.

        Raises:
            ValueError: If the event name is unknown.
        """
        self._check_event(event)
        self._listeners[event] = [
            entry for entry in self._listeners[event] if entry[0] is not listener
        ]

    def listener_count(self, event: str) -> int:
        """Return the number of listeners registered for an event."""
        self._check_event(event)
        return len(self._listeners[event])

    def emit(self, event: str, *args: Any) -> bool:
        """Call every listener registered for an event.

        Args:
            event: The event name.
            *args: The payload passed to each listener.

        Returns:
            ``True`` if at least one listener was registered, otherwise
            ``False``.

        Raises:
            ValueError: If the event name is unknown.
        """
        self._check_event(event)
        entries = list(self._listeners[event])
        if any(once for _, once in entries):
            self._listeners[event] = [entry for entry in self._listeners[event] if not entry[1]]
        for listener, _ in entries:
            try:
                result = listener(*args)
            except Exception as e:  # noqa: BLE001
                logger.warning(f"Error in {event!r} listener {listener!r}: {e}")
                continue
            if inspect.isawaitable(result):
                self._track(event, result)
        return bool(entries)

    def _track(self, event: str, awaitable: Any) -> None:
        task = asyncio.ensure_future(awaitable)
        self._tasks.add(task)

        def _done(task: asyncio.Future[Any]) -> None:
            self._tasks.discard(task)
            if not task.cancelled() and task.exception() is not None:
                logger.warning(f"Error in {event!r} listener: {task.exception()}")

        task.add_done_callback(_done)
