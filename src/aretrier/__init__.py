r"""aretrier - Retry orchestration for fallible asynchronous operations.

This package decides when to re-attempt an operation after a failure,
how long to wait between attempts and when to give up. It never
performs the operation itself: it schedules attempts on the asyncio
event loop and observes the outcomes reported by the caller.

Key Features:
    - Exponential and Fibonacci backoff sequences with optional jitter
    - Event-driven backoff cycles with a configurable fail limit
    - A retrier with attempt-count and elapsed-time ceilings
    - Both an event interface and a future-based ``run`` interface
    - Per-attempt delay overrides (e.g. from a Retry-After header)

Example:
    ```pycon
    >>> import asyncio
    >>> from aretrier import Retrier
    >>> async def fetch():
    ...     return {"code": 200}
    ...
    >>> async def main():
    ...     retrier = Retrier(min_delay=10, max_delay=1000, max_attempts_count=5)
    ...     return await retrier.run(fetch)
    ...
    >>> asyncio.run(main())
    {'code': 200}

    ```
"""

from __future__ import annotations

__all__ = [
    "AttemptFailedError",
    "Backoff",
    "BackoffConfigError",
    "MaxAttemptsCountError",
    "MaxAttemptsTimeError",
    "Retrier",
    "RetrierCancelledError",
    "RetrierConfig",
    "RetrierConfigError",
    "RetrierError",
    "RetrierState",
    "__version__",
]

from importlib.metadata import PackageNotFoundError, version

from aretrier.backoff import Backoff
from aretrier.core.config import RetrierConfig
from aretrier.exceptions import (
    AttemptFailedError,
    BackoffConfigError,
    MaxAttemptsCountError,
    MaxAttemptsTimeError,
    RetrierCancelledError,
    RetrierConfigError,
    RetrierError,
)
from aretrier.retrier import Retrier, RetrierState

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
