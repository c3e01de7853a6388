r"""Exception classes raised by the retry orchestration components.

Two families are defined:

- Configuration errors (``BackoffConfigError``, ``RetrierConfigError``) are
  ``ValueError`` subclasses raised synchronously while building a backoff or
  a retrier.
- Run outcomes (``RetrierError`` and its subclasses) are used to reject the
  outcome future returned by ``Retrier.start`` and ``Retrier.run``.
"""

from __future__ import annotations

__all__ = [
    "AttemptFailedError",
    "BackoffConfigError",
    "MaxAttemptsCountError",
    "MaxAttemptsTimeError",
    "RetrierCancelledError",
    "RetrierConfigError",
    "RetrierError",
    "as_exception",
]

from typing import Any

MAX_ATTEMPTS_TIME_MESSAGE = "Maximum attempt time limit reached"
MAX_ATTEMPTS_COUNT_MESSAGE = "Maximum attempts count reached"
CANCELLED_MESSAGE = "Retrier cancelled"


class BackoffConfigError(ValueError):
    """Exception raised when a backoff policy is invalid.

    Example:
        ```pycon
        >>> from aretrier.exceptions import BackoffConfigError
        >>> raise BackoffConfigError("The randomisation factor must be between 0 and 1.")
        Traceback (most recent call last):
            ...
        aretrier.exceptions.BackoffConfigError: The randomisation factor must be between 0 and 1.

        ```
    """


class RetrierConfigError(ValueError):
    """Exception raised when a retrier configuration is invalid."""


class RetrierError(RuntimeError):
    """Base class for errors that settle a retrier run."""


class MaxAttemptsTimeError(RetrierError):
    """Exception raised when the next attempt would exceed the elapsed
    time ceiling.

    Args:
        message: A descriptive error message. Callers may match on the
            default message.
    """

    def __init__(self, message: str = MAX_ATTEMPTS_TIME_MESSAGE) -> None:
        super().__init__(message)


class MaxAttemptsCountError(RetrierError):
    """Exception raised when the attempt count ceiling is reached and the
    caller did not report an error of its own."""

    def __init__(self, message: str = MAX_ATTEMPTS_COUNT_MESSAGE) -> None:
        super().__init__(message)


class RetrierCancelledError(RetrierError):
    """Exception used to reject the outcome future of a cancelled run."""

    def __init__(self, message: str = CANCELLED_MESSAGE) -> None:
        super().__init__(message)


class AttemptFailedError(RetrierError):
    """Wrap an error value that is not an exception.

    Callers may report any value through ``Retrier.failed``. An asyncio
    future can only be rejected with an exception, so other values are
    carried by this class.

    Args:
        error: The value reported by the caller.

    Attributes:
        error: The value reported by the caller.

    Example:
        ```pycon
        >>> from aretrier.exceptions import AttemptFailedError
        >>> exc = AttemptFailedError({"code": 503})
        >>> exc.error
        {'code': 503}
        >>> str(exc)
        "Attempt failed: {'code': 503}"

        ```
    """

    def __init__(self, error: Any) -> None:
        super().__init__(f"Attempt failed: {error!r}")
        self.error = error


def as_exception(error: Any) -> BaseException:
    r"""Return ``error`` if it is an exception, otherwise wrap it.

    Args:
        error: The value reported by the caller.

    Returns:
        An exception that can be used to reject a future.
    """
    if isinstance(error, BaseException):
        return error
    return AttemptFailedError(error)
