r"""Parameter validation utilities for backoff and retrier policies.

This module provides validation functions that check policy parameters
before they are stored, so that no backoff or retrier is ever built
from an invalid policy.
"""

from __future__ import annotations

__all__ = ["validate_backoff_params", "validate_fail_after", "validate_retrier_params"]

from aretrier.exceptions import BackoffConfigError, RetrierConfigError


def validate_backoff_params(
    initial_delay: float,
    max_delay: float,
    randomisation_factor: float = 0.0,
) -> None:
    """Validate the bounds of a backoff policy.

    The checks run in a fixed order so that the reported error is
    deterministic when several parameters are invalid.

    Args:
        initial_delay: The first delay of the sequence in milliseconds.
            Must be >= 1.
        max_delay: The delay cap in milliseconds. Must be >= 1 and
            greater than ``initial_delay``.
        randomisation_factor: The jitter fraction. Must be in [0, 1].

    Raises:
        BackoffConfigError: If any parameter is out of bounds.

    Example:
        ```pycon
        >>> from aretrier.core.validation import validate_backoff_params
        >>> validate_backoff_params(initial_delay=10, max_delay=1000)
        >>> validate_backoff_params(initial_delay=10, max_delay=5)
        Traceback (most recent call last):
            ...
        aretrier.exceptions.BackoffConfigError: The maximal backoff delay must be greater than the initial backoff delay.

        ```
    """
    if initial_delay < 1:
        msg = "The initial timeout must be equal to or greater than 1."
        raise BackoffConfigError(msg)
    if max_delay < 1:
        msg = "The maximal timeout must be equal to or greater than 1."
        raise BackoffConfigError(msg)
    if max_delay <= initial_delay:
        msg = "The maximal backoff delay must be greater than the initial backoff delay."
        raise BackoffConfigError(msg)
    if not 0 <= randomisation_factor <= 1:
        msg = "The randomisation factor must be between 0 and 1."
        raise BackoffConfigError(msg)


def validate_fail_after(max_number_of_retry: int) -> None:
    """Validate the fail limit of a backoff.

    Args:
        max_number_of_retry: The number of completed backoff cycles after
            which the backoff fails. Must be > 0.

    Raises:
        BackoffConfigError: If ``max_number_of_retry`` is not positive.
    """
    if max_number_of_retry <= 0:
        msg = f"Expected a maximum number of retry greater than 0 but got {max_number_of_retry}"
        raise BackoffConfigError(msg)


def validate_retrier_params(
    min_delay: float,
    max_delay: float,
    initial_delay: float = 0.0,
    max_attempts_count: int | None = None,
    max_attempts_time: float | None = None,
    factor: float = 2.0,
    randomisation_factor: float = 0.0,
) -> None:
    """Validate retrier parameters.

    Args:
        min_delay: Base delay in milliseconds of the backoff growth.
            Must be >= 1.
        max_delay: Cap in milliseconds of the backoff growth. Must be
            greater than ``min_delay``.
        initial_delay: Delay in milliseconds before the first attempt.
            Must be >= 0.
        max_attempts_count: Optional ceiling on the number of attempts.
            Must be > 0 if provided.
        max_attempts_time: Optional ceiling in milliseconds on the time
            elapsed since the run started. Must be > 0 if provided.
        factor: Growth multiplier of the backoff. Must be > 1.
        randomisation_factor: Jitter fraction. Must be in [0, 1].

    Raises:
        RetrierConfigError: If any parameter is out of bounds.

    Example:
        ```pycon
        >>> from aretrier.core.validation import validate_retrier_params
        >>> validate_retrier_params(min_delay=10, max_delay=1000)
        >>> validate_retrier_params(min_delay=10, max_delay=1000, max_attempts_count=0)
        Traceback (most recent call last):
            ...
        aretrier.exceptions.RetrierConfigError: max_attempts_count must be > 0, got 0

        ```
    """
    if min_delay < 1:
        msg = f"min_delay must be >= 1, got {min_delay}"
        raise RetrierConfigError(msg)
    if max_delay <= min_delay:
        msg = f"max_delay must be > min_delay ({min_delay}), got {max_delay}"
        raise RetrierConfigError(msg)
    if initial_delay < 0:
        msg = f"initial_delay must be >= 0, got {initial_delay}"
        raise RetrierConfigError(msg)
    if max_attempts_count is not None and max_attempts_count <= 0:
        msg = f"max_attempts_count must be > 0, got {max_attempts_count}"
        raise RetrierConfigError(msg)
    if max_attempts_time is not None and max_attempts_time <= 0:
        msg = f"max_attempts_time must be > 0, got {max_attempts_time}"
        raise RetrierConfigError(msg)
    if factor <= 1:
        msg = f"factor must be > 1, got {factor}"
        raise RetrierConfigError(msg)
    if not 0 <= randomisation_factor <= 1:
        msg = f"randomisation_factor must be in [0, 1], got {randomisation_factor}"
        raise RetrierConfigError(msg)
