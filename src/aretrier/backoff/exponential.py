r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["DEFAULT_FACTOR", "ExponentialBackoffStrategy"]

import math

from aretrier.backoff.base import DEFAULT_INITIAL_DELAY, DEFAULT_MAX_DELAY, BaseBackoffStrategy
from aretrier.exceptions import BackoffConfigError

DEFAULT_FACTOR = 2


class ExponentialBackoffStrategy(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as: initial_delay * (factor ** step), capped at
    max_delay.

    Args:
        initial_delay: The first delay in milliseconds (default: 100).
        max_delay: The delay cap in milliseconds (default: 10000).
        factor: Growth multiplier per step (default: 2). Must be > 1.
        randomisation_factor: Fraction of jitter in [0, 1] (default: 0).

    Example:
        ```pycon
        >>> from aretrier.backoff import ExponentialBackoffStrategy
        >>> strategy = ExponentialBackoffStrategy(initial_delay=10, max_delay=1000)
        >>> [strategy.next() for _ in range(10)]
        [10, 20, 40, 80, 160, 320, 640, 1000, 1000, 1000]
        >>> strategy.reset()
        >>> strategy.next()
        10

        ```
    """

    def __init__(
        self,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        factor: float = DEFAULT_FACTOR,
        randomisation_factor: float = 0.0,
    ) -> None:
        super().__init__(
            initial_delay=initial_delay,
            max_delay=max_delay,
            randomisation_factor=randomisation_factor,
        )
        if factor <= 1:
            msg = "The exponential factor must be greater than 1."
            raise BackoffConfigError(msg)
        self.factor = factor

    def raw_delay(self, step: int) -> float:
        """Calculate exponential backoff delay.

        Args:
            step: The position in the sequence (0-indexed).

        Returns:
            The uncapped delay: initial_delay * (factor ** step).
        """
        try:
            return self.initial_delay * self.factor**step
        except OverflowError:
            return math.inf
