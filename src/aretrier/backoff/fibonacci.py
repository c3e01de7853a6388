r"""Fibonacci backoff strategy."""

from __future__ import annotations

__all__ = ["FibonacciBackoffStrategy"]

from aretrier.backoff.base import BaseBackoffStrategy


class FibonacciBackoffStrategy(BaseBackoffStrategy):
    """Fibonacci backoff strategy.

    Calculates delay as: initial_delay * fibonacci(step + 1), capped at
    max_delay. The Fibonacci sequence (1, 1, 2, 3, 5, 8, ...) grows more
    gradually than an exponential one.

    Args:
        initial_delay: The first delay in milliseconds (default: 100).
        max_delay: The delay cap in milliseconds (default: 10000).
        randomisation_factor: Fraction of jitter in [0, 1] (default: 0).

    Example:
        ```pycon
        >>> from aretrier.backoff import FibonacciBackoffStrategy
        >>> strategy = FibonacciBackoffStrategy(initial_delay=10, max_delay=100)
        >>> [strategy.next() for _ in range(8)]
        [10, 10, 20, 30, 50, 80, 100, 100]

        ```
    """

    @staticmethod
    def _fibonacci(n: int) -> int:
        """Calculate the nth Fibonacci number (1-indexed).

        Args:
            n: The position in the Fibonacci sequence (1-indexed).

        Returns:
            The nth Fibonacci number.
        """
        if n <= 0:
            return 0
        a, b = 0, 1
        for _ in range(n - 1):
            a, b = b, a + b
        return b

    def raw_delay(self, step: int) -> float:
        """Calculate Fibonacci backoff delay.

        Args:
            step: The position in the sequence (0-indexed).

        Returns:
            The uncapped delay: initial_delay * fibonacci(step + 1).
        """
        return self.initial_delay * self._fibonacci(step + 1)
