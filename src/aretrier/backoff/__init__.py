r"""Backoff strategies and event-driven backoff cycles.

This package provides the strategies computing retry delays
(exponential and Fibonacci) and the ``Backoff`` class that drives timed
cycles around them.
"""

from __future__ import annotations

__all__ = [
    "Backoff",
    "BaseBackoffStrategy",
    "ExponentialBackoffStrategy",
    "FibonacciBackoffStrategy",
]

from aretrier.backoff.backoff import Backoff
from aretrier.backoff.base import BaseBackoffStrategy
from aretrier.backoff.exponential import ExponentialBackoffStrategy
from aretrier.backoff.fibonacci import FibonacciBackoffStrategy
