r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["DEFAULT_INITIAL_DELAY", "DEFAULT_MAX_DELAY", "BaseBackoffStrategy"]

import math
import random
from abc import ABC, abstractmethod

from aretrier.core.validation import validate_backoff_params

# Default first delay of a backoff sequence in milliseconds
DEFAULT_INITIAL_DELAY = 100

# Default delay cap of a backoff sequence in milliseconds
DEFAULT_MAX_DELAY = 10000


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy maps a step of the sequence to a delay. The growth
    law is provided by subclasses through ``raw_delay``; this class adds
    the jitter, the rounding and the cap, and keeps a cursor so that
    successive calls to ``next`` walk the sequence.

    Args:
        initial_delay: The first delay of the sequence in milliseconds.
        max_delay: The delay cap in milliseconds.
        randomisation_factor: Fraction of jitter added on top of the
            growth curve. Must be in [0, 1].

    Raises:
        BackoffConfigError: If the policy bounds are invalid.
    """

    def __init__(
        self,
        initial_delay: float = DEFAULT_INITIAL_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        randomisation_factor: float = 0.0,
    ) -> None:
        validate_backoff_params(
            initial_delay=initial_delay,
            max_delay=max_delay,
            randomisation_factor=randomisation_factor,
        )
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.randomisation_factor = randomisation_factor
        self._step = 0

    @property
    def step(self) -> int:
        """The position of the cursor in the sequence."""
        return self._step

    @abstractmethod
    def raw_delay(self, step: int) -> float:
        """Compute the deterministic, uncapped delay for a step.

        Args:
            step: The position in the sequence (0-indexed).

        Returns:
            The delay in milliseconds before jitter and cap.
        """

    def calculate(self, step: int) -> float:
        """Calculate the delay for a step without moving the cursor.

        The delay is ``round(multiplier * raw_delay(step))`` capped at
        ``max_delay``, where ``multiplier`` is 1 without jitter and drawn
        uniformly from ``[1, 1 + randomisation_factor]`` otherwise.

        Args:
            step: The position in the sequence (0-indexed).

        Returns:
            The delay in milliseconds.
        """
        delay = self.raw_delay(step)
        if delay >= self.max_delay:
            return self.max_delay
        if self.randomisation_factor > 0:
            delay *= random.uniform(1, 1 + self.randomisation_factor)  # noqa: S311
        # Round half up, then cap
        return min(math.floor(delay + 0.5), self.max_delay)

    def next(self) -> float:
        """Return the delay at the cursor and advance the cursor.

        Returns:
            The delay in milliseconds.
        """
        delay = self.calculate(self._step)
        self._step += 1
        return delay

    def reset(self) -> None:
        """Move the cursor back to the first step."""
        self._step = 0
