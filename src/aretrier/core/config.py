r"""Configuration dataclass and defaults for the Retrier.

This module provides configuration constants and a dataclass-based
configuration object holding the retry policy of a ``Retrier``.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_FACTOR",
    "DEFAULT_INITIAL_DELAY",
    "DEFAULT_RANDOMISATION_FACTOR",
    "RetrierConfig",
]

from dataclasses import asdict, dataclass, replace
from typing import Any

from aretrier.core.validation import validate_retrier_params

# Delay in milliseconds before the first attempt
# 0 fires the attempt on the next event loop iteration
DEFAULT_INITIAL_DELAY = 0.0

# Growth multiplier of the backoff between attempts
# Wait time = min_delay * (factor ** (attempt - 1)), capped at max_delay
DEFAULT_FACTOR = 2.0

# Fraction of jitter added on top of the growth curve
DEFAULT_RANDOMISATION_FACTOR = 0.0


@dataclass(frozen=True)
class RetrierConfig:
    """Configuration for Retrier scheduling behavior.

    All delays and durations are expressed in milliseconds.

    Args:
        min_delay: Base delay of the backoff growth. Must be >= 1.
        max_delay: Cap of the backoff growth. Must be > ``min_delay``.
        initial_delay: Delay before the first attempt. Must be >= 0.
        max_attempts_count: Optional ceiling on the number of attempts.
        max_attempts_time: Optional ceiling on the time elapsed since the
            run started. The next attempt is never scheduled past it.
        factor: Growth multiplier of the backoff. Must be > 1.
        randomisation_factor: Jitter fraction in [0, 1].

    Example:
        ```pycon
        >>> from aretrier.core.config import RetrierConfig
        >>> config = RetrierConfig(min_delay=10, max_delay=1000)
        >>> config.initial_delay
        0.0
        >>> merged = config.merge(max_attempts_count=5)
        >>> merged.max_attempts_count
        5
        >>> config.max_attempts_count is None  # Original unchanged
        True

        ```
    """

    min_delay: float
    max_delay: float
    initial_delay: float = DEFAULT_INITIAL_DELAY
    max_attempts_count: int | None = None
    max_attempts_time: float | None = None
    factor: float = DEFAULT_FACTOR
    randomisation_factor: float = DEFAULT_RANDOMISATION_FACTOR

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            RetrierConfigError: If any parameter fails validation.
        """
        validate_retrier_params(
            min_delay=self.min_delay,
            max_delay=self.max_delay,
            initial_delay=self.initial_delay,
            max_attempts_count=self.max_attempts_count,
            max_attempts_time=self.max_attempts_time,
            factor=self.factor,
            randomisation_factor=self.randomisation_factor,
        )

    def merge(self, **overrides: Any) -> RetrierConfig:
        """Create a new config with specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new validated RetrierConfig instance.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary format.

        Returns:
            Dictionary with every configuration parameter.

        Example:
            ```pycon
            >>> from aretrier.core.config import RetrierConfig
            >>> RetrierConfig(min_delay=10, max_delay=1000).to_dict()["max_delay"]
            1000

            ```
        """
        return asdict(self)
