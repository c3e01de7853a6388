r"""Core configuration and validation for backoff and retrier
policies."""

from __future__ import annotations

__all__ = [
    "DEFAULT_FACTOR",
    "DEFAULT_INITIAL_DELAY",
    "DEFAULT_RANDOMISATION_FACTOR",
    "RetrierConfig",
    "validate_backoff_params",
    "validate_fail_after",
    "validate_retrier_params",
]

from aretrier.core.config import (
    DEFAULT_FACTOR,
    DEFAULT_INITIAL_DELAY,
    DEFAULT_RANDOMISATION_FACTOR,
    RetrierConfig,
)
from aretrier.core.validation import (
    validate_backoff_params,
    validate_fail_after,
    validate_retrier_params,
)
