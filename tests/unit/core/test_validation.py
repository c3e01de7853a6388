r"""Unit tests for parameter validation utilities."""

from __future__ import annotations

import pytest

from aretrier.core.validation import (
    validate_backoff_params,
    validate_fail_after,
    validate_retrier_params,
)
from aretrier.exceptions import BackoffConfigError, RetrierConfigError

#############################################
#     Tests for validate_backoff_params     #
#############################################


@pytest.mark.parametrize(
    ("initial_delay", "max_delay", "randomisation_factor"),
    [(1, 2, 0.0), (10, 1000, 0.0), (10, 1000, 1.0), (10, 1000, 0.5)],
)
def test_validate_backoff_params_valid(
    initial_delay: float, max_delay: float, randomisation_factor: float
) -> None:
    validate_backoff_params(initial_delay, max_delay, randomisation_factor)


def test_validate_backoff_params_checks_initial_delay_first() -> None:
    """Test that the initial delay is reported before the other
    errors."""
    with pytest.raises(BackoffConfigError, match=r"The initial timeout"):
        validate_backoff_params(initial_delay=0, max_delay=0, randomisation_factor=2)


def test_validate_backoff_params_checks_max_delay_before_range() -> None:
    with pytest.raises(BackoffConfigError, match=r"The maximal timeout"):
        validate_backoff_params(initial_delay=10, max_delay=0)


def test_validate_backoff_params_checks_range_before_jitter() -> None:
    with pytest.raises(BackoffConfigError, match=r"The maximal backoff delay"):
        validate_backoff_params(initial_delay=10, max_delay=10, randomisation_factor=2)


def test_backoff_config_error_is_value_error() -> None:
    with pytest.raises(ValueError):  # noqa: PT011
        validate_backoff_params(initial_delay=10, max_delay=1000, randomisation_factor=-1)


#########################################
#     Tests for validate_fail_after     #
#########################################


def test_validate_fail_after_valid() -> None:
    validate_fail_after(1)


@pytest.mark.parametrize("limit", [0, -3])
def test_validate_fail_after_invalid(limit: int) -> None:
    with pytest.raises(
        BackoffConfigError,
        match=rf"Expected a maximum number of retry greater than 0 but got {limit}",
    ):
        validate_fail_after(limit)


#############################################
#     Tests for validate_retrier_params     #
#############################################


def test_validate_retrier_params_valid() -> None:
    validate_retrier_params(
        min_delay=10,
        max_delay=1000,
        initial_delay=100,
        max_attempts_count=3,
        max_attempts_time=5000,
        factor=3,
        randomisation_factor=0.2,
    )


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"min_delay": 0}, r"min_delay must be >= 1, got 0"),
        ({"max_delay": 10}, r"max_delay must be > min_delay \(10\), got 10"),
        ({"initial_delay": -1}, r"initial_delay must be >= 0, got -1"),
        ({"max_attempts_count": 0}, r"max_attempts_count must be > 0, got 0"),
        ({"max_attempts_time": 0}, r"max_attempts_time must be > 0, got 0"),
        ({"factor": 1}, r"factor must be > 1, got 1"),
        ({"randomisation_factor": 1.5}, r"randomisation_factor must be in \[0, 1\], got 1.5"),
    ],
)
def test_validate_retrier_params_invalid(kwargs: dict, message: str) -> None:
    params = {"min_delay": 10, "max_delay": 1000} | kwargs
    with pytest.raises(RetrierConfigError, match=message):
        validate_retrier_params(**params)
