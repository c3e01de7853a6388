r"""Unit tests for RetrierConfig dataclass.

This file contains tests for the RetrierConfig dataclass in
core/config.py.
"""

from __future__ import annotations

import dataclasses

import pytest
from coola.equality import objects_are_equal

from aretrier.core import (
    DEFAULT_FACTOR,
    DEFAULT_INITIAL_DELAY,
    DEFAULT_RANDOMISATION_FACTOR,
    RetrierConfig,
)
from aretrier.exceptions import RetrierConfigError

###################################
#     Tests for RetrierConfig     #
###################################


def test_retrier_config_defaults() -> None:
    config = RetrierConfig(min_delay=10, max_delay=1000)
    assert config.initial_delay == DEFAULT_INITIAL_DELAY
    assert config.max_attempts_count is None
    assert config.max_attempts_time is None
    assert config.factor == DEFAULT_FACTOR
    assert config.randomisation_factor == DEFAULT_RANDOMISATION_FACTOR


def test_retrier_config_is_frozen() -> None:
    config = RetrierConfig(min_delay=10, max_delay=1000)
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.min_delay = 20  # type: ignore[misc]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"min_delay": 0.5, "max_delay": 1000},
        {"min_delay": 10, "max_delay": 5},
        {"min_delay": 10, "max_delay": 1000, "max_attempts_count": -1},
        {"min_delay": 10, "max_delay": 1000, "max_attempts_time": -5},
    ],
)
def test_retrier_config_invalid(kwargs: dict) -> None:
    with pytest.raises(RetrierConfigError):
        RetrierConfig(**kwargs)


def test_retrier_config_merge() -> None:
    config = RetrierConfig(min_delay=10, max_delay=1000, max_attempts_count=3)
    merged = config.merge(max_attempts_time=5000.0, max_attempts_count=None)
    assert merged.max_attempts_time == 5000.0
    assert merged.max_attempts_count == 3
    assert config.max_attempts_time is None


def test_retrier_config_merge_is_validated() -> None:
    config = RetrierConfig(min_delay=10, max_delay=1000)
    with pytest.raises(RetrierConfigError, match=r"max_delay must be > min_delay"):
        config.merge(max_delay=10)


def test_retrier_config_to_dict() -> None:
    config = RetrierConfig(min_delay=10, max_delay=1000, initial_delay=50)
    assert objects_are_equal(
        config.to_dict(),
        {
            "min_delay": 10,
            "max_delay": 1000,
            "initial_delay": 50,
            "max_attempts_count": None,
            "max_attempts_time": None,
            "factor": 2.0,
            "randomisation_factor": 0.0,
        },
    )


def test_retrier_config_round_trip_through_dict() -> None:
    config = RetrierConfig(min_delay=10, max_delay=1000, max_attempts_count=4)
    assert RetrierConfig(**config.to_dict()) == config
