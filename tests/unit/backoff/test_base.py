r"""Unit tests for BaseBackoffStrategy."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from aretrier.backoff.base import BaseBackoffStrategy
from aretrier.exceptions import BackoffConfigError


class LinearStrategy(BaseBackoffStrategy):
    """Minimal strategy used to test the base class."""

    def raw_delay(self, step: int) -> float:
        return self.initial_delay * (step + 1)


def test_base_strategy_cannot_be_instantiated() -> None:
    with pytest.raises(TypeError):
        BaseBackoffStrategy()  # type: ignore[abstract]


def test_base_strategy_cursor() -> None:
    strategy = LinearStrategy(initial_delay=10, max_delay=25)
    assert strategy.step == 0
    assert [strategy.next() for _ in range(4)] == [10, 20, 25, 25]
    assert strategy.step == 4


def test_base_strategy_jitter_multiplier() -> None:
    """Test that the jitter multiplier is drawn from [1, 1 +
    randomisation_factor]."""
    strategy = LinearStrategy(initial_delay=10, max_delay=1000, randomisation_factor=0.5)
    with patch("aretrier.backoff.base.random.uniform", return_value=1.5) as mock_uniform:
        assert strategy.calculate(1) == 30
    mock_uniform.assert_called_once_with(1, 1.5)


def test_base_strategy_jitter_is_capped() -> None:
    strategy = LinearStrategy(initial_delay=10, max_delay=25, randomisation_factor=1.0)
    with patch("aretrier.backoff.base.random.uniform", return_value=2.0):
        assert strategy.calculate(1) == 25


def test_base_strategy_no_jitter_does_not_draw() -> None:
    strategy = LinearStrategy(initial_delay=10, max_delay=1000)
    with patch("aretrier.backoff.base.random.uniform") as mock_uniform:
        strategy.calculate(0)
    mock_uniform.assert_not_called()


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"initial_delay": -0.1}, "The initial timeout must be equal to or greater than 1."),
        ({"initial_delay": 0}, "The initial timeout must be equal to or greater than 1."),
        ({"max_delay": -0.1}, "The maximal timeout must be equal to or greater than 1."),
        ({"max_delay": 0}, "The maximal timeout must be equal to or greater than 1."),
        (
            {"initial_delay": 10, "max_delay": 5},
            "The maximal backoff delay must be greater than the initial backoff delay.",
        ),
        ({"randomisation_factor": 1.1}, "The randomisation factor must be between 0 and 1."),
        ({"randomisation_factor": -0.1}, "The randomisation factor must be between 0 and 1."),
    ],
)
def test_base_strategy_invalid_policy(kwargs: dict, message: str) -> None:
    with pytest.raises(BackoffConfigError) as exc_info:
        LinearStrategy(**kwargs)
    assert str(exc_info.value) == message
