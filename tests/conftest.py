from __future__ import annotations

from unittest.mock import Mock

import pytest

from tests.helpers import FakeScheduler


@pytest.fixture
def scheduler() -> FakeScheduler:
    """Create a scheduler with a manual clock starting at 0."""
    return FakeScheduler()


@pytest.fixture
def mock_callback() -> Mock:
    """Create a mock listener for testing notifications.

    Returns:
        A Mock object that can be registered as a listener.
    """
    return Mock()
