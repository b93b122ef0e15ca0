"""
Shared fixtures for the workflow tests.
"""

from datetime import datetime

import pytest

from rxworkflow.core.clock import FixedClock
from rxworkflow.core.config import reset_settings

from factories import NOW


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture(autouse=True)
def _fresh_settings():
    reset_settings()
    yield
    reset_settings()
