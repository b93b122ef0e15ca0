"""
Clock tests.
"""

from datetime import datetime, timedelta, timezone

import pytest

from rxworkflow.core.clock import Clock, FixedClock, SystemClock

from factories import NOW


def test_clock_is_abstract():
    with pytest.raises(TypeError):
        Clock()


def test_fixed_clock_moves_only_when_told():
    clock = FixedClock(NOW)
    assert clock.now() == NOW
    assert clock.advance(days=10) == NOW + timedelta(days=10)
    clock.set(NOW)
    assert clock.now() == NOW


def test_naive_start_is_treated_as_utc():
    clock = FixedClock(datetime(2024, 3, 15, 12, 0))
    assert clock.now() == NOW
    assert clock.now().tzinfo is timezone.utc


def test_system_clock_is_aware():
    assert SystemClock().now().tzinfo is not None
