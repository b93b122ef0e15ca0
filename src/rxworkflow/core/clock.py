"""
Injectable clock used wherever the engine needs "now".
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional

from .utils.datetime_utils import utc_now


class Clock(ABC):
    """Source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time, timezone-aware."""
        pass


class SystemClock(Clock):
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return utc_now()


class FixedClock(Clock):
    """Clock pinned to a given instant; tests move it explicitly."""

    def __init__(self, current: Optional[datetime] = None) -> None:
        current = current or utc_now()
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        self._current = current

    def now(self) -> datetime:
        return self._current

    def set(self, current: datetime) -> None:
        self._current = current

    def advance(self, **kwargs: float) -> datetime:
        """Move forward by ``timedelta(**kwargs)`` and return the new time."""
        self._current = self._current + timedelta(**kwargs)
        return self._current
