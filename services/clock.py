# services/clock.py
"""
Injectable clock.

Services never call datetime.now() directly; they receive a Clock so that
cooldown windows, retroactive detection and backfill can be tested against
a fixed "now". Times are naive UTC, matching the DateTime columns.
"""
from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone
from typing import Optional


class Clock(ABC):
     """Abstract clock interface."""

     @abstractmethod
     def now(self) -> datetime:
          """Current time (naive UTC)."""

     def today(self) -> date:
          """Current date, time of day truncated."""
          return self.now().date()


class SystemClock(Clock):
     """Production clock backed by the system time."""

     def now(self) -> datetime:
          return datetime.now(timezone.utc).replace(tzinfo=None)


class DeterministicClock(Clock):
     """Test clock returning a fixed time until advanced."""

     def __init__(self, fixed_time: Optional[datetime] = None):
          self._fixed_time = fixed_time or datetime(2026, 6, 15, 12, 0, 0)

     def now(self) -> datetime:
          return self._fixed_time

     def set_time(self, time: datetime) -> None:
          self._fixed_time = time

     def advance(self, **kwargs) -> datetime:
          """Advance by a timedelta expressed as keyword args (days=1, hours=2)."""
          self._fixed_time = self._fixed_time + timedelta(**kwargs)
          return self._fixed_time
