"""
Timestamp source for repositories.

System clocks can return the same instant twice (or step backwards), which
would break created_at ordering and the non-decreasing updated_at guarantee.
"""

import threading
from collections.abc import Callable
from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class MonotonicClock:
    """
    Strictly increasing UTC clock.

    Each call returns a value greater than the previous one, bumping by one
    microsecond when the underlying source has not advanced.
    """

    def __init__(self, source: Callable[[], datetime] = utc_now):
        self._source = source
        self._last: datetime | None = None
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            current = self._source()
            if self._last is not None and current <= self._last:
                current = self._last + timedelta(microseconds=1)
            self._last = current
            return current
