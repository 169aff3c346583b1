"""Strictly increasing UTC timestamps for message creation times."""

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

_TICK = timedelta(microseconds=1)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MonotonicClock:
    """
    Hands out timestamps that never repeat or go backwards.

    When the wall clock stalls or steps back, the previous value is advanced
    by one microsecond instead.
    """

    def __init__(self, source: Optional[Callable[[], datetime]] = None):
        self._source = source or utc_now
        self._last: Optional[datetime] = None
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            current = self._source()
            if self._last is not None and current <= self._last:
                current = self._last + _TICK
            self._last = current
            return current
