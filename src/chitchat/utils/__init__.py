"""Utils package for utility functions"""

from chitchat.utils.clock import MonotonicClock, utc_now

__all__ = [
    "MonotonicClock",
    "utc_now",
]
