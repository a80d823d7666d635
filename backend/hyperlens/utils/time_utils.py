"""
PURPOSE: Time helpers for cache expiry and search history timestamps.
"""

import time
from datetime import datetime, timezone


def get_utc_now() -> datetime:
    """
    PURPOSE: Return the current UTC time as a timezone-aware datetime object.

    Returns:
        datetime: Current UTC time with timezone info.
    """
    return datetime.now(timezone.utc)


def now_ms() -> int:
    """
    PURPOSE: Current wall-clock time in epoch milliseconds.

    Returns:
        int: Milliseconds since the Unix epoch.
    """
    return int(time.time() * 1000)


def monotonic() -> float:
    """
    PURPOSE: Monotonic clock in seconds used for TTL bookkeeping.

    Returns:
        float: Seconds from an arbitrary fixed point; never goes backwards.
    """
    return time.monotonic()
