"""
Time-related utilities for the application.

All wall-clock timestamps are generated in UTC. Interval measurements
(rate limiting, backoff) use the monotonic clock instead, so they are
unaffected by system clock adjustments.
"""

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def monotonic_seconds() -> float:
    """Return a monotonic clock reading in seconds."""
    return time.monotonic()
