"""Minimum-interval limiter for remote writes.

Spacing is measured from the completion of the previous successful write.
The timestamp is guarded by a lock, but the wait itself happens outside
it: two writers that check at the same moment may both proceed after the
same delay. Spacing is therefore strict for sequential callers and
best-effort for concurrent callers in one process. Nothing is shared
across processes.
"""

import threading
import time
from collections.abc import Callable

from aws_lambda_powertools import Logger

from core.utils.constants import MIN_UPLOAD_INTERVAL_SECONDS
from core.utils.time import monotonic_seconds

logger = Logger(UTC=True)

Clock = Callable[[], float]
Sleeper = Callable[[float], None]


class MinIntervalRateLimiter:
    """Enforces a minimum gap between successive successful writes."""

    def __init__(
        self,
        min_interval: float = MIN_UPLOAD_INTERVAL_SECONDS,
        *,
        clock: Clock = monotonic_seconds,
        sleep: Sleeper = time.sleep,
    ) -> None:
        if min_interval < 0:
            raise ValueError("min_interval must not be negative")

        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last_completed_at: float | None = None
        self._lock = threading.Lock()

    @property
    def last_completed_at(self) -> float | None:
        with self._lock:
            return self._last_completed_at

    def remaining_delay(self) -> float:
        """Seconds to wait before the next write may start."""
        with self._lock:
            if self._last_completed_at is None:
                return 0.0
            elapsed = self._clock() - self._last_completed_at

        return max(0.0, self.min_interval - elapsed)

    def wait(self) -> float:
        """Block until the minimum interval has elapsed. Returns the delay slept."""
        delay = self.remaining_delay()
        if delay > 0:
            logger.info(
                "Rate limiting: waiting before upload",
                extra={"wait_ms": round(delay * 1000)},
            )
            self._sleep(delay)
        return delay

    def record_completion(self) -> None:
        """Mark a successful write as completed now."""
        with self._lock:
            self._last_completed_at = self._clock()


_process_limiter: MinIntervalRateLimiter | None = None
_process_limiter_lock = threading.Lock()


def get_process_rate_limiter(
    min_interval: float = MIN_UPLOAD_INTERVAL_SECONDS,
) -> MinIntervalRateLimiter:
    """Return the limiter shared by every writer in this process.

    The interval given on the first call wins; the limiter is never reset.
    """
    global _process_limiter

    with _process_limiter_lock:
        if _process_limiter is None:
            _process_limiter = MinIntervalRateLimiter(min_interval)
        return _process_limiter
