"""Rate-limited, retrying writer for Dropbox uploads.

Per call the writer runs a small state machine::

    Throttle -> Attempt -> Success
                        -> RateLimited  -> RetryAfterBackoff -> Attempt
                        -> Transient    -> LinearBackoff     -> Attempt
                        -> Terminal (WriteError)

Throttling happens once per call. Backoff delays after a failed attempt
are not throttled again. Exhausting attempts always surfaces the last
observed error.
"""

import json
import time
from typing import Any

from aws_lambda_powertools import Logger
import requests

from core.infrastructure.adapters.dropbox_adapter import DropboxAdapter, DropboxAdapterProtocol
from core.models.auth import AccessToken
from core.models.errors import WriteError
from core.utils.constants import (
    DEFAULT_MAX_UPLOAD_ATTEMPTS,
    DEFAULT_RETRY_AFTER_SECONDS,
    DROPBOX_RATE_LIMIT_REASON,
    LINEAR_BACKOFF_STEP_SECONDS,
)
from core.utils.rate_limiter import MinIntervalRateLimiter, Sleeper, get_process_rate_limiter

logger = Logger(UTC=True)


class RetryAfterBackoff:
    """Provider-supplied delay from a ``too_many_write_operations`` error."""

    def __init__(self, default_seconds: float = DEFAULT_RETRY_AFTER_SECONDS) -> None:
        self.default_seconds = default_seconds

    def delay_for(self, retry_after: Any) -> float:
        """Missing, zero, negative or non-numeric values fall back to the default."""
        if isinstance(retry_after, bool) or not isinstance(retry_after, (int, float)):
            return self.default_seconds
        if retry_after <= 0:
            return self.default_seconds
        return float(retry_after)


class LinearBackoff:
    """``attempt * step`` seconds after a transient failure."""

    def __init__(self, step_seconds: float = LINEAR_BACKOFF_STEP_SECONDS) -> None:
        self.step_seconds = step_seconds

    def delay_for(self, attempt: int) -> float:
        return attempt * self.step_seconds


class _TransientWriteFailure(Exception):
    """A failed attempt that is retried with linear backoff."""


def parse_rate_limit(error_body: Any) -> tuple[bool, Any]:
    """Return ``(is_rate_limited, retry_after)`` for a decoded error body."""
    if not isinstance(error_body, dict):
        return False, None

    error = error_body.get("error")
    if not isinstance(error, dict):
        return False, None

    reason = error.get("reason")
    tag = reason.get(".tag") if isinstance(reason, dict) else None
    if tag != DROPBOX_RATE_LIMIT_REASON:
        return False, None

    return True, error.get("retry_after")


class RateLimitedRetryingWriter:
    """Writes bytes to a Dropbox path with spacing and retries."""

    def __init__(
        self,
        adapter: DropboxAdapterProtocol | None = None,
        *,
        rate_limiter: MinIntervalRateLimiter | None = None,
        retry_after_backoff: RetryAfterBackoff | None = None,
        linear_backoff: LinearBackoff | None = None,
        sleep: Sleeper = time.sleep,
    ) -> None:
        self._dropbox = adapter or DropboxAdapter()
        self._rate_limiter = rate_limiter or get_process_rate_limiter()
        self._retry_after = retry_after_backoff or RetryAfterBackoff()
        self._linear = linear_backoff or LinearBackoff()
        self._sleep = sleep

    def write(
        self,
        access_token: AccessToken,
        payload: bytes,
        path: str,
        *,
        max_attempts: int = DEFAULT_MAX_UPLOAD_ATTEMPTS,
        mute: bool = False,
    ) -> int:
        """Upload ``payload`` to ``path`` in overwrite mode.

        Args:
            access_token: Bearer token for the call
            payload: Bytes to store
            path: Destination path (leading slash)
            max_attempts: Total attempts including the first
            mute: Suppress Dropbox client notifications for this write

        Returns:
            Number of attempts used

        Raises:
            WriteError: When a terminal failure occurs or attempts run out
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self._rate_limiter.wait()

        attempt = 1
        while True:
            try:
                response = self._dropbox.upload(
                    authorization=access_token.authorization_header,
                    path=path,
                    body=payload,
                    mode="overwrite",
                    autorename=False,
                    mute=mute,
                )
            except requests.RequestException as exc:
                self._handle_transient(exc, attempt=attempt, max_attempts=max_attempts, path=path)
                attempt += 1
                continue

            if response.ok:
                self._rate_limiter.record_completion()
                logger.info(
                    "Upload succeeded",
                    extra={"path": path, "attempt": attempt, "size": len(payload)},
                )
                return attempt

            try:
                error_body = response.json()
            except ValueError:
                failure = _TransientWriteFailure(
                    f"Upload failed: {response.status_code} {response.text}"
                )
                self._handle_transient(failure, attempt=attempt, max_attempts=max_attempts, path=path)
                attempt += 1
                continue

            raw_error = json.dumps(error_body)
            rate_limited, retry_after = parse_rate_limit(error_body)

            if rate_limited and attempt < max_attempts:
                delay = self._retry_after.delay_for(retry_after)
                logger.warning(
                    "Rate limited by Dropbox, retrying",
                    extra={
                        "path": path,
                        "attempt": attempt,
                        "max_attempts": max_attempts,
                        "retry_after_seconds": delay,
                    },
                )
                self._sleep(delay)
                attempt += 1
                continue

            logger.error(
                "Upload failed",
                extra={
                    "path": path,
                    "attempt": attempt,
                    "status_code": response.status_code,
                    "rate_limited": rate_limited,
                },
            )
            raise WriteError(
                message=f"Upload failed: {raw_error}",
                details={
                    "path": path,
                    "attempts": attempt,
                    "status_code": response.status_code,
                    "rate_limited": rate_limited,
                    "body": raw_error,
                },
            )

    def _handle_transient(
        self,
        exc: Exception,
        *,
        attempt: int,
        max_attempts: int,
        path: str,
    ) -> None:
        """Sleep before the next attempt, or raise once attempts are spent."""
        if attempt >= max_attempts:
            logger.error(
                "Upload failed after retries",
                extra={"path": path, "attempts": attempt, "error": str(exc)},
            )
            raise WriteError(
                message=str(exc),
                details={
                    "path": path,
                    "attempts": attempt,
                    "error_type": type(exc).__name__,
                },
            ) from exc

        delay = self._linear.delay_for(attempt)
        logger.warning(
            "Upload attempt failed, retrying",
            extra={
                "path": path,
                "attempt": attempt,
                "max_attempts": max_attempts,
                "backoff_seconds": delay,
                "error": str(exc),
            },
        )
        self._sleep(delay)
