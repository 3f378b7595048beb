"""Wires Dropbox collaborators from runtime settings."""

from collections.abc import Iterator
from contextlib import contextmanager

from core.infrastructure.adapters.dropbox_adapter import DropboxAdapter
from core.infrastructure.dropbox.dropbox_storage import DropboxStorage
from core.infrastructure.dropbox.retrying_writer import RateLimitedRetryingWriter
from core.infrastructure.dropbox.token_provider import TokenProvider
from core.utils.config import ServiceSettings
from core.utils.rate_limiter import get_process_rate_limiter


@contextmanager
def build_dropbox(settings: ServiceSettings) -> Iterator[tuple[TokenProvider, DropboxStorage]]:
    """Yield a token provider and storage sharing one HTTP session.

    The session is closed when the block exits, so it never outlives the
    request that opened it. The writer always uses the process-wide rate
    limiter.

    Example:
        with build_dropbox(settings) as (token_provider, storage):
            ...
    """
    adapter = DropboxAdapter(timeout=settings.http_timeout_seconds)
    writer = RateLimitedRetryingWriter(
        adapter,
        rate_limiter=get_process_rate_limiter(settings.min_upload_interval_seconds),
    )
    token_provider = TokenProvider(adapter, auth_style=settings.token_auth_style)
    storage = DropboxStorage(
        adapter,
        writer=writer,
        max_attempts=settings.max_upload_attempts,
    )

    try:
        yield token_provider, storage
    finally:
        adapter.close()
