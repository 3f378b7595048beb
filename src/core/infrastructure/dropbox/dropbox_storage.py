"""Dropbox-backed implementation of ObjectStorageRepository."""

from aws_lambda_powertools import Logger
import requests

from core.infrastructure.adapters.dropbox_adapter import DropboxAdapter, DropboxAdapterProtocol
from core.infrastructure.dropbox.retrying_writer import RateLimitedRetryingWriter
from core.models.auth import AccessToken
from core.models.errors import NotFoundError, StoreError
from core.repositories.storage_repository import ObjectStorageRepository
from core.utils.constants import DEFAULT_MAX_UPLOAD_ATTEMPTS, ERROR_CODE_DOWNLOAD_FAILED

logger = Logger(UTC=True)


def _is_not_found(response: requests.Response) -> bool:
    """Dropbox reports missing paths as 409 with ``path/not_found``."""
    if response.status_code == 404:
        return True
    if response.status_code != 409:
        return False
    return "not_found" in response.text


class DropboxStorage(ObjectStorageRepository):
    """Object storage backed by Dropbox files endpoints.

    Reads are never retried. Writes go through the rate-limited,
    retrying writer.
    """

    def __init__(
        self,
        adapter: DropboxAdapterProtocol | None = None,
        *,
        writer: RateLimitedRetryingWriter | None = None,
        max_attempts: int = DEFAULT_MAX_UPLOAD_ATTEMPTS,
    ) -> None:
        self._dropbox = adapter or DropboxAdapter()
        self._writer = writer or RateLimitedRetryingWriter(self._dropbox)
        self._max_attempts = max_attempts

    def download(self, *, access_token: AccessToken, path: str) -> bytes:
        logger.debug("Downloading object", extra={"path": path})

        try:
            response = self._dropbox.download(
                authorization=access_token.authorization_header,
                path=path,
            )
        except requests.RequestException as exc:
            logger.exception("Dropbox download request failed")
            raise StoreError(
                message=f"Download failed: {exc}",
                error_code=ERROR_CODE_DOWNLOAD_FAILED,
                details={"path": path},
            ) from exc

        if _is_not_found(response):
            logger.info("Object not found", extra={"path": path})
            raise NotFoundError(
                message=f"Download failed: {response.status_code} {response.text}",
                details={"path": path, "status_code": response.status_code},
            )

        if not response.ok:
            logger.error(
                "Dropbox download failed",
                extra={"path": path, "status_code": response.status_code},
            )
            raise StoreError(
                message=f"Download failed: {response.status_code} {response.text}",
                error_code=ERROR_CODE_DOWNLOAD_FAILED,
                details={"path": path, "status_code": response.status_code},
            )

        content = response.content
        logger.info("Object downloaded", extra={"path": path, "size": len(content)})
        return content

    def upload(
        self,
        *,
        access_token: AccessToken,
        path: str,
        content: bytes,
        mute: bool = False,
    ) -> int:
        logger.debug("Uploading object", extra={"path": path, "size": len(content)})
        return self._writer.write(
            access_token,
            content,
            path,
            max_attempts=self._max_attempts,
            mute=mute,
        )
