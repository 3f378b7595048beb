"""Business logic for the key-value record store.

The record is a single JSON object. Updates are applied with a
read-merge-write cycle: only keys the caller sent are overwritten and
every other key already stored is preserved.
"""

import json

from aws_lambda_powertools import Logger

from core.models.auth import AccessToken
from core.models.errors import NotFoundError, StoreError, ValidationError
from core.models.record import Record, RecordUpdate
from core.repositories.storage_repository import ObjectStorageRepository
from core.utils.constants import ERROR_CODE_RECORD_INVALID_FORMAT, MESSAGE_MISSING_RECORD_FIELDS

logger = Logger(UTC=True)


class RecordMerger:
    """Reads, merges and writes the stored record."""

    def __init__(self, storage: ObjectStorageRepository) -> None:
        self.storage = storage

    @staticmethod
    def validate_update(update: RecordUpdate) -> None:
        """Reject updates that target none of the managed fields.

        Raises:
            ValidationError: If neither ``address`` nor ``unitNumber`` is present
        """
        if update.is_empty():
            raise ValidationError(message=MESSAGE_MISSING_RECORD_FIELDS)

    def read_raw(self, *, access_token: AccessToken, path: str) -> str:
        """Return the stored document text verbatim.

        Raises:
            NotFoundError: If no record is stored
            StoreError: If the download fails or is not UTF-8 text
        """
        content = self.storage.download(access_token=access_token, path=path)
        try:
            return content.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise StoreError(
                message="Stored record is not valid UTF-8",
                error_code=ERROR_CODE_RECORD_INVALID_FORMAT,
                details={"path": path},
            ) from exc

    def load_existing(self, *, access_token: AccessToken, path: str) -> Record:
        """Load the current record, treating an unreadable object as absent.

        Raises:
            StoreError: If the stored content exists but is not a JSON object
        """
        try:
            content = self.storage.download(access_token=access_token, path=path)
        except (NotFoundError, StoreError) as exc:
            logger.info(
                "No existing record readable, starting from empty",
                extra={"path": path, "reason": exc.message},
            )
            return {}

        if not content.strip():
            return {}

        try:
            existing = json.loads(content)
        except ValueError as exc:
            logger.error("Stored record is not valid JSON", extra={"path": path})
            raise StoreError(
                message="Stored record is not valid JSON",
                error_code=ERROR_CODE_RECORD_INVALID_FORMAT,
                details={"path": path},
            ) from exc

        if not isinstance(existing, dict):
            logger.error(
                "Stored record is not a JSON object",
                extra={"path": path, "type": type(existing).__name__},
            )
            raise StoreError(
                message="Stored record is not a JSON object",
                error_code=ERROR_CODE_RECORD_INVALID_FORMAT,
                details={"path": path, "type": type(existing).__name__},
            )

        return existing

    def merge_and_store(
        self,
        *,
        access_token: AccessToken,
        path: str,
        update: RecordUpdate,
    ) -> Record:
        """Apply ``update`` to the stored record and write it back.

        Returns:
            The merged record exactly as written

        Raises:
            ValidationError: If the update targets no managed field
            StoreError: If the existing record is corrupt
            WriteError: If the write fails
        """
        self.validate_update(update)

        existing = self.load_existing(access_token=access_token, path=path)
        logger.debug("Current record before update", extra={"record": existing})

        merged = update.apply_to(existing)
        logger.info(
            "Record merged",
            extra={"path": path, "updated_fields": sorted(update.present_fields())},
        )

        payload = json.dumps(merged, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        self.storage.upload(
            access_token=access_token,
            path=path,
            content=payload,
            mute=True,
        )

        return merged
