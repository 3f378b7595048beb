"""Custom exception classes for the Dropbox media functions."""

from typing import Any

from core.utils.constants import (
    ERROR_CODE_AUTH_FAILED,
    ERROR_CODE_CONFIGURATION_MISSING,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_STORE_FAILED,
    ERROR_CODE_TRANSFORM_FAILED,
    ERROR_CODE_VALIDATION_FAILED,
    ERROR_CODE_WRITE_FAILED,
)


class DropboxServiceError(Exception):
    """
    Base exception for all service errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)


class ValidationError(DropboxServiceError):
    """Raised when caller input is missing required fields."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ConfigurationError(DropboxServiceError):
    """Raised when required process configuration is absent."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_CONFIGURATION_MISSING,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class NotFoundError(DropboxServiceError):
    """Raised when a requested object does not exist in storage."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RESOURCE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class AuthError(DropboxServiceError):
    """Raised when the OAuth2 token exchange fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_AUTH_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )

    @property
    def status_code(self) -> int | None:
        status: int | None = self.details.get("status_code")
        return status


class TransformError(DropboxServiceError):
    """Raised when an image cannot be decoded or re-encoded."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_TRANSFORM_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class WriteError(DropboxServiceError):
    """Raised when a remote write exhausts retries or fails terminally."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_WRITE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )

    @property
    def attempts(self) -> int | None:
        attempts: int | None = self.details.get("attempts")
        return attempts


class StoreError(DropboxServiceError):
    """Raised for read, parse or storage failures not otherwise categorized."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORE_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )
