"""
Unit tests for core.models.errors
"""

from typing import cast

import pytest

from core.models.errors import (
    AuthError,
    ConfigurationError,
    DropboxServiceError,
    NotFoundError,
    StoreError,
    TransformError,
    ValidationError,
    WriteError,
)


class TestDropboxServiceError:
    def test_base_error(self) -> None:
        err = DropboxServiceError(
            message="Something went wrong",
            error_code="TEST_ERROR",
            details={"foo": "bar"},
        )

        assert isinstance(err, Exception)
        assert err.message == "Something went wrong"
        assert err.error_code == "TEST_ERROR"
        assert err.details == {"foo": "bar"}
        assert str(err) == "Something went wrong"

    def test_details_default_to_empty_dict(self) -> None:
        err = DropboxServiceError(message="x", error_code="X")

        assert err.details == {}


@pytest.mark.parametrize(
    "error_cls,expected_code",
    [
        (ValidationError, "VALIDATION_FAILED"),
        (ConfigurationError, "CONFIGURATION_MISSING"),
        (NotFoundError, "NOT_FOUND"),
        (AuthError, "AUTH_FAILED"),
        (TransformError, "TRANSFORM_FAILED"),
        (WriteError, "WRITE_FAILED"),
        (StoreError, "STORE_FAILED"),
    ],
)
def test_subclass_default_codes(error_cls, expected_code) -> None:
    err = error_cls(message="failure")

    assert isinstance(err, DropboxServiceError)
    assert err.error_code == expected_code
    assert err.message == "failure"


class TestAuthError:
    def test_status_code_from_details(self) -> None:
        err = AuthError(
            message="Token exchange failed: 400 invalid_grant",
            details={"status_code": 400, "body": "invalid_grant"},
        )
        typed = cast(AuthError, err)

        assert typed.status_code == 400

    def test_status_code_absent(self) -> None:
        assert AuthError(message="boom").status_code is None


class TestWriteError:
    def test_attempts_from_details(self) -> None:
        err = WriteError(message="Upload failed", details={"attempts": 3})

        assert err.attempts == 3

    def test_custom_error_code(self) -> None:
        err = WriteError(message="Upload failed", error_code="CUSTOM")

        assert err.error_code == "CUSTOM"
