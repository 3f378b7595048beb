"""
Centralized API response builder for Lambda-style proxy integrations.
"""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any

from core.utils.constants import (
    CORS_HEADERS,
    CORS_METHODS,
    CORS_ORIGIN,
    DEFAULT_CONTENT_TYPE,
    MESSAGE_METHOD_NOT_ALLOWED,
)

JsonDict = dict[str, Any]


class ResponseBuilder:
    """Factory for proxy-integration HTTP responses.

    Every response carries the permissive CORS headers. Error bodies are
    always ``{"error": <message>}``.
    """

    DEFAULT_HEADERS: dict[str, str] = {
        "Content-Type": DEFAULT_CONTENT_TYPE,
    }

    DEFAULT_CORS_HEADERS: dict[str, str] = {
        "Access-Control-Allow-Origin": CORS_ORIGIN,
        "Access-Control-Allow-Headers": CORS_HEADERS,
        "Access-Control-Allow-Methods": CORS_METHODS,
    }

    @staticmethod
    def _build_headers(cors_origin: str | None = None) -> dict[str, str]:
        headers: dict[str, str] = dict(ResponseBuilder.DEFAULT_HEADERS)

        # Always include CORS headers
        headers.update(ResponseBuilder.DEFAULT_CORS_HEADERS)

        if cors_origin:
            headers["Access-Control-Allow-Origin"] = cors_origin

        return headers

    @staticmethod
    def _response(
        *,
        status: HTTPStatus,
        body: Any,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return {
            "statusCode": status.value,
            "headers": ResponseBuilder._build_headers(cors_origin),
            "body": json.dumps(body),
        }

    @staticmethod
    def ok(body: JsonDict, *, cors_origin: str | None = None) -> JsonDict:
        return ResponseBuilder._response(
            status=HTTPStatus.OK,
            body=body,
            cors_origin=cors_origin,
        )

    @staticmethod
    def raw(
        body: str,
        *,
        status: HTTPStatus = HTTPStatus.OK,
        cors_origin: str | None = None,
    ) -> JsonDict:
        """Return ``body`` verbatim, without re-serializing it."""
        return {
            "statusCode": status.value,
            "headers": ResponseBuilder._build_headers(cors_origin),
            "body": body,
        }

    @staticmethod
    def preflight(*, cors_origin: str | None = None) -> JsonDict:
        return ResponseBuilder.raw("", cors_origin=cors_origin)

    @staticmethod
    def error(
        *,
        status: HTTPStatus,
        message: str,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return ResponseBuilder._response(
            status=status,
            body={"error": message},
            cors_origin=cors_origin,
        )

    @staticmethod
    def bad_request(message: str, *, cors_origin: str | None = None) -> JsonDict:
        return ResponseBuilder.error(
            status=HTTPStatus.BAD_REQUEST,
            message=message,
            cors_origin=cors_origin,
        )

    @staticmethod
    def not_found(
        message: str = "Resource not found",
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return ResponseBuilder.error(
            status=HTTPStatus.NOT_FOUND,
            message=message,
            cors_origin=cors_origin,
        )

    @staticmethod
    def method_not_allowed(*, cors_origin: str | None = None) -> JsonDict:
        return ResponseBuilder.error(
            status=HTTPStatus.METHOD_NOT_ALLOWED,
            message=MESSAGE_METHOD_NOT_ALLOWED,
            cors_origin=cors_origin,
        )

    @staticmethod
    def internal_error(
        message: str = "Internal server error",
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        return ResponseBuilder.error(
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            message=message,
            cors_origin=cors_origin,
        )
