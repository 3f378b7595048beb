import json
from http import HTTPStatus
from typing import Any, cast

import pytest

from core.utils.response import ResponseBuilder


def parse_body(resp: dict[str, Any]) -> dict[str, Any]:
    body = resp.get("body")
    if not body:
        return {}

    return cast(dict[str, Any], json.loads(body))


def assert_cors(resp: dict[str, Any]) -> None:
    headers = resp["headers"]
    assert headers["Access-Control-Allow-Origin"] == "*"
    assert headers["Access-Control-Allow-Headers"] == "Content-Type"
    assert headers["Access-Control-Allow-Methods"] == "GET, POST, OPTIONS"


def test_ok_response() -> None:
    resp = ResponseBuilder.ok({"foo": "bar"})

    assert resp["statusCode"] == HTTPStatus.OK
    assert parse_body(resp) == {"foo": "bar"}
    assert_cors(resp)


def test_raw_response_is_verbatim() -> None:
    document = '{"address":"123 Main St"}'

    resp = ResponseBuilder.raw(document)

    assert resp["statusCode"] == HTTPStatus.OK
    assert resp["body"] == document
    assert_cors(resp)


def test_preflight_response() -> None:
    resp = ResponseBuilder.preflight()

    assert resp["statusCode"] == HTTPStatus.OK
    assert resp["body"] == ""
    assert_cors(resp)


def test_cors_origin_override() -> None:
    resp = ResponseBuilder.ok({}, cors_origin="https://example.com")

    assert resp["headers"]["Access-Control-Allow-Origin"] == "https://example.com"


@pytest.mark.parametrize(
    "func,status",
    [
        (ResponseBuilder.bad_request, HTTPStatus.BAD_REQUEST),
        (ResponseBuilder.not_found, HTTPStatus.NOT_FOUND),
        (ResponseBuilder.internal_error, HTTPStatus.INTERNAL_SERVER_ERROR),
    ],
)
def test_error_responses_only_carry_error_key(func, status) -> None:
    resp = func("bad")

    assert resp["statusCode"] == status
    assert parse_body(resp) == {"error": "bad"}
    assert_cors(resp)


def test_method_not_allowed() -> None:
    resp = ResponseBuilder.method_not_allowed()

    assert resp["statusCode"] == HTTPStatus.METHOD_NOT_ALLOWED
    assert parse_body(resp) == {"error": "Method Not Allowed"}


def test_default_error_messages() -> None:
    assert parse_body(ResponseBuilder.not_found())["error"] == "Resource not found"
    assert parse_body(ResponseBuilder.internal_error())["error"] == "Internal server error"
