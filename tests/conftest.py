"""
Pytest configuration and fixtures for the Dropbox media function tests.
Provides an in-memory Dropbox adapter, canned HTTP responses, a fake clock
and generated image fixtures.
"""

import io
import json
import os
from collections.abc import Callable
from typing import Any

import pytest
import requests
from PIL import Image

os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "1")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "dropbox-media-functions-test")

from core.utils import rate_limiter as rate_limiter_module  # noqa: E402
from core.utils.rate_limiter import MinIntervalRateLimiter  # noqa: E402


def make_response(
    status_code: int = 200,
    *,
    json_body: Any = None,
    text: str | None = None,
    content: bytes | None = None,
) -> requests.Response:
    """Build a real ``requests.Response`` without touching the network."""
    response = requests.Response()
    response.status_code = status_code
    response.url = "https://dropbox.test"
    response.encoding = "utf-8"

    if json_body is not None:
        response._content = json.dumps(json_body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    elif text is not None:
        response._content = text.encode("utf-8")
        response.headers["Content-Type"] = "text/plain"
    else:
        response._content = content or b""
        response.headers["Content-Type"] = "application/octet-stream"

    return response


def rate_limit_body(retry_after: Any = 1, *, summary: str = "too_many_write_operations/") -> dict[str, Any]:
    error: dict[str, Any] = {"reason": {".tag": "too_many_write_operations"}}
    if retry_after is not None:
        error["retry_after"] = retry_after
    return {"error_summary": summary, "error": error}


NOT_FOUND_BODY = {
    "error_summary": "path/not_found/..",
    "error": {".tag": "path", "path": {".tag": "not_found"}},
}


class FakeClock:
    """Monotonic clock whose ``sleep`` advances time instantly."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeDropboxAdapter:
    """In-memory stand-in for ``DropboxAdapter``.

    Uploads consume ``upload_script`` first (responses or exceptions);
    once it is empty, uploads succeed and store the body.
    """

    def __init__(self, clock: FakeClock | None = None) -> None:
        self.files: dict[str, bytes] = {}
        self.token_response: requests.Response | Exception = make_response(
            json_body={"access_token": "test-access-token", "token_type": "bearer"}
        )
        self.download_overrides: dict[str, requests.Response | Exception] = {}
        self.upload_script: list[requests.Response | Exception] = []
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.upload_times: list[float] = []
        self.close_calls = 0
        self._clock = clock

    def calls_for(self, operation: str) -> list[dict[str, Any]]:
        return [kwargs for op, kwargs in self.calls if op == operation]

    def request_token(self, *, data, auth=None, timeout=None) -> requests.Response:
        self.calls.append(("request_token", {"data": dict(data), "auth": auth, "timeout": timeout}))
        if isinstance(self.token_response, Exception):
            raise self.token_response
        return self.token_response

    def download(self, *, authorization, path, timeout=None) -> requests.Response:
        self.calls.append(("download", {"authorization": authorization, "path": path}))

        override = self.download_overrides.get(path)
        if isinstance(override, Exception):
            raise override
        if override is not None:
            return override

        if path not in self.files:
            return make_response(409, json_body=NOT_FOUND_BODY)
        return make_response(content=self.files[path])

    def upload(
        self,
        *,
        authorization,
        path,
        body,
        mode="overwrite",
        autorename=False,
        mute=False,
        timeout=None,
    ) -> requests.Response:
        self.calls.append(
            (
                "upload",
                {
                    "authorization": authorization,
                    "path": path,
                    "body": body,
                    "mode": mode,
                    "autorename": autorename,
                    "mute": mute,
                },
            )
        )
        if self._clock is not None:
            self.upload_times.append(self._clock())

        if self.upload_script:
            outcome = self.upload_script.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            if outcome.ok:
                self.files[path] = body
            return outcome

        self.files[path] = body
        return make_response(json_body={"name": path.rsplit("/", 1)[-1], "path_display": path})

    def close(self) -> None:
        self.close_calls += 1


@pytest.fixture
def response_factory() -> Callable[..., requests.Response]:
    return make_response


@pytest.fixture
def rate_limit_error() -> Callable[..., dict[str, Any]]:
    return rate_limit_body


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_dropbox(fake_clock) -> FakeDropboxAdapter:
    return FakeDropboxAdapter(clock=fake_clock)


@pytest.fixture
def fake_limiter(fake_clock) -> MinIntervalRateLimiter:
    return MinIntervalRateLimiter(1.0, clock=fake_clock, sleep=fake_clock.sleep)


@pytest.fixture(autouse=True)
def process_rate_limiter(monkeypatch, fake_clock) -> MinIntervalRateLimiter:
    """Replace the process-wide limiter so handler tests never really sleep."""
    limiter = MinIntervalRateLimiter(1.0, clock=fake_clock, sleep=fake_clock.sleep)
    monkeypatch.setattr(rate_limiter_module, "_process_limiter", limiter)
    return limiter


@pytest.fixture(autouse=True)
def dropbox_env(monkeypatch) -> dict[str, str]:
    values = {
        "DROPBOX_REFRESH_TOKEN": "test-refresh-token",
        "DROPBOX_APP_KEY": "test-app-key",
        "DROPBOX_APP_SECRET": "test-app-secret",
    }
    for name, value in values.items():
        monkeypatch.setenv(name, value)
    for name in (
        "DROPBOX_TOKEN_AUTH_STYLE",
        "DROPBOX_HTTP_TIMEOUT_SECONDS",
        "RECORD_STORE_PATH",
        "MIN_UPLOAD_INTERVAL_SECONDS",
        "MAX_UPLOAD_ATTEMPTS",
    ):
        monkeypatch.delenv(name, raising=False)
    return values


@pytest.fixture
def patched_dropbox(monkeypatch, fake_dropbox) -> FakeDropboxAdapter:
    """Route every handler-built Dropbox client to the in-memory fake."""
    monkeypatch.setattr(
        "core.infrastructure.dropbox.factory.DropboxAdapter",
        lambda **_: fake_dropbox,
    )
    return fake_dropbox


def _encode_image(
    size: tuple[int, int],
    image_format: str,
    *,
    mode: str = "RGB",
    color: Any = (200, 120, 40),
    **save_kwargs: Any,
) -> bytes:
    image = Image.new(mode, size, color)
    buffer = io.BytesIO()
    image.save(buffer, format=image_format, **save_kwargs)
    return buffer.getvalue()


@pytest.fixture
def image_bytes() -> Callable[..., bytes]:
    """Factory producing encoded solid-colour images."""
    return _encode_image


@pytest.fixture
def sample_jpeg_binary() -> bytes:
    """3000x2000 JPEG, the size of a typical listing photo."""
    return _encode_image((3000, 2000), "JPEG", quality=90)


@pytest.fixture
def lambda_context():
    from types import SimpleNamespace

    return SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
    )
