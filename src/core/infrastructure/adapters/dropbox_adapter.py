"""Thin adapter for interacting with the Dropbox HTTP API."""

import json
from collections.abc import Mapping
from typing import Any, Protocol

import requests

from core.utils.constants import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DROPBOX_API_ARG_HEADER,
    DROPBOX_DOWNLOAD_URL,
    DROPBOX_TOKEN_URL,
    DROPBOX_UPLOAD_URL,
)


class DropboxAdapterProtocol(Protocol):
    """Minimal Dropbox adapter protocol (repository-facing)."""

    def request_token(
        self,
        *,
        data: Mapping[str, str],
        auth: tuple[str, str] | None = None,
        timeout: float | None = None,
    ) -> requests.Response: ...

    def download(
        self,
        *,
        authorization: str,
        path: str,
        timeout: float | None = None,
    ) -> requests.Response: ...

    def upload(
        self,
        *,
        authorization: str,
        path: str,
        body: bytes,
        mode: str = "overwrite",
        autorename: bool = False,
        mute: bool = False,
        timeout: float | None = None,
    ) -> requests.Response: ...


def encode_api_arg(arg: Mapping[str, Any]) -> str:
    """Serialize a ``Dropbox-API-Arg`` header value.

    HTTP headers must stay ASCII, so non-ASCII path characters are
    escaped as ``\\uXXXX``.
    """
    return json.dumps(dict(arg), ensure_ascii=True, separators=(",", ":"))


class DropboxAdapter:
    """Low-level Dropbox operations (mechanical, no error handling).

    This adapter:
    - Wraps a requests session
    - Returns raw responses, including non-2xx ones
    - Lets transport exceptions bubble up
    - Domain implementations inspect and translate failures
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        """Create an adapter with a per-call deadline in seconds."""
        self._timeout = timeout
        self._session = session or requests.Session()

    def request_token(
        self,
        *,
        data: Mapping[str, str],
        auth: tuple[str, str] | None = None,
        timeout: float | None = None,
    ) -> requests.Response:
        """POST a form-encoded body to the OAuth2 token endpoint."""
        return self._session.post(
            DROPBOX_TOKEN_URL,
            data=dict(data),
            auth=auth,
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=self._timeout if timeout is None else timeout,
        )

    def download(
        self,
        *,
        authorization: str,
        path: str,
        timeout: float | None = None,
    ) -> requests.Response:
        """Fetch a file's content."""
        return self._session.post(
            DROPBOX_DOWNLOAD_URL,
            headers={
                "Authorization": authorization,
                DROPBOX_API_ARG_HEADER: encode_api_arg({"path": path}),
            },
            timeout=self._timeout if timeout is None else timeout,
        )

    def upload(
        self,
        *,
        authorization: str,
        path: str,
        body: bytes,
        mode: str = "overwrite",
        autorename: bool = False,
        mute: bool = False,
        timeout: float | None = None,
    ) -> requests.Response:
        """Write a file's content."""
        return self._session.post(
            DROPBOX_UPLOAD_URL,
            headers={
                "Authorization": authorization,
                "Content-Type": "application/octet-stream",
                DROPBOX_API_ARG_HEADER: encode_api_arg(
                    {
                        "path": path,
                        "mode": mode,
                        "autorename": autorename,
                        "mute": mute,
                    }
                ),
            },
            data=body,
            timeout=self._timeout if timeout is None else timeout,
        )

    def close(self) -> None:
        self._session.close()
