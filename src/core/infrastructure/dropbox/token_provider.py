"""OAuth2 refresh-token exchange against the Dropbox token endpoint."""

from aws_lambda_powertools import Logger
import requests

from core.infrastructure.adapters.dropbox_adapter import DropboxAdapter, DropboxAdapterProtocol
from core.models.auth import AccessToken, DropboxCredential
from core.models.errors import AuthError
from core.utils.constants import TOKEN_AUTH_STYLE_BASIC, TOKEN_AUTH_STYLE_BODY

logger = Logger(UTC=True)


class TokenProvider:
    """Exchanges a refresh credential for a fresh bearer token.

    Tokens are never cached and exchanges are never retried here: a
    failure propagates to the caller immediately.

    Two client-authentication styles are supported:
    - ``body``: ``client_id`` / ``client_secret`` sent as form fields
    - ``basic``: ``client_id:client_secret`` sent as HTTP Basic auth
    """

    def __init__(
        self,
        adapter: DropboxAdapterProtocol | None = None,
        *,
        auth_style: str = TOKEN_AUTH_STYLE_BODY,
    ) -> None:
        if auth_style not in (TOKEN_AUTH_STYLE_BODY, TOKEN_AUTH_STYLE_BASIC):
            raise ValueError(f"Unsupported token auth style: {auth_style}")

        self._dropbox = adapter or DropboxAdapter()
        self._auth_style = auth_style

    def acquire_token(self, credential: DropboxCredential) -> AccessToken:
        """Request a new access token.

        Raises:
            AuthError: On transport failure, non-2xx status, or a response
                without a usable ``access_token``
        """
        data = {
            "grant_type": "refresh_token",
            "refresh_token": credential.refresh_token.get_secret_value(),
        }
        auth: tuple[str, str] | None = None

        if self._auth_style == TOKEN_AUTH_STYLE_BASIC:
            auth = (credential.app_key, credential.app_secret.get_secret_value())
        else:
            data["client_id"] = credential.app_key
            data["client_secret"] = credential.app_secret.get_secret_value()

        logger.debug("Requesting Dropbox access token", extra={"auth_style": self._auth_style})

        try:
            response = self._dropbox.request_token(data=data, auth=auth)
        except requests.RequestException as exc:
            logger.exception("Token endpoint unreachable")
            raise AuthError(
                message=f"Token exchange failed: {exc}",
                details={"status_code": None},
            ) from exc

        if not response.ok:
            logger.error(
                "Token exchange rejected",
                extra={"status_code": response.status_code},
            )
            raise AuthError(
                message=f"Token exchange failed: {response.status_code} {response.text}",
                details={"status_code": response.status_code, "body": response.text},
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise AuthError(
                message="Token exchange returned a non-JSON body",
                details={"status_code": response.status_code, "body": response.text},
            ) from exc

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not isinstance(token, str) or not token:
            logger.error("Token response missing access_token")
            raise AuthError(
                message="Token exchange response missing access_token",
                details={"status_code": response.status_code},
            )

        logger.info("Dropbox access token acquired")
        return AccessToken(value=token)
