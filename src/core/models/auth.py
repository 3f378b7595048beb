"""OAuth credential and access token models."""

import os
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, SecretStr, StrictStr

from core.models.errors import ConfigurationError
from core.utils.constants import (
    ENV_DROPBOX_APP_KEY,
    ENV_DROPBOX_APP_SECRET,
    ENV_DROPBOX_REFRESH_TOKEN,
    MESSAGE_MISSING_CREDENTIALS,
)
from core.utils.time import utc_now


class DropboxCredential(BaseModel):
    """Long-lived refresh credential exchanged for short-lived bearer tokens."""

    model_config = ConfigDict(frozen=True)

    refresh_token: SecretStr = Field(..., description="OAuth2 refresh token")
    app_key: StrictStr = Field(..., min_length=1, description="Dropbox app key (client id)")
    app_secret: SecretStr = Field(..., description="Dropbox app secret (client secret)")

    @classmethod
    def from_env(cls) -> "DropboxCredential":
        """Build the credential from process environment.

        Raises:
            ConfigurationError: If any of the three values is unset or empty
        """
        values = {
            "refresh_token": os.getenv(ENV_DROPBOX_REFRESH_TOKEN),
            "app_key": os.getenv(ENV_DROPBOX_APP_KEY),
            "app_secret": os.getenv(ENV_DROPBOX_APP_SECRET),
        }

        missing = sorted(name for name, value in values.items() if not value)
        if missing:
            raise ConfigurationError(
                message=MESSAGE_MISSING_CREDENTIALS,
                details={"missing": missing},
            )

        return cls(**values)


class AccessToken(BaseModel):
    """Short-lived bearer token. Requested fresh for every invocation."""

    model_config = ConfigDict(frozen=True)

    value: StrictStr = Field(..., min_length=1, description="Bearer token value")
    issued_at: datetime = Field(default_factory=utc_now)

    @property
    def authorization_header(self) -> str:
        return f"Bearer {self.value}"
