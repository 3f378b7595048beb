"""Runtime settings read from environment variables."""

import os

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt, field_validator

from core.utils.constants import (
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_MAX_UPLOAD_ATTEMPTS,
    DEFAULT_RECORD_PATH,
    ENV_DROPBOX_HTTP_TIMEOUT_SECONDS,
    ENV_DROPBOX_TOKEN_AUTH_STYLE,
    ENV_MAX_UPLOAD_ATTEMPTS,
    ENV_MIN_UPLOAD_INTERVAL_SECONDS,
    ENV_RECORD_STORE_PATH,
    MIN_UPLOAD_INTERVAL_SECONDS,
    TOKEN_AUTH_STYLE_BODY,
    TOKEN_AUTH_STYLES,
)


class ServiceSettings(BaseModel):
    """Non-secret tunables shared by both functions."""

    model_config = ConfigDict(frozen=True)

    token_auth_style: str = Field(
        TOKEN_AUTH_STYLE_BODY,
        description="How client credentials are sent to the token endpoint",
    )
    http_timeout_seconds: PositiveFloat = Field(
        DEFAULT_HTTP_TIMEOUT_SECONDS,
        description="Deadline applied to every Dropbox HTTP call",
    )
    record_path: str = Field(DEFAULT_RECORD_PATH, min_length=1)
    min_upload_interval_seconds: float = Field(MIN_UPLOAD_INTERVAL_SECONDS, ge=0)
    max_upload_attempts: PositiveInt = DEFAULT_MAX_UPLOAD_ATTEMPTS

    @field_validator("token_auth_style")
    @classmethod
    def validate_token_auth_style(cls, value: str) -> str:
        style = value.strip().lower()
        if style not in TOKEN_AUTH_STYLES:
            raise ValueError(
                f"Invalid token auth style '{value}'. "
                f"Allowed: {', '.join(sorted(TOKEN_AUTH_STYLES))}"
            )
        return style

    @classmethod
    def from_env(cls) -> "ServiceSettings":
        """Build settings from the environment, falling back to defaults."""
        env_map = {
            "token_auth_style": ENV_DROPBOX_TOKEN_AUTH_STYLE,
            "http_timeout_seconds": ENV_DROPBOX_HTTP_TIMEOUT_SECONDS,
            "record_path": ENV_RECORD_STORE_PATH,
            "min_upload_interval_seconds": ENV_MIN_UPLOAD_INTERVAL_SECONDS,
            "max_upload_attempts": ENV_MAX_UPLOAD_ATTEMPTS,
        }
        values = {
            field: os.environ[env_name]
            for field, env_name in env_map.items()
            if os.environ.get(env_name)
        }
        return cls.model_validate(values)
