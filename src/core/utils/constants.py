"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_CONFIGURATION_MISSING = "CONFIGURATION_MISSING"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"

# Dropbox Errors
ERROR_CODE_AUTH_FAILED = "AUTH_FAILED"
ERROR_CODE_WRITE_FAILED = "WRITE_FAILED"
ERROR_CODE_STORE_FAILED = "STORE_FAILED"
ERROR_CODE_DOWNLOAD_FAILED = "DOWNLOAD_FAILED"
ERROR_CODE_RECORD_INVALID_FORMAT = "RECORD_INVALID_FORMAT"

# Image Processing Errors
ERROR_CODE_TRANSFORM_FAILED = "TRANSFORM_FAILED"


# ============================================================================
# Dropbox API
# ============================================================================

DROPBOX_TOKEN_URL: Final[str] = "https://api.dropboxapi.com/oauth2/token"
DROPBOX_DOWNLOAD_URL: Final[str] = "https://content.dropboxapi.com/2/files/download"
DROPBOX_UPLOAD_URL: Final[str] = "https://content.dropboxapi.com/2/files/upload"
DROPBOX_API_ARG_HEADER = "Dropbox-API-Arg"
DROPBOX_RATE_LIMIT_REASON = "too_many_write_operations"

TOKEN_AUTH_STYLE_BODY = "body"
TOKEN_AUTH_STYLE_BASIC = "basic"
TOKEN_AUTH_STYLES: Final[frozenset[str]] = frozenset(
    {TOKEN_AUTH_STYLE_BODY, TOKEN_AUTH_STYLE_BASIC}
)

DEFAULT_HTTP_TIMEOUT_SECONDS = 30.0


# ============================================================================
# Upload Policy
# ============================================================================

MIN_UPLOAD_INTERVAL_SECONDS = 1.0
DEFAULT_MAX_UPLOAD_ATTEMPTS = 3
DEFAULT_RETRY_AFTER_SECONDS = 1.0
LINEAR_BACKOFF_STEP_SECONDS = 1.0


# ============================================================================
# Image Processing
# ============================================================================

TARGET_WIDTH = 1800
TARGET_HEIGHT = 1200
JPEG_QUALITY = 72
WEBP_QUALITY = 72
PNG_COMPRESS_LEVEL = 9
PNG_PALETTE_COLORS = 256

COMPRESSED_DIR_NAME = "SIR"

FORMAT_MIME_TYPES: Final[dict[str, str]] = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
}


# ============================================================================
# Record Store
# ============================================================================

DEFAULT_RECORD_PATH = "/Listings/address.json"
RECORD_FIELD_UNIT_NUMBER = "unitNumber"


# ============================================================================
# Response Messages
# ============================================================================

MESSAGE_MISSING_PATH = 'Missing "path"'
MESSAGE_BODY_NOT_OBJECT = "Request body must be a JSON object"
MESSAGE_MISSING_RECORD_FIELDS = "Missing address and unitNumber fields"
MESSAGE_MISSING_CREDENTIALS = "Missing Dropbox OAuth credentials"
MESSAGE_METHOD_NOT_ALLOWED = "Method Not Allowed"
MESSAGE_NO_DATA_FOUND = "No data found"


# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET, POST, OPTIONS"
CORS_HEADERS = "Content-Type"
DEFAULT_CONTENT_TYPE = "application/json"

# ============================================================================
# Observability
# ============================================================================

METRICS_NAMESPACE = "DropboxMediaFunctions"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_DROPBOX_REFRESH_TOKEN = "DROPBOX_REFRESH_TOKEN"
ENV_DROPBOX_APP_KEY = "DROPBOX_APP_KEY"
ENV_DROPBOX_APP_SECRET = "DROPBOX_APP_SECRET"
ENV_DROPBOX_TOKEN_AUTH_STYLE = "DROPBOX_TOKEN_AUTH_STYLE"
ENV_DROPBOX_HTTP_TIMEOUT_SECONDS = "DROPBOX_HTTP_TIMEOUT_SECONDS"
ENV_RECORD_STORE_PATH = "RECORD_STORE_PATH"
ENV_MIN_UPLOAD_INTERVAL_SECONDS = "MIN_UPLOAD_INTERVAL_SECONDS"
ENV_MAX_UPLOAD_ATTEMPTS = "MAX_UPLOAD_ATTEMPTS"

# ============================================================================
# Helper Functions
# ============================================================================


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"
