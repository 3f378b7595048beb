"""
Common decorators and helpers for proxy-integration Lambda handlers.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable, Iterable
from functools import wraps
from typing import Any

from aws_lambda_powertools import Logger

from core.models.errors import DropboxServiceError, ValidationError
from core.utils.response import ResponseBuilder

logger = Logger(service="api-gateway-handler", UTC=True)

JsonDict = dict[str, Any]


def get_http_method(event: dict[str, Any]) -> str | None:
    """Read the HTTP method from a REST (v1) or HTTP API (v2) event."""
    method = event.get("httpMethod")
    if not method:
        method = ((event.get("requestContext") or {}).get("http") or {}).get("method")
    return method.upper() if isinstance(method, str) else None


def _log_error(
    message: str,
    *,
    handler_name: str,
    request_id: str | None,
    exc: Exception,
    level: str = "warning",
) -> None:
    """
    Log error with consistent structure and full context.

    Args:
        message: Log message
        handler_name: Name of the handler function
        request_id: Runtime request ID
        exc: Exception that was raised
        level: Log level ('warning' or 'exception')
    """
    log_extra = {
        "handler": handler_name,
        "request_id": request_id,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }

    if isinstance(exc, DropboxServiceError):
        log_extra["error_code"] = exc.error_code
        log_extra["details"] = exc.details

    if level == "exception":
        # logger.exception automatically includes traceback
        logger.exception(message, extra=log_extra)
    else:
        # For warnings, manually add traceback
        log_extra["traceback"] = traceback.format_exc()
        logger.warning(message, extra=log_extra)


def api_gateway_handler(
    *,
    allowed_methods: Iterable[str],
) -> Callable[[Callable[..., JsonDict]], Callable[..., JsonDict]]:
    """
    Decorator factory for proxy-integration Lambda handlers.

    Provides:
    - CORS preflight (OPTIONS) answered with 200 and an empty body
    - 405 for methods outside ``allowed_methods``
    - ValidationError mapped to 400
    - Every other error mapped to 500 carrying the error's message
    - Request ID tracking and structured logging

    Example:
        @api_gateway_handler(allowed_methods=("POST",))
        def handler(event, context):
            return ResponseBuilder.ok({"ok": True})
    """
    methods = frozenset(method.upper() for method in allowed_methods)

    def decorator(func: Callable[..., JsonDict]) -> Callable[..., JsonDict]:
        @wraps(func)
        def wrapper(event: Any, context: Any) -> JsonDict:
            method = get_http_method(event)

            # Handle CORS preflight requests
            if method == "OPTIONS":
                return ResponseBuilder.preflight()

            if method not in methods:
                logger.info("Method not allowed", extra={"http_method": method})
                return ResponseBuilder.method_not_allowed()

            request_id = getattr(context, "aws_request_id", None)

            try:
                return func(event, context)

            # Client errors (4xx) - missing or malformed input
            except ValidationError as exc:
                _log_error(
                    "Validation error in handler",
                    handler_name=func.__name__,
                    request_id=request_id,
                    exc=exc,
                )
                return ResponseBuilder.bad_request(exc.message)

            # Every domain failure collapses to 500 with its own message
            except DropboxServiceError as exc:
                _log_error(
                    "Service error in handler",
                    handler_name=func.__name__,
                    request_id=request_id,
                    exc=exc,
                    level="exception",
                )
                return ResponseBuilder.internal_error(exc.message)

            # Catch-all for unexpected errors
            except Exception as exc:
                _log_error(
                    "Unexpected error in handler",
                    handler_name=func.__name__,
                    request_id=request_id,
                    exc=exc,
                    level="exception",
                )
                return ResponseBuilder.internal_error(str(exc) or type(exc).__name__)

        return wrapper

    return decorator
