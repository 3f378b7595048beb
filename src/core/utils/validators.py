"""Request parsing and validation utilities."""

import base64
import binascii
import json
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.models.errors import ValidationError
from core.utils.constants import MESSAGE_BODY_NOT_OBJECT

ModelT = TypeVar("ModelT", bound=BaseModel)


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for API responses.

    Removes sensitive/internal fields like:
    - url
    - ctx
    - input
    - internal exception details
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", [])) or "body"
        raw_msg = err.get("msg", "Invalid value")

        # Remove noisy prefixes
        msg = raw_msg.replace("Value error,", "").strip()

        # Friendly rewrites for common cases
        msg_lower = msg.lower()
        if "field required" in msg_lower:
            msg = "This field is required"
        elif "type" in msg_lower:
            msg = "Invalid value type"

        sanitized.append(
            {
                "field": field,
                "message": msg,
            }
        )

    return sanitized


def parse_json_body(
    event: dict[str, Any],
    *,
    non_object_message: str = MESSAGE_BODY_NOT_OBJECT,
) -> dict[str, Any]:
    """Decode the JSON object carried by a proxy event.

    An absent body is treated as ``{}``. Endpoints pass
    ``non_object_message`` so a JSON array, string or ``null`` body reports
    the same error as a body missing their required fields.

    Raises:
        ValueError: If the body is not valid JSON
        ValidationError: If the body is JSON but not an object
    """
    raw = event.get("body") or "{}"

    if event.get("isBase64Encoded"):
        try:
            raw = base64.b64decode(raw).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise ValueError("Invalid request body encoding") from exc

    try:
        body = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON body: {exc.msg}") from exc

    if not isinstance(body, dict):
        raise ValidationError(
            message=non_object_message,
            details={"type": type(body).__name__},
        )

    return body


def validate_request(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    """Validate request data against a Pydantic model.

    Raises:
        ValidationError: With sanitized field errors in ``details``
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(
            message="Invalid request payload",
            details={"errors": sanitize_validation_errors(list(exc.errors()))},
        ) from exc
