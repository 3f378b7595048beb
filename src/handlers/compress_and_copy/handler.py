"""
Lambda handler responsible for compressing an image into its SIR copy.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.infrastructure.dropbox.factory import build_dropbox
from core.models.auth import DropboxCredential
from core.models.errors import ValidationError
from core.utils.config import ServiceSettings
from core.utils.constants import MESSAGE_MISSING_PATH, METRICS_NAMESPACE
from core.utils.decorators import api_gateway_handler
from core.utils.response import ResponseBuilder
from core.utils.validators import parse_json_body, validate_request

from .models import CompressRequest
from .service import CompressService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler(allowed_methods=("POST",))
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle compress-and-copy requests.

    Expected event structure:
    {
        "httpMethod": "POST",
        "body": "{\"path\": \"listings/42/house.jpg\"}"
    }

    Args:
        event: Proxy event containing the source path
        context: Lambda execution context

    Returns:
        200 with ``{"ok": true, "source": ..., "compressed": ...}``,
        400 when ``path`` is missing, 500 on any other failure
    """
    logger.info(
        "Received compress-and-copy request",
        extra={
            "http_method": event.get("httpMethod"),
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
        },
    )

    body = parse_json_body(event, non_object_message=MESSAGE_MISSING_PATH)
    path = body.get("path")
    if not isinstance(path, str) or not path:
        raise ValidationError(
            message=MESSAGE_MISSING_PATH,
            details={"type": type(path).__name__},
        )
    request = validate_request(CompressRequest, body)

    credential = DropboxCredential.from_env()
    settings = ServiceSettings.from_env()
    with build_dropbox(settings) as (token_provider, storage):
        access_token = token_provider.acquire_token(credential)
        response = CompressService(storage).compress_and_copy(
            access_token=access_token,
            path=request.path,
        )

    metrics.add_metric(name="ImagesCompressed", unit=MetricUnit.Count, value=1)
    return ResponseBuilder.ok(response.model_dump())
