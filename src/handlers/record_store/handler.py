"""
Lambda handler for reading and updating the stored address record.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.infrastructure.dropbox.factory import build_dropbox
from core.models.auth import DropboxCredential
from core.models.errors import NotFoundError
from core.models.record import RecordUpdate
from core.utils.config import ServiceSettings
from core.utils.constants import (
    MESSAGE_MISSING_RECORD_FIELDS,
    MESSAGE_NO_DATA_FOUND,
    METRICS_NAMESPACE,
)
from core.utils.decorators import api_gateway_handler, get_http_method
from core.utils.response import ResponseBuilder
from core.utils.validators import parse_json_body, validate_request

from .models import RecordStoreResponse
from .service import RecordMerger

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics(namespace=METRICS_NAMESPACE)


@api_gateway_handler(allowed_methods=("GET", "POST"))
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle record reads (GET) and partial updates (POST).

    Credentials are checked before anything else, so a misconfigured
    function fails with 500 without touching the network.

    Args:
        event: Proxy event
        context: Lambda execution context

    Returns:
        GET: 200 with the stored document verbatim, or 404
        POST: 200 with ``{"success": true, "data": <record>}``, or 400
    """
    method = get_http_method(event)
    logger.info(
        "Received record-store request",
        extra={
            "http_method": method,
            "request_id": getattr(context, "aws_request_id", None),
            "function_name": getattr(context, "function_name", None),
        },
    )

    credential = DropboxCredential.from_env()
    settings = ServiceSettings.from_env()

    if method == "GET":
        return _get_record(credential, settings)

    return _update_record(event, credential, settings)


def _get_record(credential: DropboxCredential, settings: ServiceSettings) -> dict[str, Any]:
    with build_dropbox(settings) as (token_provider, storage):
        access_token = token_provider.acquire_token(credential)

        try:
            document = RecordMerger(storage).read_raw(
                access_token=access_token,
                path=settings.record_path,
            )
        except NotFoundError:
            logger.info("No record stored", extra={"path": settings.record_path})
            return ResponseBuilder.not_found(MESSAGE_NO_DATA_FOUND)

    logger.info("Returning stored record", extra={"size": len(document)})
    return ResponseBuilder.raw(document)


def _update_record(
    event: dict[str, Any],
    credential: DropboxCredential,
    settings: ServiceSettings,
) -> dict[str, Any]:
    body = parse_json_body(event, non_object_message=MESSAGE_MISSING_RECORD_FIELDS)
    logger.info("Incoming record update", extra={"body": body})

    update = validate_request(RecordUpdate, body)
    RecordMerger.validate_update(update)

    with build_dropbox(settings) as (token_provider, storage):
        access_token = token_provider.acquire_token(credential)
        merged = RecordMerger(storage).merge_and_store(
            access_token=access_token,
            path=settings.record_path,
            update=update,
        )

    metrics.add_metric(name="RecordUpdates", unit=MetricUnit.Count, value=1)
    return ResponseBuilder.ok(RecordStoreResponse(data=merged).model_dump())
