"""
relay/routers/webhook.py

POST /webhook/notification endpoint.
Receives a notification event over HTTP and runs it through the processor.
"""

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from relay.dependencies import get_processor
from relay.schemas import NotificationRequest
from relay.services.notification import NotificationProcessor

logger = structlog.get_logger(__name__)

router = APIRouter()


async def invalid_payload_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed notification bodies fail like any other notification: 500 {error}."""
    fields = [
        ".".join(str(part) for part in err["loc"] if part != "body")
        for err in exc.errors()
    ]
    logger.warning("webhook_payload_invalid", path=request.url.path, fields=fields)
    return JSONResponse(
        status_code=500,
        content={"error": f"Invalid notification payload: {', '.join(fields)}"},
    )


@router.post("/webhook/notification")
async def receive_notification(
    payload: NotificationRequest,
    processor: NotificationProcessor = Depends(get_processor),
) -> JSONResponse:
    """
    Process one notification event synchronously.

    Suppressed notifications count as success (200); every failure maps to 500.
    """
    logger.info(
        "webhook_notification_received",
        office_id=payload.office_id,
        notification_type=payload.notification_type,
    )

    try:
        result = await processor.process(
            payload.office_id, payload.notification_type, payload.data
        )
    except Exception as exc:
        logger.error(
            "webhook_error",
            office_id=payload.office_id,
            error=str(exc),
        )
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    if result.success:
        return JSONResponse(
            status_code=200,
            content={"message": "Notification processed successfully"},
        )
    return JSONResponse(status_code=500, content={"error": result.error})
