"""Yoco webhook endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status

from payrelay.api.dependencies import get_webhook_dispatcher
from payrelay.core.errors import SignatureMismatch, StaleEvent
from payrelay.core.logger import get_logger
from payrelay.core.observability import capture_exception
from payrelay.schemas.webhooks import WebhookAckResponse
from payrelay.webhooks.dispatcher import WebhookDispatcher, WebhookHeaders


router = APIRouter(prefix="/api/webhooks", tags=["webhooks"])
logger = get_logger("payrelay.webhooks")


@router.post("/yoco", response_model=WebhookAckResponse)
async def yoco_webhook(
    request: Request,
    dispatcher: WebhookDispatcher = Depends(get_webhook_dispatcher),
) -> WebhookAckResponse:
    # Verification needs the exact bytes the sender signed.
    payload_bytes = await request.body()
    headers = WebhookHeaders.from_mapping(request.headers)

    try:
        outcome = dispatcher.handle(headers, payload_bytes)
    except StaleEvent as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SignatureMismatch as exc:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(exc)) from exc
    except Exception as exc:
        # Still acknowledge so the sender does not retry forever.
        logger.exception("webhook_processing_failed", webhook_id=headers.webhook_id, error=str(exc))
        capture_exception(exc)
        return WebhookAckResponse(status="error")

    return WebhookAckResponse(status=outcome.status, event_type=outcome.event_type)
