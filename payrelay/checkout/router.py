"""Checkout API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from payrelay.api.dependencies import get_checkout_initiator
from payrelay.checkout.service import CheckoutInitiator, resolve_public_origin
from payrelay.core.config import get_settings
from payrelay.core.errors import UpstreamError, ValidationError
from payrelay.core.logger import get_logger
from payrelay.schemas.checkout import CheckoutRequest, CheckoutResponse, ErrorResponse


router = APIRouter(prefix="/api", tags=["checkout"])
logger = get_logger("payrelay.checkout")


@router.post(
    "/checkout",
    response_model=CheckoutResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def create_checkout(
    payload: CheckoutRequest,
    request: Request,
    initiator: CheckoutInitiator = Depends(get_checkout_initiator),
) -> Response:
    settings = get_settings()
    public_origin = resolve_public_origin(
        request.headers,
        scheme=request.url.scheme,
        public_base_url=settings.app_public_base_url,
        trust_forwarded_headers=settings.trust_forwarded_headers,
    )

    try:
        result = initiator.create_checkout(payload.note, public_origin=public_origin)
    except ValidationError as exc:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})
    except UpstreamError as exc:
        logger.warning("checkout_rejected_by_processor", status_code=exc.status_code)
        return Response(
            content=exc.content,
            status_code=exc.status_code,
            media_type=exc.content_type or "application/json",
        )
    except Exception as exc:
        logger.exception("checkout_failed", error=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc) or "Server error"},
        )

    body = CheckoutResponse(redirect_url=result.redirect_url, checkout_id=result.checkout_id)
    return JSONResponse(content=body.model_dump(by_alias=True))
