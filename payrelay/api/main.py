"""FastAPI application entrypoint for payrelay."""

from __future__ import annotations

from pathlib import Path
from time import perf_counter
from uuid import uuid4

from fastapi import Depends, FastAPI, Request
from fastapi.staticfiles import StaticFiles

from payrelay.api.dependencies import get_webhook_dispatcher, reset_dependencies
from payrelay.checkout.router import router as checkout_router
from payrelay.core.config import get_settings
from payrelay.core.logger import bind_request_context, clear_request_context, get_logger
from payrelay.core.observability import init_sentry, sentry_scope
from payrelay.webhooks.dispatcher import WebhookDispatcher
from payrelay.webhooks.router import router as webhooks_router


settings = get_settings()
logger = get_logger("payrelay.api")

app = FastAPI(title=settings.app_name, version=settings.app_version)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    started_at = perf_counter()
    request_id = request.headers.get("x-request-id", str(uuid4()))
    bind_request_context(request_id=request_id)

    status_code = 500
    try:
        with sentry_scope(request_id=request_id):
            response = await call_next(request)
        status_code = int(response.status_code)
    finally:
        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status_code=status_code,
            duration_ms=round((perf_counter() - started_at) * 1000, 2),
        )
        clear_request_context()

    response.headers["x-request-id"] = request_id
    return response


@app.on_event("startup")
def on_startup() -> None:
    sentry_enabled = init_sentry()
    dispatcher = get_webhook_dispatcher()
    logger.info(
        "application_startup",
        env=settings.env,
        version=settings.app_version,
        sentry_enabled=sentry_enabled,
        mail_transport=settings.mail_transport,
        webhook_verification_enabled=dispatcher.verification_enabled,
    )
    if not dispatcher.verification_enabled:
        logger.warning(
            "webhook_verification_disabled",
            reason="YOCO_WEBHOOK_SECRET not set; webhooks are acknowledged without verification",
        )


@app.on_event("shutdown")
def on_shutdown() -> None:
    reset_dependencies()


@app.get("/health")
def health(dispatcher: WebhookDispatcher = Depends(get_webhook_dispatcher)) -> dict[str, str]:
    return {
        "status": "ok",
        "env": settings.env,
        "webhook_verification": "enabled" if dispatcher.verification_enabled else "disabled",
    }


@app.get("/version")
def version() -> dict[str, str]:
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "env": settings.env,
    }


app.include_router(checkout_router)
app.include_router(webhooks_router)

# Mounted last so API routes take precedence over static pages.
if Path(settings.static_dir).is_dir():
    app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
