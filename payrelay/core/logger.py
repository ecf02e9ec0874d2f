"""Structured JSON logging for the relay.

Every event carries the service name, the environment and the request id bound
by the HTTP middleware. Values under credential-like keys are masked before
rendering so signatures and API keys never reach the log stream.
"""

from __future__ import annotations

import logging
from typing import Any

import structlog

from payrelay.core.config import get_settings


REDACTED = "[redacted]"
SENSITIVE_KEY_PARTS = ("authorization", "password", "secret", "signature", "api_key", "token")

_CONFIGURED = False


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(part in lowered for part in SENSITIVE_KEY_PARTS)


def redact_sensitive_values(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    del logger, method_name
    for key, value in list(event_dict.items()):
        if key != "event" and value and _is_sensitive(key):
            event_dict[key] = REDACTED
    return event_dict


def _service_context(service: str, env: str):
    def add_service_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        del logger, method_name
        event_dict.setdefault("service", service)
        event_dict.setdefault("env", env)
        event_dict.setdefault("request_id", None)
        return event_dict

    return add_service_context


def build_processors(service: str, env: str) -> list[Any]:
    return [
        structlog.contextvars.merge_contextvars,
        _service_context(service, env),
        redact_sensitive_values,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ]


def configure_logging() -> None:
    global _CONFIGURED
    if _CONFIGURED:
        return

    settings = get_settings()
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(message)s")

    structlog.configure(
        processors=build_processors(settings.app_name, settings.env),
        logger_factory=structlog.PrintLoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    configure_logging()
    return structlog.get_logger(name)


def bind_request_context(request_id: str, **values: Any) -> None:
    structlog.contextvars.bind_contextvars(request_id=request_id, **values)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()
