from __future__ import annotations

from datetime import datetime, timezone
import json
import os
from typing import Any, Dict, List, Optional

import pytest

# payrelay.api.main loads settings at import time, before any fixture runs.
os.environ.setdefault("ALLOW_INCOMPLETE_CONFIG", "true")

from payrelay.api.dependencies import reset_dependencies  # noqa: E402
from payrelay.checkout.notes import NoteCache  # noqa: E402
from payrelay.core.config import get_settings  # noqa: E402
from payrelay.notifications.base import NotificationEmail, PaymentNotification  # noqa: E402
from payrelay.webhooks.secret import encode_webhook_secret  # noqa: E402
from payrelay.webhooks.signature import sign_webhook  # noqa: E402


TEST_KEY = b"payrelay-test-signing-key-0001"
TEST_SECRET = encode_webhook_secret(TEST_KEY)
FIXED_NOW = 1_700_000_000

_MANAGED_ENV = (
    "ENV",
    "APP_PUBLIC_BASE_URL",
    "TRUST_FORWARDED_HEADERS",
    "YOCO_LIVE_SECRET",
    "YOCO_WEBHOOK_SECRET",
    "WEBHOOK_SECRET_PREFIX",
    "WEBHOOK_TOLERANCE_SECONDS",
    "WEBHOOK_CHECK_ALL_SIGNATURES",
    "MAIL_TRANSPORT",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASS",
    "EMAIL_API_KEY",
    "NOTIFY_FROM",
    "NOTIFY_TO",
    "SENTRY_DSN",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    monkeypatch.setenv("ALLOW_INCOMPLETE_CONFIG", "true")
    for name in _MANAGED_ENV:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    reset_dependencies()
    yield
    reset_dependencies()
    get_settings.cache_clear()


def fixed_clock(epoch_seconds: int = FIXED_NOW):
    return lambda: datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)


def build_event_body(
    *,
    event_type: str = "payment.succeeded",
    amount: Any = 200,
    status: Optional[str] = "succeeded",
    metadata: Optional[Dict[str, Any]] = None,
) -> bytes:
    payload: Dict[str, Any] = {"amount": amount, "metadata": metadata or {}}
    if status is not None:
        payload["status"] = status
    event = {"id": "evt_test_001", "type": event_type, "payload": payload}
    return json.dumps(event, separators=(",", ":")).encode("utf-8")


def signed_headers(
    body: bytes,
    *,
    timestamp: int = FIXED_NOW,
    webhook_id: str = "msg_test_001",
    key: bytes = TEST_KEY,
) -> Dict[str, str]:
    return {
        "Content-Type": "application/json",
        "webhook-id": webhook_id,
        "webhook-timestamp": str(timestamp),
        "webhook-signature": sign_webhook(
            webhook_id=webhook_id,
            timestamp=str(timestamp),
            payload=body,
            key=key,
        ),
    }


class FakeNotificationSink:
    def __init__(self) -> None:
        self.submitted: List[PaymentNotification] = []

    def submit(self, notification: PaymentNotification) -> None:
        self.submitted.append(notification)


class FakeMailTransport:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.sent: List[NotificationEmail] = []
        self._error = error

    def send(self, email: NotificationEmail) -> None:
        if self._error is not None:
            raise self._error
        self.sent.append(email)


class FakeYocoClient:
    def __init__(self, response: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None) -> None:
        self.calls: List[Dict[str, Any]] = []
        self._response = response if response is not None else {"id": "cs_1", "redirectUrl": "https://pay/x"}
        self._error = error

    def create_checkout(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append(payload)
        if self._error is not None:
            raise self._error
        return dict(self._response)


@pytest.fixture
def note_cache() -> NoteCache:
    return NoteCache(max_entries=100, ttl_seconds=3600)
