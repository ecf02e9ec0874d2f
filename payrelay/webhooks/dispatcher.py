"""Yoco webhook verification and dispatch.

A request moves through ``received -> timestamp_checked -> signature_checked
-> parsed -> classified -> dispatched``. Only a stale timestamp
(``StaleEvent``) or a bad signature (``SignatureMismatch``) escape
``handle``; every other outcome is acknowledged so the sender stops retrying.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
import json
from typing import Any, Callable, Dict, Mapping, Optional, Protocol

from payrelay.checkout.notes import NoteCache
from payrelay.core.errors import MalformedPayload, SignatureMismatch, StaleEvent
from payrelay.core.logger import get_logger
from payrelay.notifications.base import (
    NOTE_PLACEHOLDER,
    NOTIFIABLE_EVENT_TYPES,
    PAYMENT_SUCCEEDED,
    PaymentNotification,
)
from payrelay.webhooks.replay import DEFAULT_TOLERANCE_SECONDS, check_timestamp
from payrelay.webhooks.signature import verify_webhook_signature


logger = get_logger("payrelay.webhooks")

WEBHOOK_ID_HEADER = "webhook-id"
WEBHOOK_TIMESTAMP_HEADER = "webhook-timestamp"
WEBHOOK_SIGNATURE_HEADER = "webhook-signature"

STATE_RECEIVED = "received"
STATE_SIGNATURE_CHECKED = "signature_checked"
STATE_CLASSIFIED = "classified"
STATE_DISPATCHED = "dispatched"


@dataclass(frozen=True)
class WebhookHeaders:
    webhook_id: Optional[str]
    timestamp: Optional[str]
    signature: Optional[str]

    @classmethod
    def from_mapping(cls, headers: Mapping[str, str]) -> "WebhookHeaders":
        return cls(
            webhook_id=headers.get(WEBHOOK_ID_HEADER),
            timestamp=headers.get(WEBHOOK_TIMESTAMP_HEADER),
            signature=headers.get(WEBHOOK_SIGNATURE_HEADER),
        )


@dataclass(frozen=True)
class VerifiedEvent:
    event_type: Optional[str]
    status: Optional[str]
    amount_minor: int
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class WebhookOutcome:
    status: str
    state: str
    event_type: Optional[str] = None
    notification: Optional[PaymentNotification] = None


class NotificationSink(Protocol):
    def submit(self, notification: PaymentNotification) -> Any:
        """Queue ``notification`` without waiting for delivery."""


def _coerce_amount(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(round(value))
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


def parse_event(payload: bytes) -> VerifiedEvent:
    try:
        event = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise MalformedPayload("Webhook body is not valid JSON") from exc

    if not isinstance(event, dict):
        raise MalformedPayload("Webhook body must be a JSON object")

    body = event.get("payload")
    if not isinstance(body, dict):
        body = {}
    metadata = body.get("metadata")
    if not isinstance(metadata, dict):
        metadata = {}

    event_type = event.get("type")
    status = body.get("status")
    return VerifiedEvent(
        event_type=event_type if isinstance(event_type, str) else None,
        status=status if isinstance(status, str) and status else None,
        amount_minor=_coerce_amount(body.get("amount")),
        metadata=metadata,
    )


class WebhookDispatcher:
    def __init__(
        self,
        *,
        signing_key: Optional[bytes],
        note_cache: NoteCache,
        notifications: NotificationSink,
        tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
        check_all_signatures: bool = False,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._signing_key = signing_key
        self._note_cache = note_cache
        self._notifications = notifications
        self._tolerance_seconds = tolerance_seconds
        self._check_all_signatures = check_all_signatures
        self._clock = clock

    @property
    def verification_enabled(self) -> bool:
        return self._signing_key is not None

    def _resolve_note(self, metadata: Dict[str, Any]) -> str:
        note = metadata.get("note")
        if isinstance(note, str) and note:
            return note
        checkout_id = metadata.get("checkoutId")
        if isinstance(checkout_id, str):
            cached = self._note_cache.get(checkout_id)
            if cached:
                return cached
        return NOTE_PLACEHOLDER

    def build_notification(self, event: VerifiedEvent) -> PaymentNotification:
        checkout_id = event.metadata.get("checkoutId")
        default_status = "succeeded" if event.event_type == PAYMENT_SUCCEEDED else "failed"
        return PaymentNotification(
            event_type=event.event_type or "",
            status=event.status or default_status,
            amount_minor=event.amount_minor,
            note=self._resolve_note(event.metadata),
            checkout_id=checkout_id if isinstance(checkout_id, str) and checkout_id else None,
        )

    def verify(self, headers: WebhookHeaders, raw_body: bytes) -> None:
        """Run the replay guard, then the signature check.

        The signature is never computed for an event outside the window.
        """

        if self._signing_key is None:
            raise SignatureMismatch("Webhook signing key not configured")
        now = self._clock() if self._clock is not None else None
        try:
            check_timestamp(headers.timestamp, tolerance_seconds=self._tolerance_seconds, now=now)
        except StaleEvent as exc:
            logger.warning(
                "webhook_timestamp_rejected",
                webhook_id=headers.webhook_id,
                timestamp=headers.timestamp,
                reason=str(exc),
            )
            raise

        try:
            verify_webhook_signature(
                webhook_id=headers.webhook_id,
                timestamp=headers.timestamp,
                payload=raw_body,
                key=self._signing_key,
                signature_header=headers.signature,
                check_all=self._check_all_signatures,
            )
        except SignatureMismatch as exc:
            logger.warning(
                "webhook_signature_mismatch",
                security_event=True,
                webhook_id=headers.webhook_id,
                reason=str(exc),
            )
            raise

    def handle(self, headers: WebhookHeaders, raw_body: bytes) -> WebhookOutcome:
        if not self.verification_enabled:
            logger.warning("webhook_secret_not_configured", webhook_id=headers.webhook_id)
            return WebhookOutcome(status="unverified", state=STATE_RECEIVED)

        self.verify(headers, raw_body)

        try:
            event = parse_event(raw_body)
        except MalformedPayload as exc:
            logger.error("webhook_payload_malformed", webhook_id=headers.webhook_id, reason=str(exc))
            return WebhookOutcome(status="malformed", state=STATE_SIGNATURE_CHECKED)

        if event.event_type not in NOTIFIABLE_EVENT_TYPES:
            logger.info("webhook_event_ignored", webhook_id=headers.webhook_id, event_type=event.event_type)
            return WebhookOutcome(status="ignored", state=STATE_CLASSIFIED, event_type=event.event_type)

        notification = self.build_notification(event)
        try:
            self._notifications.submit(notification)
        except Exception as exc:
            logger.error(
                "webhook_notification_submit_failed",
                webhook_id=headers.webhook_id,
                event_type=event.event_type,
                error=str(exc),
            )
            return WebhookOutcome(
                status="acknowledged",
                state=STATE_CLASSIFIED,
                event_type=event.event_type,
                notification=notification,
            )

        logger.info(
            "webhook_event_dispatched",
            webhook_id=headers.webhook_id,
            event_type=event.event_type,
            checkout_id=notification.checkout_id,
        )
        return WebhookOutcome(
            status="acknowledged",
            state=STATE_DISPATCHED,
            event_type=event.event_type,
            notification=notification,
        )
