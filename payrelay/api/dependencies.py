"""Process-wide components, built once from settings and injected into routes."""

from __future__ import annotations

from functools import lru_cache

from payrelay.checkout.notes import NoteCache
from payrelay.checkout.service import CheckoutInitiator
from payrelay.core.config import get_settings
from payrelay.integrations.yoco import get_yoco_client
from payrelay.notifications.notifier import Notifier
from payrelay.notifications.transports import build_mail_transport
from payrelay.notifications.worker import NotificationWorker
from payrelay.webhooks.dispatcher import WebhookDispatcher
from payrelay.webhooks.secret import decode_webhook_secret


@lru_cache(maxsize=1)
def get_note_cache() -> NoteCache:
    settings = get_settings()
    return NoteCache(
        max_entries=settings.note_cache_max_entries,
        ttl_seconds=settings.note_cache_ttl_seconds,
    )


@lru_cache(maxsize=1)
def get_notification_worker() -> NotificationWorker:
    settings = get_settings()
    notifier = Notifier(
        transport=build_mail_transport(settings),
        from_address=settings.notification_from_address,
        recipients=settings.notification_recipients,
        currency_symbol=settings.currency_symbol,
    )
    return NotificationWorker(notifier, max_workers=settings.notification_workers)


@lru_cache(maxsize=1)
def get_checkout_initiator() -> CheckoutInitiator:
    settings = get_settings()
    return CheckoutInitiator(
        client=get_yoco_client(),
        note_cache=get_note_cache(),
        amount_minor=settings.checkout_amount_minor,
        currency=settings.checkout_currency,
    )


@lru_cache(maxsize=1)
def get_webhook_dispatcher() -> WebhookDispatcher:
    settings = get_settings()
    signing_key = None
    if settings.webhook_verification_enabled:
        signing_key = decode_webhook_secret(
            settings.yoco_webhook_secret,
            expected_prefix=settings.webhook_secret_prefix,
        )
    return WebhookDispatcher(
        signing_key=signing_key,
        note_cache=get_note_cache(),
        notifications=get_notification_worker(),
        tolerance_seconds=settings.webhook_tolerance_seconds,
        check_all_signatures=settings.webhook_check_all_signatures,
    )


def reset_dependencies() -> None:
    """Drop cached components, draining any pending notifications first."""

    if get_notification_worker.cache_info().currsize:
        get_notification_worker().shutdown(wait=True)
    get_webhook_dispatcher.cache_clear()
    get_checkout_initiator.cache_clear()
    get_notification_worker.cache_clear()
    get_note_cache.cache_clear()
    get_yoco_client.cache_clear()
