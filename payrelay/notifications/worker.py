"""Detached execution of notification deliveries.

Deliveries run on a small thread pool so the webhook response never waits on
the mail transport. Outcomes only reach the logs (and Sentry when enabled).
"""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Protocol

from payrelay.core.logger import get_logger
from payrelay.core.observability import capture_exception
from payrelay.notifications.base import PaymentNotification


logger = get_logger("payrelay.notifications")


class PaymentNotifier(Protocol):
    def notify(self, notification: PaymentNotification) -> object:
        """Deliver ``notification`` or raise."""


class NotificationWorker:
    def __init__(self, notifier: PaymentNotifier, *, max_workers: int = 2) -> None:
        if max_workers <= 0:
            raise ValueError("max_workers must be positive")
        self._notifier = notifier
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="notify")

    def submit(self, notification: PaymentNotification) -> Future:
        future = self._executor.submit(self._notifier.notify, notification)
        future.add_done_callback(lambda done: self._report(notification, done))
        return future

    @staticmethod
    def _report(notification: PaymentNotification, future: Future) -> None:
        exc = future.exception()
        if exc is None:
            logger.info(
                "payment_notification_sent",
                event_type=notification.event_type,
                checkout_id=notification.checkout_id,
            )
            return
        logger.error(
            "payment_notification_failed",
            event_type=notification.event_type,
            checkout_id=notification.checkout_id,
            error=str(exc),
        )
        capture_exception(exc)

    def shutdown(self, *, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
