"""Payment notification emails."""

from payrelay.notifications.base import NotificationEmail, PaymentNotification
from payrelay.notifications.notifier import Notifier
from payrelay.notifications.worker import NotificationWorker

__all__ = ["NotificationEmail", "NotificationWorker", "Notifier", "PaymentNotification"]
