"""Payment notification delivery."""

from __future__ import annotations

from typing import Iterable, List

from payrelay.core.errors import NotificationError
from payrelay.notifications.base import MailTransport, NotificationEmail, PaymentNotification
from payrelay.notifications.formatter import build_payment_email


class Notifier:
    def __init__(
        self,
        *,
        transport: MailTransport,
        from_address: str,
        recipients: Iterable[str],
        currency_symbol: str = "R",
    ) -> None:
        self._transport = transport
        self._from_address = from_address.strip()
        self._recipients: List[str] = [value.strip() for value in recipients if value.strip()]
        self._currency_symbol = currency_symbol

    def notify(self, notification: PaymentNotification) -> NotificationEmail:
        """Format and send the email for ``notification``.

        Every failure surfaces as ``NotificationError``; callers decide
        whether it is logged or propagated.
        """

        if not self._recipients:
            raise NotificationError("email_recipients_missing")
        if not self._from_address:
            raise NotificationError("email_from_address_missing")

        email = build_payment_email(
            notification,
            from_address=self._from_address,
            recipients=self._recipients,
            currency_symbol=self._currency_symbol,
        )
        try:
            self._transport.send(email)
        except NotificationError:
            raise
        except Exception as exc:
            raise NotificationError(f"email_delivery_failed error={exc}") from exc
        return email
