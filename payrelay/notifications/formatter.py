"""Payment notification email formatter."""

from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from html import escape
from typing import Iterable

from payrelay.notifications.base import CHECKOUT_ID_PLACEHOLDER, NotificationEmail, PaymentNotification


def format_amount(amount_minor: int, currency_symbol: str = "R") -> str:
    """Render minor currency units as ``R2.00``."""

    major = (Decimal(amount_minor) / Decimal(100)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return f"{currency_symbol}{major}"


def build_payment_email(
    notification: PaymentNotification,
    *,
    from_address: str,
    recipients: Iterable[str],
    currency_symbol: str = "R",
) -> NotificationEmail:
    amount = format_amount(notification.amount_minor, currency_symbol)
    checkout_id = notification.checkout_id or CHECKOUT_ID_PLACEHOLDER

    subject = f"Payment {notification.status.upper()} - {amount} - Ref: {notification.note}"
    # Header values must stay on one line.
    subject = subject.replace("\r", " ").replace("\n", " ")
    text = "\n".join(
        [
            f"Status: {notification.status}",
            f"Amount: {amount}",
            f"Reference: {notification.note}",
            f"Checkout ID: {checkout_id}",
        ]
    )
    html = (
        f"<h3>Payment {escape(notification.status)}</h3>\n"
        f"<p><b>Amount:</b> {escape(amount)}</p>\n"
        f"<p><b>Reference:</b> {escape(notification.note)}</p>\n"
        f"<p><b>Checkout ID:</b> {escape(checkout_id)}</p>\n"
    )
    return NotificationEmail(
        from_address=from_address,
        to=list(recipients),
        subject=subject,
        text=text,
        html=html,
    )
