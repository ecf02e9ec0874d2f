"""Shared notification contracts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol


PAYMENT_SUCCEEDED = "payment.succeeded"
PAYMENT_FAILED = "payment.failed"
NOTIFIABLE_EVENT_TYPES = frozenset({PAYMENT_SUCCEEDED, PAYMENT_FAILED})

NOTE_PLACEHOLDER = "N/A"
CHECKOUT_ID_PLACEHOLDER = "unknown"


@dataclass(frozen=True)
class PaymentNotification:
    event_type: str
    status: str
    amount_minor: int
    note: str = NOTE_PLACEHOLDER
    checkout_id: Optional[str] = None


@dataclass(frozen=True)
class NotificationEmail:
    from_address: str
    to: List[str]
    subject: str
    text: str
    html: Optional[str] = None


class MailTransport(Protocol):
    def send(self, email: NotificationEmail) -> None:
        """Deliver the email or raise ``NotificationError``."""
