"""Error taxonomy shared by the checkout and webhook paths."""

from __future__ import annotations

from typing import Optional


class RelayError(Exception):
    """Base class for payrelay domain errors."""


class ConfigurationError(RelayError, ValueError):
    """Raised when secrets or credentials are missing or malformed."""


class ValidationError(RelayError):
    """Raised when caller input can be corrected by the caller."""


class UpstreamError(RelayError):
    """Raised when the payment processor rejects a request.

    The processor's status code and raw body are kept so the caller can pass
    them through verbatim.
    """

    def __init__(
        self,
        status_code: int,
        content: bytes,
        *,
        content_type: Optional[str] = None,
    ) -> None:
        super().__init__(f"payment_processor_request_failed status={status_code}")
        self.status_code = status_code
        self.content = content
        self.content_type = content_type


class StaleEvent(RelayError):
    """Raised when a webhook timestamp falls outside the replay window."""


class SignatureMismatch(RelayError):
    """Raised when a webhook signature cannot be verified."""


class MalformedPayload(RelayError):
    """Raised when a verified webhook body cannot be parsed."""


class NotificationError(RelayError):
    """Raised when a notification email cannot be delivered."""
