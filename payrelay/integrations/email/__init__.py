"""Email provider integrations."""

from payrelay.integrations.email.resend_client import ResendClient

__all__ = ["ResendClient"]
