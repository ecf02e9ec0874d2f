"""Webhook shared-secret codec.

Secrets are issued as ``<prefix>_<base64 key>`` (for example ``whsec_MfKQ...``).
The decoded key bytes are the HMAC key used for signature verification.
"""

from __future__ import annotations

import base64
import binascii
from typing import Optional

from payrelay.core.errors import ConfigurationError


DEFAULT_SECRET_PREFIX = "whsec"


def decode_webhook_secret(secret: Optional[str], expected_prefix: str = DEFAULT_SECRET_PREFIX) -> bytes:
    """Strip the prefix tag and base64-decode the remainder into key bytes."""

    if secret is None or not secret.strip():
        raise ConfigurationError("Webhook secret is not configured")

    value = secret.strip()
    if "_" not in value:
        raise ConfigurationError("Webhook secret must look like '<prefix>_<base64>'")

    prefix, remainder = value.split("_", 1)
    if expected_prefix and prefix != expected_prefix:
        raise ConfigurationError(f"Webhook secret prefix must be '{expected_prefix}'")
    if not remainder:
        raise ConfigurationError("Webhook secret key material is empty")

    try:
        key = base64.b64decode(remainder, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ConfigurationError("Webhook secret is not valid base64") from exc

    if not key:
        raise ConfigurationError("Webhook secret key material is empty")
    return key


def encode_webhook_secret(key: bytes, prefix: str = DEFAULT_SECRET_PREFIX) -> str:
    return f"{prefix}_{base64.b64encode(key).decode('ascii')}"
