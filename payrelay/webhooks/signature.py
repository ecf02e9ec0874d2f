"""Webhook signature construction and verification helpers."""

from __future__ import annotations

import base64
import hashlib
import hmac
from dataclasses import dataclass
from typing import List, Optional

from payrelay.core.errors import SignatureMismatch


DEFAULT_SIGNATURE_VERSION = "v1"


@dataclass(frozen=True)
class SignatureCandidate:
    version: str
    signature: str


def _as_bytes(value: str | bytes) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def build_signed_content(webhook_id: str, timestamp: str, payload: bytes) -> bytes:
    """Return ``{id}.{timestamp}.{raw body}`` using the header values verbatim."""

    return b".".join([_as_bytes(webhook_id), _as_bytes(timestamp), payload])


def compute_signature(key: bytes, signed_content: bytes) -> str:
    digest = hmac.new(key, signed_content, digestmod=hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def parse_signature_header(signature_header: Optional[str]) -> List[SignatureCandidate]:
    """Split ``v1,<sig> v1,<sig>`` into candidates, preserving header order.

    Empty tokens, tokens without a comma and tokens with an empty value are
    kept with an empty signature so that positional checks still see them.
    """

    if not signature_header:
        return []
    candidates: List[SignatureCandidate] = []
    for token in signature_header.split(" "):
        version, _, signature = token.partition(",")
        candidates.append(SignatureCandidate(version=version, signature=signature))
    return candidates


def _matches(expected: bytes, candidate: SignatureCandidate) -> bool:
    if not candidate.signature:
        return False
    return hmac.compare_digest(expected, candidate.signature.encode("utf-8"))


def verify_webhook_signature(
    *,
    webhook_id: Optional[str],
    timestamp: Optional[str],
    payload: bytes,
    key: bytes,
    signature_header: Optional[str],
    check_all: bool = False,
) -> None:
    """Raise ``SignatureMismatch`` unless the header carries a valid signature.

    Only the first candidate is compared unless ``check_all`` is set, in which
    case any matching candidate is accepted.
    """

    if not webhook_id or not timestamp:
        raise SignatureMismatch("Webhook id or timestamp missing")

    candidates = parse_signature_header(signature_header)
    if not candidates:
        raise SignatureMismatch("Webhook signature header missing")

    signed_content = build_signed_content(webhook_id, timestamp, payload)
    expected = compute_signature(key, signed_content).encode("ascii")

    checked = candidates if check_all else candidates[:1]
    if not any(_matches(expected, candidate) for candidate in checked):
        raise SignatureMismatch("Webhook signature mismatch")


def sign_webhook(
    *,
    webhook_id: str,
    timestamp: str,
    payload: bytes,
    key: bytes,
    version: str = DEFAULT_SIGNATURE_VERSION,
) -> str:
    """Return a ``webhook-signature`` header value for the given message."""

    signature = compute_signature(key, build_signed_content(webhook_id, timestamp, payload))
    return f"{version},{signature}"
