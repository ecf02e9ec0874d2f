"""Hosted checkout creation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Protocol

from payrelay.checkout.notes import NoteCache
from payrelay.core.errors import ValidationError
from payrelay.core.logger import get_logger


logger = get_logger("payrelay.checkout")

MISSING_REFERENCE_MESSAGE = "Please enter the required reference."
SUCCESS_PATH = "/success.html"
CANCEL_PATH = "/index.html"


class CheckoutClient(Protocol):
    def create_checkout(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a checkout and return the processor's JSON body."""


@dataclass(frozen=True)
class CheckoutResult:
    redirect_url: Optional[str]
    checkout_id: Optional[str]


def resolve_public_origin(
    headers: Mapping[str, str],
    *,
    scheme: str = "http",
    public_base_url: str = "",
    trust_forwarded_headers: bool = True,
) -> str:
    """Return ``proto://host`` as seen by the payer's browser.

    A configured public base URL wins. Otherwise forwarded headers set by
    the immediate proxy are honoured when trusted.
    """

    if public_base_url.strip():
        return public_base_url.strip().rstrip("/")

    host = ""
    proto = ""
    if trust_forwarded_headers:
        host = (headers.get("x-forwarded-host") or headers.get("x-original-host") or "").split(",")[0].strip()
        proto = (headers.get("x-forwarded-proto") or "").split(",")[0].strip()
    host = host or (headers.get("host") or "").strip() or "localhost"
    proto = proto or scheme or "http"
    return f"{proto}://{host}"


class CheckoutInitiator:
    def __init__(
        self,
        *,
        client: CheckoutClient,
        note_cache: NoteCache,
        amount_minor: int,
        currency: str,
    ) -> None:
        self._client = client
        self._note_cache = note_cache
        self._amount_minor = amount_minor
        self._currency = currency

    def build_payload(self, note: str, *, public_origin: str) -> Dict[str, Any]:
        return {
            "amount": self._amount_minor,
            "currency": self._currency,
            "description": f"Payment - {note}",
            "successUrl": f"{public_origin}{SUCCESS_PATH}",
            "cancelUrl": f"{public_origin}{CANCEL_PATH}",
            "metadata": {"note": note},
        }

    def create_checkout(self, note: Any, *, public_origin: str) -> CheckoutResult:
        reference = str(note or "").strip()
        if not reference:
            raise ValidationError(MISSING_REFERENCE_MESSAGE)

        body = self._client.create_checkout(self.build_payload(reference, public_origin=public_origin))

        checkout_id = body.get("id")
        checkout_id = str(checkout_id) if checkout_id else None
        redirect_url = body.get("redirectUrl")
        if checkout_id:
            self._note_cache.put(checkout_id, reference)

        logger.info("checkout_created", checkout_id=checkout_id, amount=self._amount_minor, currency=self._currency)
        return CheckoutResult(
            redirect_url=str(redirect_url) if redirect_url else None,
            checkout_id=checkout_id,
        )
