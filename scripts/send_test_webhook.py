"""Send a signed Yoco-style webhook to a running payrelay instance."""

from __future__ import annotations

import argparse
import json
import os
import time
from typing import Any, Dict, Iterable
import uuid

import httpx

from payrelay.webhooks.secret import decode_webhook_secret
from payrelay.webhooks.signature import sign_webhook


def build_event(*, event_type: str, amount: int, note: str, checkout_id: str) -> Dict[str, Any]:
    metadata: Dict[str, str] = {}
    if note:
        metadata["note"] = note
    if checkout_id:
        metadata["checkoutId"] = checkout_id
    status = "succeeded" if event_type == "payment.succeeded" else "failed"
    return {
        "id": f"evt_{uuid.uuid4().hex[:16]}",
        "type": event_type,
        "payload": {"status": status, "amount": amount, "metadata": metadata},
    }


def send_webhook(
    *,
    url: str,
    secret: str,
    event: Dict[str, Any],
    skew_seconds: int,
    timeout_seconds: float,
) -> httpx.Response:
    payload = json.dumps(event, separators=(",", ":")).encode("utf-8")
    webhook_id = f"msg_{uuid.uuid4().hex}"
    timestamp = str(int(time.time()) + skew_seconds)
    signature = sign_webhook(
        webhook_id=webhook_id,
        timestamp=timestamp,
        payload=payload,
        key=decode_webhook_secret(secret),
    )
    with httpx.Client(timeout=timeout_seconds) as client:
        return client.post(
            url,
            content=payload,
            headers={
                "Content-Type": "application/json",
                "webhook-id": webhook_id,
                "webhook-timestamp": timestamp,
                "webhook-signature": signature,
            },
        )


def _format_report(response: httpx.Response) -> Iterable[str]:
    yield f"status_code={response.status_code}"
    yield f"request_id={response.headers.get('x-request-id', '')}"
    yield f"body={response.text.strip()}"


def main() -> None:
    parser = argparse.ArgumentParser(description="Send a signed test webhook to payrelay.")
    parser.add_argument("--url", default="http://localhost:3000/api/webhooks/yoco")
    parser.add_argument("--secret", default=os.environ.get("YOCO_WEBHOOK_SECRET", ""))
    parser.add_argument("--type", dest="event_type", default="payment.succeeded")
    parser.add_argument("--amount", type=int, default=200, help="Amount in cents.")
    parser.add_argument("--note", default="TEST-REF")
    parser.add_argument("--checkout-id", default="")
    parser.add_argument(
        "--skew",
        type=int,
        default=0,
        help="Seconds added to the current time for webhook-timestamp (negative for the past).",
    )
    parser.add_argument("--timeout", type=float, default=5.0)
    args = parser.parse_args()

    if not args.secret:
        raise ValueError("--secret or YOCO_WEBHOOK_SECRET is required")

    response = send_webhook(
        url=args.url,
        secret=args.secret,
        event=build_event(
            event_type=args.event_type,
            amount=args.amount,
            note=args.note,
            checkout_id=args.checkout_id,
        ),
        skew_seconds=args.skew,
        timeout_seconds=args.timeout,
    )
    for line in _format_report(response):
        print(line)


if __name__ == "__main__":
    main()
