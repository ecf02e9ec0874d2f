"""Resend API client for notification email delivery."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from payrelay.core.errors import NotificationError


class ResendClient:
    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = "https://api.resend.com",
        timeout_seconds: int = 20,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._api_key = api_key.strip()
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = max(1, timeout_seconds)
        self._client = client

    def _headers(self) -> Dict[str, str]:
        if not self._api_key:
            raise NotificationError("email_api_key_missing")
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    def send_email(
        self,
        *,
        from_address: str,
        to: List[str],
        subject: str,
        text: str,
        html: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "from": from_address.strip(),
            "to": [recipient.strip() for recipient in to if recipient.strip()],
            "subject": subject.strip(),
            "text": text,
        }
        if html:
            payload["html"] = html

        try:
            if self._client is not None:
                response = self._client.post(
                    f"{self._base_url}/emails",
                    headers=self._headers(),
                    json=payload,
                )
            else:
                with httpx.Client(timeout=self._timeout_seconds) as client:
                    response = client.post(
                        f"{self._base_url}/emails",
                        headers=self._headers(),
                        json=payload,
                    )
        except httpx.HTTPError as exc:
            raise NotificationError(f"email_provider_unreachable error={exc}") from exc

        if response.status_code < 200 or response.status_code >= 300:
            detail = response.text.strip()
            if len(detail) > 200:
                detail = detail[:200] + "..."
            raise NotificationError(
                f"email_provider_request_failed status={response.status_code} detail={detail}"
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise NotificationError("email_provider_invalid_json_response") from exc

        if not isinstance(body, dict):
            raise NotificationError("email_provider_invalid_payload")
        return body
