"""Yoco Checkout API client."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, Optional

import httpx

from payrelay.core.config import get_settings
from payrelay.core.errors import ConfigurationError, UpstreamError


class YocoClient:
    def __init__(
        self,
        *,
        secret_key: str,
        base_url: str = "https://payments.yoco.com/api",
        timeout_seconds: int = 20,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._secret_key = secret_key.strip()
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = max(1, timeout_seconds)
        self._client = client

    def _headers(self) -> Dict[str, str]:
        if not self._secret_key:
            raise ConfigurationError("yoco_secret_key_missing")
        return {
            "Authorization": f"Bearer {self._secret_key}",
            "Content-Type": "application/json",
        }

    def create_checkout(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create a hosted checkout and return the processor's JSON body.

        Non-2xx responses raise ``UpstreamError`` carrying the raw body.
        """

        url = f"{self._base_url}/checkouts"
        if self._client is not None:
            response = self._client.post(url, headers=self._headers(), json=payload)
        else:
            with httpx.Client(timeout=self._timeout_seconds) as client:
                response = client.post(url, headers=self._headers(), json=payload)

        if response.status_code < 200 or response.status_code >= 300:
            raise UpstreamError(
                response.status_code,
                response.content,
                content_type=response.headers.get("content-type"),
            )

        body = response.json()
        if not isinstance(body, dict):
            raise ValueError("yoco_invalid_checkout_payload")
        return body


@lru_cache(maxsize=1)
def get_yoco_client() -> YocoClient:
    settings = get_settings()
    return YocoClient(
        secret_key=settings.yoco_live_secret,
        base_url=settings.yoco_api_base_url,
        timeout_seconds=settings.yoco_api_timeout_seconds,
    )
