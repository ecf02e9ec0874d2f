import json

import httpx
import pytest

from payrelay.core.errors import ConfigurationError, UpstreamError
from payrelay.integrations.yoco import YocoClient


def _client(handler, secret_key: str = "sk_test_123") -> YocoClient:
    return YocoClient(
        secret_key=secret_key,
        base_url="https://payments.example.test/api/",
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def test_create_checkout_posts_json_with_bearer_token() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "cs_1", "redirectUrl": "https://pay/x"})

    body = _client(handler).create_checkout({"amount": 200, "currency": "ZAR"})

    assert body == {"id": "cs_1", "redirectUrl": "https://pay/x"}
    assert seen["url"] == "https://payments.example.test/api/checkouts"
    assert seen["auth"] == "Bearer sk_test_123"
    assert seen["body"] == {"amount": 200, "currency": "ZAR"}


def test_non_success_response_raises_upstream_error_with_raw_body() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, content=b'{"message":"forbidden"}', headers={"content-type": "application/json"})

    with pytest.raises(UpstreamError) as exc_info:
        _client(handler).create_checkout({"amount": 200})

    assert exc_info.value.status_code == 403
    assert exc_info.value.content == b'{"message":"forbidden"}'
    assert exc_info.value.content_type == "application/json"


def test_missing_secret_key_is_configuration_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:  # pragma: no cover
        raise AssertionError("no request expected")

    with pytest.raises(ConfigurationError):
        _client(handler, secret_key="  ").create_checkout({"amount": 200})
