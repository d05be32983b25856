"""
Tests for the outbound webhook client.
"""

import httpx
import pytest

from hookseal.core.config import Settings
from hookseal.core.security import validate_request
from hookseal.services.webhook_client import WebhookClient

URL = "https://automation.example.com/webhook"
SECRET = "client-secret"


def _recording_transport(requests: list[httpx.Request], status_code: int = 200) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status_code, json={"received": True})

    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_send_signs_exact_body() -> None:
    requests: list[httpx.Request] = []
    client = WebhookClient(URL, SECRET, transport=_recording_transport(requests))

    response = await client.send({"status": "draft", "content_id": "abc"})

    assert response.status_code == 200
    sent = requests[0]
    assert sent.content == b'{"content_id":"abc","status":"draft"}'
    assert sent.headers["content-type"] == "application/json"
    assert validate_request(sent.headers, sent.content, SECRET).valid


@pytest.mark.asyncio
async def test_send_text_payload_verbatim() -> None:
    requests: list[httpx.Request] = []
    client = WebhookClient(URL, SECRET, transport=_recording_transport(requests))

    await client.send('{"b": 1, "a": 2}')

    assert requests[0].content == b'{"b": 1, "a": 2}'
    assert validate_request(requests[0].headers, requests[0].content, SECRET).valid


@pytest.mark.asyncio
async def test_error_status_raises() -> None:
    client = WebhookClient(URL, SECRET, transport=_recording_transport([], status_code=401))
    with pytest.raises(httpx.HTTPStatusError):
        await client.send({"content_id": "abc"})


def test_from_settings() -> None:
    settings = Settings(webhook_secret=SECRET, outbound_webhook_url=URL, outbound_timeout_s=5.0)
    client = WebhookClient.from_settings(settings)
    assert client.url == URL
    assert client.timeout == 5.0


def test_from_settings_requires_url() -> None:
    with pytest.raises(ValueError):
        WebhookClient.from_settings(Settings(webhook_secret=SECRET, outbound_webhook_url=None))


def test_from_settings_requires_secret() -> None:
    with pytest.raises(ValueError):
        WebhookClient.from_settings(Settings(webhook_secret="", outbound_webhook_url=URL))
