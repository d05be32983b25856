"""
Webhook Client for delivering signed payloads.

This client handles:
- Canonical serialization of the outbound payload
- Signing with the shared secret and a fresh timestamp
- POSTing the exact signed bytes to the receiving party
"""

import logging
from typing import Optional

import httpx

from hookseal.core.config import Settings, get_settings
from hookseal.core.security import Payload, build_headers, canonical_payload

logger = logging.getLogger(__name__)


class WebhookClient:
    """
    Client for sending signed webhooks to another trusted party.

    The body is serialized once and those same bytes are both signed and
    sent, so the receiver verifies exactly what was signed.

    Attributes:
        url: The receiving endpoint.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        url: str,
        secret: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the webhook client.

        Args:
            url: Endpoint that receives the webhooks.
            secret: Shared webhook secret.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport, mainly for tests.
        """
        self.url = url
        self.timeout = timeout
        self._secret = secret
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "WebhookClient":
        """
        Build a client from application settings.

        Raises:
            ValueError: If the outbound URL or the secret is not configured.
        """
        settings = settings or get_settings()
        secret = settings.webhook_secret.get_secret_value()

        if not settings.outbound_webhook_url:
            raise ValueError("outbound_webhook_url is not configured")
        if not secret:
            raise ValueError("webhook_secret is not configured")

        return cls(
            url=settings.outbound_webhook_url,
            secret=secret,
            timeout=settings.outbound_timeout_s,
        )

    async def send(self, payload: Payload) -> httpx.Response:
        """
        Sign and deliver a payload.

        Args:
            payload: Pre-serialized JSON text, or a JSON-compatible value.

        Returns:
            httpx.Response: The receiver's response.

        Raises:
            httpx.HTTPStatusError: If the receiver answers with an error status.
            httpx.HTTPError: On transport failures.
        """
        body = canonical_payload(payload)
        headers = build_headers(body, self._secret)

        logger.info(f"Sending signed webhook to {self.url}")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            response = await client.post(self.url, content=body, headers=headers)

        if response.is_error:
            logger.error(f"Webhook delivery failed: {response.status_code} - {response.text}")
        response.raise_for_status()

        logger.debug(f"Webhook delivered: status={response.status_code}")
        return response
