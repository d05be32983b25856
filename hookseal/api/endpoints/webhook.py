"""
Signed webhook endpoint handler.

This module receives callbacks from the external automation service,
verifies their HMAC signature and timestamp, and only then looks at
the payload.
"""

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from hookseal.core.config import Settings, get_settings
from hookseal.core.security import validate_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


def get_webhook_secret(settings: Settings = Depends(get_settings)) -> str:
    """
    Resolve the shared webhook secret for the current request.

    Raises:
        HTTPException: 500 if no secret is configured.
    """
    secret = settings.webhook_secret.get_secret_value()
    if not secret:
        logger.error("Webhook secret is not configured")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server configuration error",
        )
    return secret


async def require_signed_webhook(
    request: Request,
    secret: str = Depends(get_webhook_secret),
    settings: Settings = Depends(get_settings),
) -> bytes:
    """
    Dependency that rejects any request without a valid signature.

    The failure reason is logged but never returned to the caller.

    Returns:
        bytes: The verified raw request body.

    Raises:
        HTTPException: 401 if verification fails.
    """
    # Read raw body for signature verification
    body = await request.body()

    result = validate_request(
        request.headers,
        body,
        secret,
        max_age_ms=settings.webhook_max_age_ms,
    )
    if not result.valid:
        logger.warning(
            f"Rejected webhook from {request.client.host if request.client else 'unknown'}: "
            f"{result.error}"
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )

    return body


@router.post(
    "/callback",
    status_code=status.HTTP_200_OK,
    summary="Signed Callback Receiver",
    description="Receives signed status callbacks from the automation service.",
)
async def handle_callback(
    body: bytes = Depends(require_signed_webhook),
) -> dict[str, Any]:
    """
    Handle a verified callback.

    Args:
        body: The raw body, already verified by ``require_signed_webhook``.

    Returns:
        dict: Acknowledgement including the content the callback refers to.

    Raises:
        HTTPException: 400 if the body is not a JSON object or has no content id.
    """
    try:
        payload = json.loads(body)
    except ValueError as e:
        logger.error(f"Failed to parse webhook payload: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid JSON payload",
        )

    if not isinstance(payload, dict):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid JSON payload",
        )

    # Accept both spellings for backward compatibility
    content_id = payload.get("content_id") or payload.get("contentId")
    if not content_id:
        logger.error("Missing content_id/contentId in callback")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing content_id",
        )

    logger.info(
        f"Received callback: content_id={content_id}, "
        f"workflow_type={payload.get('workflow_type', 'unknown')}"
    )

    return {
        "status": "accepted",
        "content_id": content_id,
    }
