"""
Security utilities for signed webhook exchange.

This module provides HMAC SHA-256 signing and verification of webhook
payloads with timestamp-based replay protection. The signed message is
``<timestamp>.<payload>`` where the timestamp is milliseconds since epoch.

Nothing here reads configuration: the shared secret is always passed in
by the caller.
"""

import hashlib
import hmac
import json
import logging
import re
import secrets
import time
from collections.abc import Mapping
from typing import Any, Optional, Union

from hookseal.schemas.verification import (
    FreshnessResult,
    VerificationFailure,
    VerificationResult,
    WebhookCredentials,
)

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-webhook-signature"
TIMESTAMP_HEADER = "x-webhook-timestamp"

DEFAULT_MAX_AGE_MS = 5 * 60 * 1000
MAX_FUTURE_SKEW_MS = 60 * 1000

# 19 digits covers any 64-bit epoch in milliseconds
_TIMESTAMP_PATTERN = re.compile(r"[0-9]{1,19}")

Payload = Union[str, bytes, Mapping[str, Any], list, int, float, bool, None]
Secret = Union[str, bytes]


def current_timestamp_ms() -> int:
    """Return the wall-clock time in milliseconds since epoch."""
    return time.time_ns() // 1_000_000


def _secret_bytes(secret: Secret) -> bytes:
    if isinstance(secret, bytes):
        return secret
    return secret.encode("utf-8")


def canonical_payload(payload: Payload) -> bytes:
    """
    Return the exact bytes that get signed for a payload.

    Text is signed verbatim. Structured values are serialized as compact
    JSON with sorted keys, so logically equal payloads always produce the
    same bytes regardless of key insertion order.

    Args:
        payload: Pre-serialized text/bytes, or a JSON-compatible value.

    Returns:
        bytes: The canonical payload bytes.
    """
    if isinstance(payload, bytes):
        return payload
    if isinstance(payload, str):
        return payload.encode("utf-8", errors="surrogatepass")
    return json.dumps(
        payload,
        separators=(",", ":"),
        sort_keys=True,
        ensure_ascii=False,
    ).encode("utf-8", errors="surrogatepass")


def build_signed_message(payload: Payload, timestamp: int) -> bytes:
    """Build the ``<timestamp>.<payload>`` message covered by the MAC."""
    return f"{timestamp}.".encode("ascii") + canonical_payload(payload)


def compute_signature(payload: Payload, secret: Secret, timestamp: int) -> str:
    """
    Compute the HMAC SHA-256 signature for a payload.

    Args:
        payload: The webhook payload.
        secret: The shared webhook secret.
        timestamp: Signing time in milliseconds since epoch.

    Returns:
        str: Lower-case hex digest.
    """
    return hmac.new(
        key=_secret_bytes(secret),
        msg=build_signed_message(payload, timestamp),
        digestmod=hashlib.sha256,
    ).hexdigest()


def check_freshness(
    timestamp: int,
    now: Optional[int] = None,
    max_age_ms: int = DEFAULT_MAX_AGE_MS,
    max_future_skew_ms: int = MAX_FUTURE_SKEW_MS,
) -> FreshnessResult:
    """
    Check that a request timestamp falls inside the accepted window.

    A timestamp exactly ``max_age_ms`` old, or exactly
    ``max_future_skew_ms`` ahead, is still fresh.

    Args:
        timestamp: Claimed signing time in milliseconds since epoch.
        now: Current time in milliseconds. Defaults to the wall clock.
        max_age_ms: Oldest accepted age.
        max_future_skew_ms: Tolerated clock skew into the future.

    Returns:
        FreshnessResult: Whether the timestamp is fresh, and why not.
    """
    if now is None:
        now = current_timestamp_ms()

    if now - timestamp > max_age_ms:
        return FreshnessResult(fresh=False, failure=VerificationFailure.STALE_TIMESTAMP)

    if timestamp > now + max_future_skew_ms:
        return FreshnessResult(fresh=False, failure=VerificationFailure.FUTURE_TIMESTAMP)

    return FreshnessResult(fresh=True)


def timing_safe_equal(a: Union[str, bytes], b: Union[str, bytes]) -> bool:
    """
    Compare two values in constant time, whatever their lengths.

    Both sides are MACed under a throwaway random key first, so the final
    comparison always runs over two 32-byte digests.
    """
    if isinstance(a, str):
        a = a.encode("utf-8", errors="surrogatepass")
    if isinstance(b, str):
        b = b.encode("utf-8", errors="surrogatepass")

    key = secrets.token_bytes(32)
    a_digest = hmac.new(key, a, hashlib.sha256).digest()
    b_digest = hmac.new(key, b, hashlib.sha256).digest()
    return hmac.compare_digest(a_digest, b_digest)


def verify_signature(
    payload: Payload,
    signature: str,
    secret: Secret,
    timestamp: int,
    max_age_ms: int = DEFAULT_MAX_AGE_MS,
    now: Optional[int] = None,
) -> VerificationResult:
    """
    Verify a webhook signature and its timestamp.

    The freshness check runs first so stale or far-future requests are
    rejected without computing a MAC.

    Args:
        payload: The webhook payload as received.
        signature: The claimed hex signature.
        secret: The shared webhook secret.
        timestamp: The claimed signing time in milliseconds since epoch.
        max_age_ms: Maximum accepted request age.
        now: Current time in milliseconds. Defaults to the wall clock.

    Returns:
        VerificationResult: Valid only if fresh and the signature matches.
    """
    freshness = check_freshness(timestamp, now=now, max_age_ms=max_age_ms)
    if not freshness.fresh:
        return VerificationResult.reject(freshness.failure)

    expected_signature = compute_signature(payload, secret, timestamp)
    if not timing_safe_equal(signature, expected_signature):
        return VerificationResult.reject(VerificationFailure.SIGNATURE_MISMATCH)

    return VerificationResult.ok()


def _get_header(headers: Mapping[str, str], name: str) -> Optional[str]:
    value = headers.get(name)
    if value is not None:
        return value
    for key, candidate in headers.items():
        if key.lower() == name:
            return candidate
    return None


def extract_credentials(headers: Mapping[str, str]) -> WebhookCredentials:
    """
    Read the signature and timestamp from request headers.

    Header names are matched case-insensitively. A timestamp that is
    present but not a plain decimal integer of at most 19 digits is kept
    in ``raw_timestamp`` with ``timestamp`` left unset, so the caller can
    report it.

    Args:
        headers: Any mapping of header names to values.

    Returns:
        WebhookCredentials: The extracted values.
    """
    signature = _get_header(headers, SIGNATURE_HEADER)
    raw_timestamp = _get_header(headers, TIMESTAMP_HEADER)

    if signature is not None:
        signature = signature.strip() or None
    if raw_timestamp is not None:
        raw_timestamp = raw_timestamp.strip() or None

    timestamp = None
    if raw_timestamp is not None and _TIMESTAMP_PATTERN.fullmatch(raw_timestamp):
        timestamp = int(raw_timestamp)

    return WebhookCredentials(
        signature=signature,
        timestamp=timestamp,
        raw_timestamp=raw_timestamp,
    )


def validate_request(
    headers: Mapping[str, str],
    body: Payload,
    secret: Secret,
    max_age_ms: int = DEFAULT_MAX_AGE_MS,
    now: Optional[int] = None,
) -> VerificationResult:
    """
    Validate an incoming webhook request.

    This is the entry point for the HTTP layer. It never raises for
    missing, malformed or forged input.

    Args:
        headers: The request headers.
        body: The raw request body.
        secret: The shared webhook secret.
        max_age_ms: Maximum accepted request age.
        now: Current time in milliseconds. Defaults to the wall clock.

    Returns:
        VerificationResult: The validation outcome.
    """
    credentials = extract_credentials(headers)

    if credentials.is_missing:
        result = VerificationResult.reject(VerificationFailure.MISSING_CREDENTIALS)
    elif credentials.has_malformed_timestamp:
        result = VerificationResult.reject(VerificationFailure.MALFORMED_TIMESTAMP)
    else:
        result = verify_signature(
            body,
            credentials.signature,
            secret,
            credentials.timestamp,
            max_age_ms=max_age_ms,
            now=now,
        )

    if result.valid:
        logger.debug("Webhook signature verified successfully")
    else:
        logger.warning(f"Webhook verification failed: {result.failure.value}")

    return result


def generate_secret(length_bytes: int = 32) -> str:
    """
    Generate a new shared webhook secret.

    Args:
        length_bytes: Number of random bytes. The result has twice as many
            hex characters.

    Returns:
        str: A hex-encoded secret from the OS CSPRNG.
    """
    if length_bytes <= 0:
        raise ValueError("length_bytes must be positive")
    return secrets.token_hex(length_bytes)


def build_headers(
    payload: Payload,
    secret: Secret,
    timestamp: Optional[int] = None,
) -> dict[str, str]:
    """
    Create the headers for an outgoing signed webhook request.

    Args:
        payload: The payload that will be sent as the request body.
        secret: The shared webhook secret.
        timestamp: Signing time override. Defaults to the wall clock.

    Returns:
        dict: Signature, timestamp and content-type headers.
    """
    if timestamp is None:
        timestamp = current_timestamp_ms()

    return {
        SIGNATURE_HEADER: compute_signature(payload, secret, timestamp),
        TIMESTAMP_HEADER: str(timestamp),
        "content-type": "application/json",
    }
