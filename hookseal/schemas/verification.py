"""
Webhook verification result types.

Every expected rejection is represented as a value, never an exception,
so the HTTP layer can map any failure to a single unauthorized response.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class VerificationFailure(str, Enum):
    """Why a webhook request was rejected."""
    MISSING_CREDENTIALS = "missing_credentials"
    MALFORMED_TIMESTAMP = "malformed_timestamp"
    STALE_TIMESTAMP = "stale_timestamp"
    FUTURE_TIMESTAMP = "future_timestamp"
    SIGNATURE_MISMATCH = "signature_mismatch"


FAILURE_MESSAGES: dict[VerificationFailure, str] = {
    VerificationFailure.MISSING_CREDENTIALS: "Missing webhook signature or timestamp",
    VerificationFailure.MALFORMED_TIMESTAMP: "Invalid timestamp format",
    VerificationFailure.STALE_TIMESTAMP: "Request timestamp too old",
    VerificationFailure.FUTURE_TIMESTAMP: "Request timestamp in the future",
    VerificationFailure.SIGNATURE_MISMATCH: "Invalid webhook signature",
}


class VerificationResult(BaseModel):
    """
    Outcome of verifying a single signed request.

    Attributes:
        valid: True only when both freshness and signature checks passed.
        error: Human-readable reason, for server-side diagnostics only.
        failure: Machine-readable failure kind.
    """
    valid: bool
    error: Optional[str] = None
    failure: Optional[VerificationFailure] = None

    @classmethod
    def ok(cls) -> "VerificationResult":
        return cls(valid=True)

    @classmethod
    def reject(cls, failure: VerificationFailure) -> "VerificationResult":
        return cls(valid=False, error=FAILURE_MESSAGES[failure], failure=failure)


class FreshnessResult(BaseModel):
    """Outcome of the timestamp window check."""
    fresh: bool
    failure: Optional[VerificationFailure] = None

    @property
    def reason(self) -> Optional[str]:
        return FAILURE_MESSAGES[self.failure] if self.failure else None


class WebhookCredentials(BaseModel):
    """Signature and timestamp as read from transport headers."""
    signature: Optional[str] = None
    timestamp: Optional[int] = Field(default=None, description="Epoch milliseconds")
    raw_timestamp: Optional[str] = None

    @property
    def is_missing(self) -> bool:
        return not self.signature or not self.raw_timestamp

    @property
    def has_malformed_timestamp(self) -> bool:
        return self.raw_timestamp is not None and self.timestamp is None
