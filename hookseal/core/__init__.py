"""Core module containing configuration and security utilities."""

from hookseal.core.config import settings
from hookseal.core.security import build_headers, generate_secret, validate_request

__all__ = ["settings", "build_headers", "generate_secret", "validate_request"]
