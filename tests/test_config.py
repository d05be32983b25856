"""
Tests for settings loading.
"""

import pytest
from pydantic import ValidationError

from hookseal.core.config import Settings


def test_secret_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WEBHOOK_SECRET", "  from-env\n")
    settings = Settings()
    assert settings.webhook_secret.get_secret_value() == "from-env"


def test_secret_is_masked_in_repr() -> None:
    settings = Settings(webhook_secret="hidden-value")
    assert "hidden-value" not in repr(settings)


def test_defaults() -> None:
    settings = Settings(webhook_secret="x")
    assert settings.webhook_max_age_ms == 300000
    assert settings.outbound_timeout_s == 30.0


def test_max_age_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        Settings(webhook_max_age_ms=0)
