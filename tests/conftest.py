"""
Pytest configuration and async fixtures.
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from hookseal.core.config import Settings, get_settings
from hookseal.main import app

TEST_SECRET = "test-secret"


@pytest.fixture
def test_settings() -> Settings:
    return Settings(webhook_secret=TEST_SECRET, webhook_max_age_ms=300000)


@pytest.fixture
async def async_client(test_settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """Async client with the test secret injected."""
    app.dependency_overrides[get_settings] = lambda: test_settings
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
    app.dependency_overrides = {}


@pytest.fixture
async def unconfigured_client() -> AsyncGenerator[AsyncClient, None]:
    """Async client whose settings carry no webhook secret."""
    app.dependency_overrides[get_settings] = lambda: Settings(webhook_secret="")
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac
    app.dependency_overrides = {}
