"""
hookseal - signed webhook exchange.

Main FastAPI application entry point.
It receives signed callbacks and rejects anything whose signature or
timestamp does not check out.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from hookseal.api.router import api_router
from hookseal.core.config import settings

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - [API] - %(name)s - %(levelname)s - %(message)s",
)

# Suppress noisy HTTP client logs
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Logs the effective configuration on startup. The secret itself is
    never logged, only whether one is set.

    Args:
        app: The FastAPI application instance.

    Yields:
        None
    """
    # Startup
    logger.info(f"Starting {settings.app_name}...")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Webhook freshness window: {settings.webhook_max_age_ms} ms")

    if not settings.webhook_secret.get_secret_value():
        logger.warning("WEBHOOK_SECRET is not set - all signed webhooks will be refused")

    yield

    # Shutdown
    logger.info(f"Shutting down {settings.app_name}...")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        FastAPI: The configured application instance.
    """
    app = FastAPI(
        title=settings.app_name,
        description="Receives and verifies HMAC-signed webhooks.",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # Include API routes
    app.include_router(api_router)

    # Health check endpoint
    @app.get("/health", tags=["health"])
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy", "app": settings.app_name}

    return app


# Create the application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hookseal.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
