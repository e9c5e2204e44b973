"""
ASGI host for the authentication strategies.

Serves the /auth routes for every registered strategy plus a health endpoint.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from google_auth_strategy import __version__
from google_auth_strategy.config import get_config
from google_auth_strategy.handlers.auth import router as auth_router
from google_auth_strategy.handlers.health import health_check
from google_auth_strategy.registry.strategy_registry import (
    StrategyRegistry,
    register_google_strategy,
)
from google_auth_strategy.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan (startup and shutdown)."""
    logger.info("Starting auth server", version=__version__)
    config = get_config()
    logger.info(
        "Configuration loaded",
        environment=config.environment,
        log_level=config.log_level,
    )

    registry = StrategyRegistry()
    if "google" not in registry.names():
        register_google_strategy(config)
    app.state.registry = registry
    logger.info("Strategy registry ready", providers=registry.names())
    yield
    logger.info("Shutting down auth server")


app = FastAPI(
    title="Google Auth Strategy",
    description="Google OAuth2 / OpenID Connect login behind a pluggable strategy contract.",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(auth_router)


@app.get("/health")
async def health(request: Request) -> JSONResponse:
    """Health check endpoint."""
    return await health_check(StrategyRegistry())
