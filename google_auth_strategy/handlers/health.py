"""Health check endpoint handler."""

from datetime import UTC, datetime

from fastapi.responses import JSONResponse

from google_auth_strategy import __version__
from google_auth_strategy.models.health import HealthCheckResponse
from google_auth_strategy.registry.strategy_registry import StrategyRegistry


async def health_check(registry: StrategyRegistry) -> JSONResponse:
    """
    Handles the health check request.
    Returns a JSON response with the server's health status.
    """
    response_model = HealthCheckResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(UTC),
        providers_loaded=len(registry.names()),
        registered_providers=registry.names(),
    )

    return JSONResponse(content=response_model.model_dump(mode="json"))
