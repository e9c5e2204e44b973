"""Models for the host adapter."""

from datetime import datetime

from pydantic import BaseModel, Field


class HealthCheckResponse(BaseModel):
    """
    Response model for the health check endpoint.
    """

    status: str = Field(..., description="Status of the server")
    version: str = Field(..., description="Version of the server")
    timestamp: datetime = Field(..., description="Current server timestamp in ISO 8601 format")
    providers_loaded: int = Field(..., description="Number of strategies currently registered")
    registered_providers: list[str] = Field(
        default_factory=list, description="List of registered provider names"
    )
