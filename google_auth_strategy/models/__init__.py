"""Data models for the Google authentication strategy."""

from google_auth_strategy.models.auth import (
    AuthResult,
    Credentials,
    Extra,
    GoogleOAuthConfig,
    Info,
    RequestOptions,
    StrategyOptions,
    SystemEnv,
    TokenResult,
)
from google_auth_strategy.models.errors import AuthError, ErrorCategory
from google_auth_strategy.models.health import HealthCheckResponse

__all__ = [
    "AuthError",
    "AuthResult",
    "Credentials",
    "ErrorCategory",
    "Extra",
    "GoogleOAuthConfig",
    "HealthCheckResponse",
    "Info",
    "RequestOptions",
    "StrategyOptions",
    "SystemEnv",
    "TokenResult",
]
