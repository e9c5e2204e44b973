"""Error handling data models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ErrorCategory(str, Enum):
    """Standardized error categories reported back to the host."""

    PROVIDER_ERROR = "provider_error"
    UNAUTHORIZED = "unauthorized"
    TOKEN_VERIFICATION_FAILED = "token_verification_failed"
    MISSING_CODE = "missing_code"


class AuthError(BaseModel):
    """A single structured failure collected during a callback."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Error key, e.g. the provider error code")
    message: str = Field(..., description="Human-readable error message")
    category: ErrorCategory = Field(
        ErrorCategory.PROVIDER_ERROR, description="Coarse classification of the failure"
    )


def error(key: str, message: object, category: ErrorCategory = ErrorCategory.PROVIDER_ERROR) -> AuthError:
    """Builds an AuthError, stringifying non-string messages such as status codes."""
    return AuthError(key=key, message="" if message is None else str(message), category=category)


# Custom exception classes
class ProviderError(Exception):
    """The OAuth provider rejected a request (token exchange, profile fetch)."""

    def __init__(self, code: str, description: str | None = None) -> None:
        self.code = code
        self.description = description or ""
        super().__init__(f"{code}: {self.description}")


class TokenVerificationError(Exception):
    """An identity token could not be verified."""

    def __init__(self, reason: str = "Token verification failed") -> None:
        self.reason = reason
        super().__init__(reason)


class StrategyRegistrationError(Exception):
    """Custom exception for strategy registration errors."""

    pass
