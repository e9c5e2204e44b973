"""Configuration management using environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from google_auth_strategy.models.auth import (
    DEFAULT_USERINFO_ENDPOINT,
    GoogleOAuthConfig,
    StrategyOptions,
    SystemEnv,
)


def parse_allowed_client_ids(value: str | None) -> list[str]:
    """Splits a colon-separated client id list, dropping empty entries."""
    if not value:
        return []
    return [client_id for client_id in value.split(":") if client_id]


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server Configuration
    server_host: str = Field(default="0.0.0.0", description="Server bind address")
    server_port: int = Field(default=4000, description="HTTP port", ge=1, le=65535)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )
    environment: str = Field(default="development", description="Environment name")

    # Google OAuth client
    google_client_id: str = Field(..., description="Google OAuth client ID")
    google_client_secret: SecretStr = Field(..., description="Google OAuth client secret")
    google_allowed_client_ids: str = Field(
        default="",
        description="Colon-separated client ids whose identity tokens are accepted",
    )

    # Strategy options
    google_uid_field: str = Field(default="sub", description="Profile field used as uid")
    google_default_scope: str = Field(default="email", description="Scope used when none is requested")
    google_hd: str | None = Field(None, description="Hosted domain restriction")
    google_prompt: str | None = Field(None, description="Default prompt parameter")
    google_access_type: str | None = Field(None, description="Default access_type parameter")
    google_login_hint: str | None = Field(None, description="Default login_hint parameter")
    google_include_granted_scopes: bool | None = Field(
        None, description="Request incremental authorization"
    )
    google_userinfo_endpoint: str = Field(
        default=DEFAULT_USERINFO_ENDPOINT, description="Userinfo endpoint URL"
    )
    google_userinfo_endpoint_env: str | None = Field(
        None,
        description="Name of an environment variable overriding the userinfo endpoint",
    )
    google_proto_scheme: str | None = Field(
        None, description="Scheme forced onto callback URLs (e.g. behind a TLS proxy)"
    )

    @property
    def oauth_config(self) -> GoogleOAuthConfig:
        """Returns an instance of GoogleOAuthConfig for the OAuth client."""
        return GoogleOAuthConfig(
            client_id=self.google_client_id,
            client_secret=self.google_client_secret,
        )

    @property
    def strategy_options(self) -> StrategyOptions:
        """Returns the StrategyOptions the Google strategy is registered with."""
        userinfo_endpoint: str | SystemEnv = self.google_userinfo_endpoint
        if self.google_userinfo_endpoint_env:
            userinfo_endpoint = SystemEnv(
                varname=self.google_userinfo_endpoint_env,
                default=self.google_userinfo_endpoint,
            )

        return StrategyOptions(
            uid_field=self.google_uid_field,
            default_scope=self.google_default_scope,
            hd=self.google_hd,
            prompt=self.google_prompt,
            access_type=self.google_access_type,
            login_hint=self.google_login_hint,
            include_granted_scopes=self.google_include_granted_scopes,
            userinfo_endpoint=userinfo_endpoint,
            allowed_client_ids=parse_allowed_client_ids(self.google_allowed_client_ids),
            proto_scheme=self.google_proto_scheme,
        )


@lru_cache
def get_config() -> Config:
    """Get cached configuration instance."""
    return Config()  # type: ignore
