from typing import Any

from pydantic import BaseModel, ConfigDict, Field, SecretStr

DEFAULT_USERINFO_ENDPOINT = "https://www.googleapis.com/oauth2/v3/userinfo"

# Keys lifted out of a token endpoint response; everything else ends up in other_params.
_STANDARD_TOKEN_KEYS = {"access_token", "refresh_token", "expires_at", "expires_in", "token_type"}


class SystemEnv(BaseModel):
    """An option value read from an environment variable, with an optional fallback."""

    model_config = ConfigDict(frozen=True)

    varname: str
    default: str | None = None


class StrategyOptions(BaseModel):
    """Strategy-level options, loaded once at registration and read-only afterwards."""

    model_config = ConfigDict(frozen=True)

    uid_field: str = "sub"
    default_scope: str = "email"
    hd: str | None = None
    prompt: str | None = None
    access_type: str | None = None
    login_hint: str | None = None
    include_granted_scopes: bool | None = None
    userinfo_endpoint: str | SystemEnv = DEFAULT_USERINFO_ENDPOINT
    allowed_client_ids: list[str] = Field(default_factory=list)
    proto_scheme: str | None = None


class GoogleOAuthConfig(BaseModel):
    """Static OAuth client configuration for Google."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: SecretStr
    authorize_url: str = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url: str = "https://www.googleapis.com/oauth2/v4/token"


class RequestOptions(BaseModel):
    """Client credentials overriding the static configuration for a single request."""

    model_config = ConfigDict(frozen=True)

    client_id: str | None = None
    client_secret: SecretStr | None = None


class TokenResult(BaseModel):
    """
    Token obtained from the OAuth exchange.

    An instance with every field unset stands in for the identity-token flow,
    where no access token is ever issued.
    """

    model_config = ConfigDict(frozen=True)

    access_token: str | None = None
    refresh_token: str | None = None
    expires_at: int | None = None
    token_type: str | None = None
    other_params: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "TokenResult":
        """Builds a TokenResult from a token endpoint response body."""
        expires_at = data.get("expires_at")
        if expires_at is not None:
            expires_at = int(expires_at)

        return cls(
            access_token=data.get("access_token"),
            refresh_token=data.get("refresh_token"),
            expires_at=expires_at,
            token_type=data.get("token_type"),
            other_params={k: v for k, v in data.items() if k not in _STANDARD_TOKEN_KEYS},
        )

    def as_oauth_token(self) -> dict[str, Any]:
        """Returns the token in the dict shape the OAuth client expects."""
        token: dict[str, Any] = {"access_token": self.access_token, "token_type": self.token_type or "Bearer"}
        if self.refresh_token:
            token["refresh_token"] = self.refresh_token
        if self.expires_at is not None:
            token["expires_at"] = self.expires_at
        return token


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str | None = None
    refresh_token: str | None = None
    token_type: str | None = None
    expires: bool = False
    expires_at: int | None = None
    scopes: list[str] = Field(default_factory=list)
    other: dict[str, Any] = Field(default_factory=dict)


class Info(BaseModel):
    """Display fields about the authenticated user, passed through as the provider sent them."""

    model_config = ConfigDict(frozen=True)

    name: Any = None
    first_name: Any = None
    last_name: Any = None
    nickname: Any = None
    email: Any = None
    location: Any = None
    description: Any = None
    image: Any = None
    phone: Any = None
    birthday: Any = None
    urls: dict[str, Any] = Field(default_factory=dict)


class Extra(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw_info: dict[str, Any] = Field(default_factory=dict)


class AuthResult(BaseModel):
    """
    Normalized, provider-agnostic result of a successful callback.
    """

    model_config = ConfigDict(frozen=True)

    provider: str
    strategy: str
    uid: Any = Field(None, description="Identifier taken from the configured uid field")
    credentials: Credentials
    info: Info
    extra: Extra
