"""
OAuth2 client wrapper for Google.

Thin layer over authlib's httpx integration: builds authorization URLs, exchanges
authorization codes and performs (optionally bearer-authenticated) GET requests.
"""

from typing import Any

import httpx
from authlib.integrations.base_client import OAuthError
from authlib.integrations.httpx_client import OAuth2Client
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri

from google_auth_strategy.models.auth import GoogleOAuthConfig, TokenResult
from google_auth_strategy.models.errors import ProviderError
from google_auth_strategy.utils.logging import fingerprint, get_logger

logger = get_logger(__name__)


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class GoogleOAuth:
    """OAuth2 client factory and helpers bound to a static Google client configuration."""

    def __init__(self, config: GoogleOAuthConfig) -> None:
        self.config = config

    def client(self, **opts: Any) -> OAuth2Client:
        """
        Builds an OAuth2Client from the static configuration merged with `opts`.

        Recognized options: client_id, client_secret, redirect_uri, token (a TokenResult).
        Any other keyword is handed to the underlying httpx client.
        """
        token = opts.pop("token", None)
        params: dict[str, Any] = {
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret.get_secret_value(),
        }
        params.update({k: v for k, v in opts.items() if v is not None})
        if isinstance(token, TokenResult):
            params["token"] = token.as_oauth_token()
        return OAuth2Client(**params)

    def authorize_url(self, params: dict[str, Any], opts: dict[str, Any]) -> str:
        """Builds the authorization redirect URL. Pure: no network access."""
        query = {k: _query_value(v) for k, v in params.items() if v is not None}
        scope = query.pop("scope", None)
        state = query.pop("state", None)
        client_id = opts.get("client_id") or self.config.client_id

        return prepare_grant_uri(
            self.config.authorize_url,
            client_id,
            "code",
            redirect_uri=opts.get("redirect_uri"),
            scope=scope,
            state=state,
            **query,
        )

    def get_access_token(self, params: dict[str, Any], opts: dict[str, Any]) -> TokenResult:
        """
        Exchanges an authorization code for a token.

        Raises:
            ProviderError: the provider rejected the exchange, or it could not be reached.
        """
        try:
            with self.client(**opts) as client:
                token = client.fetch_token(self.config.token_url, **params)
        except OAuthError as e:
            logger.warning("google_token_exchange_rejected", error=e.error, description=e.description)
            raise ProviderError(e.error or "error", e.description) from e
        except httpx.HTTPError as e:
            logger.error("google_token_exchange_failed", error=str(e))
            raise ProviderError("error", str(e)) from e
        except ValueError as e:
            logger.error("google_token_response_unreadable", error=str(e))
            raise ProviderError("error", f"Unreadable token response: {e}") from e

        if not token.get("access_token"):
            raise ProviderError(
                token.get("error") or "error",
                token.get("error_description") or "No access token received",
            )

        result = TokenResult.from_response(dict(token))
        logger.info(
            "google_token_exchanged",
            token_hash=fingerprint(result.access_token),
            expires_at=result.expires_at,
        )
        return result

    def get(
        self,
        token: TokenResult | None,
        url: str,
        params: dict[str, Any] | None = None,
        **opts: Any,
    ) -> httpx.Response:
        """
        GET `url`, bearer-authenticated with `token` when one is given.

        Transport failures propagate as httpx.HTTPError; a missing or expired token
        propagates as authlib's OAuthError.
        """
        # Only OAuth2Client.request accepts withhold_token.
        with self.client(token=token, **opts) as client:
            return client.request("GET", url, params=params, withhold_token=token is None)
