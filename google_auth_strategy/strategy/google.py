"""
Google strategy.

Handles both the authorization-code flow (redirect, code exchange, userinfo fetch)
and the identity-token flow, where an app presents a Google-issued id_token that
is checked against the tokeninfo endpoint and a client id allow-list.
"""

import os
from collections.abc import Mapping
from typing import Any

import httpx
from authlib.integrations.base_client import OAuthError

from google_auth_strategy.models.auth import (
    DEFAULT_USERINFO_ENDPOINT,
    Credentials,
    Extra,
    Info,
    StrategyOptions,
    SystemEnv,
    TokenResult,
)
from google_auth_strategy.models.errors import (
    ErrorCategory,
    ProviderError,
    TokenVerificationError,
    error,
)
from google_auth_strategy.strategy.base import Strategy
from google_auth_strategy.strategy.context import RequestContext
from google_auth_strategy.strategy.oauth import GoogleOAuth
from google_auth_strategy.utils.logging import fingerprint, get_logger

logger = get_logger(__name__)

TOKENINFO_URL = "https://www.googleapis.com/oauth2/v3/tokeninfo"

TOKEN_KEY = "google_token"
USER_KEY = "google_user"

# Authorization parameters taken from the strategy options, then from the request.
# Request values win when both are present.
OPTION_PARAMS = ("hd", "prompt", "access_type", "login_hint", "include_granted_scopes")
REQUEST_PARAMS = ("access_type", "prompt", "login_hint", "state")


def resolve_userinfo_endpoint(
    option: str | SystemEnv, environ: Mapping[str, str] | None = None
) -> str:
    """Resolves a static or environment-backed userinfo endpoint to a URL."""
    if environ is None:
        environ = os.environ
    if isinstance(option, SystemEnv):
        return environ.get(option.varname) or option.default or DEFAULT_USERINFO_ENDPOINT
    return option


class GoogleStrategy(Strategy):
    """Google OAuth2 / OpenID Connect strategy."""

    def __init__(
        self,
        options: StrategyOptions,
        oauth: GoogleOAuth,
        provider_name: str = "google",
    ) -> None:
        self.options = options
        self.oauth = oauth
        self._name = provider_name
        # Resolved once; never re-read while handling requests.
        self.userinfo_endpoint = resolve_userinfo_endpoint(options.userinfo_endpoint)

        logger.info(
            "google_strategy_initialized",
            provider=provider_name,
            userinfo_endpoint=self.userinfo_endpoint,
            allowed_client_ids=len(options.allowed_client_ids),
        )

    @property
    def name(self) -> str:
        return self._name

    # ----------------------------------------------------------------------- #
    # Request phase
    # ----------------------------------------------------------------------- #

    def handle_request(self, context: RequestContext) -> None:
        params: dict[str, Any] = {
            "scope": context.params.get("scope") or self.options.default_scope
        }

        for key in OPTION_PARAMS:
            value = getattr(self.options, key)
            if value:
                params[key] = value

        for key in REQUEST_PARAMS:
            value = context.params.get(key)
            if value:
                params[key] = value

        url = self.oauth.authorize_url(params, self._client_options(context))
        logger.info("google_auth_redirect", provider=self.name, scope=params["scope"])
        context.redirect(url)

    def _client_options(self, context: RequestContext) -> dict[str, Any]:
        proxied = context.with_proto_scheme(self.options.proto_scheme)
        opts: dict[str, Any] = {"redirect_uri": proxied.callback_url()}

        override = context.request_options
        if override.client_id is not None and override.client_secret is not None:
            opts["client_id"] = override.client_id
            opts["client_secret"] = override.client_secret.get_secret_value()
        return opts

    # ----------------------------------------------------------------------- #
    # Callback phase
    # ----------------------------------------------------------------------- #

    def handle_callback(self, context: RequestContext) -> None:
        if "code" in context.params:
            self._handle_code(context, context.params["code"])
        elif "id_token" in context.params:
            self._handle_id_token(context, context.params["id_token"])
        else:
            context.set_errors(
                [error("missing_code", "No code received", ErrorCategory.MISSING_CODE)]
            )

    def _handle_code(self, context: RequestContext, code: str) -> None:
        try:
            token = self.oauth.get_access_token({"code": code}, self._client_options(context))
        except ProviderError as e:
            context.set_errors([error(e.code, e.description)])
            return

        self.fetch_user(context, token)

    def _handle_id_token(self, context: RequestContext, id_token: str) -> None:
        try:
            user = self.verify_token(id_token)
        except TokenVerificationError as e:
            context.set_errors(
                [error("token", e.reason, ErrorCategory.TOKEN_VERIFICATION_FAILED)]
            )
            return

        # No access token exists in this flow, only a verified identity.
        context.put_private(TOKEN_KEY, TokenResult())
        context.put_private(USER_KEY, user)

    def fetch_user(self, context: RequestContext, token: TokenResult) -> None:
        """Stores `token` and fetches the user's profile with it."""
        context.put_private(TOKEN_KEY, token)

        try:
            response = self.oauth.get(token, self.userinfo_endpoint)
        except httpx.HTTPError as e:
            logger.error("google_userinfo_request_failed", error=str(e))
            context.set_errors([error("OAuth2", str(e))])
            return
        except OAuthError as e:
            logger.warning("google_userinfo_token_rejected", error=e.error)
            context.set_errors([error("OAuth2", e.description or e.error)])
            return

        status_code = response.status_code
        if status_code == 401:
            context.set_errors([error("token", "unauthorized", ErrorCategory.UNAUTHORIZED)])
        elif 200 <= status_code < 400:
            try:
                user = response.json()
            except ValueError as e:
                context.set_errors([error("OAuth2", f"Unreadable userinfo response: {e}")])
                return
            if not isinstance(user, dict):
                logger.warning("google_userinfo_not_an_object", body_type=type(user).__name__)
                context.set_errors([error("OAuth2", "Userinfo response is not a JSON object")])
                return
            context.put_private(USER_KEY, user)
        else:
            logger.warning("google_userinfo_unexpected_status", status_code=status_code)
            context.set_errors([error("OAuth2", status_code)])

    def verify_token(self, id_token: str) -> dict[str, Any]:
        """
        Checks an identity token with Google's tokeninfo endpoint.

        The token is accepted only when its audience is an allowed client id.

        Raises:
            TokenVerificationError: the token is unknown to Google, or was issued
                to a client id that is not allowed.
        """
        token_hash = fingerprint(id_token)
        try:
            response = self.oauth.get(None, TOKENINFO_URL, params={"id_token": id_token})
        except (httpx.HTTPError, OAuthError) as e:
            logger.warning("google_tokeninfo_request_failed", token_hash=token_hash, error=str(e))
            raise TokenVerificationError() from e

        if response.status_code != 200:
            raise TokenVerificationError()

        try:
            body = response.json()
        except ValueError as e:
            raise TokenVerificationError() from e

        if not isinstance(body, dict) or "aud" not in body:
            raise TokenVerificationError()

        aud = body["aud"]
        if aud not in self.options.allowed_client_ids:
            logger.warning("google_id_token_unknown_client", token_hash=token_hash, aud=aud)
            raise TokenVerificationError(f"Unknown client id {aud}")

        logger.info("google_id_token_verified", token_hash=token_hash, aud=aud)
        return body

    def handle_cleanup(self, context: RequestContext) -> None:
        context.put_private(USER_KEY, None)
        context.put_private(TOKEN_KEY, None)

    # ----------------------------------------------------------------------- #
    # Projections
    # ----------------------------------------------------------------------- #

    def _user(self, context: RequestContext) -> dict[str, Any]:
        return context.private.get(USER_KEY) or {}

    def _token(self, context: RequestContext) -> TokenResult:
        return context.private.get(TOKEN_KEY) or TokenResult()

    def uid(self, context: RequestContext) -> Any:
        return self._user(context).get(str(self.options.uid_field))

    def credentials(self, context: RequestContext) -> Credentials:
        token = self._token(context)
        # Google reports granted scopes space-delimited; the comma split is kept as is.
        scope_string = token.other_params.get("scope") or ""
        scopes = scope_string.split(",") if scope_string else []

        return Credentials(
            token=token.access_token,
            refresh_token=token.refresh_token,
            token_type=token.token_type,
            expires=token.expires_at is not None,
            expires_at=token.expires_at,
            scopes=scopes,
        )

    def info(self, context: RequestContext) -> Info:
        user = self._user(context)
        return Info(
            email=user.get("email"),
            first_name=user.get("given_name"),
            last_name=user.get("family_name"),
            name=user.get("name"),
            image=user.get("picture"),
            birthday=user.get("birthday"),
            urls={"profile": user.get("profile"), "website": user.get("hd")},
        )

    def extra(self, context: RequestContext) -> Extra:
        return Extra(raw_info={"token": self._token(context), "user": self._user(context)})
