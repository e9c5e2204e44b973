"""Unit tests for the GoogleOAuth client wrapper."""

from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from google_auth_strategy.models.auth import TokenResult
from google_auth_strategy.models.errors import ProviderError
from google_auth_strategy.strategy.oauth import GoogleOAuth


@pytest.fixture
def oauth(oauth_config) -> GoogleOAuth:
    return GoogleOAuth(oauth_config)


def test_authorize_url_uses_static_client_id(oauth):
    url = oauth.authorize_url(
        {"scope": "email", "state": "abc"},
        {"redirect_uri": "https://app.example.com/auth/google/callback"},
    )
    parts = urlsplit(url)
    query = parse_qs(parts.query)

    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == "https://accounts.google.com/o/oauth2/v2/auth"
    assert query == {
        "response_type": ["code"],
        "client_id": ["static-client"],
        "redirect_uri": ["https://app.example.com/auth/google/callback"],
        "scope": ["email"],
        "state": ["abc"],
    }


def test_authorize_url_prefers_client_id_option(oauth):
    url = oauth.authorize_url({"scope": "email"}, {"client_id": "other-client"})

    assert parse_qs(urlsplit(url).query)["client_id"] == ["other-client"]


def test_authorize_url_renders_booleans(oauth):
    url = oauth.authorize_url({"scope": "email", "include_granted_scopes": False}, {})

    assert parse_qs(urlsplit(url).query)["include_granted_scopes"] == ["false"]


def test_get_access_token_success(oauth):
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == "https://www.googleapis.com/oauth2/v4/token"
        form = parse_qs(request.content.decode())
        assert form["code"] == ["abc"]
        assert form["grant_type"] == ["authorization_code"]
        return httpx.Response(
            200,
            json={
                "access_token": "access-123",
                "token_type": "Bearer",
                "expires_in": 3600,
                "scope": "openid email",
                "id_token": "id-456",
            },
        )

    token = oauth.get_access_token(
        {"code": "abc"},
        {
            "redirect_uri": "https://app.example.com/auth/google/callback",
            "transport": httpx.MockTransport(handler),
        },
    )

    assert token.access_token == "access-123"
    assert token.token_type == "Bearer"
    assert token.expires_at is not None
    assert token.other_params == {"scope": "openid email", "id_token": "id-456"}


def test_get_access_token_provider_error(oauth):
    transport = httpx.MockTransport(
        lambda request: httpx.Response(
            400, json={"error": "invalid_grant", "error_description": "Bad Request"}
        )
    )

    with pytest.raises(ProviderError) as exc_info:
        oauth.get_access_token({"code": "abc"}, {"transport": transport})

    assert exc_info.value.code == "invalid_grant"
    assert exc_info.value.description == "Bad Request"


def test_get_access_token_transport_error(oauth):
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderError) as exc_info:
        oauth.get_access_token({"code": "abc"}, {"transport": httpx.MockTransport(handler)})

    assert exc_info.value.code == "error"
    assert "connection refused" in exc_info.value.description


def test_get_sends_bearer_token(oauth):
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["authorization"] = request.headers.get("authorization", "")
        return httpx.Response(200, json={"sub": "123"})

    response = oauth.get(
        TokenResult(access_token="access-123", token_type="Bearer"),
        "https://www.googleapis.com/oauth2/v3/userinfo",
        transport=httpx.MockTransport(handler),
    )

    assert response.status_code == 200
    assert response.json() == {"sub": "123"}
    assert seen["authorization"] == "Bearer access-123"


def test_get_without_token_sends_no_authorization(oauth):
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["authorization"] = request.headers.get("authorization")
        seen["id_token"] = request.url.params.get("id_token")
        return httpx.Response(200, json={"aud": "client-1"})

    response = oauth.get(
        None,
        "https://www.googleapis.com/oauth2/v3/tokeninfo",
        params={"id_token": "t"},
        transport=httpx.MockTransport(handler),
    )

    assert response.json() == {"aud": "client-1"}
    assert seen == {"authorization": None, "id_token": "t"}
