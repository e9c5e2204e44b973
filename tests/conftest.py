import os

import pytest
from pydantic import SecretStr

from google_auth_strategy.models.auth import GoogleOAuthConfig, StrategyOptions
from google_auth_strategy.strategy.context import RequestContext
from google_auth_strategy.strategy.google import GoogleStrategy
from google_auth_strategy.strategy.oauth import GoogleOAuth


def pytest_configure(config):
    """
    Loads a local .env if present and sets the environment variables the
    application configuration requires.
    """
    from dotenv import load_dotenv

    load_dotenv()
    os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
    os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")


@pytest.fixture
def oauth_config() -> GoogleOAuthConfig:
    return GoogleOAuthConfig(client_id="static-client", client_secret=SecretStr("static-secret"))


@pytest.fixture
def mock_oauth(oauth_config, mocker):
    """
    GoogleOAuth double: URL building is real (it is pure), every network-facing
    method is a mock the test configures.
    """
    oauth = mocker.MagicMock(spec=GoogleOAuth)
    oauth.config = oauth_config
    oauth.authorize_url.side_effect = GoogleOAuth(oauth_config).authorize_url
    return oauth


@pytest.fixture
def make_strategy(mock_oauth):
    """Factory fixture building a GoogleStrategy with the given option overrides."""

    def _factory(**option_overrides) -> GoogleStrategy:
        return GoogleStrategy(StrategyOptions(**option_overrides), mock_oauth)

    return _factory


@pytest.fixture
def make_context():
    """Factory fixture building a RequestContext for app.example.com."""

    def _factory(**fields) -> RequestContext:
        fields.setdefault("host", "app.example.com")
        return RequestContext(**fields)

    return _factory

