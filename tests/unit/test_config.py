"""Unit tests for the configuration module."""

import pytest
from pydantic import ValidationError

from google_auth_strategy.config import Config, get_config, parse_allowed_client_ids
from google_auth_strategy.models.auth import DEFAULT_USERINFO_ENDPOINT, SystemEnv


@pytest.fixture(autouse=True)
def clear_config_cache() -> None:
    """Clear the config cache before and after each test."""
    get_config.cache_clear()
    yield
    get_config.cache_clear()


def test_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that the Config class loads default values correctly."""
    monkeypatch.delenv("ENVIRONMENT", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    config = Config(
        google_client_id="id",
        google_client_secret="secret",
        _env_file=None,  # Disable .env file loading for isolated test
    )
    assert config.server_host == "0.0.0.0"
    assert config.server_port == 4000
    assert config.log_level == "INFO"
    assert config.environment == "development"

    options = config.strategy_options
    assert options.uid_field == "sub"
    assert options.default_scope == "email"
    assert options.hd is None
    assert options.userinfo_endpoint == DEFAULT_USERINFO_ENDPOINT
    assert options.allowed_client_ids == []
    assert options.proto_scheme is None


def test_config_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that environment variables override default values."""
    monkeypatch.setenv("SERVER_PORT", "9000")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("GOOGLE_CLIENT_ID", "env-client")
    monkeypatch.setenv("GOOGLE_CLIENT_SECRET", "env-secret")
    monkeypatch.setenv("GOOGLE_DEFAULT_SCOPE", "email profile")
    monkeypatch.setenv("GOOGLE_HD", "example.com")
    monkeypatch.setenv("GOOGLE_UID_FIELD", "email")
    monkeypatch.setenv("GOOGLE_ALLOWED_CLIENT_IDS", "client-1:client-2")
    monkeypatch.setenv("GOOGLE_INCLUDE_GRANTED_SCOPES", "true")
    monkeypatch.setenv("GOOGLE_PROTO_SCHEME", "https")

    config = get_config()

    assert config.server_port == 9000
    assert config.log_level == "DEBUG"
    assert config.oauth_config.client_id == "env-client"
    assert config.oauth_config.client_secret.get_secret_value() == "env-secret"

    options = config.strategy_options
    assert options.default_scope == "email profile"
    assert options.hd == "example.com"
    assert options.uid_field == "email"
    assert options.allowed_client_ids == ["client-1", "client-2"]
    assert options.include_granted_scopes is True
    assert options.proto_scheme == "https"


def test_userinfo_endpoint_env_indirection(monkeypatch: pytest.MonkeyPatch) -> None:
    config = Config(
        google_client_id="id",
        google_client_secret="secret",
        google_userinfo_endpoint="https://fallback.example.com/me",
        google_userinfo_endpoint_env="USERINFO_URL",
        _env_file=None,
    )

    assert config.strategy_options.userinfo_endpoint == SystemEnv(
        varname="USERINFO_URL", default="https://fallback.example.com/me"
    )


def test_config_missing_required_fields(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that validation fails if required fields are missing."""
    monkeypatch.delenv("GOOGLE_CLIENT_ID", raising=False)
    monkeypatch.delenv("GOOGLE_CLIENT_SECRET", raising=False)
    with pytest.raises(ValidationError) as excinfo:
        Config(_env_file=None)  # Disable .env file loading to test required fields
    errors = excinfo.value.errors()
    assert len(errors) == 2
    error_fields = {error["loc"][0] for error in errors}
    assert "google_client_id" in error_fields
    assert "google_client_secret" in error_fields


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (None, []),
        ("", []),
        ("client-1", ["client-1"]),
        ("client-1:client-2", ["client-1", "client-2"]),
        (":client-1::client-2:", ["client-1", "client-2"]),
    ],
)
def test_parse_allowed_client_ids(value, expected) -> None:
    assert parse_allowed_client_ids(value) == expected


def test_get_config_is_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that the get_config function caches its result."""
    monkeypatch.delenv("SERVER_PORT", raising=False)
    config1 = get_config()
    config2 = get_config()
    assert config1 is config2

    monkeypatch.setenv("SERVER_PORT", "5000")
    # The config should not change because it's cached
    config3 = get_config()
    assert config3.server_port == 4000
    assert config1 is config3

    # The cache can be cleared for new config to be loaded.
    get_config.cache_clear()
    config4 = get_config()
    assert config4.server_port == 5000
    assert config1 is not config4
