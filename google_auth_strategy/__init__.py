"""Google OAuth2 / OpenID Connect authentication strategy."""

__version__ = "0.1.0"
