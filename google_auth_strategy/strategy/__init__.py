"""Authentication strategies and their request context."""

from google_auth_strategy.strategy.base import Strategy
from google_auth_strategy.strategy.context import RequestContext
from google_auth_strategy.strategy.google import GoogleStrategy
from google_auth_strategy.strategy.oauth import GoogleOAuth

__all__ = ["GoogleOAuth", "GoogleStrategy", "RequestContext", "Strategy"]
