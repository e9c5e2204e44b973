from abc import ABC, abstractmethod
from typing import Any

from google_auth_strategy.models.auth import AuthResult, Credentials, Extra, Info
from google_auth_strategy.strategy.context import RequestContext
from google_auth_strategy.utils.logging import get_logger

logger = get_logger(__name__)


class Strategy(ABC):
    """
    Abstract Base Class for all authentication strategies.

    A host drives a strategy through two phases: `request_phase` sends the user
    to the provider, `callback_phase` turns the provider's answer into an
    AuthResult. Failures never raise; they are collected on the RequestContext.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The provider name the strategy answers to."""
        raise NotImplementedError

    @abstractmethod
    def handle_request(self, context: RequestContext) -> None:
        """Sets `context.redirect_url` to the provider's authorization URL."""
        raise NotImplementedError

    @abstractmethod
    def handle_callback(self, context: RequestContext) -> None:
        """
        Processes the provider callback, storing token and user in `context.private`
        or appending to `context.errors`.
        """
        raise NotImplementedError

    @abstractmethod
    def handle_cleanup(self, context: RequestContext) -> None:
        """Clears whatever `handle_callback` stored on the context."""
        raise NotImplementedError

    @abstractmethod
    def uid(self, context: RequestContext) -> Any:
        raise NotImplementedError

    @abstractmethod
    def info(self, context: RequestContext) -> Info:
        raise NotImplementedError

    @abstractmethod
    def credentials(self, context: RequestContext) -> Credentials:
        raise NotImplementedError

    @abstractmethod
    def extra(self, context: RequestContext) -> Extra:
        raise NotImplementedError

    def request_phase(self, context: RequestContext) -> str:
        """Runs `handle_request` and returns the URL to redirect the user to."""
        self.handle_request(context)
        if context.redirect_url is None:
            raise RuntimeError(f"Strategy '{self.name}' did not produce a redirect")
        return context.redirect_url

    def callback_phase(self, context: RequestContext) -> AuthResult | None:
        """
        Runs the callback and builds the AuthResult.

        Returns None when the callback collected errors; the host reads them from
        `context.errors`. Cleanup always runs before returning.
        """
        try:
            self.handle_callback(context)
            if context.failed:
                logger.info(
                    "auth_callback_failed",
                    provider=self.name,
                    errors=[e.key for e in context.errors],
                )
                return None

            result = AuthResult(
                provider=self.name,
                strategy=type(self).__name__,
                uid=self.uid(context),
                credentials=self.credentials(context),
                info=self.info(context),
                extra=self.extra(context),
            )
            logger.info("auth_callback_succeeded", provider=self.name)
            return result
        finally:
            self.handle_cleanup(context)
