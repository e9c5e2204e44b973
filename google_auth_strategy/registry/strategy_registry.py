from dataclasses import dataclass, field
from typing import Any, Optional

from google_auth_strategy.config import Config, get_config
from google_auth_strategy.models.auth import RequestOptions
from google_auth_strategy.models.errors import StrategyRegistrationError
from google_auth_strategy.strategy.base import Strategy
from google_auth_strategy.strategy.google import GoogleStrategy
from google_auth_strategy.strategy.oauth import GoogleOAuth


@dataclass(frozen=True)
class RegisteredStrategy:
    """A strategy together with the request options the host hands it on every request."""

    strategy: Strategy
    request_options: RequestOptions = field(default_factory=RequestOptions)


class StrategyRegistry:
    """
    Manages the registration and retrieval of authentication strategies by provider name.
    Implemented as a singleton to ensure a single, consistent registry throughout the application.
    """
    _instance: Optional['StrategyRegistry'] = None
    _registered: dict[str, RegisteredStrategy] = {}

    def __new__(cls) -> 'StrategyRegistry':
        if cls._instance is None:
            cls._instance = super(StrategyRegistry, cls).__new__(cls)
            cls._registered = {}
        return cls._instance

    def register(
        self,
        name: str,
        strategy: Strategy,
        request_options: RequestOptions | None = None,
    ) -> None:
        """
        Registers a strategy under a provider name.

        Args:
            name: Provider name used in the /auth/{provider} routes.
            strategy: An instance of a class inheriting from Strategy.
            request_options: Client credentials overriding the strategy's static ones.

        Raises:
            StrategyRegistrationError: If the strategy is invalid or the name is taken.
        """
        self._validate_strategy_instance(strategy)
        self._validate_name(name)

        self._registered[name] = RegisteredStrategy(
            strategy=strategy,
            request_options=request_options or RequestOptions(),
        )

    def _validate_strategy_instance(self, strategy: Any) -> None:
        """Checks if the provided object is an instance of Strategy."""
        if not isinstance(strategy, Strategy):
            raise StrategyRegistrationError(
                f"Provided object is not an instance of Strategy: {type(strategy)}"
            )

    def _validate_name(self, name: Any) -> None:
        if not name or not isinstance(name, str):
            raise StrategyRegistrationError("Strategy must be registered under a non-empty string name.")
        if name in self._registered:
            raise StrategyRegistrationError(f"Strategy with name '{name}' already registered.")

    def get(self, name: str) -> Optional[RegisteredStrategy]:
        """Retrieves a registered strategy by provider name, or None."""
        return self._registered.get(name)

    def names(self) -> list[str]:
        """Returns the provider names of all registered strategies."""
        return list(self._registered.keys())

    def _clear(self) -> None:
        """
        Clears all registered strategies.
        Primarily for testing purposes to reset the singleton state.
        """
        self._registered.clear()


def register_google_strategy(config: Config | None = None, name: str = "google") -> GoogleStrategy:
    """Builds the Google strategy from configuration and registers it."""
    config = config or get_config()
    strategy = GoogleStrategy(
        options=config.strategy_options,
        oauth=GoogleOAuth(config.oauth_config),
        provider_name=name,
    )
    StrategyRegistry().register(name, strategy)
    return strategy
