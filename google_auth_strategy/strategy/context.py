"""Per-request state threaded through every strategy call."""

from dataclasses import dataclass, field, replace
from typing import Any

from google_auth_strategy.models.auth import RequestOptions
from google_auth_strategy.models.errors import AuthError

DEFAULT_PORTS = {"http": 80, "https": 443}


@dataclass
class RequestContext:
    """
    Everything a strategy may read or write while handling one request.

    `private` is strategy-scoped storage that lives between the callback and the
    projection calls; `errors` collects failures for the host to inspect.
    """

    params: dict[str, Any] = field(default_factory=dict)
    scheme: str = "https"
    host: str = "localhost"
    port: int | None = None
    callback_path: str = "/auth/google/callback"
    headers: dict[str, str] = field(default_factory=dict)
    request_options: RequestOptions = field(default_factory=RequestOptions)
    private: dict[str, Any] = field(default_factory=dict)
    errors: list[AuthError] = field(default_factory=list)
    redirect_url: str | None = None

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    def put_private(self, key: str, value: Any) -> None:
        self.private[key] = value

    def set_errors(self, errors: list[AuthError]) -> None:
        self.errors.extend(errors)

    def redirect(self, url: str) -> None:
        self.redirect_url = url

    def with_proto_scheme(self, proto_scheme: str | None) -> "RequestContext":
        """
        Returns a copy that reports `proto_scheme` as its scheme, with a matching
        x-forwarded-proto header. The original context is left untouched.
        """
        if proto_scheme is None:
            return self
        headers = {**self.headers, "x-forwarded-proto": str(proto_scheme)}
        return replace(self, scheme=str(proto_scheme), headers=headers)

    def callback_url(self) -> str:
        """Absolute URL the provider should redirect back to."""
        port = ""
        if self.port is not None and DEFAULT_PORTS.get(self.scheme) != self.port:
            port = f":{self.port}"
        return f"{self.scheme}://{self.host}{port}{self.callback_path}"
