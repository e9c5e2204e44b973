"""Authentication endpoints driving registered strategies.

`GET /auth/{provider}` redirects to the provider; `/auth/{provider}/callback`
completes the login and answers with the normalized AuthResult, or with the
list of errors the strategy collected.
"""

from typing import Any
from uuid import uuid4

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, RedirectResponse
from starlette import status
from starlette.concurrency import run_in_threadpool

from google_auth_strategy.registry.strategy_registry import RegisteredStrategy, StrategyRegistry
from google_auth_strategy.strategy.context import RequestContext
from google_auth_strategy.utils.logging import get_logger

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = get_logger(__name__)


def _lookup(provider: str) -> RegisteredStrategy:
    entry = StrategyRegistry().get(provider)
    if entry is None:
        raise HTTPException(status.HTTP_404_NOT_FOUND, f"Unknown provider '{provider}'")
    return entry


def build_context(
    request: Request, provider: str, params: dict[str, Any], entry: RegisteredStrategy
) -> RequestContext:
    """Translates an incoming request into a fresh RequestContext."""
    return RequestContext(
        params=params,
        scheme=request.url.scheme,
        host=request.url.hostname or "localhost",
        port=request.url.port,
        callback_path=f"{router.prefix}/{provider}/callback",
        headers=dict(request.headers),
        request_options=entry.request_options,
    )


@router.get("/{provider}")
async def request_phase(provider: str, request: Request) -> RedirectResponse:
    """Redirect the user to the provider's authorization page."""
    entry = _lookup(provider)
    context = build_context(request, provider, dict(request.query_params), entry)

    url = entry.strategy.request_phase(context)
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@router.api_route("/{provider}/callback", methods=["GET", "POST"])
async def callback_phase(provider: str, request: Request) -> JSONResponse:
    """
    Complete the login from the provider's callback.

    Accepts an authorization `code` or an `id_token`, in the query string or a
    form body. The strategy blocks on network calls, so it runs in the threadpool.
    """
    entry = _lookup(provider)
    bound_logger = logger.bind(provider=provider, correlation_id=str(uuid4()))

    params: dict[str, Any] = dict(request.query_params)
    if request.method == "POST":
        form = await request.form()
        params.update({k: v for k, v in form.items() if isinstance(v, str)})

    context = build_context(request, provider, params, entry)
    result = await run_in_threadpool(entry.strategy.callback_phase, context)

    if result is None:
        bound_logger.warning("auth_callback_rejected", errors=[e.key for e in context.errors])
        return JSONResponse(
            {"errors": [e.model_dump(mode="json") for e in context.errors]},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    bound_logger.info("auth_callback_completed", uid=result.uid)
    return JSONResponse(result.model_dump(mode="json"))
