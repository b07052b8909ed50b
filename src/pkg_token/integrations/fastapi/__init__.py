"""

from pkg_token.integrations.fastapi import create_fastapi_token_auth
from app.config import settings  # your own settings

token_auth = create_fastapi_token_auth(secret=settings.TOKEN_SECRET)

get_current_token = token_auth.get_current_token
get_optional_token = token_auth.get_optional_token
require_refresh = token_auth.require_kind(TokenKind.REFRESH)


"""
from __future__ import annotations

from .deps import FastAPITokenAuth, bearer_scheme
from ..common.token_factory import TokenService, create_token_service
from ...config.settings import DEFAULT_COOKIE_NAME
from ...domain.constants import FailurePolicy


def create_fastapi_token_auth(
    *,
    secret: str | bytes,
    refresh_secret: str | bytes | None = None,
    leeway_seconds: int = 0,
    failure_policy: FailurePolicy = FailurePolicy.DETAILED,
    cookie_name: str = DEFAULT_COOKIE_NAME,
    bind_user_agent: bool = False,
) -> FastAPITokenAuth:
    """
    High-level helper for FastAPI apps:

    - Creates a TokenService bound to the shared secret(s)
    - Wraps it in FastAPITokenAuth, exposing dependencies like:

        token_auth.get_current_token
        token_auth.get_optional_token
        token_auth.require_kind(...)
    """
    tokens: TokenService = create_token_service(
        secret=secret,
        refresh_secret=refresh_secret,
        leeway_seconds=leeway_seconds,
        failure_policy=failure_policy,
    )
    return FastAPITokenAuth(
        tokens=tokens,
        cookie_name=cookie_name,
        bind_user_agent=bind_user_agent,
    )


__all__ = [
    "FastAPITokenAuth",
    "bearer_scheme",
    "create_fastapi_token_auth",
]
