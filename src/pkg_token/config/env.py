from __future__ import annotations

import os

from ..domain.constants import FailurePolicy
from .settings import TokenSettings


def settings_from_env() -> TokenSettings:
    def _bool(key: str, default: bool = False) -> bool:
        raw = os.getenv(key)
        if raw is None:
            return default
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}

    def _int(key: str, default: int) -> int:
        raw = os.getenv(key)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw.strip())
        except ValueError as exc:
            raise RuntimeError(f"{key} must be an integer, got {raw!r}") from exc
        if value < 0:
            raise RuntimeError(f"{key} must not be negative, got {value}")
        return value

    secret = os.getenv("PKG_TOKEN_SECRET")
    if not secret:
        raise RuntimeError("Missing token settings: PKG_TOKEN_SECRET")

    defaults = TokenSettings(secret=secret)
    policy = FailurePolicy.OPAQUE if _bool("PKG_TOKEN_OPAQUE_ERRORS") else FailurePolicy.DETAILED

    return TokenSettings(
        secret=secret,
        refresh_secret=os.getenv("PKG_TOKEN_REFRESH_SECRET") or None,
        access_ttl_seconds=_int("PKG_TOKEN_ACCESS_TTL", defaults.access_ttl_seconds),
        refresh_ttl_seconds=_int("PKG_TOKEN_REFRESH_TTL", defaults.refresh_ttl_seconds),
        leeway_seconds=_int("PKG_TOKEN_LEEWAY", defaults.leeway_seconds),
        failure_policy=policy,
        cookie_name=os.getenv("PKG_TOKEN_COOKIE_NAME") or defaults.cookie_name,
    )
