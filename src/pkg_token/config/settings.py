from __future__ import annotations

from dataclasses import dataclass, field

from ..domain.constants import (
    DEFAULT_ACCESS_TTL_SECONDS,
    DEFAULT_REFRESH_TTL_SECONDS,
    FailurePolicy,
)
from ..domain.value_objects import Key

DEFAULT_COOKIE_NAME = "session_token"


@dataclass(slots=True)
class TokenSettings:
    """
    Signing / verification settings.

    Host code decides how to construct this (env, config file, etc.).
    """
    secret: str = field(repr=False)
    # refresh tokens fall back to `secret` when unset
    refresh_secret: str | None = field(default=None, repr=False)
    access_ttl_seconds: int = DEFAULT_ACCESS_TTL_SECONDS
    refresh_ttl_seconds: int = DEFAULT_REFRESH_TTL_SECONDS
    leeway_seconds: int = 0
    failure_policy: FailurePolicy = FailurePolicy.DETAILED

    # Transport wiring
    cookie_name: str = DEFAULT_COOKIE_NAME

    @property
    def key(self) -> Key:
        return Key(self.secret)

    @property
    def refresh_key(self) -> Key:
        return Key(self.refresh_secret or self.secret)
