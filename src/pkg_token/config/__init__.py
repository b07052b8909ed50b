"""
pkg_token.config

- TokenSettings: signing key, TTLs, leeway, failure policy, cookie name.
- settings_from_env: build TokenSettings from PKG_TOKEN_* variables.
"""

from __future__ import annotations

from .env import settings_from_env
from .settings import TokenSettings

__all__ = ["TokenSettings", "settings_from_env"]
