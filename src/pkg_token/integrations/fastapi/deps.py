from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..common.token_factory import TokenService
from ...config.settings import DEFAULT_COOKIE_NAME
from ...domain.constants import WIRE_DELIMITER, TokenKind
from ...domain.entities import Token
from ...domain.exceptions import InvalidTokenError, KindMismatchError, TokenExpiredError

# Expose this so apps can plug it into dependencies if they want OpenAPI security
bearer_scheme = HTTPBearer(auto_error=False)


def _looks_like_signature(candidate: str) -> bool:
    parts = candidate.split(WIRE_DELIMITER)
    return len(parts) == 2 and all(parts)


@dataclass(slots=True)
class FastAPITokenAuth:
    """
    FastAPI integration for pkg_token, built on the framework-agnostic
    TokenService facade.

    Signatures are taken from the bearer header first, then from the
    `cookie_name` cookie. A header value that is not shaped like a
    `payload.tag` signature (e.g. a JWT from another system) is skipped
    so the cookie still gets a chance.

    With `bind_user_agent` the request's User-Agent header must match
    the one the token was issued to.
    """

    tokens: TokenService
    cookie_name: str = DEFAULT_COOKIE_NAME
    bind_user_agent: bool = False

    # ------------------------------------------------------------------ #
    # Base dependencies
    # ------------------------------------------------------------------ #

    async def get_current_token(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> Token:
        """Dependency: Require a valid token signed with the access key."""
        return self._verify(request, self._signature_from(request, credentials))

    async def get_optional_token(
            self,
            request: Request,
            credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    ) -> Token | None:
        """Dependency: Optional authentication."""
        signature = next(self._candidates(request, credentials), None)
        if signature is None:
            # no signature anywhere -> anonymous
            return None

        try:
            return self._verify(request, signature)
        except HTTPException:
            # bad signature -> treat as anonymous
            return None

    # ------------------------------------------------------------------ #
    # Dependency factories
    # ------------------------------------------------------------------ #

    def require_kind(self, kind: TokenKind) -> Callable:
        """
        Dependency factory: require a valid token of the given kind,
        checked against that kind's key.
        """

        async def dependency(
                request: Request,
                credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
        ) -> Token:
            signature = self._signature_from(request, credentials)
            return self._verify(request, signature, expected_kind=kind)

        return dependency

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _candidates(
            self,
            request: Request,
            credentials: Optional[HTTPAuthorizationCredentials],
    ) -> Iterator[str]:
        if credentials is not None:
            header_value = (credentials.credentials or "").strip()
            if _looks_like_signature(header_value):
                yield header_value

        cookie_value = (request.cookies.get(self.cookie_name) or "").strip()
        if _looks_like_signature(cookie_value):
            yield cookie_value

    def _signature_from(
            self,
            request: Request,
            credentials: Optional[HTTPAuthorizationCredentials],
    ) -> str:
        signature = next(self._candidates(request, credentials), None)
        if signature is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Not authenticated",
            )
        return signature

    def _verify(
            self,
            request: Request,
            signature: str,
            expected_kind: TokenKind | None = None,
    ) -> Token:
        user_agent = None
        if self.bind_user_agent:
            user_agent = request.headers.get("User-Agent", "")

        try:
            return self.tokens.verify(
                signature,
                expected_kind=expected_kind,
                expected_user_agent=user_agent,
            )
        except TokenExpiredError as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token expired",
            ) from exc
        except KindMismatchError as exc:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=str(exc),
            ) from exc
        except InvalidTokenError as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(exc),
            ) from exc
