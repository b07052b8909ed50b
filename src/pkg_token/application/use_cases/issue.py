from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ...domain.clock import system_clock
from ...domain.codec import canonical_codec
from ...domain.constants import (
    DEFAULT_ACCESS_TTL_SECONDS,
    DEFAULT_REFRESH_TTL_SECONDS,
    TokenKind,
)
from ...domain.entities import SignedToken, Token
from ...domain.ports import Clock, PayloadCodec, Signer
from ...domain.signer import default_signer
from ...domain.value_objects import Key

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IssueTokenUseCase:
    """
    Application use case:
    - Build a fresh Token for a subject (random id, TTL per kind)
    - Sign it with the caller's key

    The key is borrowed for the duration of the call and never stored.
    """

    signer: Signer = field(default=default_signer)
    codec: PayloadCodec = field(default=canonical_codec)
    clock: Clock = field(default=system_clock)
    access_ttl_seconds: int = DEFAULT_ACCESS_TTL_SECONDS
    refresh_ttl_seconds: int = DEFAULT_REFRESH_TTL_SECONDS

    def execute(
            self,
            key: Key | bytes | str,
            subject: str,
            *,
            kind: TokenKind = TokenKind.ACCESS,
            user_agent: str | None = None,
    ) -> SignedToken:
        """
        Raises:
            EncodingError if the resulting token cannot be encoded
        """
        token = Token.issue(
            subject,
            kind=kind,
            ttl_seconds=self._ttl_for(kind),
            user_agent=user_agent,
            clock=self.clock,
        )
        signed = token.sign(key, signer=self.signer, codec=self.codec)
        logger.debug(
            "issued %s token %s for %r, expires at %d",
            kind.value,
            token.token_id,
            token.subject,
            token.expires_at,
        )
        return signed

    def _ttl_for(self, kind: TokenKind) -> int:
        if kind is TokenKind.REFRESH:
            return self.refresh_ttl_seconds
        return self.access_ttl_seconds
