from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ...domain.clock import system_clock
from ...domain.codec import canonical_codec
from ...domain.constants import FailurePolicy, TokenKind
from ...domain.entities import Token, verify_signature
from ...domain.exceptions import InvalidTokenError, KindMismatchError
from ...domain.ports import Clock, PayloadCodec, Signer
from ...domain.signer import default_signer
from ...domain.value_objects import Key

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class VerifySignatureUseCase:
    """
    Application use case:
    - Verify a wire signature (tag first, then expiry)
    - Optionally insist on a token kind and on the presenting user agent
    - Surface failures according to the configured FailurePolicy

    The domain always tells tamper and staleness apart; with
    FailurePolicy.OPAQUE callers only ever see a bare InvalidTokenError.
    """

    signer: Signer = field(default=default_signer)
    codec: PayloadCodec = field(default=canonical_codec)
    clock: Clock = field(default=system_clock)
    leeway_seconds: int = 0
    policy: FailurePolicy = FailurePolicy.DETAILED

    def execute(
            self,
            key: Key | bytes | str,
            signature: str,
            *,
            expected_kind: TokenKind | None = None,
            expected_user_agent: str | None = None,
    ) -> Token:
        """
        Returns:
            The verified Token.

        Raises:
            InvalidTokenError (or one of its subclasses under DETAILED)
        """
        try:
            token = verify_signature(
                key,
                signature,
                clock=self.clock,
                leeway=self.leeway_seconds,
                expected_user_agent=expected_user_agent,
                signer=self.signer,
                codec=self.codec,
            )
            if expected_kind is not None and token.kind is not expected_kind:
                raise KindMismatchError(
                    f"Expected a {expected_kind.value} token, got {token.kind.value}"
                )
        except InvalidTokenError as exc:
            logger.info("token verification failed: %s: %s", type(exc).__name__, exc)
            if self.policy is FailurePolicy.OPAQUE:
                raise InvalidTokenError("Invalid token") from None
            raise

        logger.debug("verified %s token %s for %r", token.kind.value, token.token_id, token.subject)
        return token
