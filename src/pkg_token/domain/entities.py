from __future__ import annotations

import uuid
from dataclasses import dataclass, field, fields
from typing import Optional

from .clock import system_clock
from .codec import canonical_codec
from .constants import (
    DEFAULT_ACCESS_TTL_SECONDS,
    DEFAULT_REFRESH_TTL_SECONDS,
    TokenKind,
)
from .exceptions import (
    EncodingError,
    TagMismatchError,
    TokenExpiredError,
    UserAgentMismatchError,
)
from .ports import Clock, PayloadCodec, Signer
from .signer import default_signer
from .value_objects import Key
from .wire import decode_signature, encode_signature


def _default_ttl(kind: TokenKind) -> int:
    if kind is TokenKind.REFRESH:
        return DEFAULT_REFRESH_TTL_SECONDS
    return DEFAULT_ACCESS_TTL_SECONDS


@dataclass(frozen=True, slots=True)
class Token:
    """
    Claims carried by a signed token, including its expiry.

    Expiry is deliberately not checked here: a token can be built and
    signed while already expired. Liveness is only decided by verify().
    """
    subject: str
    issued_at: int
    expires_at: int
    kind: TokenKind = TokenKind.ACCESS
    token_id: Optional[str] = None
    user_agent: Optional[str] = None

    def __post_init__(self) -> None:
        if (
            isinstance(self.issued_at, int)
            and isinstance(self.expires_at, int)
            and self.expires_at < self.issued_at
        ):
            raise EncodingError(
                f"expires_at ({self.expires_at}) is before issued_at ({self.issued_at})"
            )

    @classmethod
    def issue(
        cls,
        subject: str,
        *,
        kind: TokenKind = TokenKind.ACCESS,
        ttl_seconds: int | None = None,
        user_agent: str | None = None,
        clock: Clock | None = None,
    ) -> Token:
        """Build a fresh token with a random id, valid for `ttl_seconds`."""
        issued_at = (clock or system_clock).now()
        ttl = _default_ttl(kind) if ttl_seconds is None else ttl_seconds
        return cls(
            subject=subject,
            issued_at=issued_at,
            expires_at=issued_at + ttl,
            kind=kind,
            token_id=uuid.uuid4().hex,
            user_agent=user_agent,
        )

    # ------------------------------------------------------------------ #
    # Operations
    # ------------------------------------------------------------------ #

    def equal(self, other: Token) -> bool:
        """Field-by-field identity; unlike ==, `True` and `1.0` never match `1`."""
        if not isinstance(other, Token):
            return False
        return all(
            type(getattr(self, f.name)) is type(getattr(other, f.name))
            and getattr(self, f.name) == getattr(other, f.name)
            for f in fields(self)
        )

    def sign(
        self,
        key: Key | bytes | str,
        *,
        signer: Signer | None = None,
        codec: PayloadCodec | None = None,
    ) -> SignedToken:
        """
        Encode and tag this token.

        Raises:
            EncodingError if the token's fields are structurally invalid.
        """
        secret = Key.coerce(key).value
        payload = (codec or canonical_codec).encode(self)
        tag = (signer or default_signer).tag(secret, payload)
        return SignedToken(payload=payload, tag=tag)

    def verify(
        self,
        key: Key | bytes | str,
        signature: str,
        *,
        clock: Clock | None = None,
        expected_user_agent: str | None = None,
        leeway: int = 0,
        signer: Signer | None = None,
        codec: PayloadCodec | None = None,
    ) -> Token:
        """
        Verify an incoming signature string with the shared key.

        The signature does not have to carry this very token; `self` only
        acts as the holder of the verification call. See verify_signature().
        """
        return verify_signature(
            key,
            signature,
            clock=clock,
            leeway=leeway,
            expected_user_agent=expected_user_agent,
            signer=signer,
            codec=codec,
        )


@dataclass(frozen=True, slots=True)
class SignedToken:
    """
    Canonical bytes of a token plus their authentication tag.
    """
    payload: bytes = field(repr=False)
    tag: bytes = field(repr=False)

    @classmethod
    def from_signature(cls, signature: str) -> SignedToken:
        """
        Raises:
            MalformedSignatureError
        """
        payload, tag = decode_signature(signature)
        return cls(payload=payload, tag=tag)

    def signature(self) -> str:
        return encode_signature(self.payload, self.tag)

    def parse(self, codec: PayloadCodec | None = None) -> Token:
        """
        Decode the carried token WITHOUT checking tag or expiry.

        Useful to inspect what a signature claims before (or without)
        trusting it. Raises MalformedPayloadError for garbage payloads.
        """
        return (codec or canonical_codec).decode(self.payload)


def verify_signature(
    key: Key | bytes | str,
    signature: str,
    *,
    clock: Clock | None = None,
    expected_user_agent: str | None = None,
    leeway: int = 0,
    signer: Signer | None = None,
    codec: PayloadCodec | None = None,
) -> Token:
    """
    Check authenticity, then freshness, of a wire signature string.

    With `expected_user_agent` set, the token must also have been issued to
    that exact user agent.

    Returns:
        The verified Token.

    Raises:
        MalformedSignatureError  the wire string cannot be decoded
        TagMismatchError         tampered content or wrong key
        MalformedPayloadError    authentic but undecodable payload
        TokenExpiredError        authentic, but now > expires_at + leeway
        UserAgentMismatchError   authentic and fresh, but bound to another user agent
    """
    secret = Key.coerce(key).value
    signed = SignedToken.from_signature(signature)

    if not (signer or default_signer).verify(secret, signed.payload, signed.tag):
        raise TagMismatchError("Token signature does not match")

    token = signed.parse(codec)
    now = (clock or system_clock).now()
    if now > token.expires_at + leeway:
        raise TokenExpiredError(
            f"Token expired at {token.expires_at}, now is {now}"
        )
    if expected_user_agent is not None and token.user_agent != expected_user_agent:
        raise UserAgentMismatchError("Token was issued to a different user agent")
    return token
