from __future__ import annotations

from dataclasses import dataclass, field

from ...application.use_cases.issue import IssueTokenUseCase
from ...application.use_cases.verify import VerifySignatureUseCase
from ...config.settings import TokenSettings
from ...domain.clock import system_clock
from ...domain.constants import (
    DEFAULT_ACCESS_TTL_SECONDS,
    DEFAULT_REFRESH_TTL_SECONDS,
    FailurePolicy,
    TokenKind,
)
from ...domain.entities import SignedToken, Token
from ...domain.ports import Clock
from ...domain.value_objects import Key


@dataclass(slots=True)
class TokenService:
    """
    Framework-agnostic token facade bound to the shared keys.

    Access tokens are signed with `key`, refresh tokens with `refresh_key`
    (or `key` when no separate refresh key is configured). Integrations
    (FastAPI, the CLI, etc.) adapt this to their own dependency / command
    systems.
    """

    key: Key = field(repr=False)
    issue_use_case: IssueTokenUseCase
    verify_use_case: VerifySignatureUseCase
    refresh_key: Key | None = field(default=None, repr=False)

    def key_for(self, kind: TokenKind) -> Key:
        if kind is TokenKind.REFRESH and self.refresh_key is not None:
            return self.refresh_key
        return self.key

    # --- Core operations --------------------------------------------------

    def issue(
            self,
            subject: str,
            *,
            kind: TokenKind = TokenKind.ACCESS,
            user_agent: str | None = None,
    ) -> str:
        """Subject -> fresh wire signature string."""
        signed = self.issue_use_case.execute(
            self.key_for(kind), subject, kind=kind, user_agent=user_agent
        )
        return signed.signature()

    def sign(self, token: Token) -> str:
        """Existing Token -> wire signature string (expiry is not checked)."""
        return token.sign(
            self.key_for(token.kind),
            signer=self.issue_use_case.signer,
            codec=self.issue_use_case.codec,
        ).signature()

    def verify(
            self,
            signature: str,
            *,
            expected_kind: TokenKind | None = None,
            expected_user_agent: str | None = None,
    ) -> Token:
        """
        Wire signature string -> verified Token (or raise InvalidTokenError).

        Without `expected_kind` the signature is checked against the access
        key, so refresh tokens under a separate key need
        `expected_kind=TokenKind.REFRESH`.
        """
        return self.verify_use_case.execute(
            self.key_for(expected_kind or TokenKind.ACCESS),
            signature,
            expected_kind=expected_kind,
            expected_user_agent=expected_user_agent,
        )

    def inspect(self, signature: str) -> Token:
        """
        Wire signature string -> Token WITHOUT verifying tag or expiry.

        Never use the result for access decisions.
        """
        return SignedToken.from_signature(signature).parse(self.verify_use_case.codec)


def create_token_service(
        *,
        secret: Key | bytes | str,
        refresh_secret: Key | bytes | str | None = None,
        access_ttl_seconds: int = DEFAULT_ACCESS_TTL_SECONDS,
        refresh_ttl_seconds: int = DEFAULT_REFRESH_TTL_SECONDS,
        leeway_seconds: int = 0,
        failure_policy: FailurePolicy = FailurePolicy.DETAILED,
        clock: Clock | None = None,
) -> TokenService:
    """
    High-level factory: shared secret(s) + policy -> TokenService.

    - wires IssueTokenUseCase + VerifySignatureUseCase on the same clock
    - returns a TokenService facade holding the keys
    """
    clock = clock or system_clock

    issue_uc = IssueTokenUseCase(
        clock=clock,
        access_ttl_seconds=access_ttl_seconds,
        refresh_ttl_seconds=refresh_ttl_seconds,
    )
    verify_uc = VerifySignatureUseCase(
        clock=clock,
        leeway_seconds=leeway_seconds,
        policy=failure_policy,
    )

    return TokenService(
        key=Key.coerce(secret),
        refresh_key=Key.coerce(refresh_secret) if refresh_secret is not None else None,
        issue_use_case=issue_uc,
        verify_use_case=verify_uc,
    )


def create_token_service_from_settings(
        settings: TokenSettings,
        *,
        clock: Clock | None = None,
) -> TokenService:
    return create_token_service(
        secret=settings.key,
        refresh_secret=settings.refresh_key,
        access_ttl_seconds=settings.access_ttl_seconds,
        refresh_ttl_seconds=settings.refresh_ttl_seconds,
        leeway_seconds=settings.leeway_seconds,
        failure_policy=settings.failure_policy,
        clock=clock,
    )
