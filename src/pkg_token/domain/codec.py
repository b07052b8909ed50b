from __future__ import annotations

import json
from typing import Any, Mapping

from .constants import TokenKind
from .exceptions import EncodingError, MalformedPayloadError

# Field order of a Token; the canonical form sorts keys anyway, this list is
# what decode() insists on finding.
_FIELDS = ("subject", "issued_at", "expires_at", "kind", "token_id", "user_agent")
_OPTIONAL_STRINGS = ("token_id", "user_agent")
_TIMESTAMPS = ("issued_at", "expires_at")


def _is_timestamp(value: Any) -> bool:
    # bool is an int subclass, but True is not a timestamp
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class CanonicalCodec:
    """
    Canonical JSON encoding of a Token.

    Compact separators, sorted keys and ASCII-only output make the bytes a
    pure function of the token's fields, which keeps signatures stable
    across processes. Every field is always present (null for unset
    optionals) so two different tokens can never share an encoding.
    """

    def encode(self, token) -> bytes:
        self._check_fields(token)
        document = {
            "subject": token.subject,
            "issued_at": token.issued_at,
            "expires_at": token.expires_at,
            "kind": token.kind.value,
            "token_id": token.token_id,
            "user_agent": token.user_agent,
        }
        return json.dumps(
            document,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=True,
            allow_nan=False,
        ).encode("ascii")

    def decode(self, payload: bytes):
        # imported here: entities depends on this module for its defaults
        from .entities import Token

        try:
            document = json.loads(bytes(payload).decode("utf-8"))
        except (UnicodeDecodeError, ValueError, TypeError, RecursionError) as exc:
            raise MalformedPayloadError(f"Payload is not valid JSON: {exc}") from exc

        claims = self._check_document(document)
        try:
            return Token(
                subject=claims["subject"],
                issued_at=claims["issued_at"],
                expires_at=claims["expires_at"],
                kind=TokenKind(claims["kind"]),
                token_id=claims["token_id"],
                user_agent=claims["user_agent"],
            )
        except EncodingError as exc:
            raise MalformedPayloadError(str(exc)) from exc

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _check_fields(token) -> None:
        if not isinstance(token.subject, str) or not token.subject:
            raise EncodingError("subject must be a non-empty string")
        for name in _TIMESTAMPS:
            if not _is_timestamp(getattr(token, name)):
                raise EncodingError(f"{name} must be a non-negative integer")
        if not isinstance(token.kind, TokenKind):
            raise EncodingError(f"kind must be a TokenKind, got {token.kind!r}")
        for name in _OPTIONAL_STRINGS:
            value = getattr(token, name)
            if value is not None and not isinstance(value, str):
                raise EncodingError(f"{name} must be a string or None")

    @staticmethod
    def _check_document(document: Any) -> Mapping[str, Any]:
        if not isinstance(document, dict):
            raise MalformedPayloadError("Payload must be a JSON object")

        missing = [name for name in _FIELDS if name not in document]
        extra = sorted(set(document) - set(_FIELDS))
        if missing or extra:
            raise MalformedPayloadError(
                f"Unexpected payload fields: missing={missing}, extra={extra}"
            )

        if not isinstance(document["subject"], str) or not document["subject"]:
            raise MalformedPayloadError("subject must be a non-empty string")
        for name in _TIMESTAMPS:
            if not _is_timestamp(document[name]):
                raise MalformedPayloadError(f"{name} must be a non-negative integer")
        kind = document["kind"]
        if not isinstance(kind, str) or kind not in {k.value for k in TokenKind}:
            raise MalformedPayloadError(f"Unknown token kind: {kind!r}")
        for name in _OPTIONAL_STRINGS:
            value = document[name]
            if value is not None and not isinstance(value, str):
                raise MalformedPayloadError(f"{name} must be a string or null")

        return document


canonical_codec = CanonicalCodec()
