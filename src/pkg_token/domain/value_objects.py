# src/pkg_token/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass, field

from .exceptions import EncodingError


# --- Secret value objects -------------------------------------------------


@dataclass(frozen=True, slots=True)
class Key:
    """
    Shared HMAC secret.

    Accepts bytes or text (text is UTF-8 encoded). The raw value is kept
    out of repr() so a Key never ends up in logs or tracebacks.
    """
    value: bytes = field(repr=False)

    def __init__(self, value: bytes | str) -> None:
        if isinstance(value, str):
            value = value.encode("utf-8")
        if not isinstance(value, (bytes, bytearray)):
            raise EncodingError(f"Key must be bytes or str, got {type(value).__name__}")
        if not value:
            raise EncodingError("Key must not be empty")
        object.__setattr__(self, "value", bytes(value))

    @classmethod
    def coerce(cls, value: Key | bytes | str) -> Key:
        """Return `value` as a Key, wrapping raw bytes / text if needed."""
        if isinstance(value, Key):
            return value
        return cls(value)

    def __bytes__(self) -> bytes:
        return self.value
