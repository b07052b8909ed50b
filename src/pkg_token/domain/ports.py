from __future__ import annotations

from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from .entities import Token


class Signer(Protocol):
    """
    Port for computing a keyed authentication tag over canonical bytes.

    Implementations must be deterministic and side-effect free.
    """

    def tag(self, key: bytes, payload: bytes) -> bytes:
        ...

    def verify(self, key: bytes, payload: bytes, tag: bytes) -> bool:
        """
        Recompute the tag for `payload` and compare it with `tag`.

        Must compare in constant time.
        """
        ...


class PayloadCodec(Protocol):
    """Port for turning a Token into canonical bytes and back."""

    def encode(self, token: "Token") -> bytes:
        """
        Raises:
          - EncodingError
        """
        ...

    def decode(self, payload: bytes) -> "Token":
        """
        Raises:
          - MalformedPayloadError
        """
        ...


class Clock(Protocol):
    """Source of the current time, in whole unix seconds."""

    def now(self) -> int:
        ...
