from __future__ import annotations

import binascii
import re
from typing import Tuple

from jwt.utils import base64url_decode, base64url_encode

from .constants import WIRE_DELIMITER
from .exceptions import MalformedSignatureError

_SEGMENT = re.compile(r"[A-Za-z0-9_-]+")


def _encode_segment(data: bytes) -> str:
    return base64url_encode(data).decode("ascii")


def _decode_segment(segment: str, name: str) -> bytes:
    if not _SEGMENT.fullmatch(segment):
        raise MalformedSignatureError(f"{name} segment is empty or not base64url")
    try:
        data = base64url_decode(segment)
    except (binascii.Error, ValueError) as exc:
        raise MalformedSignatureError(f"{name} segment cannot be decoded: {exc}") from exc

    # Unused trailing bits would let several strings decode to the same
    # bytes; only the canonical spelling is accepted.
    if _encode_segment(data) != segment:
        raise MalformedSignatureError(f"{name} segment is not canonically encoded")
    return data


def encode_signature(payload: bytes, tag: bytes) -> str:
    """Render canonical bytes and tag as `<payload>.<tag>` (unpadded base64url)."""
    return f"{_encode_segment(payload)}{WIRE_DELIMITER}{_encode_segment(tag)}"


def decode_signature(signature: str) -> Tuple[bytes, bytes]:
    """
    Split a wire signature string back into (payload, tag).

    Raises:
        MalformedSignatureError
    """
    if not isinstance(signature, str):
        raise MalformedSignatureError(
            f"Signature must be a string, got {type(signature).__name__}"
        )

    segments = signature.split(WIRE_DELIMITER)
    if len(segments) != 2:
        raise MalformedSignatureError(
            f"Expected exactly one {WIRE_DELIMITER!r} in signature, found {len(segments) - 1}"
        )

    payload_segment, tag_segment = segments
    return (
        _decode_segment(payload_segment, "payload"),
        _decode_segment(tag_segment, "tag"),
    )
