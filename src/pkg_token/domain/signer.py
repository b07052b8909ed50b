from __future__ import annotations

from jwt.algorithms import HMACAlgorithm


class HMACSigner:
    """
    HMAC-SHA256 tagger built on PyJWT's HMAC algorithm.

    PyJWT's `verify` recomputes the digest and compares it with
    `hmac.compare_digest`, so tag checks run in constant time.
    """

    def __init__(self) -> None:
        self._algorithm = HMACAlgorithm(HMACAlgorithm.SHA256)

    def tag(self, key: bytes, payload: bytes) -> bytes:
        return self._algorithm.sign(payload, key)

    def verify(self, key: bytes, payload: bytes, tag: bytes) -> bool:
        return self._algorithm.verify(payload, key, tag)


default_signer = HMACSigner()
