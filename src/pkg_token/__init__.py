"""
pkg_token

Compact, symmetrically-signed expiring tokens: canonical encoding,
HMAC tagging, a `payload.tag` wire form and expiry-aware verification,
with thin integrations for FastAPI and the command line.
"""

__version__ = "0.1.0"

from .domain.entities import Token, SignedToken, verify_signature
from .domain.constants import TokenKind, FailurePolicy
from .domain.exceptions import (
    TokenError,
    EncodingError,
    InvalidTokenError,
    MalformedSignatureError,
    MalformedPayloadError,
    TagMismatchError,
    TokenExpiredError,
    UserAgentMismatchError,
    KindMismatchError,
)
from .domain.value_objects import Key
from .domain.ports import Signer, PayloadCodec, Clock
from .domain.codec import CanonicalCodec
from .domain.signer import HMACSigner
from .domain.clock import SystemClock, FixedClock

from .application.use_cases.issue import IssueTokenUseCase
from .application.use_cases.verify import VerifySignatureUseCase

from .config import TokenSettings, settings_from_env
from .integrations.common.token_factory import (
    TokenService,
    create_token_service,
    create_token_service_from_settings,
)

__all__ = [
    "__version__",
    # domain core
    "Token",
    "SignedToken",
    "verify_signature",
    "TokenKind",
    "FailurePolicy",
    "Key",
    "Signer",
    "PayloadCodec",
    "Clock",
    "CanonicalCodec",
    "HMACSigner",
    "SystemClock",
    "FixedClock",
    # exceptions
    "TokenError",
    "EncodingError",
    "InvalidTokenError",
    "MalformedSignatureError",
    "MalformedPayloadError",
    "TagMismatchError",
    "TokenExpiredError",
    "UserAgentMismatchError",
    "KindMismatchError",
    # use cases
    "IssueTokenUseCase",
    "VerifySignatureUseCase",
    # wiring
    "TokenSettings",
    "settings_from_env",
    "TokenService",
    "create_token_service",
    "create_token_service_from_settings",
]
