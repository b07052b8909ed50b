from enum import Enum


WIRE_DELIMITER = "."

DEFAULT_ACCESS_TTL_SECONDS = 10 * 60
DEFAULT_REFRESH_TTL_SECONDS = 7 * 24 * 60 * 60


class TokenKind(Enum):
    ACCESS = "access"
    REFRESH = "refresh"


class FailurePolicy(Enum):
    # DETAILED surfaces the specific failure, OPAQUE collapses all of them
    # into a bare InvalidTokenError.
    DETAILED = "detailed"
    OPAQUE = "opaque"
