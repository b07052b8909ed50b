class TokenError(Exception):
    """Base class for every error raised by pkg_token."""
    pass


class EncodingError(TokenError, ValueError):
    """Raised when a token's own fields cannot be encoded."""
    pass


class InvalidTokenError(TokenError):
    """Raised when a signature cannot be trusted (generic category)."""
    pass


class MalformedSignatureError(InvalidTokenError):
    """Raised when a wire signature string cannot be decoded."""
    pass


class MalformedPayloadError(InvalidTokenError):
    """Raised when canonical bytes do not describe a token."""
    pass


class TagMismatchError(InvalidTokenError):
    """Raised when the recomputed tag disagrees with the supplied one."""
    pass


class TokenExpiredError(InvalidTokenError):
    """Raised when an authentic token is past its expiry."""
    pass


class UserAgentMismatchError(InvalidTokenError):
    """Raised when a token is presented by a different user agent."""
    pass


class KindMismatchError(InvalidTokenError):
    """Raised when a token of the wrong kind is presented."""
    pass
