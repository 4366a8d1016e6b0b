"""
Session token package.

Self-contained, signed session tokens: nothing is stored server-side, a
token is trusted when its signature recomputes under the secret shared by
its (source, manager) pair and its expiry has not passed.

- origins: the closed set of issuing channels.
- signing: signature computation and the expiry time format.
- session: token claims, minting and verification.
- errors: failure kinds, each mapped to an error code.
"""

from .errors import (
    ExpiryParseError,
    InvalidLifetimeError,
    OriginMismatchError,
    SecretResolutionError,
    SessionDecodeError,
    SessionDecodingError,
    SessionEncodingError,
    SessionExpiredError,
    SessionParseError,
    SessionTokenError,
    UnauthorizedError,
    UnknownOriginError,
)
from .origins import Origin
from .session import (
    SecretResolver,
    SessionClaims,
    decode_session,
    encode_session,
    generate_session,
    verify_session,
)
from .signing import SIGNATURE_SCHEME, TIME_FORMAT, format_expiry, parse_expiry, sign

__all__ = [
    "Origin",
    "SecretResolver",
    "SessionClaims",
    "generate_session",
    "verify_session",
    "encode_session",
    "decode_session",
    "sign",
    "format_expiry",
    "parse_expiry",
    "SIGNATURE_SCHEME",
    "TIME_FORMAT",
    "SessionTokenError",
    "UnknownOriginError",
    "SecretResolutionError",
    "SessionEncodingError",
    "InvalidLifetimeError",
    "SessionDecodingError",
    "SessionDecodeError",
    "SessionParseError",
    "OriginMismatchError",
    "ExpiryParseError",
    "SessionExpiredError",
    "UnauthorizedError",
]
